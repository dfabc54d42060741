from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional, Sequence

from . import __version__
from .config import ConfigManager
from .core import BackupChecker, VolumeIndexer, discover_volumes, prompt_roles, select_roles
from .errors import BackupCheckError, VolumeSelectionError
from .utils import reporting
from .utils.cancel import CancelledError, CancellationToken
from .utils.logger import set_console_level
from .utils.progress import TqdmProgressSink

EXIT_OK = 0
EXIT_PROBLEMS = 1
EXIT_USAGE = 2
EXIT_CANCELLED = 130


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    print(f"sd-backup-verify v{__version__}")
    if args.command is None:
        parser.print_help()
        return EXIT_USAGE

    cancel_token = CancellationToken()
    try:
        config = ConfigManager(Path(args.config) if args.config else None)
        config.ensure_valid()
        if args.command == "volumes":
            return _run_volumes(config)
        if args.command == "index":
            return _run_index(args, config, cancel_token)
        return _run_check(args, config, cancel_token)
    except BackupCheckError as exc:
        print(f"Error: {exc}")
        return EXIT_USAGE
    except (KeyboardInterrupt, EOFError, CancelledError):
        cancel_token.set()
        print("Cancelled")
        return EXIT_CANCELLED


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sd-backup-verify",
        description=(
            "Verify that all files from an SD card exist on one or more hard drives "
            "connected to your computer."
        ),
    )
    parser.add_argument("--config", help="Path to config file", default=None)

    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser("volumes", help="List mounted volumes")

    check = subparsers.add_parser("check", help="Check SD card contents against backups")
    check.add_argument("--source", help="SD card volume label or path")
    check.add_argument(
        "--backup",
        action="append",
        default=[],
        help="Backup volume label or path (repeatable)",
    )
    check.add_argument("--report-dir", help="Write summary.txt and report.csv under this folder")
    check.add_argument("--no-progress", action="store_true", help="Disable progress bars")

    index = subparsers.add_parser("index", help="Index a single volume and print totals")
    index.add_argument("--root", required=True, help="Volume root folder")
    index.add_argument("--label", help="Volume label (defaults to folder name)")
    index.add_argument("--no-progress", action="store_true", help="Disable progress bars")

    return parser


def _run_volumes(config: ConfigManager) -> int:
    volumes = discover_volumes(
        Path(config.get("volumes.mount_root")),
        config.get("volumes.ignore_names", []),
    )
    if not volumes:
        print(f"No volumes found under {config.get('volumes.mount_root')}")
        return EXIT_OK
    for volume in volumes:
        print(f"{volume.label}\t{volume.root}")
    return EXIT_OK


def _run_index(args: argparse.Namespace, config: ConfigManager, cancel_token: CancellationToken) -> int:
    root = Path(args.root)
    label = args.label or root.name or str(root)
    sink = TqdmProgressSink(disable=args.no_progress)
    try:
        index = VolumeIndexer(config).index_volume(
            root, label, progress_callback=sink, cancel_token=cancel_token
        )
    except OSError as exc:
        print(f"Error: {exc}")
        return EXIT_USAGE
    finally:
        sink.close()

    print(
        f"{index.volume_label}: {len(index.videos_by_identity)} videos, "
        f"{len(index.images_by_identity)} images, "
        f"{reporting.format_bytes_gb(index.total_bytes)}"
    )
    for error in index.errors:
        print(f"Unreadable: {error.file_path} ({error.message})")
    return EXIT_PROBLEMS if index.errors else EXIT_OK


def _run_check(args: argparse.Namespace, config: ConfigManager, cancel_token: CancellationToken) -> int:
    volumes = discover_volumes(
        Path(config.get("volumes.mount_root")),
        config.get("volumes.ignore_names", []),
    )
    if args.source or args.backup:
        if not args.source:
            raise VolumeSelectionError("需要指定 SD 卡 (--source)")
        roles = select_roles(volumes, args.source, args.backup)
    else:
        roles = prompt_roles(volumes)

    checker = BackupChecker(config)
    if not args.no_progress:
        # 進度條與 INFO 日誌共用終端時只保留警告
        set_console_level(logging.WARNING)
    sink = TqdmProgressSink(disable=args.no_progress)
    try:
        report = checker.run(roles, progress_callback=sink, cancel_token=cancel_token)
    except OSError as exc:
        print(f"Error: {exc}")
        return EXIT_PROBLEMS
    finally:
        sink.close()

    print(reporting.build_summary_text(report))
    if args.report_dir:
        report_dir = reporting.ensure_report_dir(Path(args.report_dir))
        reporting.write_summary(report_dir, report)
        reporting.write_report_csv(report_dir, report)
        print(f"Report written to: {report_dir}")

    return EXIT_OK if report.is_clean else EXIT_PROBLEMS
