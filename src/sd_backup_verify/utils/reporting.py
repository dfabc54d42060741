"""報告輸出工具。"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Iterable, Iterator

from ..models import CheckReport, FileRecord, ProcessError
from .time_utils import format_elapsed, get_timestamp_for_folder

REPORT_FIELDNAMES = [
    "status",
    "media_kind",
    "display_name",
    "location",
    "size_bytes",
    "identity",
    "volume_label",
    "error_message",
]


def ensure_report_dir(output_root: Path) -> Path:
    report_dir = output_root / f"REPORT_{get_timestamp_for_folder()}"
    report_dir.mkdir(parents=True, exist_ok=True)
    return report_dir


def write_summary(report_dir: Path, report: CheckReport) -> Path:
    summary_path = report_dir / "summary.txt"
    summary_path.write_text(build_summary_text(report), encoding="utf-8")
    return summary_path


def write_report_csv(report_dir: Path, report: CheckReport) -> Path:
    report_path = report_dir / "report.csv"
    with report_path.open("w", encoding="utf-8", newline="") as handle:
        writer = csv.DictWriter(handle, fieldnames=REPORT_FIELDNAMES)
        writer.writeheader()
        for row in iter_report_rows(report):
            writer.writerow(row)
    return report_path


def iter_report_rows(report: CheckReport) -> Iterator[dict[str, object]]:
    result = report.result
    for status, records in (
        ("MISSING", result.missing),
        ("CORRUPTED", result.corrupted),
        ("VERIFIED", result.verified),
    ):
        for record in records:
            row = {field: None for field in REPORT_FIELDNAMES}
            row.update(record.to_dict())
            row["status"] = status
            yield row
    for error in result.unreadable:
        yield _error_row("UNREADABLE", error)
    for error in report.backup_errors:
        yield _error_row("BACKUP_UNREADABLE", error)


def _error_row(status: str, error: ProcessError) -> dict[str, object]:
    row: dict[str, object] = {field: None for field in REPORT_FIELDNAMES}
    row.update(
        {
            "status": status,
            "display_name": error.display_name,
            "location": error.file_path,
            "volume_label": error.volume_label,
            "error_message": error.message,
        }
    )
    return row


def build_summary_text(report: CheckReport) -> str:
    result = report.result
    source = report.source_index
    lines = [
        "=== sd-backup-verify 驗證摘要 ===",
        f"執行時間: {report.run_time}",
        f"耗時: {format_elapsed(report.elapsed_ms)}",
        f"SD 卡: {report.roles.source.label} ({report.roles.source.root})",
        f"備份硬碟: {', '.join(backup.label for backup in report.roles.backups)}",
        "",
        "--- 索引結果 ---",
        f"SD 卡: 影片 {len(source.videos_by_identity)} 個，影像 {len(source.images_by_identity)} 個"
        f" ({format_bytes_gb(source.total_bytes)})",
    ]
    for index in report.backup_indexes:
        lines.append(
            f"{index.volume_label}: 影片 {len(index.videos_by_identity)} 個，"
            f"影像 {len(index.images_by_identity)} 個 ({format_bytes_gb(index.total_bytes)})"
        )

    lines.extend(
        [
            "",
            "--- 比對結果 ---",
            f"已確認完整: {len(result.verified)} 個",
            f"缺少: {len(result.missing)} 個",
            f"損毀: {len(result.corrupted)} 個",
            f"無法讀取: {len(result.unreadable)} 個",
        ]
    )

    lines.extend(_section("缺少的檔案", _record_lines(result.missing)))
    lines.extend(_section("損毀的檔案", _record_lines(result.corrupted)))
    lines.extend(_section("無法讀取的檔案", _error_lines(result.unreadable)))
    lines.extend(_section("備份硬碟上無法讀取的檔案", _error_lines(report.backup_errors)))

    lines.append("")
    if report.is_clean:
        lines.append("All files are backed up")
    else:
        lines.append("請重新複製上列檔案後再次驗證。")

    return "\n".join(lines) + "\n"


def _section(title: str, body: list[str]) -> list[str]:
    if not body:
        return []
    return ["", f"--- {title} ---", *body]


def _record_lines(records: Iterable[FileRecord]) -> list[str]:
    return [f"{record.display_name}\t{record.location}" for record in records]


def _error_lines(errors: Iterable[ProcessError]) -> list[str]:
    return [f"{error.display_name}\t{error.file_path} ({error.message})" for error in errors]


def format_bytes_gb(num_bytes: int) -> str:
    gb_value = num_bytes / (1024 ** 3)
    return f"{gb_value:.1f} GB"
