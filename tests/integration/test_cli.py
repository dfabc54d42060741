import io
import json
import os
import shutil
from pathlib import Path

from sd_backup_verify.main import EXIT_CANCELLED, EXIT_OK, EXIT_PROBLEMS, EXIT_USAGE, main


def _write(path: Path, data: bytes) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    return path


def _setup(tmp_path: Path) -> tuple[Path, Path]:
    card = tmp_path / "Volumes" / "Untitled"
    drive = tmp_path / "Volumes" / "Toshiba 4TB"
    _write(card / "DCIM" / "C0001.MP4", os.urandom(50_000))
    _write(card / "DCIM" / "DSC0001.JPG", os.urandom(8_000))
    drive.mkdir(parents=True)
    shutil.copy2(card / "DCIM" / "C0001.MP4", drive / "clip.mp4")
    return card, drive


def test_cli_check_reports_missing(tmp_path: Path, capsys) -> None:
    card, drive = _setup(tmp_path)

    code = main(["check", "--source", str(card), "--backup", str(drive), "--no-progress"])

    out = capsys.readouterr().out
    assert code == EXIT_PROBLEMS
    assert "缺少: 1 個" in out
    assert "DSC0001.JPG" in out


def test_cli_check_clean_with_report(tmp_path: Path, capsys) -> None:
    card, drive = _setup(tmp_path)
    shutil.copy2(card / "DCIM" / "DSC0001.JPG", drive / "still.jpg")
    report_root = tmp_path / "reports"

    code = main(
        [
            "check",
            "--source",
            str(card),
            "--backup",
            str(drive),
            "--no-progress",
            "--report-dir",
            str(report_root),
        ]
    )

    assert code == EXIT_OK
    (report_dir,) = list(report_root.iterdir())
    assert (report_dir / "summary.txt").exists()
    assert (report_dir / "report.csv").exists()
    assert "All files are backed up" in capsys.readouterr().out


def test_cli_check_without_backup_is_usage_error(tmp_path: Path, capsys) -> None:
    card, _drive = _setup(tmp_path)

    code = main(["check", "--backup", str(card), "--no-progress"])

    assert code == EXIT_USAGE
    assert "Error:" in capsys.readouterr().out


def test_cli_volumes_uses_config(tmp_path: Path, capsys) -> None:
    _setup(tmp_path)
    (tmp_path / "Volumes" / "Macintosh HD").mkdir()
    config_path = tmp_path / "config.json"
    config_path.write_text(
        json.dumps({"volumes": {"mount_root": str(tmp_path / "Volumes")}}),
        encoding="utf-8",
    )

    code = main(["--config", str(config_path), "volumes"])

    out = capsys.readouterr().out
    assert code == EXIT_OK
    assert "Untitled" in out
    assert "Toshiba 4TB" in out
    assert "Macintosh HD" not in out


def test_cli_invalid_config(tmp_path: Path, capsys) -> None:
    config_path = tmp_path / "config.json"
    config_path.write_text(json.dumps({"hash": {"parallel_workers": 0}}), encoding="utf-8")

    code = main(["--config", str(config_path), "volumes"])

    assert code == EXIT_USAGE
    assert "hash.parallel_workers" in capsys.readouterr().out


def test_cli_index(tmp_path: Path, capsys) -> None:
    card, _drive = _setup(tmp_path)

    code = main(["index", "--root", str(card), "--label", "SD", "--no-progress"])

    assert code == EXIT_OK
    assert "SD: 1 videos, 1 images" in capsys.readouterr().out


def test_cli_prompt_closed_stdin_is_cancelled(tmp_path: Path, capsys, monkeypatch) -> None:
    _setup(tmp_path)
    config_path = tmp_path / "config.json"
    config_path.write_text(
        json.dumps({"volumes": {"mount_root": str(tmp_path / "Volumes")}}),
        encoding="utf-8",
    )
    monkeypatch.setattr("sys.stdin", io.StringIO(""))

    code = main(["--config", str(config_path), "check", "--no-progress"])

    assert code == EXIT_CANCELLED
    assert "Cancelled" in capsys.readouterr().out
