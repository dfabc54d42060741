import os
import shutil
from pathlib import Path
from unittest.mock import patch

import pytest

from sd_backup_verify.config import ConfigManager
from sd_backup_verify.core import BackupChecker, discover_volumes, select_roles
from sd_backup_verify.errors import VolumeSelectionError
from sd_backup_verify.models import Volume, VolumeRoles
from sd_backup_verify.utils.cancel import CancelledError, CancellationToken


def _write(path: Path, data: bytes) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    return path


def _make_card(card: Path) -> None:
    _write(card / "PRIVATE" / "M4ROOT" / "CLIP" / "C0001.MP4", os.urandom(120_000))
    _write(card / "PRIVATE" / "M4ROOT" / "CLIP" / "C0002.MP4", os.urandom(90_000))
    _write(card / "PRIVATE" / "M4ROOT" / "THMBNL" / "C0001T01.JPG", os.urandom(2_000))
    _write(card / "DCIM" / "100MSDCF" / "DSC00001.JPG", os.urandom(30_000))


def _roles(tmp_path: Path, *backups: str) -> VolumeRoles:
    return VolumeRoles(
        source=Volume(label="Untitled", root=tmp_path / "Untitled"),
        backups=[Volume(label=name, root=tmp_path / name) for name in backups],
    )


def test_full_backup_is_clean(tmp_path: Path) -> None:
    card = tmp_path / "Untitled"
    _make_card(card)
    shutil.copytree(card / "PRIVATE" / "M4ROOT" / "CLIP", tmp_path / "Toshiba 4TB" / "2025" / "footage")
    shutil.copytree(card / "DCIM", tmp_path / "Toshiba 4TB" / "2025" / "stills")

    report = BackupChecker(ConfigManager()).run(_roles(tmp_path, "Toshiba 4TB"))

    assert report.is_clean
    assert len(report.result.verified) == 3
    assert report.source_index.file_count == 3


def test_split_backup_across_drives(tmp_path: Path) -> None:
    card = tmp_path / "Untitled"
    _make_card(card)
    shutil.copy2(card / "PRIVATE" / "M4ROOT" / "CLIP" / "C0001.MP4", _mkdir(tmp_path / "HD1") / "a.mp4")
    shutil.copy2(card / "PRIVATE" / "M4ROOT" / "CLIP" / "C0002.MP4", _mkdir(tmp_path / "HD2") / "b.mp4")

    report = BackupChecker(ConfigManager()).run(_roles(tmp_path, "HD1", "HD2"))

    assert not report.is_clean
    assert [record.display_name for record in report.result.missing] == ["DSC00001.JPG"]
    assert len(report.result.verified) == 2
    assert [index.volume_label for index in report.backup_indexes] == ["HD1", "HD2"]


def test_backup_index_failure_aborts_check(tmp_path: Path) -> None:
    _make_card(tmp_path / "Untitled")
    _mkdir(tmp_path / "HD1")
    _mkdir(tmp_path / "HD2")
    checker = BackupChecker(ConfigManager())
    original = checker.indexer.index_volume

    def failing(root, label, *args, **kwargs):
        if label == "HD2":
            raise PermissionError(13, "Permission denied", str(root))
        return original(root, label, *args, **kwargs)

    with patch.object(checker.indexer, "index_volume", side_effect=failing):
        with pytest.raises(PermissionError):
            checker.run(_roles(tmp_path, "HD1", "HD2"))


def test_no_backup_fails_before_indexing(tmp_path: Path) -> None:
    _make_card(tmp_path / "Untitled")
    checker = BackupChecker(ConfigManager())

    with patch.object(checker.indexer, "index_volume") as index_volume:
        with pytest.raises(VolumeSelectionError):
            checker.run(_roles(tmp_path))

    index_volume.assert_not_called()


def test_cancelled_check(tmp_path: Path) -> None:
    _make_card(tmp_path / "Untitled")
    _mkdir(tmp_path / "HD1")

    token = CancellationToken()
    token.set()

    with pytest.raises(CancelledError):
        BackupChecker(ConfigManager()).run(_roles(tmp_path, "HD1"), cancel_token=token)


def test_select_roles_then_check(tmp_path: Path) -> None:
    mount_root = tmp_path / "Volumes"
    card = mount_root / "Untitled"
    _make_card(card)
    shutil.copytree(card, mount_root / "Toshiba 4TB" / "card-dump")

    volumes = discover_volumes(mount_root, ["Macintosh HD"])
    roles = select_roles(volumes, "Untitled", ["Toshiba 4TB"])
    report = BackupChecker(ConfigManager()).run(roles)

    assert report.is_clean


def test_mount_root_as_backup_fails_before_indexing(tmp_path: Path) -> None:
    mount_root = tmp_path / "Volumes"
    _make_card(mount_root / "Untitled")
    volumes = discover_volumes(mount_root, ["Macintosh HD"])
    checker = BackupChecker(ConfigManager())
    roles = VolumeRoles(
        source=volumes[0],
        backups=[Volume(label="Volumes", root=mount_root)],
    )

    with pytest.raises(VolumeSelectionError):
        select_roles(volumes, "Untitled", [str(mount_root)])
    with patch.object(checker.indexer, "index_volume") as index_volume:
        with pytest.raises(VolumeSelectionError):
            checker.run(roles)

    index_volume.assert_not_called()

def _mkdir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path
