from pathlib import Path

import pytest

from sd_backup_verify.core import discover_volumes, prompt_roles, resolve_volume, select_roles, validate_roles
from sd_backup_verify.errors import VolumeSelectionError
from sd_backup_verify.models import Volume, VolumeRoles


def _mount(tmp_path: Path, *names: str) -> Path:
    mount_root = tmp_path / "Volumes"
    for name in names:
        (mount_root / name).mkdir(parents=True)
    return mount_root


def test_discover_volumes_skips_system_disk(tmp_path: Path) -> None:
    mount_root = _mount(tmp_path, "Untitled", "Macintosh HD", "Toshiba 4TB", ".timemachine")
    (mount_root / "stray-file").write_text("x", encoding="utf-8")

    volumes = discover_volumes(mount_root, ["Macintosh HD"])

    assert [volume.label for volume in volumes] == ["Toshiba 4TB", "Untitled"]
    assert volumes[1].root == mount_root / "Untitled"


def test_discover_volumes_missing_mount_root(tmp_path: Path) -> None:
    assert discover_volumes(tmp_path / "Volumes") == []


def test_select_roles_by_label_and_path(tmp_path: Path) -> None:
    mount_root = _mount(tmp_path, "Untitled", "Toshiba 4TB")
    extra = tmp_path / "archive"
    extra.mkdir()
    volumes = discover_volumes(mount_root)

    roles = select_roles(volumes, "Untitled", ["Toshiba 4TB", str(extra)])

    assert roles.source.label == "Untitled"
    assert [backup.label for backup in roles.backups] == ["Toshiba 4TB", "archive"]


def test_select_roles_requires_backup(tmp_path: Path) -> None:
    volumes = discover_volumes(_mount(tmp_path, "Untitled"))

    with pytest.raises(VolumeSelectionError):
        select_roles(volumes, "Untitled", [])


def test_select_roles_rejects_source_as_backup(tmp_path: Path) -> None:
    volumes = discover_volumes(_mount(tmp_path, "Untitled", "Toshiba 4TB"))

    with pytest.raises(VolumeSelectionError):
        select_roles(volumes, "Untitled", ["Toshiba 4TB", "Untitled"])


def test_resolve_unknown_volume(tmp_path: Path) -> None:
    with pytest.raises(VolumeSelectionError):
        resolve_volume([], str(tmp_path / "nowhere"))


def test_validate_roles_missing_root(tmp_path: Path) -> None:
    roles = VolumeRoles(
        source=Volume(label="SD", root=tmp_path / "gone"),
        backups=[Volume(label="HD", root=tmp_path)],
    )

    with pytest.raises(VolumeSelectionError):
        validate_roles(roles)


def test_prompt_roles_retries_until_valid(tmp_path: Path) -> None:
    volumes = discover_volumes(_mount(tmp_path, "A-HD", "B-HD", "Untitled"))
    answers = iter(["9", "3", "", "x", "1, 2"])
    output: list[str] = []

    roles = prompt_roles(volumes, input_func=lambda _prompt: next(answers), output_func=output.append)

    assert roles.source.label == "Untitled"
    assert [backup.label for backup in roles.backups] == ["A-HD", "B-HD"]
    assert "Please enter exactly one number." in output
    assert "Please select at least one hard drive." in output


def test_prompt_roles_needs_two_volumes(tmp_path: Path) -> None:
    volumes = discover_volumes(_mount(tmp_path, "Untitled"))

    with pytest.raises(VolumeSelectionError):
        prompt_roles(volumes, input_func=lambda _prompt: "1", output_func=lambda _line: None)


def test_select_roles_rejects_backup_containing_source(tmp_path: Path) -> None:
    mount_root = _mount(tmp_path, "Untitled", "Toshiba 4TB")
    volumes = discover_volumes(mount_root)

    with pytest.raises(VolumeSelectionError):
        select_roles(volumes, "Untitled", [str(mount_root)])


def test_select_roles_rejects_backup_inside_source(tmp_path: Path) -> None:
    mount_root = _mount(tmp_path, "Untitled")
    inner = mount_root / "Untitled" / "DCIM"
    inner.mkdir()
    volumes = discover_volumes(mount_root)

    with pytest.raises(VolumeSelectionError):
        select_roles(volumes, "Untitled", [str(inner)])
