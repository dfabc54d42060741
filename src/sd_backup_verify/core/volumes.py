"""磁碟探索與來源 / 備份角色選擇。"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence

from ..errors import VolumeSelectionError
from ..models import Volume, VolumeRoles
from ..utils import path_utils


def discover_volumes(mount_root: Path, ignore_names: Iterable[str] = ()) -> List[Volume]:
    """列出 mount_root 下已掛載的磁碟，排除系統碟與隱藏項目。"""
    mount_root = Path(mount_root)
    ignored = set(ignore_names)
    if not mount_root.is_dir():
        return []
    volumes: List[Volume] = []
    for entry in sorted(mount_root.iterdir(), key=lambda item: item.name):
        if entry.name in ignored or path_utils.is_hidden(entry.name):
            continue
        if not entry.is_dir():
            continue
        volumes.append(Volume(label=entry.name, root=entry))
    return volumes


def resolve_volume(volumes: Sequence[Volume], value: str) -> Volume:
    """以名稱或路徑找出磁碟；路徑不在清單內時直接建立 Volume。"""
    for volume in volumes:
        if volume.label == value:
            return volume
    path = Path(value).expanduser()
    for volume in volumes:
        if volume.root == path:
            return volume
    if path.is_dir():
        return Volume(label=path.name or str(path), root=path)
    raise VolumeSelectionError(f"找不到磁碟: {value}")


def validate_roles(roles: VolumeRoles) -> VolumeRoles:
    if not roles.backups:
        raise VolumeSelectionError("至少需要選擇一個備份磁碟")
    source_root = roles.source.root.resolve()
    seen: set[Path] = set()
    for backup in roles.backups:
        backup_root = backup.root.resolve()
        if backup_root == source_root:
            raise VolumeSelectionError(f"來源磁碟不可同時作為備份: {backup.label}")
        # 巢狀路徑會讓備份索引走訪到 SD 卡本身
        if source_root.is_relative_to(backup_root) or backup_root.is_relative_to(source_root):
            raise VolumeSelectionError(f"備份磁碟與來源磁碟路徑重疊: {backup.label} ({backup.root})")
        if backup_root in seen:
            raise VolumeSelectionError(f"備份磁碟重複選擇: {backup.label}")
        seen.add(backup_root)
    for volume in [roles.source, *roles.backups]:
        if not volume.root.is_dir():
            raise VolumeSelectionError(f"磁碟根目錄不存在: {volume.label} ({volume.root})")
    return roles


def select_roles(
    volumes: Sequence[Volume],
    source: str,
    backups: Sequence[str],
) -> VolumeRoles:
    roles = VolumeRoles(
        source=resolve_volume(volumes, source),
        backups=[resolve_volume(volumes, value) for value in backups],
    )
    return validate_roles(roles)


def prompt_roles(
    volumes: Sequence[Volume],
    input_func: Callable[[str], str] = input,
    output_func: Callable[[str], None] = print,
) -> VolumeRoles:
    """互動式選擇：先選一個 SD 卡，再選一或多個備份硬碟。"""
    if len(volumes) < 2:
        raise VolumeSelectionError("至少需要兩個已掛載的磁碟 (SD 卡與備份硬碟)")

    output_func("Which is your SD card?")
    for number, volume in enumerate(volumes, start=1):
        output_func(f"  {number}) {volume.label}")
    source: Optional[Volume] = None
    while source is None:
        answer = input_func("SD card number: ").strip()
        picked = _parse_numbers(answer, len(volumes))
        if picked is None or len(picked) != 1:
            output_func("Please enter exactly one number.")
            continue
        source = volumes[picked[0]]

    candidates = [volume for volume in volumes if volume.root != source.root]
    output_func("Which are your hard drives? (you can select multiple, comma separated)")
    for number, volume in enumerate(candidates, start=1):
        output_func(f"  {number}) {volume.label}")
    backups: List[Volume] = []
    while not backups:
        answer = input_func("Hard drive numbers: ").strip()
        picked = _parse_numbers(answer, len(candidates))
        if not picked:
            output_func("Please select at least one hard drive.")
            continue
        backups = [candidates[index] for index in picked]

    return validate_roles(VolumeRoles(source=source, backups=backups))


def _parse_numbers(answer: str, upper: int) -> Optional[List[int]]:
    indexes: List[int] = []
    for part in answer.replace(" ", ",").split(","):
        if not part:
            continue
        if not part.isdigit():
            return None
        number = int(part)
        if not 1 <= number <= upper:
            return None
        if number - 1 not in indexes:
            indexes.append(number - 1)
    return indexes
