"""磁碟與角色模型。"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List


@dataclass(frozen=True)
class Volume:
    label: str
    root: Path


@dataclass
class VolumeRoles:
    source: Volume
    backups: List[Volume] = field(default_factory=list)
