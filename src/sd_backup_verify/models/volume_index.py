"""單一磁碟的媒體索引。"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Iterator, Mapping, Tuple

from .error_record import ProcessError
from .file_record import FileRecord


@dataclass(frozen=True)
class VolumeIndex:
    """一次目錄走訪的結果，建立後不再變動。"""

    volume_label: str
    volume_root: Path
    videos_by_identity: Mapping[str, FileRecord] = field(default_factory=dict)
    images_by_identity: Mapping[str, FileRecord] = field(default_factory=dict)
    errors: Tuple[ProcessError, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "videos_by_identity", MappingProxyType(dict(self.videos_by_identity))
        )
        object.__setattr__(
            self, "images_by_identity", MappingProxyType(dict(self.images_by_identity))
        )
        object.__setattr__(self, "errors", tuple(self.errors))

    def records(self) -> Iterator[FileRecord]:
        yield from self.videos_by_identity.values()
        yield from self.images_by_identity.values()

    @property
    def file_count(self) -> int:
        return len(self.videos_by_identity) + len(self.images_by_identity)

    @property
    def total_bytes(self) -> int:
        return sum(record.size_bytes for record in self.records())
