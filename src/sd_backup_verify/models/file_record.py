"""單一媒體檔案的索引紀錄。"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class MediaKind(str, Enum):
    IMAGE = "IMAGE"
    VIDEO = "VIDEO"


@dataclass(frozen=True)
class FileRecord:
    """以內容指紋識別的媒體檔案。

    `identity` 只由檔案內容決定，`display_name` 與 `location` 僅供報告使用，
    不參與比對。
    """

    identity: str
    display_name: str
    location: Path
    size_bytes: int
    media_kind: MediaKind
    volume_label: str

    def to_dict(self) -> dict[str, object]:
        return {
            "identity": self.identity,
            "display_name": self.display_name,
            "location": str(self.location),
            "size_bytes": self.size_bytes,
            "media_kind": self.media_kind.value,
            "volume_label": self.volume_label,
        }
