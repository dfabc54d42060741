"""檔案類型分類工具。"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional

from ..models import MediaKind

DEFAULT_IMAGE_EXTS = frozenset({".jpg", ".jpeg", ".png", ".heic", ".tiff", ".webp"})
DEFAULT_VIDEO_EXTS = frozenset({".mp4", ".mov", ".avi", ".mkv", ".m4v", ".wmv"})


class MediaClassifier:
    """依副檔名 (不分大小寫) 判定影像或影片，其餘檔案不列入。"""

    def __init__(
        self,
        image_exts: Optional[Iterable[str]] = None,
        video_exts: Optional[Iterable[str]] = None,
    ) -> None:
        self.image_exts = frozenset(
            str(item).lower() for item in (DEFAULT_IMAGE_EXTS if image_exts is None else image_exts)
        )
        self.video_exts = frozenset(
            str(item).lower() for item in (DEFAULT_VIDEO_EXTS if video_exts is None else video_exts)
        )
        overlap = self.image_exts & self.video_exts
        if overlap:
            raise ValueError(f"影像與影片副檔名不可重疊: {', '.join(sorted(overlap))}")

    @classmethod
    def from_config(cls, config) -> "MediaClassifier":
        return cls(
            config.get("file_extensions.image", sorted(DEFAULT_IMAGE_EXTS)),
            config.get("file_extensions.video", sorted(DEFAULT_VIDEO_EXTS)),
        )

    def classify(self, path: Path | str) -> Optional[MediaKind]:
        ext = Path(path).suffix.lower()
        if ext in self.image_exts:
            return MediaKind.IMAGE
        if ext in self.video_exts:
            return MediaKind.VIDEO
        return None
