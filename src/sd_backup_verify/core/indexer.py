"""磁碟媒體檔案索引。"""

from __future__ import annotations

import os
import time
from pathlib import Path
from typing import Optional

from ..config import ConfigManager
from ..models import (
    ErrorLevel,
    FileRecord,
    FileStatus,
    MediaKind,
    ProcessError,
    ProgressEventType,
    VolumeIndex,
)
from ..utils import hash_calc, path_utils
from ..utils.cancel import CancellationToken
from ..utils.file_classifier import MediaClassifier
from ..utils.logger import get_logger
from ..utils.progress import ProgressCallback, emit
from ..utils.time_utils import elapsed_ms

PHASE_NAME = "Indexing"


class VolumeIndexer:
    def __init__(self, config: ConfigManager, logger=None) -> None:
        self.logger = logger or get_logger(self.__class__.__name__)
        self.classifier = MediaClassifier.from_config(config)
        self.ignore_dir_names = list(config.get("scan.ignore_dir_names", []))
        self.sample_chunk_bytes = int(
            config.get("fingerprint.sample_chunk_bytes", hash_calc.DEFAULT_SAMPLE_CHUNK_BYTES)
        )
        self.sample_region_count = int(
            config.get("fingerprint.sample_region_count", hash_calc.DEFAULT_SAMPLE_REGION_COUNT)
        )
        self.algorithm = str(config.get("fingerprint.algorithm", "sha256")).lower()

    def index_volume(
        self,
        root: Path,
        label: str,
        progress_callback: Optional[ProgressCallback] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> VolumeIndex:
        """走訪 root 並建立以內容指紋為 key 的索引。

        同一磁碟內指紋重複時後走訪到的檔案覆蓋前者。單一檔案讀取失敗時
        記錄到 `VolumeIndex.errors` 並繼續；root 本身無法讀取時拋出 OSError。
        """
        root = Path(root)
        if not root.is_dir():
            raise NotADirectoryError(f"磁碟根目錄不存在或不是資料夾: {root}")
        # os.walk 預設吞掉錯誤，root 需先確認可讀
        os.listdir(root)

        videos: dict[str, FileRecord] = {}
        images: dict[str, FileRecord] = {}
        errors: list[ProcessError] = []

        start_time = time.time()
        files_scanned = 0
        bytes_scanned = 0

        emit(progress_callback, ProgressEventType.PHASE_START, phase_name=PHASE_NAME, volume_label=label)
        self.logger.info(f"開始建立索引: {label} ({root})")

        def on_walk_error(exc: OSError) -> None:
            self.logger.warning(f"無法讀取資料夾: {exc.filename} ({exc})")
            errors.append(
                ProcessError(
                    code="E-READ-DIR",
                    level=ErrorLevel.RECOVERABLE,
                    message=str(exc),
                    file_path=str(exc.filename) if exc.filename else None,
                    volume_label=label,
                )
            )

        for dirpath, dirnames, filenames in os.walk(root, onerror=on_walk_error):
            dirnames[:] = sorted(
                name for name in dirnames if not path_utils.should_prune_dir(name, self.ignore_dir_names)
            )
            current_dir = Path(dirpath)

            for name in sorted(filenames):
                if cancel_token is not None:
                    cancel_token.raise_if_cancelled(f"已取消索引: {label}")
                if path_utils.is_hidden(name):
                    continue
                media_kind = self.classifier.classify(name)
                if media_kind is None:
                    continue

                file_path = current_dir / name
                emit(
                    progress_callback,
                    ProgressEventType.FILE_START,
                    phase_name=PHASE_NAME,
                    volume_label=label,
                    file_path=str(file_path),
                )
                try:
                    record = self._build_record(file_path, media_kind, label, cancel_token)
                except OSError as exc:
                    self.logger.warning(f"無法讀取檔案: {file_path} ({exc})")
                    errors.append(
                        ProcessError(
                            code="E-READ",
                            level=ErrorLevel.RECOVERABLE,
                            message=str(exc),
                            file_path=str(file_path),
                            volume_label=label,
                        )
                    )
                    status = FileStatus.UNREADABLE
                else:
                    target = videos if media_kind == MediaKind.VIDEO else images
                    if record.identity in target:
                        self.logger.info(
                            f"指紋重複，以較後的檔案為準: {target[record.identity].location} -> {file_path}"
                        )
                    target[record.identity] = record
                    bytes_scanned += record.size_bytes
                    status = FileStatus.INDEXED

                files_scanned += 1
                emit(
                    progress_callback,
                    ProgressEventType.FILE_DONE,
                    phase_name=PHASE_NAME,
                    volume_label=label,
                    file_path=str(file_path),
                    run_processed_files=files_scanned,
                    run_processed_bytes=bytes_scanned,
                    status=status,
                    elapsed_ms=elapsed_ms(start_time),
                )

        emit(
            progress_callback,
            ProgressEventType.PHASE_END,
            phase_name=PHASE_NAME,
            volume_label=label,
            run_processed_files=files_scanned,
            run_processed_bytes=bytes_scanned,
            elapsed_ms=elapsed_ms(start_time),
        )
        self.logger.info(
            f"索引完成: {label}，影片 {len(videos)} 個，影像 {len(images)} 個，"
            f"無法讀取 {len(errors)} 個"
        )

        return VolumeIndex(
            volume_label=label,
            volume_root=root,
            videos_by_identity=videos,
            images_by_identity=images,
            errors=tuple(errors),
        )

    def _build_record(
        self,
        path: Path,
        media_kind: MediaKind,
        label: str,
        cancel_token: Optional[CancellationToken],
    ) -> FileRecord:
        size_bytes = path.stat().st_size
        identity = hash_calc.compute_fingerprint(
            path,
            sample_chunk_bytes=self.sample_chunk_bytes,
            sample_region_count=self.sample_region_count,
            algorithm=self.algorithm,
            cancel_token=cancel_token,
        )
        return FileRecord(
            identity=identity,
            display_name=path.name,
            location=path.absolute(),
            size_bytes=size_bytes,
            media_kind=media_kind,
            volume_label=label,
        )
