"""來源索引與備份索引的比對。"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
import time
from typing import Dict, Iterable, List, Optional, Sequence

from ..config import ConfigManager
from ..models import (
    ErrorLevel,
    FileRecord,
    FileStatus,
    ProcessError,
    ProgressEventType,
    ReconciliationResult,
    VolumeIndex,
)
from ..utils import hash_calc
from ..utils.cancel import CancellationToken
from ..utils.logger import get_logger
from ..utils.progress import ProgressCallback, emit
from ..utils.time_utils import elapsed_ms

PHASE_NAME = "Verifying"


@dataclass
class _Outcome:
    record: FileRecord
    status: FileStatus
    error: Optional[ProcessError] = None


def merge_backup_indexes(backup_indexes: Iterable[VolumeIndex]) -> Dict[str, List[FileRecord]]:
    """合併所有備份的影片與影像索引：identity -> 候選檔案 (依備份順序)。"""
    merged: Dict[str, List[FileRecord]] = {}
    for index in backup_indexes:
        for record in index.records():
            merged.setdefault(record.identity, []).append(record)
    return merged


class Reconciler:
    def __init__(self, config: ConfigManager, logger=None) -> None:
        self.logger = logger or get_logger(self.__class__.__name__)
        self.algorithm = str(config.get("hash.algorithm", "sha256")).lower()
        self.chunk_size_kb = int(config.get("hash.chunk_size_kb", 1024))
        self.parallel_workers = int(config.get("hash.parallel_workers", 1))
        self.bytes_update_threshold = int(config.get("progress.bytes_update_threshold", 1048576))
        self.report_interval_sec = int(config.get("progress.ui_update_interval_ms", 250)) / 1000

    def reconcile(
        self,
        source_index: VolumeIndex,
        backup_indexes: Sequence[VolumeIndex],
        progress_callback: Optional[ProgressCallback] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> ReconciliationResult:
        """將來源的每個檔案分類為 verified、missing、corrupted 或 unreadable。

        指紋相符只是候選；必須完整內容 hash 一致才算 verified。結果依來源
        索引順序 (先影片後影像) 排列，與平行計算的完成順序無關。
        """
        merged = merge_backup_indexes(backup_indexes)
        source_records = list(source_index.records())
        outcomes: List[Optional[_Outcome]] = [None] * len(source_records)

        start_time = time.time()
        processed_files = 0
        processed_bytes = 0

        def report(outcome: _Outcome) -> None:
            nonlocal processed_files, processed_bytes
            processed_files += 1
            processed_bytes += outcome.record.size_bytes
            emit(
                progress_callback,
                ProgressEventType.FILE_DONE,
                phase_name=PHASE_NAME,
                volume_label=source_index.volume_label,
                file_path=str(outcome.record.location),
                run_total_files=len(source_records),
                run_processed_files=processed_files,
                run_processed_bytes=processed_bytes,
                status=outcome.status,
                elapsed_ms=elapsed_ms(start_time),
            )

        emit(
            progress_callback,
            ProgressEventType.PHASE_START,
            phase_name=PHASE_NAME,
            volume_label=source_index.volume_label,
            run_total_files=len(source_records),
        )

        pending: list[int] = []
        for position, record in enumerate(source_records):
            if record.identity in merged:
                pending.append(position)
                continue
            outcomes[position] = _Outcome(record=record, status=FileStatus.MISSING)
            report(outcomes[position])

        if self.parallel_workers > 1 and len(pending) > 1:
            self._verify_parallel(
                source_records, pending, merged, outcomes, report, cancel_token, progress_callback
            )
        else:
            for position in pending:
                record = source_records[position]
                outcomes[position] = self._verify(
                    record, merged[record.identity], cancel_token, progress_callback
                )
                report(outcomes[position])

        result = ReconciliationResult(unreadable=list(source_index.errors))
        for outcome in outcomes:
            if outcome.status == FileStatus.VERIFIED:
                result.verified.append(outcome.record)
            elif outcome.status == FileStatus.MISSING:
                result.missing.append(outcome.record)
            elif outcome.status == FileStatus.CORRUPTED:
                result.corrupted.append(outcome.record)
            elif outcome.error is not None:
                result.unreadable.append(outcome.error)

        emit(
            progress_callback,
            ProgressEventType.PHASE_END,
            phase_name=PHASE_NAME,
            volume_label=source_index.volume_label,
            run_total_files=len(source_records),
            run_processed_files=processed_files,
            run_processed_bytes=processed_bytes,
            elapsed_ms=elapsed_ms(start_time),
        )
        self.logger.info(
            f"比對完成: 已確認 {len(result.verified)}，缺少 {len(result.missing)}，"
            f"損毀 {len(result.corrupted)}，無法讀取 {len(result.unreadable)}"
        )
        return result

    def _verify_parallel(
        self,
        source_records: List[FileRecord],
        pending: List[int],
        merged: Dict[str, List[FileRecord]],
        outcomes: List[Optional[_Outcome]],
        report,
        cancel_token: Optional[CancellationToken],
        progress_callback: Optional[ProgressCallback] = None,
    ) -> None:
        with ThreadPoolExecutor(max_workers=self.parallel_workers) as executor:
            future_map = {
                executor.submit(
                    self._verify,
                    source_records[position],
                    merged[source_records[position].identity],
                    cancel_token,
                    progress_callback,
                ): position
                for position in pending
            }
            try:
                for future in as_completed(future_map):
                    position = future_map[future]
                    outcomes[position] = future.result()
                    report(outcomes[position])
            except BaseException:
                if cancel_token is not None:
                    cancel_token.set()
                for future in future_map:
                    future.cancel()
                raise

    def _verify(
        self,
        record: FileRecord,
        candidates: List[FileRecord],
        cancel_token: Optional[CancellationToken],
        progress_callback: Optional[ProgressCallback] = None,
    ) -> _Outcome:
        try:
            source_hash = self._full_hash(record, cancel_token, progress_callback, record.volume_label)
        except OSError as exc:
            self.logger.warning(f"無法讀取來源檔案: {record.location} ({exc})")
            return _Outcome(
                record=record,
                status=FileStatus.UNREADABLE,
                error=ProcessError(
                    code="E-READ-HASH",
                    level=ErrorLevel.RECOVERABLE,
                    message=str(exc),
                    file_path=str(record.location),
                    volume_label=record.volume_label,
                ),
            )

        any_readable = False
        for candidate in candidates:
            if candidate.location == record.location:
                # 同一個實體檔案不能作為自己的備份
                continue
            try:
                backup_hash = self._full_hash(
                    candidate, cancel_token, progress_callback, record.volume_label
                )
            except OSError as exc:
                self.logger.warning(
                    f"無法讀取備份檔案: {candidate.location} [{candidate.volume_label}] ({exc})"
                )
                continue
            any_readable = True
            if backup_hash == source_hash:
                return _Outcome(record=record, status=FileStatus.VERIFIED)
            self.logger.warning(
                f"內容不一致: {record.location} <-> {candidate.location} [{candidate.volume_label}]"
            )

        if any_readable:
            return _Outcome(record=record, status=FileStatus.CORRUPTED)
        # 備份檔案在索引後消失，視同缺少
        return _Outcome(record=record, status=FileStatus.MISSING)

    def _full_hash(
        self,
        record: FileRecord,
        cancel_token: Optional[CancellationToken],
        progress_callback: Optional[ProgressCallback] = None,
        bar_label: Optional[str] = None,
    ) -> str:
        """完整 hash；大檔案計算期間以 FILE_PROGRESS 回報已讀取的位元組。"""
        on_bytes = None
        if progress_callback is not None:

            def on_bytes(done: int, total: int) -> None:
                emit(
                    progress_callback,
                    ProgressEventType.FILE_PROGRESS,
                    phase_name=PHASE_NAME,
                    volume_label=bar_label,
                    file_path=str(record.location),
                    file_total_bytes=total,
                    file_processed_bytes=done,
                )

        return hash_calc.compute_full_hash(
            record.location,
            algorithm=self.algorithm,
            chunk_size_kb=self.chunk_size_kb,
            progress_callback=on_bytes,
            cancel_token=cancel_token,
            bytes_update_threshold=self.bytes_update_threshold,
            report_interval_sec=self.report_interval_sec,
        )
