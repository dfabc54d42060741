"""進度事件輸出。"""

from __future__ import annotations

import threading
from typing import Callable, Optional

from tqdm import tqdm

from ..models import FileStatus, ProgressEvent, ProgressEventType

ProgressCallback = Callable[[ProgressEvent], None]


def emit(callback: Optional[ProgressCallback], event_type: ProgressEventType, **fields) -> None:
    if callback is None:
        return
    callback(ProgressEvent(event_type=event_type, **fields))


class TqdmProgressSink:
    """把 ProgressEvent 轉成 tqdm 進度條，每個階段 / 磁碟一條。"""

    def __init__(self, disable: bool = False) -> None:
        self.disable = disable
        self._bars: dict[tuple[str, str], tqdm] = {}
        self._bytes: dict[tuple[str, str], int] = {}
        self._lock = threading.Lock()
        self._next_position = 0

    def __call__(self, event: ProgressEvent) -> None:
        key = (event.phase_name or "", event.volume_label or "")
        with self._lock:
            if event.event_type == ProgressEventType.PHASE_START:
                self._open(key, event)
            elif event.event_type == ProgressEventType.FILE_PROGRESS:
                self._file_progress(key, event)
            elif event.event_type == ProgressEventType.FILE_DONE:
                self._advance(key, event)
            elif event.event_type == ProgressEventType.PHASE_END:
                self._close(key, event)

    def _open(self, key: tuple[str, str], event: ProgressEvent) -> None:
        phase, label = key
        desc = f"{phase} {label}".strip()
        self._bars[key] = tqdm(
            total=event.run_total_files,
            desc=desc,
            unit="file",
            position=self._next_position,
            dynamic_ncols=True,
            leave=True,
            disable=self.disable,
        )
        self._bytes[key] = 0
        self._next_position += 1

    def _advance(self, key: tuple[str, str], event: ProgressEvent) -> None:
        bar = self._bars.get(key)
        if bar is None:
            return
        bar.update(1)
        if event.run_processed_bytes is not None:
            self._bytes[key] = event.run_processed_bytes
        postfix = {"GB": f"{self._bytes[key] / (1024 ** 3):.2f}"}
        if event.status is not None and event.status != FileStatus.INDEXED:
            postfix["last"] = event.status.value
        bar.set_postfix(postfix, refresh=False)

    def _file_progress(self, key: tuple[str, str], event: ProgressEvent) -> None:
        bar = self._bars.get(key)
        if bar is None or not event.file_total_bytes:
            return
        percent = 100 * (event.file_processed_bytes or 0) // event.file_total_bytes
        postfix = {"GB": f"{self._bytes[key] / (1024 ** 3):.2f}", "file": f"{percent}%"}
        bar.set_postfix(postfix, refresh=True)

    def _close(self, key: tuple[str, str], event: ProgressEvent) -> None:
        bar = self._bars.pop(key, None)
        self._bytes.pop(key, None)
        if bar is None:
            return
        if event.run_processed_files is not None and bar.total is None:
            bar.total = event.run_processed_files
        bar.refresh()
        bar.close()

    def close(self) -> None:
        with self._lock:
            for bar in self._bars.values():
                bar.close()
            self._bars.clear()
            self._bytes.clear()
