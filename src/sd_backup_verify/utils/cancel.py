"""可協作取消工具。"""

from __future__ import annotations

import threading


class CancelledError(Exception):
    """表示驗證已由使用者取消。"""


class CancellationToken:
    """跨執行緒共用的取消旗標，長時間作業在檔案或區塊之間檢查。"""

    def __init__(self) -> None:
        self._event = threading.Event()

    def set(self) -> None:
        self._event.set()

    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self, message: str = "已取消") -> None:
        if self._event.is_set():
            raise CancelledError(message)
