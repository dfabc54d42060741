"""時間戳處理工具。"""

from __future__ import annotations

import time
from datetime import datetime


def get_timestamp_for_folder() -> str:
    return datetime.now().strftime("%Y%m%d_%H%M%S")


def get_run_time() -> str:
    return datetime.now().strftime("%Y-%m-%d %H:%M:%S")


def elapsed_ms(start_time: float) -> int:
    return int((time.time() - start_time) * 1000)


def format_elapsed(ms: int) -> str:
    seconds = max(0, ms) // 1000
    minutes, seconds = divmod(seconds, 60)
    hours, minutes = divmod(minutes, 60)
    if hours:
        return f"{hours}h{minutes:02d}m{seconds:02d}s"
    if minutes:
        return f"{minutes}m{seconds:02d}s"
    return f"{seconds}s"
