"""執行階段進度事件模型。"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


class ProgressEventType(str, Enum):
    PHASE_START = "PHASE_START"
    PHASE_END = "PHASE_END"
    FILE_START = "FILE_START"
    FILE_PROGRESS = "FILE_PROGRESS"
    FILE_DONE = "FILE_DONE"


class FileStatus(str, Enum):
    INDEXED = "INDEXED"
    VERIFIED = "VERIFIED"
    MISSING = "MISSING"
    CORRUPTED = "CORRUPTED"
    UNREADABLE = "UNREADABLE"


@dataclass
class ProgressEvent:
    event_type: ProgressEventType
    timestamp: datetime = field(default_factory=datetime.now)
    phase_name: Optional[str] = None
    volume_label: Optional[str] = None
    file_path: Optional[str] = None
    file_total_bytes: Optional[int] = None
    file_processed_bytes: Optional[int] = None
    run_total_files: Optional[int] = None
    run_processed_files: Optional[int] = None
    run_processed_bytes: Optional[int] = None
    status: Optional[FileStatus] = None
    elapsed_ms: Optional[int] = None
