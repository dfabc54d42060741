"""資料模型模組。"""

from .check_report import CheckReport
from .error_record import ErrorLevel, ProcessError
from .file_record import FileRecord, MediaKind
from .progress_event import FileStatus, ProgressEvent, ProgressEventType
from .reconciliation import ReconciliationResult
from .volume import Volume, VolumeRoles
from .volume_index import VolumeIndex

__all__ = [
    "CheckReport",
    "ErrorLevel",
    "FileRecord",
    "FileStatus",
    "MediaKind",
    "ProcessError",
    "ProgressEvent",
    "ProgressEventType",
    "ReconciliationResult",
    "Volume",
    "VolumeIndex",
    "VolumeRoles",
]
