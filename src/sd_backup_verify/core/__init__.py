"""核心流程模組。"""

from .checker import BackupChecker
from .indexer import VolumeIndexer
from .reconciler import Reconciler, merge_backup_indexes
from .volumes import discover_volumes, prompt_roles, resolve_volume, select_roles, validate_roles

__all__ = [
    "BackupChecker",
    "Reconciler",
    "VolumeIndexer",
    "discover_volumes",
    "merge_backup_indexes",
    "prompt_roles",
    "resolve_volume",
    "select_roles",
    "validate_roles",
]
