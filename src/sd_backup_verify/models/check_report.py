"""一次驗證流程的完整結果。"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from .error_record import ProcessError
from .reconciliation import ReconciliationResult
from .volume import VolumeRoles
from .volume_index import VolumeIndex


@dataclass
class CheckReport:
    run_time: str
    roles: VolumeRoles
    source_index: VolumeIndex
    backup_indexes: List[VolumeIndex]
    result: ReconciliationResult
    elapsed_ms: int = 0
    backup_errors: List[ProcessError] = field(default_factory=list)

    @property
    def is_clean(self) -> bool:
        return self.result.is_clean
