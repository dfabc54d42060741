"""比對結果模型。"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from .error_record import ProcessError
from .file_record import FileRecord


@dataclass
class ReconciliationResult:
    """來源索引對備份索引的比對結果。

    每個來源檔案只會出現在 missing、corrupted、unreadable、verified 其中之一。
    """

    missing: List[FileRecord] = field(default_factory=list)
    corrupted: List[FileRecord] = field(default_factory=list)
    unreadable: List[ProcessError] = field(default_factory=list)
    verified: List[FileRecord] = field(default_factory=list)

    @property
    def is_clean(self) -> bool:
        return not (self.missing or self.corrupted or self.unreadable)
