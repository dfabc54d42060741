"""錯誤收集工具。"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List

from ..models.error_record import ProcessError


@dataclass
class ErrorHandler:
    """集中收集各磁碟的 ProcessError。"""

    errors: List[ProcessError] = field(default_factory=list)

    def add(self, error: ProcessError) -> None:
        self.errors.append(error)

    def extend(self, errors: Iterable[ProcessError]) -> None:
        self.errors.extend(errors)
