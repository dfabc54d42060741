"""路徑處理工具。"""

from __future__ import annotations

import fnmatch
from typing import Iterable

HIDDEN_PREFIX = "."


def is_hidden(name: str) -> bool:
    return name.startswith(HIDDEN_PREFIX)


def should_prune_dir(name: str, ignore_dir_names: Iterable[str]) -> bool:
    if is_hidden(name):
        return True
    for pattern in ignore_dir_names:
        if fnmatch.fnmatchcase(name, pattern):
            return True
    return False
