"""例外類型。"""

from __future__ import annotations


class BackupCheckError(Exception):
    """備份驗證流程的基底例外。"""


class VolumeSelectionError(BackupCheckError):
    """來源 / 備份磁碟選擇不合法，在索引開始前拋出。"""


class ConfigError(BackupCheckError):
    """設定檔內容不合法。"""

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))
