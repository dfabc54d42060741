"""備份驗證流程：建立索引、比對、彙整結果。"""

from __future__ import annotations

from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
import time
from typing import List, Optional

from ..config import ConfigManager
from ..models import CheckReport, ProcessError, VolumeIndex, VolumeRoles
from ..utils.cancel import CancellationToken
from ..utils.error_handler import ErrorHandler
from ..utils.logger import get_logger
from ..utils.progress import ProgressCallback
from ..utils.time_utils import elapsed_ms, get_run_time
from .indexer import VolumeIndexer
from .reconciler import Reconciler
from .volumes import validate_roles


class BackupChecker:
    def __init__(self, config: ConfigManager, logger=None) -> None:
        self.logger = logger or get_logger(self.__class__.__name__)
        self.indexer = VolumeIndexer(config, self.logger)
        self.reconciler = Reconciler(config, self.logger)
        self.parallel_volumes = int(config.get("index.parallel_volumes", 1))

    def run(
        self,
        roles: VolumeRoles,
        progress_callback: Optional[ProgressCallback] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> CheckReport:
        """驗證 roles.source 上每個媒體檔案都已完整備份到 roles.backups。

        任一備份磁碟索引失敗即整體失敗，不會略過該磁碟繼續比對。
        """
        validate_roles(roles)
        cancel_token = cancel_token or CancellationToken()
        run_time = get_run_time()
        start_time = time.time()

        source_index = self.indexer.index_volume(
            roles.source.root,
            roles.source.label,
            progress_callback=progress_callback,
            cancel_token=cancel_token,
        )
        backup_indexes = self._index_backups(roles, progress_callback, cancel_token)

        result = self.reconciler.reconcile(
            source_index,
            backup_indexes,
            progress_callback=progress_callback,
            cancel_token=cancel_token,
        )

        errors = ErrorHandler()
        for index in backup_indexes:
            errors.extend(index.errors)
        backup_errors: List[ProcessError] = list(errors.errors)
        if backup_errors:
            self.logger.warning(f"備份磁碟有 {len(backup_errors)} 個檔案無法讀取，可能影響比對結果")

        return CheckReport(
            run_time=run_time,
            roles=roles,
            source_index=source_index,
            backup_indexes=backup_indexes,
            result=result,
            elapsed_ms=elapsed_ms(start_time),
            backup_errors=backup_errors,
        )

    def _index_backups(
        self,
        roles: VolumeRoles,
        progress_callback: Optional[ProgressCallback],
        cancel_token: CancellationToken,
    ) -> List[VolumeIndex]:
        workers = max(1, min(self.parallel_volumes, len(roles.backups)))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [
                executor.submit(
                    self.indexer.index_volume,
                    backup.root,
                    backup.label,
                    progress_callback,
                    cancel_token,
                )
                for backup in roles.backups
            ]
            try:
                done, _ = wait(futures, return_when=FIRST_EXCEPTION)
                failed = [future for future in futures if future in done and future.exception() is not None]
                if failed:
                    self.logger.error(f"備份磁碟索引失敗，中止驗證: {failed[0].exception()}")
                    raise failed[0].exception()
                return [future.result() for future in futures]
            except BaseException:
                cancel_token.set()
                for future in futures:
                    future.cancel()
                raise
