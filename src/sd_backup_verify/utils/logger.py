"""日誌工具。"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"


def get_logger(name: str, log_file: Optional[Path] = None) -> logging.Logger:
    logger = logging.getLogger(f"sd_backup_verify.{name}")
    if logger.handlers:
        return logger

    logger.setLevel(logging.INFO)
    logger.propagate = False

    log_path = log_file or (Path.cwd() / "error.log")
    formatter = logging.Formatter(LOG_FORMAT)

    # error.log 只在第一次寫入時建立
    file_handler = logging.FileHandler(log_path, encoding="utf-8", delay=True)
    file_handler.setLevel(logging.WARNING)
    file_handler.setFormatter(formatter)

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(logging.INFO)
    stream_handler.setFormatter(formatter)

    logger.addHandler(file_handler)
    logger.addHandler(stream_handler)

    return logger


def set_console_level(level: int) -> None:
    """調整所有已建立 logger 的終端輸出層級。"""
    for name, candidate in logging.Logger.manager.loggerDict.items():
        if not name.startswith("sd_backup_verify.") or not isinstance(candidate, logging.Logger):
            continue
        for handler in candidate.handlers:
            if not isinstance(handler, logging.FileHandler):
                handler.setLevel(level)
