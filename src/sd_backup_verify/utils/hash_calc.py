"""Hash calculation helpers.

兩層識別：`compute_fingerprint` 只讀取固定位置的取樣區塊，作為跨磁碟比對的
內容指紋；`compute_full_hash` 讀完整個檔案，只用於確認指紋相符的檔案對。
"""

from __future__ import annotations

import hashlib
import time
from pathlib import Path
from typing import Callable, Optional

from .cancel import CancellationToken

DEFAULT_SAMPLE_CHUNK_BYTES = 16 * 1024
DEFAULT_SAMPLE_REGION_COUNT = 4


def _new_hasher(algorithm: str) -> "hashlib._Hash":
    try:
        return hashlib.new(algorithm)
    except ValueError as exc:
        raise ValueError(f"不支援的 hash 演算法: {algorithm}") from exc


def sample_offsets(file_size: int, sample_chunk_bytes: int, sample_region_count: int) -> list[int]:
    """回傳取樣區塊的起始位移，依位移遞增排列。

    檔案不大於單一區塊時整個檔案視為一個區塊 (位移 0)，空檔案也一樣。
    """
    if sample_chunk_bytes <= 0:
        raise ValueError("sample_chunk_bytes 必須是正整數")
    if sample_region_count <= 0:
        raise ValueError("sample_region_count 必須是正整數")
    if file_size <= sample_chunk_bytes:
        return [0]
    region_spacing = file_size // sample_region_count
    return [index * region_spacing for index in range(sample_region_count)]


def compute_fingerprint(
    path: Path,
    sample_chunk_bytes: int = DEFAULT_SAMPLE_CHUNK_BYTES,
    sample_region_count: int = DEFAULT_SAMPLE_REGION_COUNT,
    algorithm: str = "sha256",
    cancel_token: Optional[CancellationToken] = None,
) -> str:
    """以取樣區塊計算檔案的內容指紋 (hex digest)。

    與檔名、路徑、所在磁碟無關；相同大小、相同取樣內容必得相同指紋。
    讀取失敗時 OSError 直接往外拋。
    """
    hasher = _new_hasher(algorithm)
    file_size = path.stat().st_size
    offsets = sample_offsets(file_size, sample_chunk_bytes, sample_region_count)

    with path.open("rb") as handle:
        if file_size <= sample_chunk_bytes:
            hasher.update(handle.read(sample_chunk_bytes))
            return hasher.hexdigest()

        for offset in offsets:
            if cancel_token is not None:
                cancel_token.raise_if_cancelled(f"已取消指紋計算: {path}")
            length = min(sample_chunk_bytes, file_size - offset)
            if length <= 0:
                continue
            handle.seek(offset)
            hasher.update(handle.read(length))

    return hasher.hexdigest()


def compute_full_hash(
    path: Path,
    algorithm: str = "sha256",
    chunk_size_kb: int = 1024,
    progress_callback: Optional[Callable[[int, int], None]] = None,
    cancel_token: Optional[CancellationToken] = None,
    bytes_update_threshold: int = 1048576,
    report_interval_sec: float = 0.1,
) -> str:
    hasher = _new_hasher(algorithm)

    total_size = 0
    try:
        total_size = path.stat().st_size
    except OSError:
        total_size = 0

    bytes_read = 0
    last_reported = 0
    last_report_time = time.time()

    with path.open("rb") as handle:
        while True:
            if cancel_token is not None:
                cancel_token.raise_if_cancelled(f"已取消 hash 計算: {path}")
            chunk = handle.read(chunk_size_kb * 1024)
            if not chunk:
                break
            bytes_read += len(chunk)
            hasher.update(chunk)

            if progress_callback is not None:
                now = time.time()
                should_report = (bytes_read - last_reported) >= bytes_update_threshold
                if not should_report and (now - last_report_time) >= report_interval_sec:
                    should_report = True
                if should_report:
                    progress_callback(bytes_read, total_size)
                    last_reported = bytes_read
                    last_report_time = now

    if progress_callback is not None and bytes_read != last_reported:
        progress_callback(bytes_read, total_size)

    return hasher.hexdigest()
