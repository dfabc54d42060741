"""設定檔驗證邏輯。"""

from __future__ import annotations

import hashlib
from typing import Any


def validate_config(config: dict[str, Any]) -> list[str]:
    errors: list[str] = []

    def add_error(path: str, message: str) -> None:
        errors.append(f"{path}: {message}")

    def check_positive_int(path: str, value: Any) -> None:
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            add_error(path, "必須是正整數")

    def check_algorithm(path: str, value: Any) -> None:
        if not isinstance(value, str) or value.lower() not in hashlib.algorithms_available:
            add_error(path, f"不支援的 hash 演算法: {value}")

    def check_str_list(path: str, value: Any) -> bool:
        if not isinstance(value, list) or any(not isinstance(item, str) for item in value):
            add_error(path, "必須是字串清單")
            return False
        return True

    fingerprint = config.get("fingerprint", {})
    check_positive_int("fingerprint.sample_chunk_bytes", fingerprint.get("sample_chunk_bytes"))
    check_positive_int("fingerprint.sample_region_count", fingerprint.get("sample_region_count"))
    check_algorithm("fingerprint.algorithm", fingerprint.get("algorithm"))

    hash_config = config.get("hash", {})
    check_algorithm("hash.algorithm", hash_config.get("algorithm"))
    check_positive_int("hash.chunk_size_kb", hash_config.get("chunk_size_kb"))
    check_positive_int("hash.parallel_workers", hash_config.get("parallel_workers", 1))

    index_config = config.get("index", {})
    check_positive_int("index.parallel_volumes", index_config.get("parallel_volumes", 1))

    file_extensions = config.get("file_extensions", {})
    image_exts = file_extensions.get("image", [])
    video_exts = file_extensions.get("video", [])
    images_ok = check_str_list("file_extensions.image", image_exts)
    videos_ok = check_str_list("file_extensions.video", video_exts)
    if images_ok and videos_ok:
        for path, exts in (("file_extensions.image", image_exts), ("file_extensions.video", video_exts)):
            for ext in exts:
                if not ext.startswith(".") or ext != ext.lower():
                    add_error(path, f"副檔名必須為小寫且以 . 開頭: {ext}")
        overlap = sorted(set(image_exts) & set(video_exts))
        if overlap:
            add_error("file_extensions", f"影像與影片副檔名不可重疊: {', '.join(overlap)}")

    scan = config.get("scan", {})
    check_str_list("scan.ignore_dir_names", scan.get("ignore_dir_names", []))

    volumes = config.get("volumes", {})
    mount_root = volumes.get("mount_root")
    if not isinstance(mount_root, str) or not mount_root.strip():
        add_error("volumes.mount_root", "必須是非空字串")
    check_str_list("volumes.ignore_names", volumes.get("ignore_names", []))

    progress = config.get("progress", {})
    check_positive_int("progress.bytes_update_threshold", progress.get("bytes_update_threshold", 1048576))
    check_positive_int("progress.ui_update_interval_ms", progress.get("ui_update_interval_ms", 250))

    return errors
