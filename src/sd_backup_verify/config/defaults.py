"""預設設定值。"""

DEFAULT_CONFIG = {
    "fingerprint": {
        "sample_chunk_bytes": 16 * 1024,
        "sample_region_count": 4,
        "algorithm": "sha256",
    },
    "hash": {
        "algorithm": "sha256",
        "chunk_size_kb": 1024,
        "parallel_workers": 4,
    },
    "index": {
        "parallel_volumes": 4,
    },
    "file_extensions": {
        "image": [".jpg", ".jpeg", ".png", ".heic", ".tiff", ".webp"],
        "video": [".mp4", ".mov", ".avi", ".mkv", ".m4v", ".wmv"],
    },
    "scan": {
        # Sony 相機為影片保留的縮圖資料夾
        "ignore_dir_names": ["THMBNL"],
    },
    "volumes": {
        "mount_root": "/Volumes",
        "ignore_names": ["Macintosh HD"],
    },
    "progress": {
        "bytes_update_threshold": 1048576,
        "ui_update_interval_ms": 250,
    },
}
