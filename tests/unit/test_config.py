import json
from pathlib import Path

import pytest

from sd_backup_verify.config import ConfigManager
from sd_backup_verify.errors import ConfigError


def test_config_load_defaults() -> None:
    config = ConfigManager()
    assert config.get("fingerprint.sample_chunk_bytes") == 16384
    assert config.get("fingerprint.sample_region_count") == 4
    assert config.get("hash.algorithm") == "sha256"
    assert config.get("hash.parallel_workers") == 4
    assert config.get("scan.ignore_dir_names") == ["THMBNL"]
    assert config.get("volumes.mount_root") == "/Volumes"
    assert ".jpg" in config.get("file_extensions.image")
    assert ".mp4" in config.get("file_extensions.video")
    assert config.validate_config() == []


def test_config_user_file_overrides(tmp_path: Path) -> None:
    user_path = tmp_path / "config.json"
    user_path.write_text(json.dumps({"hash": {"parallel_workers": 2}}), encoding="utf-8")

    config = ConfigManager(user_path)

    assert config.get("hash.parallel_workers") == 2
    assert config.get("hash.chunk_size_kb") == 1024


def test_config_validation() -> None:
    config = ConfigManager()
    config.set("fingerprint.sample_region_count", 0)
    config.set("hash.algorithm", "not-a-hash")
    config.set("file_extensions.video", [".mp4", ".jpg"])

    errors = config.validate_config()

    assert any(error.startswith("fingerprint.sample_region_count") for error in errors)
    assert any(error.startswith("hash.algorithm") for error in errors)
    assert any(error.startswith("file_extensions:") for error in errors)
    with pytest.raises(ConfigError):
        config.ensure_valid()


def test_config_rejects_broken_json(tmp_path: Path) -> None:
    user_path = tmp_path / "config.json"
    user_path.write_text("{not json", encoding="utf-8")

    with pytest.raises(ConfigError):
        ConfigManager(user_path)
