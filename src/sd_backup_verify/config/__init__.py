"""設定模組。"""

from .manager import ConfigManager

__all__ = ["ConfigManager"]
