"""SD 卡備份驗證工具。"""

__version__ = "0.1.0"
