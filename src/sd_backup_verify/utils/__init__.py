"""工具模組。"""

from . import hash_calc, path_utils
from .cancel import CancelledError, CancellationToken

__all__ = ["hash_calc", "path_utils", "CancelledError", "CancellationToken"]
