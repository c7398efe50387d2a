"""設定管理モジュール。"""

from climux.config._locator import find_project_config
from climux.config._resolver import resolve_config

__all__ = [
    "find_project_config",
    "resolve_config",
]
