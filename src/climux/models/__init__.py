"""climux ドメインモデルパッケージ。"""

from climux.models._base import ClimuxBaseModel
from climux.models.config import ClimuxConfig, LogLevel
from climux.models.exit_code import ExitCode

__all__ = [
    "ClimuxBaseModel",
    "ClimuxConfig",
    "ExitCode",
    "LogLevel",
]
