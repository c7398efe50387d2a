"""設定管理モデル。

設定ファイル・環境変数・CLI オプションを統合した最終的な設定値を表す。
"""

from __future__ import annotations

import shlex
from enum import StrEnum
from typing import Annotated, Final

from pydantic import Field, StrictBool, StringConstraints, field_validator

from climux.models._base import ClimuxBaseModel, normalize_enum_value

DEFAULT_SIGNAL_BUFFER_SIZE: Final[int] = 4
"""シグナル受信側の猶予バッファ。短いバーストを取りこぼさない程度の大きさ。"""

DEFAULT_FORCE_KILL_AFTER: Final[int] = 2
"""長時間実行コマンドが子プロセスを強制終了するまでのシャットダウン通知回数。"""


class LogLevel(StrEnum):
    """ログ出力レベル。"""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class ClimuxConfig(ClimuxBaseModel):
    """全設定項目を統合した不変モデル。

    デフォルト値のみで有効なインスタンスを構築可能。
    """

    # ログ設定
    log_level: LogLevel = LogLevel.WARNING

    # バックエンド設定（コマンド本体を実行する外部実行ファイルの argv 先頭部分）
    backend_command: tuple[Annotated[str, StringConstraints(min_length=1)], ...] = ()

    # シャットダウン通知設定
    eager_shutdown_streams: StrictBool = False
    signal_buffer_size: int = Field(default=DEFAULT_SIGNAL_BUFFER_SIZE, gt=0)
    force_kill_after: int = Field(default=DEFAULT_FORCE_KILL_AFTER, gt=0)

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, v: object) -> object:
        return normalize_enum_value(v, LogLevel)

    @field_validator("backend_command", mode="before")
    @classmethod
    def _split_backend_command(cls, v: object) -> object:
        """文字列指定（環境変数など）はシェルの引用規則で argv に分割する。"""
        if isinstance(v, str):
            return tuple(shlex.split(v))
        return v
