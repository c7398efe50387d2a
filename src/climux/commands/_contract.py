"""コマンド実行契約と、ファクトリへ渡す共有依存関係。"""

from __future__ import annotations

import functools
import importlib.metadata
from collections.abc import Callable, Sequence
from typing import Protocol, runtime_checkable

from pydantic import ConfigDict, Field

from climux.commands._ui import Ui
from climux.models._base import ClimuxBaseModel
from climux.models.config import ClimuxConfig
from climux.signals import ShutdownStream, new_shutdown_stream

_DISTRIBUTION_NAME = "climux"


@runtime_checkable
class Command(Protocol):
    """レジストリが生成する全コマンドの共通実行契約。"""

    def run(self, args: Sequence[str]) -> int:
        """コマンドを実行し、終了コードを返す。0 が成功。"""
        ...

    def synopsis(self) -> str:
        """一覧表示用の1行説明。"""
        ...

    def help(self) -> str:
        """--help 用の詳細説明。"""
        ...


CommandFactory = Callable[[], Command]
"""呼び出されるたびに新しい Command を構築するゼロ引数ファクトリ。"""

ShutdownProvider = Callable[[], ShutdownStream]
"""長時間実行コマンドが実行開始時に呼び出し、自身の ShutdownStream を得る。"""


class VersionInfo(ClimuxBaseModel):
    """バージョン情報。

    Attributes:
        version: リリースバージョン。
        prerelease: プレリリース識別子（例: "dev"）。空ならリリース版。
        revision: ビルド元リビジョン。空なら不明。
    """

    version: str = Field(min_length=1)
    prerelease: str = ""
    revision: str = ""

    @property
    def human(self) -> str:
        """表示用のバージョン文字列（例: "v1.2.0-dev (abc123)"）。"""
        text = f"v{self.version}"
        if self.prerelease:
            text += f"-{self.prerelease}"
        if self.revision:
            text += f" ({self.revision})"
        return text

    @classmethod
    def from_metadata(cls) -> VersionInfo:
        """インストール済みパッケージのメタデータからバージョン情報を構築する。"""
        try:
            version = importlib.metadata.version(_DISTRIBUTION_NAME)
        except importlib.metadata.PackageNotFoundError:
            return cls(version="0.0.0", prerelease="unknown")
        return cls(version=version)


class CommandDeps(ClimuxBaseModel):
    """全ファクトリが共有する読み取り専用の依存関係。

    起動時に1度だけ構築され、build_registry() に渡される。

    Attributes:
        ui: ユーザー向け出力シンク。
        config: 解決済み設定。
        version: バージョン情報。
        shutdown_source: ShutdownStream を新規作成する関数（引数はバッファサイズ）。
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    ui: Ui
    config: ClimuxConfig = Field(default_factory=ClimuxConfig)
    version: VersionInfo = Field(default_factory=VersionInfo.from_metadata)
    shutdown_source: Callable[[int], ShutdownStream] = new_shutdown_stream

    def shutdown_provider(self) -> ShutdownProvider:
        """長時間実行コマンド1つ分の ShutdownProvider を返す。

        eager_shutdown_streams が有効な場合はこの時点でストリームを作成し、
        以後は同じストリームを返す。無効な場合はコマンドの実行開始時まで
        作成を遅延する。
        """
        buffer_size = self.config.signal_buffer_size
        if self.config.eager_shutdown_streams:
            stream = self.shutdown_source(buffer_size)
            return lambda: stream
        return functools.partial(self.shutdown_source, buffer_size)
