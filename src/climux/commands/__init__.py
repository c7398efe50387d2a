"""コマンドレジストリパッケージ。

公開 API:
    Command: コマンド実行契約。
    CommandRegistry: コマンド名 → ファクトリの対応表。
    CommandNotFoundError: 未登録名の解決エラー。
    CommandDeps: ファクトリが共有する依存関係。
    build_registry: 組み込みコマンドを登録したレジストリを構築する。
"""

from climux.commands._backend import BackendCommand, LongRunningBackendCommand
from climux.commands._builtin import (
    BACKEND_COMMANDS,
    GROUP_COMMANDS,
    LONG_RUNNING_COMMANDS,
    build_registry,
)
from climux.commands._contract import (
    Command,
    CommandDeps,
    CommandFactory,
    ShutdownProvider,
    VersionInfo,
)
from climux.commands._local import GroupCommand, KeygenCommand, VersionCommand
from climux.commands._registry import (
    GROUP_SEPARATOR,
    CommandNotFoundError,
    CommandRegistry,
)
from climux.commands._ui import ConsoleUi, Ui

__all__ = [
    "BACKEND_COMMANDS",
    "BackendCommand",
    "Command",
    "CommandDeps",
    "CommandFactory",
    "CommandNotFoundError",
    "CommandRegistry",
    "ConsoleUi",
    "GROUP_COMMANDS",
    "GROUP_SEPARATOR",
    "GroupCommand",
    "KeygenCommand",
    "LONG_RUNNING_COMMANDS",
    "LongRunningBackendCommand",
    "ShutdownProvider",
    "Ui",
    "VersionCommand",
    "VersionInfo",
    "build_registry",
]
