"""プロセス内で完結するコマンド。"""

from __future__ import annotations

import base64
import secrets
from collections.abc import Callable, Sequence
from typing import Final

from climux.commands._contract import VersionInfo
from climux.commands._ui import Ui
from climux.models.exit_code import ExitCode

GOSSIP_KEY_BYTES: Final[int] = 32


class VersionCommand:
    """バージョンを表示する。"""

    def __init__(self, ui: Ui, version: VersionInfo) -> None:
        self._ui = ui
        self._version = version

    def run(self, args: Sequence[str]) -> int:
        self._ui.output(f"climux {self._version.human}")
        return ExitCode.SUCCESS

    def synopsis(self) -> str:
        return "Prints the climux version"

    def help(self) -> str:
        return "Usage: climux version\n\n  Prints the version of this tool."


class KeygenCommand:
    """gossip 暗号化用の新しい鍵を base64 で出力する。"""

    def __init__(self, ui: Ui) -> None:
        self._ui = ui

    def run(self, args: Sequence[str]) -> int:
        if args:
            self._ui.error("Error: keygen takes no arguments.")
            return ExitCode.USAGE_ERROR
        key = secrets.token_bytes(GOSSIP_KEY_BYTES)
        self._ui.output(base64.b64encode(key).decode("ascii"))
        return ExitCode.SUCCESS

    def synopsis(self) -> str:
        return "Generates a new encryption key"

    def help(self) -> str:
        return (
            "Usage: climux keygen\n\n"
            f"  Generates a new {GOSSIP_KEY_BYTES}-byte encryption key that can be used"
            " to configure the agent to encrypt traffic. The output is base64 encoded."
        )


class GroupCommand:
    """サブコマンドをまとめる親コマンド。単独で実行されるとヘルプを表示する。

    サブコマンド一覧は subcommands 関数で実行時に取得するため、
    レジストリへの登録順に依存しない。
    """

    def __init__(
        self,
        name: str,
        synopsis: str,
        description: str,
        ui: Ui,
        subcommands: Callable[[], Sequence[str]],
    ) -> None:
        self._name = name
        self._synopsis = synopsis
        self._description = description
        self._ui = ui
        self._subcommands = subcommands

    def run(self, args: Sequence[str]) -> int:
        self._ui.error(self.help())
        return ExitCode.USAGE_ERROR

    def synopsis(self) -> str:
        return self._synopsis

    def help(self) -> str:
        lines = [
            f"Usage: climux {self._name} <subcommand> [options] [args]",
            "",
            f"  {self._description}",
        ]
        subcommands = self._subcommands()
        if subcommands:
            lines += ["", "Subcommands:"]
            lines += [f"    {name.split()[-1]}" for name in subcommands]
        return "\n".join(lines)
