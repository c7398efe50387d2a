"""使い方表示と、引数列からコマンド名を切り出す処理。"""

from __future__ import annotations

import itertools
from collections.abc import Sequence

from climux.commands import GROUP_SEPARATOR, Command, CommandRegistry

HELP_FLAGS: frozenset[str] = frozenset({"-h", "-help", "--help"})

_ARGS_TERMINATOR = "--"


def split_command(
    args: Sequence[str], registry: CommandRegistry
) -> tuple[str, list[str]] | None:
    """引数列の先頭から、登録済みの最長のコマンド名を切り出す。

    オプション（"-" 始まり）より前の語だけを名前の候補とする。
    レジストリ自体は完全一致でしか解決しないため、
    "kv get" の解決はここで語を結合して行う。

    Returns:
        (コマンド名, 残りの引数)。該当する名前がなければ None。
    """
    words = list(itertools.takewhile(lambda a: not a.startswith("-"), args))
    for count in range(len(words), 0, -1):
        name = GROUP_SEPARATOR.join(words[:count])
        if name in registry:
            return name, list(args[count:])
    return None


def wants_help(args: Sequence[str]) -> bool:
    """"--" より前に -h/--help が含まれるか判定する。"""
    for arg in args:
        if arg == _ARGS_TERMINATOR:
            return False
        if arg in HELP_FLAGS:
            return True
    return False


def render_usage(registry: CommandRegistry) -> str:
    """全コマンドの一覧を含む使い方テキストを構築する。

    サブコマンドは親コマンドのヘルプで表示するため、ここでは最上位の名前のみ並べる。
    """
    top_level = [name for name in registry.names() if GROUP_SEPARATOR not in name]
    width = max((len(name) for name in top_level), default=0)
    lines = [
        "Usage: climux [--version] [--help] <command> [<args>]",
        "",
        "Available commands are:",
    ]
    for name in top_level:
        command = registry.resolve(name)
        lines.append(f"    {name:<{width}}    {command.synopsis()}")
    return "\n".join(lines)


def render_command_help(command: Command) -> str:
    """コマンド単体のヘルプテキストを返す。"""
    return command.help().rstrip()
