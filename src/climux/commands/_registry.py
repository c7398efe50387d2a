"""CommandRegistry: コマンド名からファクトリへの対応表。

名前は完全一致でのみ解決する。"kv get" のような空白区切りの複合名も
単なる文字列キーであり、"kv" とは無関係なエントリとして扱う。
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from types import MappingProxyType

from climux.commands._contract import Command, CommandFactory

logger = logging.getLogger(__name__)

GROUP_SEPARATOR: str = " "


class CommandNotFoundError(LookupError):
    """登録されていないコマンド名が解決された場合のエラー。

    Attributes:
        name: 解決しようとしたコマンド名。
        available: 登録済みのコマンド名（ソート済み）。
    """

    def __init__(self, name: str, available: tuple[str, ...]) -> None:
        super().__init__(f"Command '{name}' is not registered.")
        self.name = name
        self.available = available


class CommandRegistry:
    """コマンド名 → ファクトリの対応表。

    起動時に register() で構築し、以後は読み取り専用として扱う。
    resolve() は対応表を変更しないため、並行して呼び出してよい。
    """

    def __init__(self) -> None:
        self._factories: dict[str, CommandFactory] = {}

    def register(self, name: str, factory: CommandFactory) -> None:
        """name にファクトリを登録する。既存の登録は上書きする。

        Raises:
            ValueError: name が空、または前後に空白を含む場合。
        """
        if not name or name != name.strip():
            raise ValueError(f"Invalid command name: {name!r}")
        if name in self._factories:
            logger.debug("Command '%s' re-registered; previous factory replaced", name)
        self._factories[name] = factory

    def resolve(self, name: str) -> Command:
        """name のファクトリを呼び出し、新しい Command を返す。

        Raises:
            CommandNotFoundError: name が登録されていない場合。
        """
        try:
            factory = self._factories[name]
        except KeyError:
            raise CommandNotFoundError(name, self.names()) from None
        return factory()

    def names(self) -> tuple[str, ...]:
        """登録済みのコマンド名を表示用にソートして返す。"""
        return tuple(sorted(self._factories))

    def subcommands(self, group: str) -> tuple[str, ...]:
        """group の直下にあるサブコマンド名（"group sub" 形式）をソートして返す。"""
        prefix = group + GROUP_SEPARATOR
        return tuple(
            name
            for name in sorted(self._factories)
            if name.startswith(prefix) and GROUP_SEPARATOR not in name[len(prefix) :]
        )

    def as_mapping(self) -> Mapping[str, CommandFactory]:
        """登録内容の読み取り専用ビューを返す。"""
        return MappingProxyType(self._factories)

    def __contains__(self, name: object) -> bool:
        return name in self._factories

    def __len__(self) -> int:
        return len(self._factories)

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())
