"""Ui: ユーザー向けメッセージの出力先。

stdout にはコマンドの結果、stderr には情報・警告・エラーを出す。
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from rich.console import Console


@runtime_checkable
class Ui(Protocol):
    """コマンドが共有する出力シンク。"""

    def output(self, message: str) -> None:
        """コマンドの結果を stdout に出力する。"""
        ...

    def info(self, message: str) -> None:
        """補足情報を stderr に出力する。"""
        ...

    def warn(self, message: str) -> None:
        """警告を stderr に出力する。"""
        ...

    def error(self, message: str) -> None:
        """エラーを stderr に出力する。"""
        ...


class ConsoleUi:
    """Rich Console による Ui 実装。

    ユーザー入力やバックエンド出力を含むメッセージをそのまま表示するため、
    markup と自動ハイライトは無効にする。
    """

    def __init__(
        self, stdout: Console | None = None, stderr: Console | None = None
    ) -> None:
        self._stdout = stdout or Console(markup=False, highlight=False)
        self._stderr = stderr or Console(stderr=True, markup=False, highlight=False)

    def output(self, message: str) -> None:
        self._stdout.print(message, soft_wrap=True)

    def info(self, message: str) -> None:
        self._stderr.print(message, soft_wrap=True)

    def warn(self, message: str) -> None:
        self._stderr.print(message, style="yellow", soft_wrap=True)

    def error(self, message: str) -> None:
        self._stderr.print(message, style="red", soft_wrap=True)
