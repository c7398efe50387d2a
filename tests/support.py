"""テスト共通ヘルパー。"""

from __future__ import annotations

from collections.abc import Sequence


class RecordingUi:
    """出力内容を種別ごとに記録する Ui 実装。"""

    def __init__(self) -> None:
        self.messages: list[tuple[str, str]] = []

    def output(self, message: str) -> None:
        self.messages.append(("output", message))

    def info(self, message: str) -> None:
        self.messages.append(("info", message))

    def warn(self, message: str) -> None:
        self.messages.append(("warn", message))

    def error(self, message: str) -> None:
        self.messages.append(("error", message))

    def text(self, kind: str) -> str:
        """指定種別のメッセージを改行で連結して返す。"""
        return "\n".join(m for k, m in self.messages if k == kind)


class FakeCommand:
    """名前だけを持つ最小の Command 実装。"""

    def __init__(self, name: str, status: int = 0) -> None:
        self.name = name
        self.status = status
        self.received: list[list[str]] = []

    def run(self, args: Sequence[str]) -> int:
        self.received.append(list(args))
        return self.status

    def synopsis(self) -> str:
        return f"{self.name} synopsis"

    def help(self) -> str:
        return f"Usage: climux {self.name}"
