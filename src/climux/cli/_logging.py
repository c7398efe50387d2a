"""ロギング設定。

診断ログは stderr に Rich の RichHandler で出力する。
ユーザー向けメッセージは Ui が担当し、ここでは扱わない。
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

from climux.models.config import LogLevel

_ROOT_LOGGER_NAME = "climux"


def configure_logging(level: LogLevel) -> logging.Logger:
    """climux ロガーに RichHandler を1つだけ設定し、レベルを反映する。

    複数回呼ばれてもハンドラは重複しない。

    Returns:
        設定済みの climux ロガー。
    """
    logger = logging.getLogger(_ROOT_LOGGER_NAME)
    logger.setLevel(level.value.upper())
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(
            console=Console(stderr=True),
            show_path=False,
            rich_tracebacks=True,
        )
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
        logger.addHandler(handler)
    logger.propagate = False
    return logger
