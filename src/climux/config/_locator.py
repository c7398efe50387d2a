"""設定ファイル探索。

プロジェクト設定 .climux.toml のカレント→親探索と、
ユーザーグローバル設定パスの解決を行う。
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

PROJECT_CONFIG_FILE_NAME: str = ".climux.toml"
CONFIG_PATH_ENV_VAR: str = "CLIMUX_CONFIG"


def find_project_config(start: Path) -> Path | None:
    """start から親方向に .climux.toml を探索し、最初に見つかった通常ファイルを返す。

    Args:
        start: 探索開始ディレクトリ。

    Returns:
        .climux.toml のフルパス。ファイルシステムルートまで見つからなければ None。

    Raises:
        OSError: 探索パス上のアクセス権限エラー等。
    """
    current = start.resolve()
    while True:
        candidate = current / PROJECT_CONFIG_FILE_NAME
        if candidate.is_file():
            return candidate
        if current.parent == current:
            return None
        current = current.parent


def get_user_config_path() -> Path:
    """ユーザーグローバル設定ファイル ~/.config/climux/config.toml のパスを返す。

    存在チェックは行わない。

    Raises:
        RuntimeError: ホームディレクトリを特定できない場合。
    """
    return Path.home() / ".config" / "climux" / "config.toml"


def get_explicit_config_path(environ: Mapping[str, str] | None = None) -> Path | None:
    """環境変数 CLIMUX_CONFIG で明示された設定ファイルパスを返す。未設定・空なら None。"""
    env = os.environ if environ is None else environ
    value = env.get(CONFIG_PATH_ENV_VAR, "")
    return Path(value) if value else None
