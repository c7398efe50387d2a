"""設定ソースローダー。

TOML ファイルと CLIMUX_* 環境変数を辞書として読み込む。
バリデーションは ClimuxConfig が担当する。
"""

from __future__ import annotations

import tomllib
from collections.abc import Mapping
from pathlib import Path

from climux.models.config import ClimuxConfig

ENV_PREFIX: str = "CLIMUX_"

_TRUE_STRINGS = frozenset({"1", "true", "yes", "on"})
_FALSE_STRINGS = frozenset({"0", "false", "no", "off"})


def load_toml_config(path: Path) -> dict[str, object]:
    """TOML 設定ファイルを読み込み辞書として返す。

    Raises:
        tomllib.TOMLDecodeError: TOML 構文エラーの場合。
        UnicodeDecodeError: UTF-8 として不正なバイト列を含む場合。
        OSError: ファイルを読み取れない場合（存在しない場合やディレクトリの場合を含む）。
    """
    with path.open("rb") as f:
        return tomllib.load(f)


def _coerce_env_value(field_name: str, raw: str) -> object:
    # StrictBool フィールドは文字列を受け付けないため、ここで真偽値に変換する。
    # 解釈できない値はそのまま渡し、バリデーションエラーとして報告させる。
    annotation = ClimuxConfig.model_fields[field_name].annotation
    if annotation is bool:
        lowered = raw.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    return raw


def load_env_config(environ: Mapping[str, str]) -> dict[str, object] | None:
    """CLIMUX_<FIELD> 形式の環境変数から設定辞書を構築する。

    ClimuxConfig のフィールド名に対応しない変数（CLIMUX_CONFIG など）は無視する。

    Args:
        environ: 環境変数のマッピング。

    Returns:
        設定辞書。該当する変数が1つもなければ None。
    """
    layer: dict[str, object] = {}
    for field_name in ClimuxConfig.model_fields:
        key = ENV_PREFIX + field_name.upper()
        if key in environ:
            layer[field_name] = _coerce_env_value(field_name, environ[key])
    return layer or None
