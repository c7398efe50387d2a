"""設定リゾルバー。

デフォルト値 < ユーザー設定 < プロジェクト設定 < 環境変数 < CLI オプション
の順に項目単位で上書きし、ClimuxConfig を構築する。
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

from climux.config._loader import load_env_config, load_toml_config
from climux.config._locator import (
    find_project_config,
    get_explicit_config_path,
    get_user_config_path,
)
from climux.models.config import ClimuxConfig


def merge_config_layers(
    *layers: Mapping[str, object] | None,
) -> dict[str, object]:
    """複数の設定レイヤーを項目単位でマージする。

    後のレイヤーが先のレイヤーを上書きする。None のレイヤーはスキップされる。

    Args:
        layers: マージ対象の設定辞書。低優先度から高優先度の順。

    Returns:
        マージ済みの設定辞書。
    """
    result: dict[str, object] = {}
    for layer in layers:
        if layer is not None:
            result.update(layer)
    return result


def filter_cli_overrides(cli_options: Mapping[str, object]) -> dict[str, object]:
    """CLI オプション辞書から None 値（未指定）を除外する。"""
    return {k: v for k, v in cli_options.items() if v is not None}


def resolve_config(
    start_dir: Path | None = None,
    config_path: Path | None = None,
    cli_overrides: Mapping[str, object] | None = None,
    environ: Mapping[str, str] | None = None,
) -> ClimuxConfig:
    """全設定ソースを解決し ClimuxConfig を構築する。

    プロジェクト設定は config_path、CLIMUX_CONFIG、.climux.toml の探索結果の
    順に最初に決まったものを使う。明示されたパスが存在しない場合はエラーとし、
    探索やユーザー設定で見つからない場合は該当レイヤーをスキップする。

    Args:
        start_dir: .climux.toml の探索開始ディレクトリ。None の場合はカレントディレクトリ。
        config_path: 明示的なプロジェクト設定ファイル（--config）。
        cli_overrides: CLI オプションの辞書。None 値は未指定扱い。
        environ: 環境変数。None の場合は os.environ。

    Returns:
        解決済みの ClimuxConfig インスタンス。

    Raises:
        pydantic.ValidationError: マージ後の設定が不正な場合。
        tomllib.TOMLDecodeError: 設定ファイルの TOML 構文が不正な場合。
        UnicodeDecodeError: 設定ファイルが UTF-8 として読めない場合。
        OSError: 設定ファイルを読み取れない場合（明示されたパスが存在しない場合や
            ディレクトリの場合を含む）。
    """
    env = os.environ if environ is None else environ
    effective_start = start_dir if start_dir is not None else Path.cwd()

    # Layer 1: ユーザーグローバル設定
    user_layer: dict[str, object] | None = None
    try:
        user_layer = load_toml_config(get_user_config_path())
    except FileNotFoundError:
        pass

    # Layer 2: プロジェクト設定（明示パスは存在必須）
    project_layer: dict[str, object] | None = None
    explicit_path = config_path or get_explicit_config_path(env)
    if explicit_path is not None:
        project_layer = load_toml_config(explicit_path)
    else:
        found = find_project_config(effective_start)
        if found is not None:
            project_layer = load_toml_config(found)

    # Layer 3: 環境変数
    env_layer = load_env_config(env)

    # Layer 4 (最高優先): CLI overrides
    cli_layer = filter_cli_overrides(cli_overrides) if cli_overrides else None

    merged = merge_config_layers(user_layer, project_layer, env_layer, cli_layer)

    # 未指定の項目には ClimuxConfig のフィールドデフォルトが適用される
    return ClimuxConfig(**merged)  # type: ignore[arg-type]
