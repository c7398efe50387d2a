"""設定探索・読み込み・解決のテスト。"""

from __future__ import annotations

import tomllib
from collections.abc import Iterator
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from climux.config import find_project_config
from climux.config._loader import load_env_config, load_toml_config
from climux.config._locator import get_explicit_config_path, get_user_config_path
from climux.config._resolver import (
    filter_cli_overrides,
    merge_config_layers,
    resolve_config,
)
from climux.models.config import ClimuxConfig, LogLevel

PATCH_USER_CONFIG = "climux.config._resolver.get_user_config_path"


@pytest.fixture
def user_config(tmp_path: Path) -> Iterator[Path]:
    """ユーザーグローバル設定を tmp_path 配下に差し替える（初期状態は未作成）。"""
    path = tmp_path / "home" / "config.toml"
    with patch(PATCH_USER_CONFIG, return_value=path):
        yield path


@pytest.fixture
def project(tmp_path: Path) -> Path:
    root = tmp_path / "project"
    (root / "sub" / "dir").mkdir(parents=True)
    return root


def _write(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# 探索
# ---------------------------------------------------------------------------


class TestFindProjectConfig:
    """find_project_config のテスト。"""

    def test_finds_file_in_start_dir(self, project: Path) -> None:
        """開始ディレクトリの .climux.toml を見つける。"""
        config = _write(project / ".climux.toml", "")
        assert find_project_config(project) == config.resolve()

    def test_finds_file_in_ancestor(self, project: Path) -> None:
        """祖先ディレクトリまで遡って探す。"""
        config = _write(project / ".climux.toml", "")
        assert find_project_config(project / "sub" / "dir") == config.resolve()

    def test_nearest_file_wins(self, project: Path) -> None:
        """最も近いファイルを優先する。"""
        _write(project / ".climux.toml", "")
        nearer = _write(project / "sub" / ".climux.toml", "")
        assert find_project_config(project / "sub" / "dir") == nearer.resolve()

    def test_directory_with_same_name_ignored(self, project: Path) -> None:
        """同名のディレクトリは設定ファイルとみなさない。"""
        (project / "sub" / ".climux.toml").mkdir()
        config = _write(project / ".climux.toml", "")
        assert find_project_config(project / "sub") == config.resolve()


class TestLocatorPaths:
    """設定ファイルパス解決のテスト。"""

    def test_user_config_path(self) -> None:
        """ユーザー設定は ~/.config/climux/config.toml。"""
        assert get_user_config_path() == Path.home() / ".config" / "climux" / "config.toml"

    def test_explicit_path_from_env(self) -> None:
        """CLIMUX_CONFIG で設定ファイルを明示できる。"""
        assert get_explicit_config_path({"CLIMUX_CONFIG": "/etc/climux.toml"}) == Path(
            "/etc/climux.toml"
        )

    @pytest.mark.parametrize("environ", [{}, {"CLIMUX_CONFIG": ""}])
    def test_explicit_path_unset(self, environ: dict[str, str]) -> None:
        """未設定または空文字列なら None。"""
        assert get_explicit_config_path(environ) is None


# ---------------------------------------------------------------------------
# 読み込み
# ---------------------------------------------------------------------------


class TestLoadTomlConfig:
    """load_toml_config のテスト。"""

    def test_parses_toml(self, tmp_path: Path) -> None:
        """TOML を辞書として読み込む。"""
        path = _write(tmp_path / "c.toml", 'log_level = "info"\nbackend_command = ["consul"]\n')
        assert load_toml_config(path) == {"log_level": "info", "backend_command": ["consul"]}

    def test_syntax_error_propagates(self, tmp_path: Path) -> None:
        """構文エラーは TOMLDecodeError として伝播する。"""
        path = _write(tmp_path / "c.toml", "log_level = \n")
        with pytest.raises(tomllib.TOMLDecodeError):
            load_toml_config(path)


class TestLoadEnvConfig:
    """load_env_config のテスト。"""

    def test_no_matching_variables(self) -> None:
        """該当する変数がなければ None。"""
        assert load_env_config({"PATH": "/bin", "CLIMUX_CONFIG": "x.toml"}) is None

    def test_reads_prefixed_fields(self) -> None:
        """CLIMUX_<FIELD> をフィールド名に対応付ける。"""
        layer = load_env_config(
            {"CLIMUX_LOG_LEVEL": "debug", "CLIMUX_SIGNAL_BUFFER_SIZE": "8"}
        )
        assert layer == {"log_level": "debug", "signal_buffer_size": "8"}

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("1", True), ("true", True), ("On", True), ("0", False), ("no", False)],
    )
    def test_bool_fields_coerced(self, raw: str, expected: bool) -> None:
        """真偽値フィールドは代表的な表記を変換する。"""
        layer = load_env_config({"CLIMUX_EAGER_SHUTDOWN_STREAMS": raw})
        assert layer == {"eager_shutdown_streams": expected}

    def test_unrecognized_bool_left_for_validation(self) -> None:
        """解釈できない値は検証に委ねる。"""
        layer = load_env_config({"CLIMUX_EAGER_SHUTDOWN_STREAMS": "maybe"})
        assert layer == {"eager_shutdown_streams": "maybe"}


# ---------------------------------------------------------------------------
# マージ
# ---------------------------------------------------------------------------


class TestMergeConfigLayers:
    """merge_config_layers のテスト。"""

    def test_empty(self) -> None:
        """レイヤーがなければ空の辞書。"""
        assert merge_config_layers() == {}
        assert merge_config_layers(None, None) == {}

    def test_later_layer_wins_per_key(self) -> None:
        """キー単位で後のレイヤーが優先する。"""
        result = merge_config_layers(
            {"log_level": "info", "signal_buffer_size": 2},
            None,
            {"log_level": "debug"},
        )
        assert result == {"log_level": "debug", "signal_buffer_size": 2}


class TestFilterCliOverrides:
    """filter_cli_overrides のテスト。"""

    def test_drops_none(self) -> None:
        """None 値は未指定として除外する。"""
        assert filter_cli_overrides({"log_level": None, "backend_command": ("b",)}) == {
            "backend_command": ("b",)
        }


# ---------------------------------------------------------------------------
# 解決
# ---------------------------------------------------------------------------


class TestResolveConfig:
    """resolve_config のレイヤー優先順位テスト。"""

    def test_defaults_when_no_sources(self, user_config: Path, project: Path) -> None:
        """設定ソースがなければデフォルト値。"""
        assert resolve_config(start_dir=project, environ={}) == ClimuxConfig()

    def test_user_layer_applied(self, user_config: Path, project: Path) -> None:
        """ユーザー設定を反映する。"""
        _write(user_config, 'log_level = "info"\n')
        config = resolve_config(start_dir=project, environ={})
        assert config.log_level == LogLevel.INFO

    def test_project_overrides_user(self, user_config: Path, project: Path) -> None:
        """プロジェクト設定がユーザー設定より優先する。"""
        _write(user_config, 'log_level = "info"\nsignal_buffer_size = 6\n')
        _write(project / ".climux.toml", 'log_level = "error"\n')
        config = resolve_config(start_dir=project / "sub", environ={})
        assert config.log_level == LogLevel.ERROR
        assert config.signal_buffer_size == 6

    def test_env_overrides_project(self, user_config: Path, project: Path) -> None:
        """環境変数がプロジェクト設定より優先する。"""
        _write(project / ".climux.toml", "eager_shutdown_streams = false\n")
        config = resolve_config(
            start_dir=project, environ={"CLIMUX_EAGER_SHUTDOWN_STREAMS": "true"}
        )
        assert config.eager_shutdown_streams is True

    def test_cli_overrides_env(self, user_config: Path, project: Path) -> None:
        """CLI オプションが環境変数より優先する。"""
        config = resolve_config(
            start_dir=project,
            cli_overrides={"backend_command": ("nomad",), "log_level": None},
            environ={"CLIMUX_BACKEND_COMMAND": "consul -x", "CLIMUX_LOG_LEVEL": "info"},
        )
        assert config.backend_command == ("nomad",)
        assert config.log_level == LogLevel.INFO

    def test_env_backend_command_split(self, user_config: Path, project: Path) -> None:
        """環境変数のバックエンド指定は argv に分割する。"""
        config = resolve_config(
            start_dir=project, environ={"CLIMUX_BACKEND_COMMAND": "consul -dev"}
        )
        assert config.backend_command == ("consul", "-dev")

    def test_env_backend_command_with_quoted_path(
        self, user_config: Path, project: Path
    ) -> None:
        """環境変数では引用符で空白を含むバックエンドのパスを指定できる。"""
        config = resolve_config(
            start_dir=project,
            environ={"CLIMUX_BACKEND_COMMAND": '"/opt/hashi corp/consul" -dev'},
        )
        assert config.backend_command == ("/opt/hashi corp/consul", "-dev")

    def test_explicit_path_replaces_search(
        self, user_config: Path, project: Path, tmp_path: Path
    ) -> None:
        """明示パスは .climux.toml の探索を置き換える。"""
        _write(project / ".climux.toml", 'log_level = "error"\n')
        explicit = _write(tmp_path / "other.toml", 'log_level = "debug"\n')
        config = resolve_config(start_dir=project, config_path=explicit, environ={})
        assert config.log_level == LogLevel.DEBUG

    def test_env_explicit_path(self, user_config: Path, project: Path, tmp_path: Path) -> None:
        """CLIMUX_CONFIG の明示パスを読み込む。"""
        explicit = _write(tmp_path / "env.toml", "force_kill_after = 3\n")
        config = resolve_config(
            start_dir=project, environ={"CLIMUX_CONFIG": str(explicit)}
        )
        assert config.force_kill_after == 3

    def test_missing_explicit_path_raises(
        self, user_config: Path, project: Path, tmp_path: Path
    ) -> None:
        """明示パスが存在しなければエラー。"""
        with pytest.raises(FileNotFoundError):
            resolve_config(
                start_dir=project, config_path=tmp_path / "missing.toml", environ={}
            )

    def test_invalid_value_raises(self, user_config: Path, project: Path) -> None:
        """不正な値は ValidationError。"""
        _write(project / ".climux.toml", "signal_buffer_size = 0\n")
        with pytest.raises(ValidationError):
            resolve_config(start_dir=project, environ={})

    def test_unknown_key_raises(self, user_config: Path, project: Path) -> None:
        """未知のキーは ValidationError。"""
        _write(project / ".climux.toml", "colour = true\n")
        with pytest.raises(ValidationError):
            resolve_config(start_dir=project, environ={})

    def test_invalid_env_bool_raises(self, user_config: Path, project: Path) -> None:
        """解釈できない真偽値は ValidationError。"""
        with pytest.raises(ValidationError):
            resolve_config(
                start_dir=project, environ={"CLIMUX_EAGER_SHUTDOWN_STREAMS": "maybe"}
            )

    def test_toml_syntax_error_propagates(self, user_config: Path, project: Path) -> None:
        """TOML 構文エラーは伝播する。"""
        _write(project / ".climux.toml", "log_level = [\n")
        with pytest.raises(tomllib.TOMLDecodeError):
            resolve_config(start_dir=project, environ={})
