"""CliApp: Typer アプリケーション定義。

climux <command> [args] の形式で呼び出され、コマンド名をレジストリで解決して
実行し、その終了コードでプロセスを終了する。
"""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError

from climux.cli._logging import configure_logging
from climux.cli._usage import (
    HELP_FLAGS,
    render_command_help,
    render_usage,
    split_command,
    wants_help,
)
from climux.commands import (
    CommandDeps,
    CommandNotFoundError,
    ConsoleUi,
    VersionInfo,
    build_registry,
)
from climux.config import resolve_config
from climux.models.config import ClimuxConfig, LogLevel
from climux.models.exit_code import ExitCode

app = typer.Typer(
    name="climux",
    help="Command-line multiplexer for cluster agent tooling.",
    add_completion=False,
)


def _version_callback(value: bool) -> None:
    """--version 指定時にバージョンを出力して終了する。"""
    if value:
        print(f"climux {VersionInfo.from_metadata().human}")
        raise typer.Exit()


def main() -> None:
    """CLI エントリポイント。pyproject.toml の [project.scripts] から呼び出される。"""
    app()


@app.command(
    context_settings={
        # -h/--help はコマンドごとのヘルプとして自前で扱う
        "help_option_names": [],
        "allow_extra_args": True,
        "ignore_unknown_options": True,
        "allow_interspersed_args": False,
    },
)
def dispatch(
    args: Annotated[
        list[str] | None,
        typer.Argument(metavar="COMMAND [ARGS]...", show_default=False),
    ] = None,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            help="Show version and exit.",
            callback=_version_callback,
            is_eager=True,
        ),
    ] = None,
    log_level: Annotated[
        LogLevel | None,
        typer.Option("--log-level", help="Diagnostic log level.", case_sensitive=False),
    ] = None,
    backend: Annotated[
        list[str] | None,
        typer.Option(
            "--backend",
            help="Backend argv element (repeatable). Overrides backend_command.",
        ),
    ] = None,
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Project configuration file (TOML)."),
    ] = None,
) -> None:
    """Run COMMAND with ARGS."""
    raw_args = list(args or [])

    # 1. 設定解決
    config = _load_config(
        config_file,
        {
            "log_level": log_level,
            "backend_command": tuple(backend) if backend else None,
        },
    )
    configure_logging(config.log_level)

    # 2. レジストリ構築
    ui = ConsoleUi()
    registry = build_registry(CommandDeps(ui=ui, config=config))

    # 3. コマンド名の解決
    if not raw_args:
        ui.error(render_usage(registry))
        raise typer.Exit(code=ExitCode.USAGE_ERROR)
    if raw_args[0] in HELP_FLAGS:
        ui.output(render_usage(registry))
        raise typer.Exit(code=ExitCode.SUCCESS)

    split = split_command(raw_args, registry)
    if split is None:
        ui.error(f"Error: Unknown command '{raw_args[0]}'.\n")
        ui.error(render_usage(registry))
        raise typer.Exit(code=ExitCode.NOT_FOUND)
    name, rest = split

    try:
        command = registry.resolve(name)
    except CommandNotFoundError as e:
        ui.error(f"Error: {e}")
        raise typer.Exit(code=ExitCode.NOT_FOUND) from None

    # 4. 実行
    if wants_help(rest):
        ui.output(render_command_help(command))
        raise typer.Exit(code=ExitCode.SUCCESS)

    status = command.run(rest)
    raise typer.Exit(code=int(status))


def _load_config(
    config_file: Path | None, overrides: dict[str, object]
) -> ClimuxConfig:
    """設定を解決する。読み込み・検証エラーは使い方エラーとして終了する。"""
    try:
        return resolve_config(config_path=config_file, cli_overrides=overrides)
    except (ValidationError, tomllib.TOMLDecodeError, UnicodeDecodeError) as e:
        ConsoleUi().error(
            f"Error: Invalid configuration: {e}\n"
            "Check .climux.toml and CLIMUX_* environment variables."
        )
        raise typer.Exit(code=ExitCode.USAGE_ERROR) from None
    except OSError as e:
        ConsoleUi().error(
            f"Error: Cannot read configuration file: {e}\n"
            "Check the --config / CLIMUX_CONFIG path and its permissions."
        )
        raise typer.Exit(code=ExitCode.USAGE_ERROR) from None
