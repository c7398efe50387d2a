"""外部バックエンドへ委譲するコマンド。

エージェントのライフサイクル、KV ストア操作、メンバーシップ、スナップショット、
ロック、監視などの本体はバックエンド実行ファイルが担う。climux は
[*backend_command, *name.split(), *args] を起動し、その終了コードを返す。
"""

from __future__ import annotations

import logging
import signal
import subprocess
from collections.abc import Sequence
from typing import Final

from climux.commands._contract import ShutdownProvider
from climux.commands._ui import Ui
from climux.models.config import DEFAULT_FORCE_KILL_AFTER
from climux.models.exit_code import ExitCode
from climux.signals import SignalSubscriptionError

logger = logging.getLogger(__name__)

CHILD_POLL_INTERVAL_SECONDS: Final[float] = 0.1


def exit_status(returncode: int) -> int:
    """subprocess の returncode をシェル慣習の終了コードに変換する。

    シグナルで終了した子プロセス（負の returncode）は 128 + シグナル番号とする。
    """
    return 128 - returncode if returncode < 0 else returncode


class BackendCommand:
    """バックエンド実行ファイルを1回起動し、終了を待つコマンド。"""

    def __init__(
        self,
        name: str,
        synopsis: str,
        ui: Ui,
        backend: Sequence[str],
    ) -> None:
        self._name = name
        self._synopsis = synopsis
        self._ui = ui
        self._backend = tuple(backend)

    @property
    def name(self) -> str:
        return self._name

    def run(self, args: Sequence[str]) -> int:
        argv = self._build_argv(args)
        if argv is None:
            return ExitCode.EXECUTION_ERROR
        logger.debug("Running backend: %s", argv)
        try:
            completed = subprocess.run(argv, check=False)
        except OSError as e:
            self._report_launch_failure(e)
            return ExitCode.EXECUTION_ERROR
        return exit_status(completed.returncode)

    def synopsis(self) -> str:
        return self._synopsis

    def help(self) -> str:
        return (
            f"Usage: climux {self._name} [options] [args]\n\n"
            f"  {self._synopsis}.\n\n"
            "  Options and arguments are passed through to the configured backend\n"
            "  (backend_command in .climux.toml, CLIMUX_BACKEND_COMMAND or --backend)."
        )

    def _build_argv(self, args: Sequence[str]) -> list[str] | None:
        if not self._backend:
            self._ui.error(
                f"Error: '{self._name}' requires a backend, but none is configured.\n"
                "Set backend_command in .climux.toml, export CLIMUX_BACKEND_COMMAND, "
                "or pass --backend."
            )
            return None
        return [*self._backend, *self._name.split(), *args]

    def _report_launch_failure(self, exc: OSError) -> None:
        self._ui.error(
            f"Error: Failed to start backend '{self._backend[0]}': {exc}\n"
            "Check that the backend executable exists and is executable."
        )


class LongRunningBackendCommand(BackendCommand):
    """シャットダウン通知を受けて子プロセスを停止させる長時間実行コマンド。

    子プロセスの終了と停止要求の両方を待ち、先に起きた方に反応する。
    1回目の通知は受信したシグナルを子プロセスへ転送し、
    force_kill_after 回目の通知で子プロセスを強制終了する。
    """

    def __init__(
        self,
        name: str,
        synopsis: str,
        ui: Ui,
        backend: Sequence[str],
        shutdown: ShutdownProvider,
        force_kill_after: int = DEFAULT_FORCE_KILL_AFTER,
    ) -> None:
        super().__init__(name, synopsis, ui, backend)
        self._shutdown = shutdown
        self._force_kill_after = force_kill_after

    def run(self, args: Sequence[str]) -> int:
        argv = self._build_argv(args)
        if argv is None:
            return ExitCode.EXECUTION_ERROR

        # 作業開始前にストリームを確保し、起動直後のシグナルも取りこぼさない
        try:
            stream = self._shutdown()
        except SignalSubscriptionError as e:
            self._ui.error(f"Error: Cannot watch for shutdown signals: {e}")
            return ExitCode.EXECUTION_ERROR

        logger.debug("Running long-lived backend: %s", argv)
        # 端末からのシグナルは climux だけが受け取り、子へは転送分のみ届ける
        try:
            process = subprocess.Popen(argv, process_group=0)
        except OSError as e:
            self._report_launch_failure(e)
            return ExitCode.EXECUTION_ERROR

        received = 0
        while True:
            returncode = process.poll()
            if returncode is not None:
                return exit_status(returncode)

            sig = stream.wait(timeout=CHILD_POLL_INTERVAL_SECONDS)
            if sig is None:
                continue

            received += 1
            if received >= self._force_kill_after:
                self._ui.warn(f"Caught {sig.name} again, forcing '{self._name}' to stop")
                process.kill()
                process.wait()
                return ExitCode.EXECUTION_ERROR

            self._ui.info(f"Caught {sig.name}, asking '{self._name}' to stop gracefully")
            process.send_signal(sig)

    def help(self) -> str:
        return (
            super().help()
            + f"\n\n  Runs until the backend exits. {signal.SIGINT.name} or "
            f"{signal.SIGTERM.name} is forwarded to it;\n"
            f"  receiving {self._force_kill_after} such signals kills it."
        )
