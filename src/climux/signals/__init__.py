"""シャットダウン通知パッケージ。

公開 API:
    new_shutdown_stream: SIGINT/SIGTERM を購読する独立したストリームを作成する。
    ShutdownStream: シャットダウン通知ストリーム。
    SignalDispatcher: プロセス全体のシグナルハンドラと購読者の管理。
    SignalSubscriptionError: 購読失敗時のエラー。
"""

from climux.signals._dispatcher import (
    HANDLED_SIGNALS,
    SignalDispatcher,
    SignalSubscriptionError,
    get_default_dispatcher,
)
from climux.signals._stream import ShutdownStream, new_shutdown_stream

__all__ = [
    "HANDLED_SIGNALS",
    "ShutdownStream",
    "SignalDispatcher",
    "SignalSubscriptionError",
    "get_default_dispatcher",
    "new_shutdown_stream",
]
