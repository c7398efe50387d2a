"""SignalDispatcher: プロセス全体のシグナルハンドラを複数購読者へ分配する。

Python ではシグナル種別ごとにハンドラを1つしか登録できないため、
最初の購読時に SIGINT/SIGTERM へ単一のハンドラを登録し、
受信したシグナルを全購読者の受信箱へ配る。
"""

from __future__ import annotations

import logging
import queue
import signal
import threading
from collections.abc import Iterable
from types import FrameType
from typing import Final

logger = logging.getLogger(__name__)

HANDLED_SIGNALS: Final[tuple[signal.Signals, ...]] = (signal.SIGINT, signal.SIGTERM)
"""シャットダウン意図として扱うシグナル。これ以外は横取りしない。"""


class SignalSubscriptionError(RuntimeError):
    """シグナルハンドラを登録できない環境で購読しようとした場合のエラー。

    メインスレッド以外からの初回購読や、プラットフォームが対象シグナルを
    サポートしない場合に送出される。
    """


class SignalInbox:
    """1購読者分の受信箱。

    シグナルハンドラから呼ばれる offer() は SimpleQueue.put のみを行い、
    決してブロックしない。容量を超えた分は OS のシグナル合流と同様に捨てる。
    """

    def __init__(self, capacity: int) -> None:
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self._queue: queue.SimpleQueue[signal.Signals] = queue.SimpleQueue()
        self._capacity = capacity

    def offer(self, sig: signal.Signals) -> None:
        if self._queue.qsize() < self._capacity:
            self._queue.put(sig)

    @property
    def pending(self) -> int:
        """保留中のシグナル数。"""
        return self._queue.qsize()

    def take(self) -> signal.Signals:
        """次のシグナルが届くまでブロックして取り出す。"""
        return self._queue.get()


class SignalDispatcher:
    """対象シグナルのプロセス全体ハンドラを所有し、全受信箱へ配送する。

    購読者一覧はコピーオンライトのタプルで保持し、
    シグナルハンドラ側ではロックを取らない。
    """

    def __init__(self, signals: Iterable[signal.Signals] = HANDLED_SIGNALS) -> None:
        self._signals = tuple(signals)
        self._lock = threading.Lock()
        self._inboxes: tuple[SignalInbox, ...] = ()
        self._previous: dict[signal.Signals, object] = {}

    @property
    def signals(self) -> tuple[signal.Signals, ...]:
        return self._signals

    @property
    def installed(self) -> bool:
        return bool(self._previous)

    @property
    def subscriber_count(self) -> int:
        return len(self._inboxes)

    def subscribe(self, capacity: int) -> SignalInbox:
        """新しい受信箱を作成し、以後のシグナルを配送対象に加える。

        Args:
            capacity: 受信箱に保留できるシグナル数。

        Returns:
            作成された受信箱。

        Raises:
            SignalSubscriptionError: ハンドラを登録できない場合。
            ValueError: capacity が正でない場合。
        """
        inbox = SignalInbox(capacity)
        with self._lock:
            self._install()
            self._inboxes = (*self._inboxes, inbox)
        logger.debug("Shutdown subscription #%d created", len(self._inboxes))
        return inbox

    def uninstall(self) -> None:
        """登録前のハンドラを復元する。

        既存の受信箱は購読者一覧に残り、次回 subscribe() でハンドラが再登録されると
        再び配送を受ける。
        """
        with self._lock:
            for signum, handler in self._previous.items():
                signal.signal(signum, handler)  # type: ignore[arg-type]
            self._previous = {}

    def _install(self) -> None:
        if self._previous:
            return
        previous: dict[signal.Signals, object] = {}
        try:
            for signum in self._signals:
                old = signal.signal(signum, self._handle)
                # C レベルで登録されたハンドラは None として返るため既定動作で復元する
                previous[signum] = old if old is not None else signal.SIG_DFL
        except (ValueError, OSError) as exc:
            for signum, handler in previous.items():
                signal.signal(signum, handler)  # type: ignore[arg-type]
            raise SignalSubscriptionError(
                f"Cannot subscribe to {', '.join(s.name for s in self._signals)}: {exc}"
            ) from exc
        self._previous = previous

    def _handle(self, signum: int, frame: FrameType | None) -> None:
        sig = signal.Signals(signum)
        for inbox in self._inboxes:
            inbox.offer(sig)


_default_dispatcher = SignalDispatcher()


def get_default_dispatcher() -> SignalDispatcher:
    """プロセス共有の SignalDispatcher を返す。"""
    return _default_dispatcher
