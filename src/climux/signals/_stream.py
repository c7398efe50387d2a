"""ShutdownStream: 長時間実行コマンド向けのシャットダウン通知チャネル。

new_shutdown_stream() を呼ぶたびに独立した購読と転送スレッドが作られる。
1回の SIGINT/SIGTERM は生存中の全ストリームへ1イベントずつ届く。
"""

from __future__ import annotations

import asyncio
import itertools
import logging
import queue
import signal
import threading
from typing import Final

from climux.models.config import DEFAULT_SIGNAL_BUFFER_SIZE
from climux.signals._dispatcher import (
    SignalDispatcher,
    SignalInbox,
    get_default_dispatcher,
)

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL_SECONDS: Final[float] = 0.05

_stream_ids = itertools.count(1)


class ShutdownStream:
    """シャットダウン要求を1シグナル1イベントで届ける単一消費者向けストリーム。

    イベントは受信したシグナル（signal.Signals）そのもの。
    「停止せよ」だけを知りたい消費者は値を無視してよい。

    転送スレッドはプロセス終了まで終わらない。ストリームを明示的に閉じる経路は
    存在せず、読まれないストリームは転送スレッドがそのストリームへの受け渡しで
    待機し続けるだけで、他のストリームには影響しない。
    """

    def __init__(self, inbox: SignalInbox, name: str) -> None:
        self._name = name
        # 受け渡しは容量1のキューで行い、消費者が追いつくまで転送スレッドを待たせる
        self._events: queue.Queue[signal.Signals] = queue.Queue(maxsize=1)
        self._forwarder = threading.Thread(
            target=self._forward, args=(inbox,), name=name, daemon=True
        )
        self._forwarder.start()

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_forwarding(self) -> bool:
        """転送スレッドが生存しているか。"""
        return self._forwarder.is_alive()

    def wait(self, timeout: float | None = None) -> signal.Signals | None:
        """次のイベントを待つ。

        Args:
            timeout: 最大待機秒数。None の場合は無期限。

        Returns:
            受信したシグナル。タイムアウトした場合は None。
        """
        try:
            return self._events.get(timeout=timeout)
        except queue.Empty:
            return None

    def poll(self) -> signal.Signals | None:
        """待機せずにイベントを取り出す。なければ None。"""
        try:
            return self._events.get_nowait()
        except queue.Empty:
            return None

    async def wait_async(
        self, poll_interval: float = DEFAULT_POLL_INTERVAL_SECONDS
    ) -> signal.Signals:
        """イベントが届くまで協調的に待つ。

        スレッドを占有しないため、キャンセルされてもイベントを取りこぼさない。
        asyncio.wait(..., return_when=FIRST_COMPLETED) で作業完了と
        停止要求のどちらか早い方に反応する用途を想定する。
        """
        while True:
            sig = self.poll()
            if sig is not None:
                return sig
            await asyncio.sleep(poll_interval)

    def _forward(self, inbox: SignalInbox) -> None:
        while True:
            sig = inbox.take()
            logger.debug("%s: forwarding %s", self._name, sig.name)
            self._events.put(sig)


def new_shutdown_stream(
    buffer_size: int = DEFAULT_SIGNAL_BUFFER_SIZE,
    dispatcher: SignalDispatcher | None = None,
) -> ShutdownStream:
    """SIGINT/SIGTERM を購読する新しい ShutdownStream を作成する。

    呼び出しごとに独立した購読と転送スレッドを持つ。

    Args:
        buffer_size: シグナル受信側で保留できる件数。
        dispatcher: 配送元。None の場合はプロセス共有のディスパッチャ。

    Returns:
        作成されたストリーム。

    Raises:
        SignalSubscriptionError: シグナルを購読できない環境の場合。
    """
    source = dispatcher if dispatcher is not None else get_default_dispatcher()
    inbox = source.subscribe(buffer_size)
    return ShutdownStream(inbox, name=f"climux-shutdown-{next(_stream_ids)}")
