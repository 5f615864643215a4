"""
どこで: `engine.runtime` のスケジューリング戦略。
何を: 次のティックを「今のティックの同期処理が終わった後」に回す `defer(continuation)` の実装群。
     - `InlineHost`: バッチ/CLI 向け。トランポリンで直列に回す（再帰が深くならない）。
     - `AsyncioHost`: 実行中の asyncio ループへ `call_soon` で委ねる。
     - `PygletHost`: pyglet の clock へ `schedule_once(…, 0)` で委ね、1 フレームに 1 ティック。
なぜ: Drawable のドレイン手順をホスト環境から切り離し、どの戦略でも同じ順序・同じ出力を得るため。
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections import deque
from typing import Any, Callable, Protocol

from common import settings as _settings

logger = logging.getLogger(__name__)

Continuation = Callable[[], Any]


class Host(Protocol):
    """Drawable が次のティックを依頼する相手。"""

    #: True ならティックはホストのフレーム周期に同期する（完了は助言的なログのみ）。
    frame_paced: bool

    def defer(self, continuation: Continuation) -> None: ...


class InlineHost:
    """同期実行ホスト。

    最初の `defer()` がループを開始し、実行中に積まれた継続は同じループで順に処理する。
    継続が例外を送出した場合は残りを破棄して呼び出し元へ伝播する。

    Parameters
    ----------
    yield_between_ticks : bool | None
        True ならティック間で `time.sleep(0)` し、他スレッドへ実行機会を譲る。
        None の場合は `SKB_YIELD_BETWEEN_TICKS` 設定に従う。
    """

    frame_paced = False

    def __init__(self, *, yield_between_ticks: bool | None = None) -> None:
        if yield_between_ticks is None:
            yield_between_ticks = _settings.get().YIELD_BETWEEN_TICKS
        self.yield_between_ticks = bool(yield_between_ticks)
        self._pending: deque[Continuation] = deque()
        self._running = False
        self.ticks = 0

    def defer(self, continuation: Continuation) -> None:
        self._pending.append(continuation)
        if self._running:
            return
        self._running = True
        try:
            while self._pending:
                fn = self._pending.popleft()
                if self.yield_between_ticks and self.ticks:
                    time.sleep(0)
                self.ticks += 1
                fn()
        except BaseException:
            self._pending.clear()
            raise
        finally:
            self._running = False


class AsyncioHost:
    """asyncio ループ上で 1 ティックずつ `call_soon` する。

    継続内の例外は `call_soon` の呼び出し元へは戻らずループの例外ハンドラへ渡り、以降のティックは
    予約されない。実行を待つ側は `Drawable.completion()` の Future で完了または例外を受け取る。
    """

    frame_paced = False

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def defer(self, continuation: Continuation) -> None:
        loop = self._loop if self._loop is not None else asyncio.get_running_loop()
        loop.call_soon(continuation)


class PygletHost:
    """pyglet の clock で次フレームへ回す（プレビュー用）。

    Parameters
    ----------
    clock : object, optional
        `schedule_once(func, delay)` を持つ clock。None なら `pyglet.clock` を使う。
    """

    frame_paced = True

    def __init__(self, clock: Any | None = None) -> None:
        if clock is None:
            import pyglet.clock as clock  # type: ignore[no-redef]
        self._clock = clock

    def defer(self, continuation: Continuation) -> None:
        def _tick(dt: float) -> None:
            continuation()

        self._clock.schedule_once(_tick, 0.0)


__all__ = ["AsyncioHost", "Continuation", "Host", "InlineHost", "PygletHost"]
