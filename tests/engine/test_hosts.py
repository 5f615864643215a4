from __future__ import annotations

import asyncio

import pytest

from engine.drawable import COMPLETED, ERROR, DrawableState
from engine.runtime.host import AsyncioHost, InlineHost, PygletHost
from tests._utils.recording import FailingAction, RecordingAction


class FakeClock:
    """`pyglet.clock` の代わりに予約を溜めておき、`step()` で 1 件ずつ実行する。"""

    def __init__(self) -> None:
        self.scheduled: list[tuple[object, float]] = []

    def schedule_once(self, func, delay: float) -> None:
        self.scheduled.append((func, delay))

    def step(self) -> bool:
        if not self.scheduled:
            return False
        func, _ = self.scheduled.pop(0)
        func(1 / 60)
        return True


def test_inline_host_runs_nested_defers_iteratively() -> None:
    host = InlineHost(yield_between_ticks=False)
    order: list[int] = []

    def make(i: int):
        def _fn() -> None:
            order.append(i)
            if i < 2000:
                host.defer(make(i + 1))

        return _fn

    # 再帰で実装すると再帰上限を超える深さ
    host.defer(make(0))
    assert order == list(range(2001))
    assert host.ticks == 2001


def test_inline_host_drops_pending_on_error() -> None:
    host = InlineHost(yield_between_ticks=False)
    seen: list[str] = []

    def bad() -> None:
        host.defer(lambda: seen.append("never"))
        raise ValueError("x")

    with pytest.raises(ValueError):
        host.defer(bad)
    host.defer(lambda: seen.append("next"))
    assert seen == ["next"]


def test_pyglet_host_one_tick_per_frame(make_sketch, size_100) -> None:
    clock = FakeClock()
    log: list = []
    d = make_sketch(3, log=log, host=PygletHost(clock))
    events: list[str] = []
    d.on(COMPLETED, lambda: events.append("done"))

    d.draw(1, size=size_100)
    # execute() は最初のティックを予約するだけ
    assert log == []
    assert [delay for _, delay in clock.scheduled] == [0.0]

    frames = 0
    while clock.step():
        frames += 1
        assert len(log) == frames
    assert frames == 3
    assert events == ["done"]


def test_asyncio_host_matches_inline_output(make_sketch, size_100) -> None:
    inline_log: list = []
    make_sketch(4, log=inline_log).draw(8, size=size_100)

    async def _run() -> list:
        log: list = []
        done = asyncio.Event()
        d = make_sketch(4, log=log, host=AsyncioHost())
        d.on(COMPLETED, done.set)
        d.draw(8, size=size_100)
        await asyncio.wait_for(done.wait(), timeout=5)
        return log

    assert asyncio.run(_run()) == inline_log


def test_asyncio_host_delivers_action_error_to_awaiting_code(make_sketch, size_100) -> None:
    log: list = []
    errors: list[Exception] = []
    uncaught: list[object] = []

    async def _run():
        loop = asyncio.get_running_loop()
        loop.set_exception_handler(lambda _loop, context: uncaught.append(context.get("exception")))
        d = make_sketch(0, host=AsyncioHost())
        d.actions = [RecordingAction("a", log), FailingAction(), RecordingAction("b", log)]
        d.on(ERROR, errors.append)
        finished = d.completion()
        d.draw(1, size=size_100)
        with pytest.raises(RuntimeError, match="boom"):
            await asyncio.wait_for(finished, timeout=5)
        return d

    d = asyncio.run(_run())
    assert d.state is DrawableState.FAILED
    assert [label for label, _ in log] == ["a"]
    assert errors == [d.error]
    assert isinstance(d.error, RuntimeError)


def test_completion_future_resolves_on_success(make_sketch, size_100) -> None:
    async def _run():
        d = make_sketch(2, host=AsyncioHost())
        finished = d.completion()
        d.draw(2, size=size_100)
        assert await asyncio.wait_for(finished, timeout=5) is None
        return d

    assert asyncio.run(_run()).done
