from __future__ import annotations

import pytest

from common.events import EventEmitter


def test_on_emit_off() -> None:
    em = EventEmitter()
    seen: list = []
    cb = em.on("completed", lambda *a, **k: seen.append((a, k)))
    assert em.emit("completed", 1, x=2) == 1
    assert seen == [((1,), {"x": 2})]
    em.off("completed", cb)
    assert em.emit("completed") == 0
    em.off("completed", cb)  # 未登録でも例外にならない


def test_duplicate_subscription_ignored_and_count() -> None:
    em = EventEmitter()
    cb = lambda: None  # noqa: E731
    em.on("e", cb)
    em.on("e", cb)
    assert em.listener_count("e") == 1
    assert em.listener_count("other") == 0


def test_once_fires_a_single_time() -> None:
    em = EventEmitter()
    seen: list[int] = []
    em.once("e", lambda: seen.append(1))
    em.emit("e")
    em.emit("e")
    assert seen == [1]
    assert em.listener_count("e") == 0


def test_remove_all_listeners() -> None:
    em = EventEmitter()
    em.on("a", lambda: None)
    em.on("b", lambda: None)
    em.remove_all_listeners("a")
    assert em.listener_count("a") == 0 and em.listener_count("b") == 1
    em.remove_all_listeners()
    assert em.listener_count("b") == 0


def test_callback_errors_propagate() -> None:
    em = EventEmitter()

    def boom() -> None:
        raise RuntimeError("listener failed")

    em.on("e", boom)
    with pytest.raises(RuntimeError):
        em.emit("e")
