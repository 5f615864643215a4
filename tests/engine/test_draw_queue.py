from __future__ import annotations

import pytest

from engine.errors import QueueError
from engine.runtime.queue import DrawQueue, QueueEntry


def test_fifo_order_and_default_colour() -> None:
    q = DrawQueue()
    a, b, c = object(), object(), object()
    q.enqueue(a, (10, 20, 30))
    q.enqueue(b)
    q.enqueue(c, "#000000")
    assert len(q) == 3
    assert q.shift() == QueueEntry(a, (10, 20, 30))
    assert q.shift() == QueueEntry(b, "#ffffff")
    assert q.shift().action is c
    assert q.shift() is None
    assert not q


def test_enqueue_none_raises_and_leaves_queue_empty() -> None:
    q = DrawQueue()
    with pytest.raises(QueueError):
        q.enqueue(None)
    assert len(q) == 0


def test_iteration_does_not_consume_and_clear_empties() -> None:
    q = DrawQueue()
    for i in range(3):
        q.enqueue(i)
    assert [e.action for e in q] == [0, 1, 2]
    assert len(q) == 3
    q.clear()
    assert len(q) == 0
