from __future__ import annotations

from engine.runtime.surfaces import CompositingSurfaces
from tests._utils.recording import RecordingAction, RecordingSurface


def test_acquire_clears_unless_carry_over() -> None:
    tex, pre = RecordingSurface(), RecordingSurface()
    s = CompositingSurfaces(tex, pre)
    assert s.acquire() is s
    assert (tex.clears, pre.clears) == (1, 1)
    s.acquire(carry_over=True)
    assert (tex.clears, pre.clears) == (1, 1)
    assert s.acquisitions == 2


def test_missing_surfaces_are_tolerated() -> None:
    s = CompositingSurfaces()
    assert not s.has_scratch
    assert s.texture_ctx is None and s.predraw_ctx is None
    s.acquire()
    s.resize(10, 10)


def test_engine_clears_scratch_per_action(make_sketch, size_100) -> None:
    tex, pre = RecordingSurface(), RecordingSurface()
    log: list = []
    d = make_sketch(0, texture=tex, predraw=pre)
    d.actions = [
        RecordingAction("a", log),
        RecordingAction("b", log, carry_over=True),
        RecordingAction("c", log),
    ]
    d.draw(2, size=size_100)
    assert tex.clears == 2
    assert pre.clears == 2
    assert (tex.width, tex.height) == (100, 100)
