from __future__ import annotations

import pytest

from engine.drawable import ERROR, Drawable, DrawableState, SizeSpec
from engine.errors import ConfigurationError, QueueError, StateError
from tests._utils.recording import FailingAction, RecordingAction, RecordingSurface


def test_construction_requires_canvas_palettes_and_name(palettes) -> None:
    canvas = RecordingSurface()
    with pytest.raises(ConfigurationError):
        Drawable(palettes=palettes, name="x")
    with pytest.raises(ConfigurationError):
        Drawable(canvas=canvas, name="x")
    with pytest.raises(ConfigurationError):
        Drawable(canvas=canvas, palettes=palettes)
    with pytest.raises(ConfigurationError):
        Drawable(canvas=canvas, palettes=[], name="x")


def test_base_draw_is_abstract(palettes) -> None:
    d = Drawable(canvas=RecordingSurface(), palettes=palettes, name="x")
    with pytest.raises(NotImplementedError):
        d.draw()


@pytest.mark.parametrize("seed, expected", [(None, None), ("", None), (0, None), (17, 17), ("42", 42)])
def test_set_seed_normalizes(palettes, seed, expected) -> None:
    d = Drawable(canvas=RecordingSurface(), palettes=palettes, name="x")
    d.set_seed(seed)
    assert d.seed == expected


@pytest.mark.parametrize("seed", ["abc", -1, 1.5j])
def test_set_seed_rejects_invalid(palettes, seed) -> None:
    d = Drawable(canvas=RecordingSurface(), palettes=palettes, name="x")
    with pytest.raises(ConfigurationError):
        d.set_seed(seed)


def test_init_generates_seed_and_sizes_surfaces(palettes) -> None:
    canvas, texture, predraw = RecordingSurface(), RecordingSurface(), RecordingSurface()
    d = Drawable(canvas=canvas, texture=texture, predraw=predraw, palettes=palettes, name="x")
    assert d.init(SizeSpec(width=2, height=1, dpi=50)) is d
    assert d.state is DrawableState.INITIALIZED
    assert isinstance(d.seed, int) and d.seed > 0
    assert (canvas.width, canvas.height) == (100, 50)
    assert (texture.width, texture.height) == (100, 50)
    assert (predraw.width, predraw.height) == (100, 50)
    assert d.palette in [list(p) for p in palettes]


def test_init_accepts_mapping_with_short_keys(palettes) -> None:
    d = Drawable(canvas=RecordingSurface(), palettes=palettes, name="x", seed=3)
    d.init({"w": 3, "h": 2, "dpi": 10, "border": 0.1})
    assert (d.w(), d.h()) == (30.0, 20.0)
    assert d.border == 0.1


def test_init_twice_and_seed_after_init_raise(palettes) -> None:
    d = Drawable(canvas=RecordingSurface(), palettes=palettes, name="x")
    d.init(SizeSpec(width=1, height=1, dpi=10))
    with pytest.raises(StateError):
        d.init()
    with pytest.raises(StateError):
        d.set_seed(5)


def test_execute_before_init_raises(palettes) -> None:
    d = Drawable(canvas=RecordingSurface(), palettes=palettes, name="x")
    with pytest.raises(StateError):
        d.execute()


def test_neutral_selects_first_palette_with_same_rng_consumption(palettes) -> None:
    a = Drawable(canvas=RecordingSurface(), palettes=palettes, name="x", seed=11)
    b = Drawable(canvas=RecordingSurface(), palettes=palettes, name="x", seed=11)
    a.init(SizeSpec(width=1, height=1, dpi=10))
    b.init(SizeSpec(width=1, height=1, dpi=10), neutral=True)
    assert b.palette == list(palettes[0])
    assert a.rng.random() == b.rng.random()


def test_enqueue_none_raises_queue_error(make_sketch, size_100) -> None:
    d = make_sketch(0)
    d.init(size_100)
    with pytest.raises(QueueError):
        d.enqueue(None)
    assert len(d.draw_queue) == 0
    assert d.state is DrawableState.INITIALIZED


def test_enqueue_after_done_raises(make_sketch, size_100) -> None:
    d = make_sketch(1)
    d.draw(1, size=size_100)
    with pytest.raises(StateError):
        d.enqueue(RecordingAction("late", []))


def test_action_exception_propagates_after_restore(make_sketch, size_100) -> None:
    log: list = []
    canvas = RecordingSurface()
    d = make_sketch(0, canvas=canvas)
    d.actions = [RecordingAction("a", log), FailingAction(), RecordingAction("b", log)]
    errors: list[Exception] = []
    d.on(ERROR, errors.append)
    with pytest.raises(RuntimeError, match="boom"):
        d.draw(1, size=size_100)
    assert [label for label, _ in log] == ["a"]
    assert canvas.context.depth == 0
    assert not d.done
    assert d.state is DrawableState.FAILED
    assert errors == [d.error]
    assert len(d.draw_queue) == 0

    # 打ち切られた実行は再開しない
    d.process()
    assert [label for label, _ in log] == ["a"]
    with pytest.raises(StateError):
        d.enqueue(RecordingAction("late", log))


def test_size_spec_validation() -> None:
    with pytest.raises(ConfigurationError):
        SizeSpec(width=0)
    with pytest.raises(ConfigurationError):
        SizeSpec(border=0.5)
    with pytest.raises(ConfigurationError):
        SizeSpec(border_cm=-1)
    assert SizeSpec(width=2, height=3, dpi=10).pixel_size == (20, 30)


def test_unit_helpers(palettes) -> None:
    d = Drawable(canvas=RecordingSurface(), palettes=palettes, name="x", seed=1)
    d.init(SizeSpec(width=2, height=4, dpi=100))
    assert d.w(0.5) == 100.0
    assert d.h(0.25) == 100.0
    assert d.cm(2.54) == 100
