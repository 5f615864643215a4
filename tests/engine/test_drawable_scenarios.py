"""エンドツーエンドの振る舞い（決定性・順序・境界クリップ・完了通知）。"""

from __future__ import annotations

import numpy as np

from engine.core.canvas import Surface
from engine.drawable import COMPLETED, DrawableState, SizeSpec
from tests._utils.recording import RecordingAction, RecordingSurface


class FillEverything:
    """キャンバス全面を赤で塗るアクション（クリップの効き方を見る）。"""

    def draw(self, ctx, colour, surfaces=None) -> None:
        ctx.fill_style = "#ff0000"
        ctx.fill_rect(0, 0, 100, 100)


def test_three_actions_draw_in_order_then_complete_once(make_sketch, size_100) -> None:
    log: list = []
    d = make_sketch(3, log=log)
    completed: list[int] = []
    d.on(COMPLETED, lambda: completed.append(len(log)))

    d.draw(42, size=size_100, colour="#abcdef")

    assert [label for label, _ in log] == ["a0", "a1", "a2"]
    assert all(colour == "#abcdef" for _, colour in log)
    # 最後の draw の後にちょうど 1 回
    assert completed == [3]
    assert d.state is DrawableState.DONE
    assert d.ticks == 3


def test_same_seed_reproduces_palette_and_draw_args(make_sketch, size_100) -> None:
    runs = []
    for _ in range(2):
        log: list = []
        d = make_sketch(3, log=log)
        d.draw(42, size=size_100)
        runs.append((d.seed, d.palette, [d.rng.random() for _ in range(5)], log))
    assert runs[0] == runs[1]
    assert runs[0][0] == 42


def test_border_clips_each_tick_once_with_inset_rect(make_sketch) -> None:
    canvas = RecordingSurface()
    d = make_sketch(2, canvas=canvas)
    d.draw(7, size=SizeSpec(width=100, height=100, dpi=1, border=0.1))

    ctx = canvas.context
    assert ctx.names().count("clip") == 2
    assert ctx.args_of("rect") == [(10.0, 10.0, 80.0, 80.0)] * 2
    # rect → clip の順で、ティックごとに save/restore が対になる
    tick = ctx.names()[ctx.names().index("save") :]
    assert tick[:4] == ["save", "begin_path", "rect", "clip"]
    assert ctx.depth == 0
    assert ctx.unmatched_restores == 0


def test_border_clip_is_inset_equally_on_all_sides(make_sketch) -> None:
    canvas = Surface()
    d = make_sketch(0, canvas=canvas)
    d.actions = [FillEverything()]
    d.draw(3, size=SizeSpec(width=100, height=100, dpi=1, border=0.1))

    red = np.all(canvas.to_array() == [255, 0, 0, 255], axis=-1)
    ys, xs = np.nonzero(red)
    assert int(red.sum()) == 80 * 80
    assert (xs.min(), xs.max(), ys.min(), ys.max()) == (10, 89, 10, 89)


def test_zero_border_cm_falls_back_to_fractional_border(make_sketch) -> None:
    canvas = RecordingSurface()
    d = make_sketch(1, canvas=canvas, border=0.2)
    d.draw(7, size=SizeSpec(width=100, height=100, dpi=1, border_cm=0.0))
    assert canvas.context.args_of("rect") == [(20.0, 20.0, 60.0, 60.0)]


def test_no_clip_without_border(make_sketch, size_100) -> None:
    canvas = RecordingSurface()
    make_sketch(3, canvas=canvas).draw(7, size=size_100)
    assert "clip" not in canvas.context.names()
    assert canvas.context.names().count("save") == canvas.context.names().count("restore") == 3


def test_border_in_cm_takes_precedence(make_sketch) -> None:
    canvas = RecordingSurface()
    d = make_sketch(1, canvas=canvas, border=0.2)
    d.draw(7, size=SizeSpec(width=2, height=2, dpi=254, border_cm=1.0))
    # 1 cm @ 254 dpi = 100 px
    assert canvas.context.args_of("rect") == [(100.0, 100.0, 308.0, 308.0)]


def test_background_filled_before_first_tick(make_sketch, size_100) -> None:
    canvas = RecordingSurface()
    d = make_sketch(1, canvas=canvas)
    d.draw(5, size=size_100)
    names = canvas.context.names()
    assert names.index("fill_rect") < names.index("save")
    assert canvas.context.args_of("fill_rect")[0] == (0, 0, 100.0, 100.0)


def test_entries_without_draw_are_skipped(make_sketch, size_100) -> None:
    log: list = []
    d = make_sketch(0, log=log)
    d.actions = [RecordingAction("a", log), object(), RecordingAction("b", log)]
    d.draw(3, size=size_100)
    assert [label for label, _ in log] == ["a", "b"]
    assert d.done


def test_zero_actions_complete_on_first_tick(make_sketch, size_100) -> None:
    d = make_sketch(0, show_text=True)
    events: list[str] = []
    d.on(COMPLETED, lambda: events.append("done"))
    d.draw(9, size=size_100)
    assert events == ["done"]
    assert d.done
    # キャプションは描かれる
    assert "fill_text" in d.canvas.context.names()


def test_process_after_done_is_ignored(make_sketch, size_100) -> None:
    d = make_sketch(1)
    events: list[str] = []
    d.on(COMPLETED, lambda: events.append("done"))
    d.draw(9, size=size_100)
    d.process()
    d.process()
    assert events == ["done"]


def test_caption_shows_seed_in_bottom_left(make_sketch) -> None:
    canvas = RecordingSurface()
    d = make_sketch(0, canvas=canvas, show_text=True)
    d.draw(1234, size=SizeSpec(width=1000, height=1000, dpi=1))
    ctx = canvas.context
    txt_h = int(d.h(0.015))
    (label, x, y) = ctx.args_of("fill_text")[0]
    assert label == "#1234"
    assert x == 2 * 0.25 * txt_h
    assert y == 1000 - 1.5 * txt_h
    assert ("set:font", (f"{txt_h}px Helvetica",)) in ctx.calls
    assert ctx.depth == 0
