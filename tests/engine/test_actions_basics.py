from __future__ import annotations

import math

import pytest

from common.types import Circle, Point, Rect
from engine.actions import CircleMask, DrawArc, DrawDot, DrawLine, DrawPolygon, DrawRect, Fill
from engine.core.canvas import Surface
from engine.errors import ActionError
from tests._utils.recording import RecordingContext


@pytest.mark.parametrize(
    "action",
    [
        DrawDot(dot=Point(0.5, 0.5)),
        DrawArc(circle=Circle(0.5, 0.5, 0.2)),
        DrawLine(points=[(0, 0), (1, 1)]),
        DrawPolygon(points=[(0, 0), (1, 0), (0, 1)], style="both"),
        DrawRect(rect=Rect(0.1, 0.1, 0.5, 0.5), filled=True),
    ],
)
def test_actions_balance_save_and_transform_first(action) -> None:
    ctx = RecordingContext()
    action.draw(ctx, (200, 50, 50))
    names = ctx.names()
    assert names[0] == "save"
    assert names[1:3] == ["translate", "rotate"]
    assert ctx.depth == 0 and ctx.unmatched_restores == 0


@pytest.mark.parametrize(
    "action",
    [DrawDot(), DrawArc(), DrawLine(), DrawPolygon(), DrawRect()],
)
def test_missing_required_shape_raises(action) -> None:
    with pytest.raises(ActionError):
        action.draw(RecordingContext(), "#000000")


def test_point_count_requirements() -> None:
    with pytest.raises(ActionError):
        DrawLine(points=[(0, 0)]).draw(RecordingContext(), "#000000")
    with pytest.raises(ActionError):
        DrawPolygon(points=[(0, 0), (1, 1)]).draw(RecordingContext(), "#000000")
    with pytest.raises(ActionError):
        DrawPolygon(style="dashed")


def test_dot_scales_by_width_and_fills() -> None:
    ctx = RecordingContext()
    DrawDot(width=200, height=100, dot=(0.5, 0.5), r=0.1).draw(ctx, "#ff0000")
    (x, y, r, start, end) = ctx.args_of("arc")[0]
    assert (x, y, r) == (100.0, 50.0, 20.0)
    assert end == pytest.approx(2 * math.pi)
    assert "fill" in ctx.names() and "stroke" not in ctx.names()
    assert ("set:fill_style", ("#ff0000",)) in ctx.calls


def test_dot_with_line_width_strokes() -> None:
    ctx = RecordingContext()
    DrawDot(dot=(0.5, 0.5), line_width=0.01).draw(ctx, "#ff0000")
    assert "stroke" in ctx.names() and "fill" not in ctx.names()
    assert ctx.line_width == 1.0


def test_mask_clips_before_geometry() -> None:
    ctx = RecordingContext()
    DrawLine(points=[(0, 0), (1, 0)], mask=CircleMask(radius=0.2)).draw(ctx, "#000000")
    names = ctx.names()
    assert names.index("clip") < names.index("stroke")


def test_fill_strategy_runs_after_shape() -> None:
    ctx = RecordingContext()
    DrawRect(rect=(0, 0, 1, 1), fill=Fill(alpha=0.3)).draw(ctx, "#00ff00")
    names = ctx.names()
    assert names.index("stroke") < names.index("fill")
    assert ctx.depth == 0


def test_rect_renders_pixels() -> None:
    s = Surface(50, 50)
    ctx = s.get_context()
    DrawRect(width=50, height=50, alpha=1.0, rect=(0.2, 0.2, 0.4, 0.4), filled=True, line_width=0.02).draw(
        ctx, (0, 100, 100)
    )
    px = s.to_array()
    assert px[20, 20].tolist() == [255, 0, 0, 255]
    assert px[2, 2, 3] == 0
    assert ctx.save_depth == 0
