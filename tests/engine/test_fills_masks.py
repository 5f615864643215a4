from __future__ import annotations

import numpy as np
import pytest

from engine.actions import BlockMask, CircleMask, Fill, HatchFill, NoiseFill, RectMask
from engine.core.canvas import Surface
from engine.core.noise import PerlinNoise
from engine.core.random import SeededRandom
from engine.errors import ActionError
from tests._utils.recording import RecordingContext


def test_rect_mask_centred_on_translate() -> None:
    s = Surface(100, 100)
    ctx = s.get_context()
    ctx.save()
    RectMask(width=100, height=100, translate=(0.5, 0.5), w=0.2, h=0.2).clip(ctx)
    ctx.fill_rect(0, 0, 100, 100)
    ctx.restore()
    a = s.to_array()[..., 3]
    assert a[50, 50] == 255
    assert a[35, 50] == 0 and a[50, 65] == 0


def test_circle_mask_and_trace_leaves_transform_untouched() -> None:
    ctx = RecordingContext()
    CircleMask(width=100, height=100, radius=0.1, rotate=0.25).clip(ctx)
    names = ctx.names()
    assert names[:3] == ["begin_path", "save", "translate"]
    assert names[-2:] == ["restore", "clip"]
    assert ctx.args_of("arc")[0][:3] == (0.0, 0.0, 10.0)
    assert ctx.depth == 0


def test_block_mask_keeps_one_side() -> None:
    s = Surface(40, 40)
    ctx = s.get_context()
    ctx.save()
    BlockMask(width=40, height=40, translate=(0.5, 0.5)).clip(ctx)
    ctx.fill_rect(0, 0, 40, 40)
    ctx.restore()
    a = s.to_array()[..., 3]
    assert a[30, 20] == 255
    assert a[10, 20] == 0


def test_fill_paints_rect_with_alpha_and_restores() -> None:
    s = Surface(10, 10)
    ctx = s.get_context()
    Fill(width=10, height=10, alpha=1.0).fill(ctx, "#ff0000")
    assert s.to_array()[5, 5].tolist() == [255, 0, 0, 255]
    assert ctx.save_depth == 0
    assert ctx.global_alpha == 1.0


def test_hatch_fill_line_count_and_validation() -> None:
    h = HatchFill(line_width=0.125, fill_width=1.0, density=0.625)
    assert h.line_count() == 5
    assert HatchFill(line_width=1.0, fill_width=0.1).line_count() == 1
    with pytest.raises(ActionError):
        HatchFill(line_width=0)

    ctx = RecordingContext()
    h.fill(ctx, "#000000")
    assert ctx.names().count("stroke") == 5
    assert ctx.depth == 0


def test_hatch_fill_with_noise_is_deterministic() -> None:
    def run() -> list:
        ctx = RecordingContext()
        HatchFill(noise=PerlinNoise(SeededRandom(3)), line_width=0.01).fill(ctx, "#000000")
        return ctx.args_of("line_to")

    assert run() == run()


def test_noise_fill_requires_noise_and_steps() -> None:
    with pytest.raises(ActionError):
        NoiseFill()
    with pytest.raises(ActionError):
        NoiseFill(noise=PerlinNoise(SeededRandom(1)), steps=0)


def test_noise_fill_alpha_grid_and_paint() -> None:
    nf = NoiseFill(width=32, height=32, noise=PerlinNoise(SeededRandom(5)), scale=0.3, steps=8)
    grid = nf.alpha_grid()
    assert grid.shape == (8, 8)
    assert np.all((grid >= 0) & (grid <= 1))

    s = Surface(32, 32)
    nf.fill(s.get_context(), "#000000")
    a = s.to_array()[..., 3]
    # 4x4 px のセルごとに一様
    assert np.all(a[0:4, 0:4] == a[0, 0])
    assert a.any()
