from __future__ import annotations

import numpy as np
import pytest

from api import RenderResult, create_sketch, render, resolve_size
from engine.drawable import DrawableState
from engine.runtime.host import InlineHost
from palette import NEUTRAL_PALETTE, PaletteSet

TINY = dict(width=1.0, height=1.0, dpi=40)


def test_resolve_size_precedence() -> None:
    cfg = {"size": {"width": 3.0, "height": 2.0, "dpi": 100, "border": 0.05}}
    spec = resolve_size(config=cfg)
    assert (spec.width, spec.height, spec.dpi, spec.border) == (3.0, 2.0, 100, 0.05)

    spec = resolve_size(width=1.5, dpi=50, config=cfg)
    assert (spec.width, spec.height, spec.dpi) == (1.5, 2.0, 50)


def test_resolve_size_falls_back_to_defaults() -> None:
    spec = resolve_size(config={})
    assert spec.width > 0 and spec.height > 0 and spec.dpi > 0
    assert spec.border == 0.0


def test_create_sketch_wires_surfaces_and_neutral_palette() -> None:
    d = create_sketch("noise_lines", neutral=True, show_text=False)
    assert isinstance(d.host, InlineHost)
    assert d.texture is not None and d.predraw is not None
    assert isinstance(d.palettes, PaletteSet)
    assert list(d.palettes[0]) == list(NEUTRAL_PALETTE)


def test_render_completes_and_saves_png(tmp_path) -> None:
    out = tmp_path / "lines.png"
    result = render("noise_lines", 77, out=out, show_text=False, config={}, **TINY)
    assert isinstance(result, RenderResult)
    assert result.drawable.state is DrawableState.DONE
    assert result.seed == 77
    assert result.path == out and out.exists()
    assert result.canvas.to_array().shape == (40, 40, 4)


def test_render_without_out_does_not_save() -> None:
    result = render("palette_map", 5, show_text=False, config={}, rows=3, **TINY)
    assert result.path is None
    assert result.canvas.height == 20


def test_render_is_reproducible() -> None:
    a = render("masked_dots", 99, show_text=False, config={}, dots=300, **TINY)
    b = render("masked_dots", 99, show_text=False, config={}, dots=300, **TINY)
    assert np.array_equal(a.canvas.to_array(), b.canvas.to_array())


def test_render_generates_seed_when_missing() -> None:
    result = render("noise_lines", show_text=False, config={}, **TINY)
    assert result.seed is not None and result.seed > 0


def test_unknown_sketch_lists_available_names() -> None:
    with pytest.raises(KeyError) as ei:
        render("no_such_sketch", 1, config={}, **TINY)
    assert "noise_lines" in str(ei.value)
