from __future__ import annotations

import json

import pytest

from palette import (
    NEUTRAL_PALETTE,
    PaletteSet,
    convert,
    hex_to_hsv,
    hsv_to_hex,
    load_palettes,
    to_style,
)


def test_bundled_palettes_load_as_hsv() -> None:
    ps = load_palettes()
    assert len(ps) > 10
    for pal in ps:
        assert pal
        for h, s, v in pal:
            assert 0 <= h <= 360 and 0 <= s <= 100 and 0 <= v <= 100


def test_convert_and_hex_round_trip() -> None:
    ps = convert([["#ff0000", "#ffffff"], ["#000000"]])
    assert ps[0][0] == pytest.approx((0.0, 100.0, 100.0))
    assert ps[0][1] == pytest.approx((0.0, 0.0, 100.0))
    assert hsv_to_hex(hex_to_hsv("#69d2e7")) == "#69d2e7"
    assert to_style((0, 0, 0)) == "#000000"
    assert to_style("#123456") == "#123456"


def test_load_palettes_from_file(tmp_path) -> None:
    p = tmp_path / "p.json"
    p.write_text(json.dumps([["#000000", "#ffffff"]]), encoding="utf-8")
    ps = load_palettes(p)
    assert len(ps) == 1

    bad = tmp_path / "bad.json"
    bad.write_text("{not json", encoding="utf-8")
    with pytest.raises(ValueError):
        load_palettes(bad)
    bad.write_text(json.dumps({"a": 1}), encoding="utf-8")
    with pytest.raises(ValueError):
        load_palettes(bad)


def test_palette_set_validation_and_neutral() -> None:
    with pytest.raises(ValueError):
        PaletteSet(())
    with pytest.raises(ValueError):
        PaletteSet(((),))
    ps = PaletteSet.from_lists([[(10, 20, 30)]]).with_neutral()
    assert tuple(ps[0]) == NEUTRAL_PALETTE
    assert len(ps) == 2
