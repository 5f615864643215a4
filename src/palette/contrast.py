from __future__ import annotations

"""Contrast scoring and contrast-based palette ordering.

The score is the WCAG 2.x contrast ratio ``(L1 + 0.05) / (L2 + 0.05)``
where ``L1`` is the lighter relative luminance. It is symmetric and lies
in [1, 21].
"""

from dataclasses import dataclass
from typing import List, Sequence

from .color_types import HSV, Colour, as_hsv
from .engine import ColorEngine, DefaultColorEngine
from util.color import parse_color_str


@dataclass(frozen=True)
class RankedPalette:
    """Result of :func:`rank_contrast`.

    Attributes
    ----------
    bg:
        The palette entry with the highest mean contrast against the others.
    fgs:
        The remaining entries, highest contrast against ``bg`` first.
    """

    bg: HSV
    fgs: List[HSV]


def _luminance(colour: Colour, engine: ColorEngine) -> float:
    if isinstance(colour, str):
        r, g, b, _a = parse_color_str(colour)
    else:
        h, s, v = as_hsv(colour)
        r, g, b = engine.hsv_to_srgb(h, s, v)
    return engine.relative_luminance(r, g, b)


def contrast_ratio(a: Colour, b: Colour, engine: ColorEngine | None = None) -> float:
    """Return the WCAG contrast ratio between two colours."""
    if engine is None:
        engine = DefaultColorEngine()
    la = _luminance(a, engine)
    lb = _luminance(b, engine)
    hi, lo = max(la, lb), min(la, lb)
    return (hi + 0.05) / (lo + 0.05)


def best_contrast(palette: Sequence[HSV], reference: Colour) -> int:
    """Return the index of the palette entry with the most contrast to ``reference``.

    Ties keep the first occurrence.
    """
    if not palette:
        raise ValueError("palette must not be empty.")
    engine = DefaultColorEngine()
    best_index = 0
    best_ratio = -1.0
    for i, colour in enumerate(palette):
        ratio = contrast_ratio(reference, colour, engine)
        if ratio > best_ratio:
            best_index = i
            best_ratio = ratio
    return best_index


def rank_contrast(palette: Sequence[HSV]) -> RankedPalette:
    """Choose a background and order the rest of the palette by contrast.

    The background is the entry whose mean contrast against every other
    entry is highest (first occurrence wins ties). The foregrounds are the
    remaining entries sorted by descending contrast against it; the sort is
    stable so equal ratios keep palette order.
    """
    if not palette:
        raise ValueError("palette must not be empty.")
    engine = DefaultColorEngine()
    colours = [as_hsv(c) for c in palette]
    n = len(colours)

    best_bg = 0
    best_mean = -1.0
    for i, bg in enumerate(colours):
        others = [contrast_ratio(bg, fg, engine) for j, fg in enumerate(colours) if j != i]
        mean = sum(others) / len(others) if others else 1.0
        if mean > best_mean:
            best_bg = i
            best_mean = mean

    bg = colours[best_bg]
    rest = [colours[j] for j in range(n) if j != best_bg]
    fgs = sorted(rest, key=lambda c: contrast_ratio(bg, c, engine), reverse=True)
    return RankedPalette(bg=bg, fgs=fgs)
