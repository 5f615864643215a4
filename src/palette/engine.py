from __future__ import annotations

"""Color conversion engine for HSV palettes and sRGB.

This module defines the :class:`ColorEngine` protocol and a default
implementation that converts between the HSV triples used by palette
sets (h in degrees, s/v in percent) and sRGB, and computes relative
luminance for contrast scoring.
"""

import colorsys
from typing import Protocol, Tuple


HSV = Tuple[float, float, float]
SRGB = Tuple[float, float, float]


class ColorEngine(Protocol):
    """Protocol abstracting color space conversions."""

    def hsv_to_srgb(self, h: float, s: float, v: float) -> SRGB: ...

    def srgb_to_hsv(self, r: float, g: float, b: float) -> HSV: ...

    def relative_luminance(self, r: float, g: float, b: float) -> float: ...


class DefaultColorEngine:
    """Default implementation based on sRGB (D65) and WCAG 2.x luminance."""

    def normalize_hue(self, h: float) -> float:
        """Normalize hue angle into [0, 360)."""
        return (h % 360.0 + 360.0) % 360.0

    def hsv_to_srgb(self, h: float, s: float, v: float) -> SRGB:
        """Convert HSV (h degrees, s/v in [0, 100]) to sRGB in [0, 1]."""
        hh = self.normalize_hue(h) / 360.0
        ss = max(0.0, min(100.0, s)) / 100.0
        vv = max(0.0, min(100.0, v)) / 100.0
        return colorsys.hsv_to_rgb(hh, ss, vv)

    def srgb_to_hsv(self, r: float, g: float, b: float) -> HSV:
        """Convert sRGB in [0, 1] to HSV with h in degrees and s/v in [0, 100]."""
        hh, ss, vv = colorsys.rgb_to_hsv(_clamp01(r), _clamp01(g), _clamp01(b))
        return (hh * 360.0, ss * 100.0, vv * 100.0)

    def relative_luminance(self, r: float, g: float, b: float) -> float:
        """WCAG relative luminance of an sRGB color in [0, 1]."""
        rl, gl, bl = _srgb_to_linear(r), _srgb_to_linear(g), _srgb_to_linear(b)
        return 0.2126 * rl + 0.7152 * gl + 0.0722 * bl


def _clamp01(x: float) -> float:
    return max(0.0, min(1.0, x))


def _srgb_to_linear(c: float) -> float:
    c = _clamp01(c)
    if c <= 0.04045:
        return c / 12.92
    return ((c + 0.055) / 1.055) ** 2.4
