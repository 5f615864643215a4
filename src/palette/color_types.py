from __future__ import annotations

"""Core color helpers for HSV palette entries.

Palette entries are plain ``(h, s, v)`` tuples (h in degrees, s and v in
percent). Draw queues also accept hex strings, so :func:`to_style` turns
either form into a string a drawing context understands.
"""

from typing import Sequence, Tuple, Union

from .engine import ColorEngine, DefaultColorEngine


HSV = Tuple[float, float, float]
SRGB = Tuple[float, float, float]
Colour = Union[HSV, str]

# off-white used by several sketches as a neutral background
EGGSHELL: HSV = (47.0, 6.0, 100.0)
BLACK: HSV = (0.0, 0.0, 0.0)
WHITE: HSV = (0.0, 0.0, 100.0)


def _clamp01(x: float) -> float:
    return max(0.0, min(1.0, x))


def as_hsv(colour: Sequence[float]) -> HSV:
    """Validate and return a 3-tuple HSV color."""
    if isinstance(colour, str) or len(colour) != 3:
        raise ValueError(f"HSV color must be a (h, s, v) triple: got {colour!r}")
    h, s, v = (float(c) for c in colour)
    return (h, s, v)


def hsv_to_rgb(colour: Sequence[float], engine: ColorEngine | None = None) -> SRGB:
    """Return sRGB (r, g, b) in [0, 1] for an HSV triple."""
    if engine is None:
        engine = DefaultColorEngine()
    h, s, v = as_hsv(colour)
    return engine.hsv_to_srgb(h, s, v)


def rgb_to_hsv(r: float, g: float, b: float, engine: ColorEngine | None = None) -> HSV:
    """Return the HSV triple for sRGB values in [0, 1]."""
    if engine is None:
        engine = DefaultColorEngine()
    return engine.srgb_to_hsv(r, g, b)


def hsv_to_hex(colour: Sequence[float]) -> str:
    """Return ``#rrggbb`` for an HSV triple."""
    return _srgb_to_hex(hsv_to_rgb(colour))


def hex_to_hsv(hex_str: str) -> HSV:
    """Parse ``#rrggbb`` (or ``rrggbb``) into an HSV triple."""
    s = hex_str.strip()
    if s.startswith("#"):
        s = s[1:]
    if len(s) != 6:
        raise ValueError("HEX string must be 6 hex digits.")
    try:
        r = int(s[0:2], 16) / 255.0
        g = int(s[2:4], 16) / 255.0
        b = int(s[4:6], 16) / 255.0
    except ValueError as exc:
        raise ValueError("HEX string must contain only hex digits.") from exc
    return rgb_to_hsv(r, g, b)


def to_style(colour: Colour) -> str:
    """Return a context style string for a queue colour (HSV triple or hex)."""
    if isinstance(colour, str):
        return colour
    return hsv_to_hex(colour)


def _srgb_to_hex(rgb: SRGB) -> str:
    r, g, b = rgb
    r_i = int(round(_clamp01(r) * 255))
    g_i = int(round(_clamp01(g) * 255))
    b_i = int(round(_clamp01(b) * 255))
    return f"#{r_i:02x}{g_i:02x}{b_i:02x}"
