"""Public entrypoint for the palette package.

This module re-exports the palette-set types, HSV color helpers and the
contrast utilities so that drawables can simply import from ``palette``
instead of individual submodules.
"""

from .api import convert, load_palettes
from .color_types import (
    BLACK,
    EGGSHELL,
    WHITE,
    as_hsv,
    hex_to_hsv,
    hsv_to_hex,
    hsv_to_rgb,
    rgb_to_hsv,
    to_style,
)
from .contrast import RankedPalette, best_contrast, contrast_ratio, rank_contrast
from .palette import NEUTRAL_PALETTE, Palette, PaletteSet

__all__ = [
    "BLACK",
    "EGGSHELL",
    "NEUTRAL_PALETTE",
    "Palette",
    "PaletteSet",
    "RankedPalette",
    "WHITE",
    "as_hsv",
    "best_contrast",
    "contrast_ratio",
    "convert",
    "hex_to_hsv",
    "hsv_to_hex",
    "hsv_to_rgb",
    "load_palettes",
    "rank_contrast",
    "rgb_to_hsv",
    "to_style",
]
