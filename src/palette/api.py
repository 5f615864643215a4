from __future__ import annotations

"""High-level public API for loading palette sets.

Palette files are JSON arrays of palettes, each palette an array of
``#rrggbb`` strings. They are converted to HSV on load so drawables can
work in a single color space.
"""

import json
from importlib import resources
from pathlib import Path
from typing import Optional, Sequence

from .color_types import hex_to_hsv
from .palette import PaletteSet

_PACKAGED = "palettes.json"


def convert(palette_list: Sequence[Sequence[str]]) -> PaletteSet:
    """Convert lists of hex strings into a :class:`PaletteSet` of HSV triples."""
    return PaletteSet(tuple(tuple(hex_to_hsv(c) for c in pal) for pal in palette_list))


def load_palettes(path: Optional[str | Path] = None) -> PaletteSet:
    """Load a palette set.

    Parameters
    ----------
    path:
        JSON file to read. If None, the palette set shipped with the
        package (``palette/resource/palettes.json``) is used.

    Raises
    ------
    ValueError
        If the JSON is not a list of lists of hex strings.
    """
    if path is None:
        text = resources.files("palette").joinpath("resource", _PACKAGED).read_text(encoding="utf-8")
        source = f"palette/resource/{_PACKAGED}"
    else:
        text = Path(path).read_text(encoding="utf-8")
        source = str(path)

    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"palette file is not valid JSON: {source}") from exc

    if not isinstance(data, list) or not all(isinstance(p, list) for p in data):
        raise ValueError(f"palette file must be a list of lists: {source}")
    return convert(data)
