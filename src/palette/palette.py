from __future__ import annotations

"""Container type for a set of candidate palettes.

A drawable receives a :class:`PaletteSet` (or any sequence of HSV
palettes) and picks exactly one palette per run.
"""

from dataclasses import dataclass
from typing import Iterator, List, Sequence, Tuple

from .color_types import BLACK, HSV, WHITE, as_hsv

Palette = List[HSV]

# fixed black & white reference palette used for "neutral" runs
NEUTRAL_PALETTE: Tuple[HSV, ...] = (WHITE, BLACK)


@dataclass(frozen=True)
class PaletteSet:
    """Ordered, immutable set of palettes.

    Attributes
    ----------
    palettes:
        Tuple of palettes; each palette is a tuple of HSV triples in a
        caller-defined order (the first entry is the default background).
    """

    palettes: Tuple[Tuple[HSV, ...], ...]

    def __post_init__(self) -> None:
        if not self.palettes:
            raise ValueError("PaletteSet must contain at least one palette.")
        for i, pal in enumerate(self.palettes):
            if not pal:
                raise ValueError(f"palette #{i} is empty.")

    @classmethod
    def from_lists(cls, palettes: Sequence[Sequence[Sequence[float]]]) -> "PaletteSet":
        """Build from nested lists of HSV triples (validating each entry)."""
        return cls(tuple(tuple(as_hsv(c) for c in pal) for pal in palettes))

    def with_neutral(self) -> "PaletteSet":
        """Return a copy whose first palette is the black & white reference."""
        return PaletteSet((NEUTRAL_PALETTE,) + self.palettes)

    def __len__(self) -> int:
        return len(self.palettes)

    def __getitem__(self, index: int) -> Palette:
        return list(self.palettes[index])

    def __iter__(self) -> Iterator[Palette]:
        for pal in self.palettes:
            yield list(pal)
