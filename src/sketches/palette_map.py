"""
どこで: `sketches.palette_map`。
何を: 読み込んだ全パレットを格子状に並べ、各パレットの先頭色に対する最良コントラスト色を帯で重ねる一覧図。
なぜ: パレット JSON を差し替えたときに色の並びとコントラスト選択を目視で確認するため。

乱数は使わない（シードはキャプションにだけ現れる）。画像の高さは幅の半分に固定する。
"""

from __future__ import annotations

import dataclasses
import math
from typing import TYPE_CHECKING, Any, Sequence

from common.types import HSV, Colour, Point
from engine.actions import Action
from engine.drawable import SizeSpec
from palette import BLACK, WHITE, best_contrast

from .base import Sketch
from .registry import sketch

if TYPE_CHECKING:
    from engine.core.context import Context2D
    from engine.runtime.surfaces import CompositingSurfaces


class PaletteTile(Action):
    """1 パレット分のタイル列とコントラスト帯。"""

    def __init__(self, *, palette: Sequence[HSV], tile_size: tuple[float, float], strip_width: float, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.palette = list(palette)
        self.tile_size = tile_size
        self.strip_width = float(strip_width)

    def draw(self, ctx: "Context2D", colour: Colour, surfaces: "CompositingSurfaces | None" = None) -> None:
        tile_w, tile_h = self.tile_size
        with self.scoped(ctx):
            super().draw(ctx, colour, surfaces)
            for j, c in enumerate(self.palette):
                ctx.fill_style = self.style(c)
                ctx.fill_rect(j * tile_w, 0.0, tile_w, tile_h)

            strip = self.palette[best_contrast(self.palette, self.palette[0])]
            ctx.fill_style = self.style(strip)
            ctx.fill_rect(0.0, 0.5 * tile_h - 0.5 * tile_w, self.strip_width, tile_w)


@sketch
class PaletteMap(Sketch):
    """全パレットの一覧。`rows`（既定 10）と `padding`（幅に対する分数）を指定できる。"""

    sketch_name = "palette_map"

    def draw(self, seed: int | None = None, **options: Any) -> None:
        if seed is not None:
            self.set_seed(seed)
        size = options.get("size")
        spec = size if isinstance(size, SizeSpec) else SizeSpec.from_mapping(size or {})
        self.init(dataclasses.replace(spec, height=spec.width * 0.5))

        width, height = self.w(), self.h()
        rows = max(1, int(options.get("rows", 10)))
        cols = max(1, math.ceil(len(self.palettes) / rows))
        padding = float(options.get("padding", 0.0035)) * width

        palette_h = (height + padding) / rows
        palette_w = (width + padding) / cols
        tile_h = palette_h - padding
        tile_w = (palette_w - padding) / max(1, len(self.palettes[0]))

        for i, pal in enumerate(self.palettes):
            col = i % cols
            row = i // cols
            self.enqueue(
                PaletteTile(
                    width=width,
                    height=height,
                    alpha=1.0,
                    translate=Point(col * palette_w / width, row * palette_h / height),
                    palette=pal,
                    tile_size=(tile_w, tile_h),
                    strip_width=palette_w - padding,
                    t=i,
                )
            )

        self.execute(bg=WHITE, fg=BLACK, fgs=[])


__all__ = ["PaletteMap", "PaletteTile"]
