"""
どこで: `sketches.rings`。
何を: ノイズで揺らした短い線と点で輪を描き、ノイズテクスチャで削ってから本体へ合成するスケッチ。
なぜ: テクスチャ/プリドロー面を使う多段合成（`destination-out`）の代表例。

1 アクションの流れ:
1. テクスチャ面に `NoiseFill` でノイズ濃淡を塗る。
2. プリドロー面に輪（線 + 点）を描く。
3. プリドロー面からテクスチャを `destination-out` で削る。
4. プリドロー面を `alpha` で本体キャンバスへ描く。
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Any

from common.types import Colour, Point
from engine.actions import Action, NoiseFill
from engine.core.geometry import TAU
from engine.core.noise import PerlinNoise
from engine.core.random import SeededRandom
from engine.errors import ActionError

from .base import Sketch
from .registry import sketch

if TYPE_CHECKING:
    from engine.core.context import Context2D
    from engine.runtime.surfaces import CompositingSurfaces


class Ring(Action):
    """ノイズで侵食された輪。

    Parameters
    ----------
    radius : float
        輪の半径（幅に対する分数）。
    noise : PerlinNoise
        線の揺らぎとテクスチャに使うノイズ（必須）。
    rng : SeededRandom
        線の配置に使う乱数（必須）。
    scale : float
        テクスチャのノイズ周波数。
    """

    def __init__(
        self,
        *,
        radius: float = 0.4,
        noise: PerlinNoise | None = None,
        rng: SeededRandom | None = None,
        scale: float = 0.1,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.radius = float(radius)
        self.noise = noise
        self.rng = rng
        self.scale = float(scale)

    def draw(self, ctx: "Context2D", colour: Colour, surfaces: "CompositingSurfaces | None" = None) -> None:
        if self.noise is None or self.rng is None:
            raise ActionError("Ring requires 'noise' and 'rng'")
        if surfaces is None or surfaces.texture is None or surfaces.predraw is None:
            raise ActionError("Ring requires texture and predraw surfaces")
        tx = surfaces.texture_ctx
        pd = surfaces.predraw_ctx
        w, h = self.width, self.height
        rng = self.rng

        NoiseFill(width=w, height=h, alpha=self.alpha, scale=self.scale, steps=128, noise=self.noise).fill(tx)

        style = self.style(colour)
        with self.scoped(pd):
            super().draw(pd, colour, surfaces)
            pd.stroke_style = style
            pd.fill_style = style
            pd.global_alpha = 1.0
            pd.line_width = rng.rnd_range(0.0001, 0.0005) * w

            lines = int(rng.rnd_range(4000, 8000) * self.radius)
            dots: list[tuple[float, float, float]] = []
            pd.begin_path()
            for i in range(lines):
                theta = rng.random() * TAU
                l_theta = rng.random() * TAU
                length = rng.rnd_range(0.001, 0.04)

                x0 = self.radius * math.cos(theta)
                y0 = self.radius * math.sin(theta)
                x1 = x0 + self.noise.noise2d(x0, i / lines) * length
                y1 = y0 + self.noise.noise2d(y0, i / lines) * length
                x2 = x1 + math.cos(l_theta) * length * rng.rnd_range(0.1, 1.1)
                y2 = y1 + math.sin(l_theta) * length * rng.rnd_range(0.1, 1.1)

                pd.move_to(x1 * w, y1 * h)
                pd.line_to(x2 * w, y2 * h)
                if i % 4 == 0:
                    dots.append((x0, y0, rng.rnd_range(0.002, 0.006)))
            pd.stroke()

            for x0, y0, size in dots:
                pd.begin_path()
                pd.arc(x0 * w, y0 * h, size * w, 0.0, TAU)
                pd.fill()

        with self.scoped(pd):
            pd.global_composite_operation = "destination-out"
            pd.draw_image(surfaces.texture, 0, 0)

        with self.scoped(ctx):
            ctx.global_alpha = self.alpha
            ctx.draw_image(surfaces.predraw, 0, 0)
        self.fill(ctx, colour)


@sketch
class Rings(Sketch):
    """ノイズで侵食された輪を 1〜10 個重ねる。texture/predraw 面が必要。"""

    sketch_name = "rings"

    def draw(self, seed: int | None = None, **options: Any) -> None:
        ranked = self.begin(seed, options.get("size"), neutral=bool(options.get("neutral", False)))
        rng = self.rng
        width, height = self.w(), self.h()
        noise = PerlinNoise(rng)

        for r in range(rng.rnd_range(1, 10)):
            centre = Point(rng.rnd_range(0.2, 0.8), rng.rnd_range(0.2, 0.8))
            self.enqueue(
                Ring(
                    alpha=rng.rnd_range(0.7, 0.9),
                    width=width,
                    height=height,
                    translate=centre,
                    radius=rng.rnd_range(0.01, 0.3),
                    noise=noise,
                    rng=rng,
                    scale=0.007,
                    t=r,
                ),
                rng.choose(ranked.fgs),
            )

        self.execute(bg=ranked.bg, fg=ranked.fgs[0], fgs=ranked.fgs)


__all__ = ["Ring", "Rings"]
