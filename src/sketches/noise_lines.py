"""
どこで: `sketches.noise_lines`。
何を: ノイズで少しずつ揺らした縦線を等間隔に並べるスケッチ（1 本 = 1 アクション）。
なぜ: 最小構成のスケッチ。パレット先頭を背景に、最もコントラストの高い色で線を引く。
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from common.types import Colour
from engine.actions import Action
from engine.core.noise import PerlinNoise
from engine.errors import ActionError
from palette import best_contrast

from .base import Sketch
from .registry import sketch

if TYPE_CHECKING:
    from engine.core.context import Context2D
    from engine.runtime.surfaces import CompositingSurfaces


class NoiseLine(Action):
    """x 位置 `x`（分数）から下へ `segments` 区間の折れ線を引く。"""

    def __init__(
        self,
        *,
        x: float = 0.0,
        segments: int = 30,
        noise: PerlinNoise | None = None,
        frequency: float = 7.3,
        wobble: tuple[float, float] = (0.0028, 0.0056),
        line_width: float = 0.0014,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        if segments < 1:
            raise ActionError(f"segments must be >= 1: got {segments}")
        self.x = float(x)
        self.segments = int(segments)
        self.noise = noise
        self.frequency = float(frequency)
        self.wobble = wobble
        self.line_width = float(line_width)

    def points(self) -> list[tuple[float, float]]:
        """折れ線の頂点（ピクセル、x 位置からの相対）。"""
        if self.noise is None:
            raise ActionError("NoiseLine requires 'noise'")
        w, h = self.width, self.height
        gap = h / self.segments
        dx, dy = self.wobble
        pts = [(0.0, 0.0)]
        for s in range(1, self.segments + 1):
            n = self.noise.noise2d(self.x * self.frequency, s / self.segments * self.frequency)
            pts.append((n * dx * w, s * gap + n * dy * h))
        return pts

    def draw(self, ctx: "Context2D", colour: Colour, surfaces: "CompositingSurfaces | None" = None) -> None:
        pts = self.points()
        with self.scoped(ctx):
            super().draw(ctx, colour, surfaces)
            ctx.translate(self.x * self.width, 0.0)
            ctx.stroke_style = self.style(colour)
            ctx.line_width = self.line_width * self.width
            ctx.begin_path()
            ctx.move_to(*pts[0])
            for p in pts[1:]:
                ctx.line_to(*p)
            ctx.stroke()
        self.fill(ctx, colour)


@sketch
class NoiseLines(Sketch):
    """ノイズで揺れる縦線。`padding`（幅に対する分数）で間隔、`segments` で折れ数を変えられる。"""

    sketch_name = "noise_lines"

    def draw(self, seed: int | None = None, **options: Any) -> None:
        if seed is not None:
            self.set_seed(seed)
        self.init(options.get("size"), neutral=bool(options.get("neutral", False)))
        rng = self.rng
        width, height = self.w(), self.h()
        noise = PerlinNoise(rng)

        padding = float(options.get("padding", 0.0063))
        segments = int(options.get("segments", 30))
        if padding <= 0:
            raise ValueError(f"padding must be positive: got {padding}")

        bg = self.palette[0]
        line_colour = self.palette[best_contrast(self.palette, bg)]

        count = int(1.0 / padding)
        for i in range(count):
            self.enqueue(
                NoiseLine(
                    width=width,
                    height=height,
                    alpha=rng.random(),
                    x=i * padding,
                    segments=segments,
                    noise=noise,
                    t=i,
                ),
                line_colour,
            )

        self.execute(bg=bg, fg=line_colour)


__all__ = ["NoiseLine", "NoiseLines"]
