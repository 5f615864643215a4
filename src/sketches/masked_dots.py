"""
どこで: `sketches.masked_dots`。
何を: 正規分布で散らした点群を、回転した半平面マスク（`BlockMask`）でクリップして描くスケッチ。
なぜ: マスクのクリップと、クリップ解除後に少数の点をはみ出させる表現の例。
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from common.types import Colour, Point, as_point
from engine.actions import Action, BlockMask
from engine.core.geometry import TAU
from engine.core.random import SeededRandom
from engine.errors import ActionError

from .base import Sketch
from .registry import sketch

if TYPE_CHECKING:
    from engine.core.context import Context2D
    from engine.runtime.surfaces import CompositingSurfaces

CENTRES = (0.37, 0.5, 0.67)


class Dots(Action):
    """`centre` の周りに `no` 個の点を打つ。うち `post_mask_dots` の割合はマスク外に描く。"""

    min_size = 0.001
    max_size = 0.006

    def __init__(
        self,
        *,
        no: int = 10,
        post_mask_dots: float = 0.02,
        centre: Point | tuple[float, float] | None = None,
        tightness: float = 0.2,
        rng: SeededRandom | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.no_dots = int(no)
        self.post_mask_dots = float(post_mask_dots)
        self.centre = Point(0.5, 0.5) if centre is None else as_point(centre)
        self.tightness = float(tightness)
        self.rng = rng
        self.over_dots = int(self.no_dots * self.post_mask_dots)

    def dot(self, ctx: "Context2D", colour: Colour) -> None:
        rng = self.rng
        x = rng.nrand(self.centre.x, self.tightness)
        y = rng.nrand(self.centre.y, self.tightness)
        size = rng.rnd_range(self.min_size, self.max_size) * self.width

        ctx.fill_style = self.style(colour)
        ctx.global_alpha = self.alpha
        ctx.begin_path()
        ctx.arc(x * self.width, y * self.height, size, 0.0, TAU)
        ctx.fill()

    def draw(self, ctx: "Context2D", colour: Colour, surfaces: "CompositingSurfaces | None" = None) -> None:
        if self.rng is None:
            raise ActionError("Dots requires 'rng'")

        with self.scoped(ctx):
            self.apply_mask(ctx)
            for _ in range(self.no_dots - self.over_dots):
                self.dot(ctx, colour)

        for _ in range(self.over_dots):
            self.dot(ctx, colour)


@sketch
class MaskedDots(Sketch):
    """回転した半平面で切り取った点群。`dots` で点数を変えられる（既定 10000）。"""

    sketch_name = "masked_dots"

    def draw(self, seed: int | None = None, **options: Any) -> None:
        ranked = self.begin(seed, options.get("size"), neutral=bool(options.get("neutral", False)))
        rng = self.rng
        width, height = self.w(), self.h()

        centre = Point(rng.choose(CENTRES), rng.choose(CENTRES))
        mask = BlockMask(width=width, height=height, translate=centre, rotate=rng.random())

        self.enqueue(
            Dots(
                alpha=0.5,
                width=width,
                height=height,
                centre=centre,
                tightness=rng.rnd_range(0.1, 0.3),
                no=int(options.get("dots", 10000)),
                mask=mask,
                post_mask_dots=rng.rnd_range(0.01, 0.05),
                rng=rng,
            ),
            ranked.fgs[0],
        )

        self.execute(bg=ranked.bg, fg=ranked.fgs[0], fgs=ranked.fgs)


__all__ = ["Dots", "MaskedDots"]
