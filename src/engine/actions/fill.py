"""
どこで: `engine.actions` の塗り戦略。
何を: アクションの後処理として呼ばれる塗り（単色矩形/ハッチング/ノイズ濃淡）。
なぜ: 形状ごとの描画と「領域をどう埋めるか」を分離し、任意のアクションに後付けできるようにするため。

いずれも `fill(ctx, colour)` 内で save/restore を完結させ、兄弟アクションへ状態を漏らさない。
マスクがあればその内側、無ければ `translate`/`rotate` を適用した座標系で塗る。
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
from PIL import Image

from common.types import Colour, Point, as_point
from engine.core.geometry import TAU, rescale
from engine.errors import ActionError
from palette import to_style
from util.color import normalize_color

if TYPE_CHECKING:
    from engine.core.context import Context2D
    from engine.core.noise import PerlinNoise

    from .mask import Mask

DEFAULT_FILL_COLOUR = "#000000"


class Fill:
    """単色で `width` x `height` の矩形を塗る基本戦略。

    Parameters
    ----------
    width, height : float
        ピクセル寸法。
    alpha : float, optional
        不透明度（既定 0.5）。
    translate : Point | (x, y), optional
        分数の平行移動（マスクが無い場合のみ）。
    rotate : float
        回転量（1.0 で 1 回転、マスクが無い場合のみ）。
    mask : Mask, optional
        塗り範囲を限定するクリップ。
    density : float
        派生クラスが使う塗り密度（0..1）。
    """

    def __init__(
        self,
        *,
        width: float = 100.0,
        height: float = 100.0,
        alpha: float | None = None,
        translate: Point | tuple[float, float] | None = None,
        rotate: float = 0.0,
        mask: "Mask | None" = None,
        density: float = 0.5,
    ) -> None:
        self.width = float(width)
        self.height = float(height)
        self.alpha = 0.5 if alpha is None else float(alpha)
        self.translate = Point() if translate is None else as_point(translate)
        self.rotate = float(rotate)
        self.mask = mask
        self.density = float(density)

    def _frame(self, ctx: "Context2D") -> None:
        if self.mask is not None:
            self.mask.clip(ctx)
        else:
            ctx.translate(self.translate.x * self.width, self.translate.y * self.height)
            ctx.rotate(self.rotate * TAU)

    def fill(self, ctx: "Context2D", colour: Colour | None = None) -> None:
        ctx.save()
        try:
            self._frame(ctx)
            self.paint(ctx, DEFAULT_FILL_COLOUR if colour is None else colour)
        finally:
            ctx.restore()

    def paint(self, ctx: "Context2D", colour: Colour) -> None:
        ctx.fill_style = to_style(colour)
        ctx.global_alpha = self.alpha
        ctx.begin_path()
        ctx.rect(0.0, 0.0, self.width, self.height)
        ctx.fill()


class HatchFill(Fill):
    """原点 `origin` から角度 `angle` 方向へ平行線を敷き詰めるハッチング。

    Parameters
    ----------
    line_width : float
        線幅（幅に対する分数）。
    fill_width : float
        ハッチ帯の厚み（分数）。本数は `fill_width / line_width * density`。
    length : float
        各線の長さ（分数）。
    angle : float
        線の向き（1.0 で 1 回転）。
    origin : Point | (x, y), optional
        帯の始点（分数）。
    noise : PerlinNoise, optional
        与えると端点をノイズで揺らす。
    """

    def __init__(
        self,
        *,
        line_width: float = 0.001,
        fill_width: float = 0.1,
        length: float = 0.5,
        angle: float = 0.0,
        origin: Point | tuple[float, float] | None = None,
        noise: "PerlinNoise | None" = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        if line_width <= 0:
            raise ActionError(f"line_width must be > 0: got {line_width}")
        self.line_width = float(line_width)
        self.fill_width = float(fill_width)
        self.length = float(length)
        self.angle = float(angle)
        self.origin = Point() if origin is None else as_point(origin)
        self.noise = noise

    def line_count(self) -> int:
        return max(1, int(self.fill_width / self.line_width * self.density))

    def paint(self, ctx: "Context2D", colour: Colour) -> None:
        w, h = self.width, self.height
        ctx.global_alpha = self.alpha
        ctx.stroke_style = to_style(colour)
        ctx.line_width = self.line_width * w
        ctx.translate(self.origin.x * w, self.origin.y * h)
        ctx.rotate(self.angle * TAU)

        n = self.line_count()
        gap = self.fill_width / n
        for i in range(n):
            lt = i / n
            y = (i - 0.5 * n) * gap
            x1, y1, x2, y2 = 0.0, y, self.length, y
            if self.noise is not None:
                x1 += self.noise.noise2d(lt, x1 + 0.5) * gap
                x2 += self.noise.noise2d(lt, x2 + 0.5) * gap
                y1 += self.noise.noise2d(lt + 0.5, y1) * 0.6 * gap
                y2 += self.noise.noise2d(lt + 0.5, y2) * 0.6 * gap
            ctx.begin_path()
            ctx.move_to(x1 * w, y1 * h)
            ctx.line_to(x2 * w, y2 * h)
            ctx.stroke()


class NoiseFill(Fill):
    """`steps` x `steps` のセルをノイズ値に応じた不透明度で塗る。

    主に合成用テクスチャ（`destination-out` で削る素材）として使う。

    Raises
    ------
    ActionError
        ノイズ源が与えられていない場合。
    """

    def __init__(self, *, noise: "PerlinNoise | None" = None, scale: float = 0.1, steps: int = 256, **kwargs) -> None:
        super().__init__(**kwargs)
        if noise is None:
            raise ActionError("NoiseFill requires a noise source")
        if steps < 1:
            raise ActionError(f"steps must be >= 1: got {steps}")
        self.noise = noise
        self.scale = float(scale)
        self.steps = int(steps)

    def alpha_grid(self) -> np.ndarray:
        """(steps, steps) のセル不透明度（0..1）。"""
        idx = np.arange(self.steps, dtype=np.float64) * self.scale
        values = self.noise.grid(idx, idx)
        return np.clip(rescale(-1.0, 1.0, 0.0, 1.0, values), 0.0, 1.0)

    def paint(self, ctx: "Context2D", colour: Colour) -> None:
        r, g, b, _ = normalize_color(to_style(colour))
        cells = np.empty((self.steps, self.steps, 4), dtype=np.uint8)
        cells[..., 0] = round(r * 255)
        cells[..., 1] = round(g * 255)
        cells[..., 2] = round(b * 255)
        cells[..., 3] = np.rint(self.alpha_grid() * 255).astype(np.uint8)
        cell = int(np.ceil(self.width / self.steps))
        size = cell * self.steps
        image = Image.fromarray(cells).resize((size, size), Image.Resampling.NEAREST)
        ctx.global_alpha = 1.0
        ctx.draw_image(image, 0.0, 0.0)


__all__ = ["Fill", "HatchFill", "NoiseFill"]
