"""
どこで: `engine.actions` のクリップ形状。
何を: アクションの描画範囲を限定する `Mask` と、矩形/円の具象マスク。
なぜ: 形状ごとのクリップパスを 1 箇所で組み立て、アクション/塗り戦略の双方から同じ手順で使えるようにするため。

`clip(ctx)` はパスを組む間だけ自前の変換を save/restore し、その後で `ctx.clip()` を呼ぶ。
パスは追加時点でデバイス座標に確定するため、restore 後もクリップ形状は回転したまま残る。
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from common.types import Point, as_point
from engine.core.geometry import TAU

if TYPE_CHECKING:
    from engine.core.context import Context2D


class Mask(ABC):
    """クリップ用マスクの基底。

    Parameters
    ----------
    width, height : float
        ピクセル寸法（分数座標の基準）。
    translate : Point | (x, y), optional
        マスク中心の位置（分数）。既定は中央 (0.5, 0.5)。
    rotate : float
        回転量（1.0 で 1 回転）。
    """

    def __init__(
        self,
        *,
        width: float = 100.0,
        height: float = 100.0,
        translate: Point | tuple[float, float] | None = None,
        rotate: float = 0.0,
    ) -> None:
        self.width = float(width)
        self.height = float(height)
        self.translate = Point(0.5, 0.5) if translate is None else as_point(translate)
        self.rotate = float(rotate)

    @abstractmethod
    def path(self, ctx: "Context2D") -> None:
        """マスク中心を原点としたローカル座標で輪郭パスを追加する。"""

    def trace(self, ctx: "Context2D") -> None:
        """新しいパスとしてマスク輪郭を組む（クリップ/線描の両方で使う）。"""
        ctx.begin_path()
        ctx.save()
        ctx.translate(self.translate.x * self.width, self.translate.y * self.height)
        ctx.rotate(self.rotate * TAU)
        self.path(ctx)
        ctx.restore()

    def clip(self, ctx: "Context2D") -> None:
        self.trace(ctx)
        ctx.clip()


class RectMask(Mask):
    """中心 `translate`、寸法 `w` x `h`（分数）の矩形マスク。"""

    def __init__(self, *, w: float = 0.4, h: float = 0.4, **kwargs) -> None:
        super().__init__(**kwargs)
        self.w = float(w)
        self.h = float(h)

    def path(self, ctx: "Context2D") -> None:
        pw = self.w * self.width
        ph = self.h * self.height
        ctx.rect(-0.5 * pw, -0.5 * ph, pw, ph)


class CircleMask(Mask):
    """中心 `translate`、半径 `radius`（幅に対する分数）の円マスク。"""

    def __init__(self, *, radius: float = 0.4, **kwargs) -> None:
        super().__init__(**kwargs)
        self.radius = float(radius)

    def path(self, ctx: "Context2D") -> None:
        ctx.arc(0.0, 0.0, self.radius * self.width, 0.0, TAU)


class BlockMask(Mask):
    """`translate` を通り `rotate` だけ傾いた直線の片側（幅 2 倍の帯）を残すマスク。"""

    def path(self, ctx: "Context2D") -> None:
        ctx.rect(-self.width, 0.0, self.width * 2.0, self.height)


__all__ = ["BlockMask", "CircleMask", "Mask", "RectMask"]
