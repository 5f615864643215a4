"""
どこで: `engine.runtime` の合成用スクラッチ面。
何を: テクスチャ/プリドローの 2 枚を 1 つの能力オブジェクト `CompositingSurfaces` として束ねる。
なぜ: 多段合成するアクション（テクスチャ作成 → プリドローへ描画 → 本体へ合成）が、
      前のアクションの残骸を読まないよう「使う前にクリア」を明示的な手順にするため。

`acquire(carry_over=False)` が既定でクリアする。前の内容を意図的に引き継ぐアクションは
`carry_over=True` を宣言する。
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from engine.core.canvas import Surface
    from engine.core.context import Context2D

logger = logging.getLogger(__name__)


class CompositingSurfaces:
    """テクスチャ面とプリドロー面（どちらも任意）。"""

    def __init__(self, texture: "Surface | None" = None, predraw: "Surface | None" = None) -> None:
        self.texture = texture
        self.predraw = predraw
        self.acquisitions = 0

    @property
    def texture_ctx(self) -> "Context2D | None":
        return None if self.texture is None else self.texture.get_context("2d")

    @property
    def predraw_ctx(self) -> "Context2D | None":
        return None if self.predraw is None else self.predraw.get_context("2d")

    def acquire(self, carry_over: bool = False) -> "CompositingSurfaces":
        """このティックのアクション用に面を渡す。`carry_over` が False なら両面をクリアする。"""
        if not carry_over:
            for surface in (self.texture, self.predraw):
                if surface is not None:
                    surface.clear()
        self.acquisitions += 1
        return self

    def resize(self, width: int, height: int) -> None:
        """両面を同じピクセル寸法にそろえる（内容はクリアされる）。"""
        for surface in (self.texture, self.predraw):
            if surface is not None:
                surface.width = width
                surface.height = height
        logger.debug("scratch surfaces resized to %dx%d", width, height)

    @property
    def has_scratch(self) -> bool:
        return self.texture is not None or self.predraw is not None


__all__ = ["CompositingSurfaces"]
