"""
どこで: `sketches` の共通下ごしらえ。
何を: スケッチ `draw()` 冒頭の定型（シード設定 → init → コントラスト順のパレット）をまとめる。
なぜ: 各スケッチが同じ順序で乱数を消費し、同じシードで同じ出力になることを保証しやすくするため。
"""

from __future__ import annotations

from typing import Any, Mapping

from engine.drawable import Drawable, SizeSpec
from palette import RankedPalette, rank_contrast


class Sketch(Drawable):
    """名前を固定した Drawable。サブクラスは `sketch_name` と `draw()` を定義する。"""

    sketch_name = "sketch"
    default_border = 0.0

    def __init__(self, **kwargs: Any) -> None:
        kwargs["name"] = self.sketch_name
        kwargs.setdefault("border", self.default_border)
        super().__init__(**kwargs)

    def begin(
        self,
        seed: int | str | None = None,
        size: SizeSpec | Mapping[str, Any] | None = None,
        *,
        neutral: bool = False,
    ) -> RankedPalette:
        """シード設定と `init()` を行い、選ばれたパレットのコントラスト順を返す。"""
        if seed is not None:
            self.set_seed(seed)
        self.init(size, neutral=neutral)
        ranked = rank_contrast(self.palette)
        if not ranked.fgs:
            # 単色パレットでは前景も背景色で代用する
            ranked = RankedPalette(bg=ranked.bg, fgs=[ranked.bg])
        return ranked


__all__ = ["Sketch"]
