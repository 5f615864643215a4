"""
どこで: `engine.actions` の基底契約。
何を: 描画キューに積まれる 1 単位の描画仕事 `Action` と、その共通前処理（平行移動/回転/不透明度）と後処理（fill）。
なぜ: 具象アクションが「変換 → 形状 → 任意の塗り」の同じ順序で描けるよう、合成用の小さなヘルパを 1 箇所に置くため。

契約:
- エンジンが要求するのは `draw(ctx, colour, surfaces)` を持つことだけ（`SupportsDraw`）。
- `Action.draw()` は `op_order` の順に translate/rotate を適用し、最後に `global_alpha = alpha` を設定する。
  具象クラスは自分の `draw()` の最初でこれを呼び、save/restore は具象クラス側で管理する。
- `Action.fill()` は塗り戦略があれば委譲し、無ければ何もしない。
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Iterator, Protocol, runtime_checkable

from common.types import Colour, Point, as_point
from engine.core.geometry import TAU
from engine.errors import ActionError
from palette import to_style

if TYPE_CHECKING:
    from engine.core.context import Context2D
    from engine.runtime.surfaces import CompositingSurfaces

    from .fill import Fill
    from .mask import Mask

DEFAULT_SIZE = 100.0
DEFAULT_ALPHA = 0.5
DEFAULT_OP_ORDER = "TR"


@runtime_checkable
class SupportsDraw(Protocol):
    """描画キューが受け付ける最小の能力。"""

    def draw(self, ctx: Any, colour: Colour, surfaces: Any = None) -> None: ...


def validate_op_order(op_order: str) -> str:
    """`op_order` を大文字化し、`T` と `R` をちょうど 1 回ずつ含むことを検証する。"""
    if not isinstance(op_order, str):
        raise ActionError(f"op_order must be a string: got {op_order!r}")
    order = op_order.upper()
    if sorted(order) != ["R", "T"]:
        raise ActionError(f"op_order must contain 'T' and 'R' exactly once: got {op_order!r}")
    return order


class Action:
    """描画アクションの基底。

    Parameters
    ----------
    width, height : float
        ピクセル寸法。同じ Drawable 内のアクションは同じ参照枠を共有する。
    alpha : float, optional
        全体不透明度（0..1）。既定 0.5。
    translate : Point | (x, y) | mapping, optional
        幅/高さに対する分数の平行移動。既定 (0, 0)。
    rotate : float
        回転量（1.0 で 1 回転）。
    t : float
        パス番号/時刻。ノイズ参照などに使う任意値。
    op_order : str
        "TR"（平行移動 → 回転）または "RT"。大文字小文字は問わない。
    fill : Fill, optional
        形状描画の後に適用する塗り戦略。
    mask : Mask, optional
        形状描画の前に適用するクリップ。
    carry_over : bool
        True なら合成用スクラッチ面を前のアクションの内容のまま受け取る。
    """

    def __init__(
        self,
        *,
        width: float = DEFAULT_SIZE,
        height: float = DEFAULT_SIZE,
        alpha: float | None = None,
        translate: Point | tuple[float, float] | dict | None = None,
        rotate: float = 0.0,
        t: float = 0.0,
        op_order: str = DEFAULT_OP_ORDER,
        fill: "Fill | None" = None,
        mask: "Mask | None" = None,
        carry_over: bool = False,
    ) -> None:
        self.width = float(width)
        self.height = float(height)
        self.alpha = DEFAULT_ALPHA if alpha is None else float(alpha)
        if not 0.0 <= self.alpha <= 1.0:
            raise ActionError(f"alpha must be within 0..1: got {alpha!r}")
        self.translate = Point() if translate is None else as_point(translate)
        self.rotate = float(rotate)
        self.t = float(t)
        self.op_order = validate_op_order(op_order)
        self.fill_strategy = fill
        self.mask = mask
        self.carry_over = bool(carry_over)

    def draw(
        self,
        ctx: "Context2D",
        colour: Colour,
        surfaces: "CompositingSurfaces | None" = None,
    ) -> None:
        """`op_order` の順で変換を適用し、`global_alpha` を設定する。"""
        for op in self.op_order:
            if op == "T":
                ctx.translate(self.translate.x * self.width, self.translate.y * self.height)
            else:
                ctx.rotate(self.rotate * TAU)
        ctx.global_alpha = self.alpha

    def fill(self, ctx: "Context2D", colour: Colour | None = None) -> None:
        if self.fill_strategy is not None:
            self.fill_strategy.fill(ctx, colour)

    @contextmanager
    def scoped(self, ctx: "Context2D") -> Iterator["Context2D"]:
        """ブロックの前後で save/restore を対にする。"""
        ctx.save()
        try:
            yield ctx
        finally:
            ctx.restore()

    def apply_mask(self, ctx: "Context2D") -> None:
        if self.mask is not None:
            self.mask.clip(ctx)

    @staticmethod
    def style(colour: Colour) -> str:
        """キューの色（HSV または文字列）をコンテキストのスタイル文字列へ。"""
        return to_style(colour)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(t={self.t}, op_order={self.op_order!r})"


__all__ = ["Action", "SupportsDraw", "validate_op_order"]
