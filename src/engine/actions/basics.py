"""
どこで: `engine.actions` の基本図形アクション。
何を: 点/円弧/折れ線/多角形/矩形を描く具象アクション群。
なぜ: スケッチが形状ごとの描画手順を書かずに、分数座標の値オブジェクトを積むだけで済むようにするため。

各 `draw()` の流れ（共通）:
1. save → 基底の変換（`Action.draw`）→ マスクでクリップ
2. 形状を描画（色は `palette.to_style` で文字列化）
3. restore → 任意の塗り戦略（`Action.fill`）

座標・半径・線幅はすべて `width`/`height` に対する分数で指定する。
必須の形状が欠けている場合は描画時に `ActionError` を送出する。
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

from common.types import Circle, Colour, Point, Rect, as_point
from engine.core.geometry import TAU
from engine.errors import ActionError

from .action import Action

if TYPE_CHECKING:
    from engine.core.context import Context2D
    from engine.runtime.surfaces import CompositingSurfaces


def _require(action: Action, name: str, value):
    if value is None:
        raise ActionError(f"{type(action).__name__} requires '{name}'")
    return value


class DrawDot(Action):
    """点（円）。`line_width` があれば輪郭線、無ければ塗りつぶし。"""

    def __init__(
        self,
        *,
        dot: Point | tuple[float, float] | None = None,
        r: float = 0.01,
        line_width: float | None = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.dot = None if dot is None else as_point(dot)
        self.r = float(r)
        self.line_width = line_width

    def draw(self, ctx: "Context2D", colour: Colour, surfaces: "CompositingSurfaces | None" = None) -> None:
        dot = _require(self, "dot", self.dot)
        with self.scoped(ctx):
            super().draw(ctx, colour, surfaces)
            self.apply_mask(ctx)
            style = self.style(colour)
            ctx.fill_style = style
            ctx.stroke_style = style
            ctx.begin_path()
            ctx.arc(dot.x * self.width, dot.y * self.height, self.r * self.width, 0.0, TAU)
            if self.line_width:
                ctx.line_width = self.line_width * self.width
                ctx.stroke()
            else:
                ctx.fill()
        self.fill(ctx, colour)


class DrawArc(Action):
    """円 `circle` 上の `start`〜`end`（ラジアン）の円弧を線で描く。"""

    def __init__(
        self,
        *,
        circle: Circle | tuple[float, float, float] | None = None,
        start: float = 0.0,
        end: float = TAU,
        line_width: float | None = None,
        line_cap: str | None = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.circle = None if circle is None else Circle(*circle)
        self.start = float(start)
        self.end = float(end)
        self.line_width = line_width
        self.line_cap = line_cap

    def draw(self, ctx: "Context2D", colour: Colour, surfaces: "CompositingSurfaces | None" = None) -> None:
        c = _require(self, "circle", self.circle)
        with self.scoped(ctx):
            super().draw(ctx, colour, surfaces)
            self.apply_mask(ctx)
            ctx.stroke_style = self.style(colour)
            if self.line_width:
                ctx.line_width = self.line_width * self.width
            if self.line_cap:
                ctx.line_cap = self.line_cap
            ctx.begin_path()
            ctx.arc(c.x * self.width, c.y * self.height, c.r * self.width, self.start, self.end)
            ctx.stroke()
        self.fill(ctx, colour)


class DrawLine(Action):
    """点列 `points` を結ぶ折れ線。"""

    def __init__(
        self,
        *,
        points: Sequence[Point | tuple[float, float]] | None = None,
        line_width: float = 0.001,
        closed: bool = False,
        line_cap: str | None = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.points = None if points is None else [as_point(p) for p in points]
        self.line_width = float(line_width)
        self.closed = bool(closed)
        self.line_cap = line_cap

    def draw(self, ctx: "Context2D", colour: Colour, surfaces: "CompositingSurfaces | None" = None) -> None:
        points = _require(self, "points", self.points)
        if len(points) < 2:
            raise ActionError(f"DrawLine requires at least 2 points: got {len(points)}")
        w, h = self.width, self.height
        with self.scoped(ctx):
            super().draw(ctx, colour, surfaces)
            self.apply_mask(ctx)
            ctx.stroke_style = self.style(colour)
            ctx.line_width = self.line_width * w
            if self.line_cap:
                ctx.line_cap = self.line_cap
            ctx.begin_path()
            ctx.move_to(points[0].x * w, points[0].y * h)
            for p in points[1:]:
                ctx.line_to(p.x * w, p.y * h)
            if self.closed:
                ctx.close_path()
            ctx.stroke()
        self.fill(ctx, colour)


class DrawPolygon(Action):
    """多角形。`style` は "LINES"（輪郭）/"FILL"（塗り）/"POINTS"（頂点の点）/"BOTH"（輪郭+頂点）。"""

    STYLES = ("LINES", "FILL", "POINTS", "BOTH")

    def __init__(
        self,
        *,
        points: Sequence[Point | tuple[float, float]] | None = None,
        line_width: float = 0.001,
        style: str = "LINES",
        point_radius: float = 0.005,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        style = style.upper()
        if style not in self.STYLES:
            raise ActionError(f"style must be one of {self.STYLES}: got {style!r}")
        self.points = None if points is None else [as_point(p) for p in points]
        self.line_width = float(line_width)
        self.style_mode = style
        self.point_radius = float(point_radius)

    def _outline(self, ctx: "Context2D", points: list[Point]) -> None:
        w, h = self.width, self.height
        ctx.begin_path()
        ctx.move_to(points[0].x * w, points[0].y * h)
        for p in points[1:]:
            ctx.line_to(p.x * w, p.y * h)
        ctx.close_path()

    def draw(self, ctx: "Context2D", colour: Colour, surfaces: "CompositingSurfaces | None" = None) -> None:
        points = _require(self, "points", self.points)
        if len(points) < 3:
            raise ActionError(f"DrawPolygon requires at least 3 points: got {len(points)}")
        w, h = self.width, self.height
        with self.scoped(ctx):
            super().draw(ctx, colour, surfaces)
            self.apply_mask(ctx)
            style = self.style(colour)
            ctx.stroke_style = style
            ctx.fill_style = style
            ctx.line_width = self.line_width * w
            if self.style_mode in ("LINES", "BOTH"):
                self._outline(ctx, points)
                ctx.stroke()
            if self.style_mode == "FILL":
                self._outline(ctx, points)
                ctx.fill()
            if self.style_mode in ("POINTS", "BOTH"):
                for p in points:
                    ctx.begin_path()
                    ctx.arc(p.x * w, p.y * h, self.point_radius * w, 0.0, TAU)
                    ctx.fill()
        self.fill(ctx, colour)


class DrawRect(Action):
    """矩形 `rect`。`filled=True` で塗ってから輪郭線を引く。"""

    def __init__(
        self,
        *,
        rect: Rect | tuple[float, float, float, float] | None = None,
        line_width: float = 0.001,
        filled: bool = False,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.rect = None if rect is None else Rect(*rect)
        self.line_width = float(line_width)
        self.filled = bool(filled)

    def draw(self, ctx: "Context2D", colour: Colour, surfaces: "CompositingSurfaces | None" = None) -> None:
        r = _require(self, "rect", self.rect)
        w, h = self.width, self.height
        with self.scoped(ctx):
            super().draw(ctx, colour, surfaces)
            self.apply_mask(ctx)
            style = self.style(colour)
            ctx.stroke_style = style
            ctx.fill_style = style
            ctx.line_width = self.line_width * w
            ctx.begin_path()
            ctx.rect(r.x * w, r.y * h, r.w * w, r.h * h)
            if self.filled:
                ctx.fill()
            ctx.stroke()
        self.fill(ctx, colour)


__all__ = ["DrawArc", "DrawDot", "DrawLine", "DrawPolygon", "DrawRect"]
