"""
どこで: `engine.drawable`（描画キュー実行エンジンの中核）。
何を: 1 枚の画像を描く `Drawable` 基底。サイズ/DPI 設定・シード固定・パレット選択・境界クリップ・
      キューのドレイン（スケジューラ）・シードキャプション・完了通知を担う。
なぜ: 個々のスケッチは「アクションを積む」ことだけに集中し、実行順序と再現性の保証を 1 箇所に閉じ込めるため。

ライフサイクル（`DrawableState`）:
    IDLE --init()--> INITIALIZED --enqueue()--> QUEUED --execute()--> RUNNING
         --process() 毎ティック--> DRAINING --キューが空--> DONE（"completed" を 1 回だけ発火）
         DRAINING --アクション例外--> FAILED（"error" を例外付きで 1 回発火）

1 ティック（`process()`）:
1. 先頭を取り出す（空ならログして終了。ゼロ件の実行はここで完了処理へ進む）。
2. `ctx.save()`、どの経路でも `ctx.restore()`。
3. 境界 `_border > 0` なら `border_path()` → `ctx.clip()`（1 回）。
4. `draw` を持つアクションなら `draw(ctx, colour, surfaces)`。
5. 残りがあれば `host.defer(self.process)`、無ければキャプション → 完了通知。

アクションの例外は握りつぶさない。ティックの restore 後に FAILED へ移り、"error" を発火してから
そのまま伝播する。例外が呼び出し元へ届かないホスト（asyncio）では `completion()` の Future で受け取る。
"""

from __future__ import annotations

import asyncio
import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Mapping, Sequence

from common import settings as _settings
from common.events import EventEmitter
from common.types import HSV, Colour
from palette import best_contrast, to_style

from .core.random import SeededRandom, generate_seed
from .errors import ConfigurationError, StateError
from .runtime.host import Host, InlineHost
from .runtime.queue import DEFAULT_COLOUR, DrawQueue, QueueEntry
from .runtime.surfaces import CompositingSurfaces

if TYPE_CHECKING:
    from .core.canvas import Surface
    from .core.context import Context2D

logger = logging.getLogger(__name__)

COMPLETED = "completed"
ERROR = "error"

# キャプションの文字高（画像高さに対する比率）
CAPTION_HEIGHT = 0.015


class DrawableState(Enum):
    IDLE = "idle"
    INITIALIZED = "initialized"
    QUEUED = "queued"
    RUNNING = "running"
    DRAINING = "draining"
    DONE = "done"
    FAILED = "failed"


def _default_width() -> float:
    return _settings.get().DEFAULT_WIDTH


def _default_height() -> float:
    return _settings.get().DEFAULT_HEIGHT


def _default_dpi() -> float:
    return float(_settings.get().DEFAULT_DPI)


@dataclass(frozen=True)
class SizeSpec:
    """出力サイズ。`width`/`height` は論理単位（既定はインチ）、`dpi` は 1 単位あたりのピクセル数。

    `border` は幅に対する分数、`border_cm` は実寸（cm）。`border_cm` が正なら優先し、0 は未指定と同じ。
    """

    width: float = field(default_factory=_default_width)
    height: float = field(default_factory=_default_height)
    dpi: float = field(default_factory=_default_dpi)
    border: float = 0.0
    border_cm: float | None = None

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0 or self.dpi <= 0:
            raise ConfigurationError(
                f"size must be positive: width={self.width}, height={self.height}, dpi={self.dpi}"
            )
        if not 0.0 <= self.border < 0.5:
            raise ConfigurationError(f"border must be within [0, 0.5): got {self.border}")
        if self.border_cm is not None and self.border_cm < 0:
            raise ConfigurationError(f"border_cm must be >= 0: got {self.border_cm}")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "SizeSpec":
        """`{"width"|"w", "height"|"h", "dpi", "border", "border_cm"}` から作る（欠けたキーは既定値）。"""
        kwargs: dict[str, Any] = {}
        for key, aliases in (("width", ("width", "w")), ("height", ("height", "h"))):
            for alias in aliases:
                if data.get(alias) is not None:
                    kwargs[key] = float(data[alias])
                    break
        if data.get("dpi") is not None:
            kwargs["dpi"] = float(data["dpi"])
        if data.get("border") is not None:
            kwargs["border"] = float(data["border"])
        if data.get("border_cm") is not None:
            kwargs["border_cm"] = float(data["border_cm"])
        return cls(**kwargs)

    @property
    def pixel_size(self) -> tuple[int, int]:
        return int(round(self.width * self.dpi)), int(round(self.height * self.dpi))


class Drawable(EventEmitter):
    """1 枚の画像を描く実行エンジン。

    サブクラスは `draw(seed=None, **options)` を実装し、`init()` → `enqueue()` の繰り返し →
    `execute()` の順に呼ぶ。

    Parameters
    ----------
    canvas : Surface
        描画先（必須）。
    palettes : PaletteSet | Sequence[Sequence[HSV]]
        候補パレットの集合（必須、空は不可）。
    name : str
        スケッチ名（必須）。
    texture, predraw : Surface, optional
        多段合成用のスクラッチ面。キャンバスと同じピクセル寸法にそろえられる。
    border : float
        幅に対する分数の境界（`init(size)` の `border` が正なら上書き）。
    show_text : bool, optional
        完了時にシードキャプションを描くか。None なら `SKB_SHOW_TEXT` に従う。
    seed : int, optional
        固定シード。None なら `init()` で生成する。
    host : Host, optional
        ティックのスケジューリング戦略。既定は `InlineHost()`（同期）。

    Raises
    ------
    ConfigurationError
        canvas/palettes/name のいずれかが欠けている場合。
    """

    def __init__(
        self,
        *,
        canvas: "Surface | None" = None,
        palettes: Sequence[Sequence[HSV]] | None = None,
        name: str | None = None,
        texture: "Surface | None" = None,
        predraw: "Surface | None" = None,
        border: float = 0.0,
        show_text: bool | None = None,
        seed: int | None = None,
        host: Host | None = None,
    ) -> None:
        super().__init__()
        if canvas is None:
            raise ConfigurationError("canvas is not defined")
        if palettes is None:
            raise ConfigurationError("palettes are not defined")
        if name is None:
            raise ConfigurationError("drawable name is not defined")
        if len(palettes) == 0:
            raise ConfigurationError("palettes must contain at least one palette")

        self.state = DrawableState.IDLE
        self.name = name
        self.canvas = canvas
        self.texture = texture
        self.predraw = predraw
        self.palettes = palettes
        self.border = float(border)
        self.border_cm: float | None = None
        self.show_text = _settings.get().SHOW_TEXT if show_text is None else bool(show_text)
        self.seed: int | None = None
        self.set_seed(seed)
        self.host: Host = host if host is not None else InlineHost()

        self.draw_queue = DrawQueue()
        self.surfaces = CompositingSurfaces(texture, predraw)
        self.rng: SeededRandom | None = None
        self.palette: list[HSV] = []
        self.width = 0.0
        self.height = 0.0
        self.dpi = 0.0
        self._border = 0.0
        self.ctx: Context2D | None = None
        self.bg: Colour | None = None
        self.fg: Colour | None = None
        self.fgs: list[Colour] = []
        self.ticks = 0
        self.error: Exception | None = None

    # ------------------------------------------------------------------
    # 準備
    # ------------------------------------------------------------------
    def set_seed(self, seed: int | str | None) -> None:
        """シードを設定する。None/0/空文字は「未指定」（init で生成）。"""
        if self.state is not DrawableState.IDLE:
            raise StateError("seed is fixed once init() has run")
        if seed is None or seed == "":
            self.seed = None
            return
        try:
            value = int(seed)
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"seed must be an integer: got {seed!r}") from exc
        if value < 0:
            raise ConfigurationError(f"seed must be positive: got {value}")
        self.seed = value or None

    def init(
        self,
        size: SizeSpec | Mapping[str, Any] | None = None,
        *,
        neutral: bool = False,
    ) -> "Drawable":
        """シード・サイズ・境界・パレットを確定する（1 インスタンスにつき 1 回）。"""
        if self.state is not DrawableState.IDLE:
            raise StateError(f"{self.name}: init() may only be called once per drawable")

        if self.seed is None:
            self.seed = generate_seed()
        self.rng = SeededRandom(self.seed)

        spec = size if isinstance(size, SizeSpec) else SizeSpec.from_mapping(size or {})
        self.width = spec.width
        self.height = spec.height
        self.dpi = spec.dpi
        if spec.border:
            self.border = spec.border
        self.border_cm = spec.border_cm

        px_w, px_h = spec.pixel_size
        self.canvas.width = px_w
        self.canvas.height = px_h
        self.surfaces.resize(px_w, px_h)

        if self.border_cm:
            self._border = float(self.cm(self.border_cm))
        else:
            self._border = self.w(self.border)

        # シャッフルして先頭を取る。neutral でも乱数の消費量は同じにする
        order = self.rng.permutation(len(self.palettes))
        self.palette = list(self.palettes[int(order[0])])
        if neutral:
            self.palette = list(self.palettes[0])

        self.state = DrawableState.INITIALIZED
        logger.debug(
            "%s: init %dx%d px (dpi=%s, border=%.1f px, seed=%d)",
            self.name,
            px_w,
            px_h,
            self.dpi,
            self._border,
            self.seed,
        )
        return self

    def enqueue(self, action: Any, colour: Colour = DEFAULT_COLOUR) -> QueueEntry:
        """アクションを末尾へ積む。`action` が None なら `QueueError`。"""
        if self.state in (DrawableState.DONE, DrawableState.FAILED):
            raise StateError(f"{self.name}: cannot enqueue after the run has ended (state={self.state.value})")
        entry = self.draw_queue.enqueue(action, colour)
        if self.state is DrawableState.INITIALIZED:
            self.state = DrawableState.QUEUED
        return entry

    # ------------------------------------------------------------------
    # 実行
    # ------------------------------------------------------------------
    def execute(
        self,
        *,
        bg: Colour | None = None,
        fg: Colour | None = None,
        fgs: Sequence[Colour] | None = None,
    ) -> None:
        """背景を塗り、最初のティックをホストへ依頼する。"""
        if self.state not in (DrawableState.INITIALIZED, DrawableState.QUEUED):
            raise StateError(f"{self.name}: execute() requires init() and may only run once (state={self.state.value})")

        self.ctx = self.canvas.get_context("2d")
        palette = self.palette
        self.bg = bg if bg is not None else palette[0]
        self.fg = fg if fg is not None else palette[best_contrast(palette, self.bg)]
        self.fgs = list(fgs) if fgs is not None else list(palette)

        self.ctx.fill_style = to_style(self.bg)
        self.ctx.fill_rect(0, 0, self.w(), self.h())

        logger.info("%s: seed %d", self.name, self.seed)
        self.state = DrawableState.RUNNING
        self.host.defer(self.process)

    def process(self) -> None:
        """1 ティック: 先頭のアクションを 1 件だけ描く。"""
        if self.state in (DrawableState.DONE, DrawableState.FAILED):
            logger.debug("%s: process() after the run ended ignored (state=%s)", self.name, self.state.value)
            return
        if self.ctx is None:
            raise StateError(f"{self.name}: process() requires execute()")

        entry = self.draw_queue.shift()
        if entry is None:
            logger.warning("%s: nothing in the queue to process", self.name)
            if self.state is DrawableState.RUNNING:
                self._finish()
            return

        self.state = DrawableState.DRAINING
        self.ticks += 1
        try:
            self._tick(self.ctx, entry)
        except Exception as exc:
            self._fail(exc)
            raise

        if self.draw_queue:
            self.host.defer(self.process)
        else:
            self._finish()

    def _tick(self, ctx: "Context2D", entry: QueueEntry) -> None:
        ctx.save()
        try:
            if self._border > 0:
                self.border_path(ctx)
                ctx.clip()
            draw = getattr(entry.action, "draw", None)
            if callable(draw):
                surfaces = self.surfaces.acquire(bool(getattr(entry.action, "carry_over", False)))
                draw(ctx, entry.colour, surfaces)
            else:
                logger.debug("%s: entry without draw() skipped: %r", self.name, entry.action)
        finally:
            ctx.restore()

    def border_path(self, ctx: "Context2D") -> None:
        """境界クリップの形状（既定は内側へ `_border` だけ寄せた矩形）。サブクラスで差し替え可。"""
        b = self._border
        ctx.begin_path()
        ctx.rect(b, b, self.w() - 2 * b, self.h() - 2 * b)

    def _finish(self) -> None:
        if self.show_text:
            self.text(self.ctx)
        self.state = DrawableState.DONE
        if self.host.frame_paced:
            logger.info("%s: process complete (seed=%d, ticks=%d)", self.name, self.seed, self.ticks)
        else:
            logger.debug("%s: process complete (seed=%d, ticks=%d)", self.name, self.seed, self.ticks)
        self.emit(COMPLETED)

    def _fail(self, exc: Exception) -> None:
        """アクション例外で実行を打ち切る（残りのエントリは捨て、"error" を 1 回発火）。"""
        self.state = DrawableState.FAILED
        self.error = exc
        self.draw_queue.clear()
        logger.debug("%s: run failed at tick %d: %r", self.name, self.ticks, exc)
        self.emit(ERROR, exc)

    def completion(self) -> "asyncio.Future[None]":
        """実行中の asyncio ループ上で、完了なら None、アクション例外ならその例外で終わる Future。

        `AsyncioHost` のように呼び出し元へ例外が届かないホストで、実行の終わりを待つために使う。
        `execute()` より前に取得しておく。
        """
        future: asyncio.Future[None] = asyncio.get_running_loop().create_future()

        def _done() -> None:
            if not future.done():
                future.set_result(None)

        def _failed(exc: BaseException) -> None:
            if not future.done():
                future.set_exception(exc)

        self.once(COMPLETED, _done)
        self.once(ERROR, _failed)
        return future

    # ------------------------------------------------------------------
    # 補助
    # ------------------------------------------------------------------
    def text(
        self,
        ctx: "Context2D",
        data: object | None = None,
        bg: Colour | None = None,
        fg: Colour | None = None,
    ) -> None:
        """画像の左下に `#<data>`（既定はシード）を背景色の帯付きで描く。"""
        bg = self.bg if bg is None else bg
        fg = self.fg if fg is None else fg
        label = f"#{self.seed if data is None else data}"
        txt_h = int(self.h(CAPTION_HEIGHT))
        if txt_h < 1:
            return

        ctx.save()
        try:
            ctx.global_alpha = 1.0
            ctx.font = f"{txt_h}px Helvetica"
            txt_w = ctx.measure_text(label).width
            gx = 0.25 * txt_h
            gy = 0.5 * txt_h

            ctx.fill_style = to_style(bg)
            ctx.fill_rect(gx, self.h() - txt_h - gy, txt_w + 2 * gx, txt_h + gx)

            ctx.fill_style = to_style(fg)
            ctx.text_baseline = "top"
            ctx.fill_text(label, gx * 2, self.h() - 1.5 * txt_h)
        finally:
            ctx.restore()

    def w(self, v: float = 1.0) -> float:
        """幅に対する分数をピクセルへ。"""
        return v * self.width * self.dpi

    def h(self, v: float = 1.0) -> float:
        """高さに対する分数をピクセルへ。"""
        return v * self.height * self.dpi

    def cm(self, v: float = 1.0) -> int:
        """センチメートルをおおよそのピクセル数へ。"""
        return int(math.floor(v * self.dpi / 2.54 + 0.5))

    @staticmethod
    def clear(surface: "Surface", ctx: "Context2D") -> None:
        ctx.clear_rect(0, 0, surface.width, surface.height)

    @property
    def done(self) -> bool:
        return self.state is DrawableState.DONE

    def draw(self, seed: int | None = None, **options: Any) -> None:
        """サブクラスで実装する: `set_seed` → `init` → `enqueue`… → `execute`。"""
        raise NotImplementedError(f"{type(self).__name__} must implement draw()")

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, seed={self.seed}, state={self.state.value})"


__all__ = ["COMPLETED", "ERROR", "Drawable", "DrawableState", "SizeSpec"]
