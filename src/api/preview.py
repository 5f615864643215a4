"""
どこで: `api.preview`（フレーム駆動のプレビュー窓）。
何を: pyglet ウィンドウにキャンバスを毎フレーム転送しながら、`PygletHost` で 1 ティックずつドレインする。
なぜ: 描画キューがアクションを 1 件ずつ積み上げていく様子をそのまま見られるようにするため。

pyglet は関数内で遅延 import する（ヘッドレス環境でもモジュール import は成功させる）。
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Sequence

from common.types import HSV
from engine.core.canvas import Surface
from engine.core.frame_clock import FrameClock
from engine.drawable import COMPLETED, Drawable
from engine.runtime.host import PygletHost

from .render import create_sketch, resolve_size

logger = logging.getLogger(__name__)

DEFAULT_FPS = 60
MAX_WINDOW_SIDE = 900


def resolve_fps(requested_fps: int | None, *, default: int = DEFAULT_FPS) -> int:
    """FPS を解決して 1 以上の int を返す。

    - 明示指定があればそれを優先（数値化できない/<=0 は既定へ）。
    - それ以外は構成 `preview.fps` を読み、失敗時は既定値。
    """
    if requested_fps is not None:
        try:
            return max(1, int(requested_fps))
        except (TypeError, ValueError):
            return max(1, int(default))
    from util.utils import config_section, load_config

    section = config_section(load_config(), "preview")
    try:
        return max(1, int(section.get("fps", default)))
    except (TypeError, ValueError):
        return max(1, int(default))


def window_size(width: int, height: int, max_side: int = MAX_WINDOW_SIDE) -> tuple[int, int]:
    """長辺が `max_side` に収まるよう縮小したウィンドウ寸法。"""
    scale = min(1.0, max_side / max(width, height, 1))
    return max(1, int(round(width * scale))), max(1, int(round(height * scale)))


class CanvasView:
    """キャンバスの画素を pyglet の画像へ転送する Tickable。"""

    def __init__(self, surface: Surface) -> None:
        self.surface = surface
        self._image: Any = None

    def tick(self, dt: float) -> None:
        import pyglet

        w, h = self.surface.width, self.surface.height
        data = self.surface.to_array().tobytes()
        # 負の pitch で上から下の行順を指定する
        self._image = pyglet.image.ImageData(w, h, "RGBA", data, pitch=-w * 4)

    def blit(self, width: int, height: int) -> None:
        if self._image is not None:
            self._image.blit(0, 0, width=width, height=height)


def preview(
    name: str,
    seed: int | None = None,
    *,
    width: float | None = None,
    height: float | None = None,
    dpi: float | None = None,
    border: float | None = None,
    neutral: bool = False,
    show_text: bool | None = None,
    palettes: Sequence[Sequence[HSV]] | str | Path | None = None,
    fps: int | None = None,
    **options: Any,
) -> Drawable:
    """スケッチをウィンドウで描きながら表示する（ウィンドウを閉じるまで戻らない）。"""
    import pyglet

    host = PygletHost()
    drawable = create_sketch(name, palettes=palettes, host=host, show_text=show_text, neutral=neutral)
    size = resolve_size(width, height, dpi, border)
    # 最初のティックは pyglet.app.run() 後に回る
    drawable.draw(seed, size=size, neutral=neutral, **options)

    px_w, px_h = drawable.canvas.width, drawable.canvas.height
    win_w, win_h = window_size(px_w, px_h)
    window = pyglet.window.Window(width=win_w, height=win_h, caption=f"{drawable.name} #{drawable.seed}")

    view = CanvasView(drawable.canvas)
    clock = FrameClock([view])
    interval = 1.0 / resolve_fps(fps)
    pyglet.clock.schedule_interval(clock.tick, interval)

    @window.event
    def on_draw() -> None:
        window.clear()
        view.blit(window.width, window.height)

    drawable.once(COMPLETED, lambda: logger.info("%s: preview finished after %d frames", drawable.name, clock.frames))
    logger.info("previewing %s at %dx%d (fps=%d)", drawable.name, px_w, px_h, int(round(1.0 / interval)))
    try:
        pyglet.app.run()
    finally:
        pyglet.clock.unschedule(clock.tick)
    return drawable


__all__ = ["CanvasView", "preview", "resolve_fps", "window_size"]
