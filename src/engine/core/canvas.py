"""
どこで: `engine.core` のラスタ面。
何を: ピクセル幅/高さを持つ RGBA 面 `Surface` と、その 2D コンテキスト取得口。
なぜ: メインキャンバス/テクスチャ/プリドローを同じ型で扱い、Drawable がサイズ設定とコンテキスト取得だけで済むようにするため。

ピクセルは非乗算 RGBA の float32 配列 `(H, W, 4)`（値域 0..1）で保持する。
幅/高さを代入するとブラウザの canvas と同様に内容とコンテキスト状態がクリアされる。
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np
from PIL import Image

if TYPE_CHECKING:
    from .context import Context2D

logger = logging.getLogger(__name__)


class Surface:
    """描画先のラスタ面。

    Parameters
    ----------
    width, height : int
        ピクセル寸法（0 以上）。既定は HTML canvas と同じ 300x150。
    """

    def __init__(self, width: int = 300, height: int = 150) -> None:
        self._width = self._check_dim("width", width)
        self._height = self._check_dim("height", height)
        self.pixels = np.zeros((self._height, self._width, 4), dtype=np.float32)
        self._context: Context2D | None = None

    @staticmethod
    def _check_dim(name: str, value: int) -> int:
        v = int(round(value))
        if v < 0:
            raise ValueError(f"{name} must be >= 0: got {value!r}")
        return v

    # ---- 寸法 ----
    @property
    def width(self) -> int:
        return self._width

    @width.setter
    def width(self, value: int) -> None:
        self._width = self._check_dim("width", value)
        self._reset()

    @property
    def height(self) -> int:
        return self._height

    @height.setter
    def height(self, value: int) -> None:
        self._height = self._check_dim("height", value)
        self._reset()

    @property
    def size(self) -> tuple[int, int]:
        return self._width, self._height

    def _reset(self) -> None:
        self.pixels = np.zeros((self._height, self._width, 4), dtype=np.float32)
        if self._context is not None:
            self._context.reset()

    # ---- コンテキスト ----
    def get_context(self, kind: str = "2d") -> "Context2D":
        """2D コンテキストを返す（面ごとに 1 つをキャッシュ）。"""
        if kind != "2d":
            raise ValueError(f"unsupported context type: {kind!r} (only '2d')")
        if self._context is None:
            from .context import Context2D

            self._context = Context2D(self)
        return self._context

    # ---- 入出力 ----
    def clear(self) -> None:
        """全ピクセルを透明にする（コンテキスト状態は維持）。"""
        self.pixels.fill(0.0)

    def to_array(self) -> np.ndarray:
        """uint8 RGBA の `(H, W, 4)` 配列を返す。"""
        return np.clip(np.rint(self.pixels * 255.0), 0, 255).astype(np.uint8)

    def to_image(self) -> Image.Image:
        return Image.fromarray(self.to_array())

    def save(self, path: str | Path) -> Path:
        """PNG などとして保存し、保存先パスを返す。"""
        p = Path(path)
        self.to_image().save(p)
        logger.debug("saved surface %dx%d to %s", self._width, self._height, p)
        return p

    def __repr__(self) -> str:
        return f"Surface({self._width}x{self._height})"


__all__ = ["Surface"]
