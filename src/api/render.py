"""
どこで: `api.render`（ヘッドレス描画の入口）。
何を: スケッチ名からキャンバス/スクラッチ面/パレットを組み立て、同期ホストで描き切って任意で PNG 保存する。
なぜ: CLI・テスト・ノートブックが同じ組み立て手順（サイズ解決の優先順位を含む）を共有するため。

サイズの優先順位: 明示引数 > 構成 `size` セクション > 組込み既定（6.5 x 6.5 in @ DPI 既定）。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Sequence

from common.types import HSV
from engine.core.canvas import Surface
from engine.drawable import Drawable, SizeSpec
from engine.errors import StateError
from engine.export.image import save_png
from engine.runtime.host import Host, InlineHost
from palette import PaletteSet, load_palettes
from util.utils import config_float, config_section, load_config

from .registry import get_sketch

logger = logging.getLogger(__name__)


@dataclass
class RenderResult:
    """`render()` の戻り値。"""

    drawable: Drawable
    path: Path | None = None

    @property
    def canvas(self) -> Surface:
        return self.drawable.canvas

    @property
    def seed(self) -> int | None:
        return self.drawable.seed


def resolve_size(
    width: float | None = None,
    height: float | None = None,
    dpi: float | None = None,
    border: float | None = None,
    *,
    config: Mapping[str, Any] | None = None,
) -> SizeSpec:
    """明示値 > 構成 `size` > 既定の順でサイズを決める。"""
    cfg = load_config() if config is None else dict(config)
    section = config_section(cfg, "size")
    values = {
        "width": width if width is not None else config_float(section, "width", None),
        "height": height if height is not None else config_float(section, "height", None),
        "dpi": dpi if dpi is not None else config_float(section, "dpi", None),
        "border": border if border is not None else config_float(section, "border", None),
    }
    return SizeSpec.from_mapping(values)


def create_sketch(
    name: str,
    *,
    palettes: Sequence[Sequence[HSV]] | str | Path | None = None,
    host: Host | None = None,
    show_text: bool | None = None,
    neutral: bool = False,
) -> Drawable:
    """スケッチを生成する（キャンバスとテクスチャ/プリドロー面を付ける）。

    `neutral` なら白黒の参照パレットを先頭に加える（`init(neutral=True)` が先頭を選ぶ）。
    """
    cls = get_sketch(name)
    if palettes is None or isinstance(palettes, (str, Path)):
        palettes = load_palettes(palettes)
    if neutral and isinstance(palettes, PaletteSet):
        palettes = palettes.with_neutral()
    return cls(
        canvas=Surface(),
        texture=Surface(),
        predraw=Surface(),
        palettes=palettes,
        show_text=show_text,
        host=host if host is not None else InlineHost(),
    )


def render(
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
    out: str | Path | None = None,
    save: bool = False,
    config: Mapping[str, Any] | None = None,
    **options: Any,
) -> RenderResult:
    """スケッチを最後まで同期的に描く。

    Parameters
    ----------
    name : str
        登録済みスケッチ名。
    seed : int, optional
        固定シード。None なら生成される（`result.seed` で取得）。
    width, height, dpi, border : float, optional
        サイズの明示値（未指定は構成/既定）。
    out : str | Path, optional
        指定すればそのパスへ PNG 保存する。
    save : bool
        `out` 未指定でも出力ディレクトリへ `{name}_{seed}.png` で保存する。
    **options :
        スケッチ固有のオプション（例: `dots`, `rows`）。

    Raises
    ------
    KeyError
        未登録のスケッチ名。
    StateError
        同期ホストで描き終わらなかった場合。
    """
    size = resolve_size(width, height, dpi, border, config=config)
    drawable = create_sketch(name, palettes=palettes, show_text=show_text, neutral=neutral)
    drawable.draw(seed, size=size, neutral=neutral, **options)
    if not drawable.done:
        raise StateError(f"{name}: run did not complete (state={drawable.state.value})")

    result = RenderResult(drawable=drawable)
    if out is not None or save:
        result.path = save_png(drawable.canvas, out, sketch=drawable.name, seed=drawable.seed or 0)
    logger.debug("rendered %s seed=%s ticks=%d", drawable.name, drawable.seed, drawable.ticks)
    return result


__all__ = ["RenderResult", "create_sketch", "render", "resolve_size"]
