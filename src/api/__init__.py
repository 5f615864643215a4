"""
どこで: `api` 入口（高レベル公開 API）。
何を: スケッチの名前解決・ヘッドレス描画・プレビューを再輸出する。
なぜ: 利用者が単一名前空間からスケッチ選択 → 描画 → 保存まで完結できるようにするため。

Usage:
    from api import render, list_sketches

    print(list_sketches())
    result = render("rings", seed=1234, width=4, height=4, dpi=100, out="rings.png")
    print(result.seed, result.path)
"""

from .registry import get_sketch, is_sketch_registered, list_sketches, sketch
from .render import RenderResult, create_sketch, render, resolve_size

__all__ = [
    # メインAPI
    "render",
    "create_sketch",
    "resolve_size",
    "RenderResult",
    # スケッチ
    "sketch",
    "get_sketch",
    "list_sketches",
    "is_sketch_registered",
]

__version__ = "2026.10"
