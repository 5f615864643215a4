"""
どこで: `api.registry`。
何を: 組込みスケッチを登録済みにした上で、名前 → スケッチクラスの解決を公開する。
なぜ: CLI/プレビュー/レンダが `sketches` パッケージの import 副作用（登録）を意識せずに済むようにするため。
"""

from __future__ import annotations

import sketches  # noqa: F401  (組込みスケッチを登録)
from engine.drawable import Drawable
from sketches.registry import get_sketch as _get_sketch
from sketches.registry import is_sketch_registered, list_sketches, sketch


def get_sketch(name: str) -> type[Drawable]:
    """登録済みスケッチクラスを返す。

    例外:
    - KeyError: 未登録名。メッセージに登録済みの名前一覧を含める。
    """
    try:
        return _get_sketch(name)
    except KeyError:
        available = ", ".join(list_sketches()) or "(none)"
        raise KeyError(f"unknown sketch {name!r}; available: {available}") from None


__all__ = ["get_sketch", "is_sketch_registered", "list_sketches", "sketch"]
