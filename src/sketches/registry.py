"""
どこで: `sketches` のレジストリ層（Drawable サブクラス専用）。
何を: `@sketch` デコレータによる登録と取得/一覧/検査を提供（キーは正規化）。
なぜ: CLI/プレビュー/レンダ API がスケッチを名前で解決できるよう、登録点を一箇所に集約するため。

公開 API 概要:
- `sketch`（デコレータ）: Drawable サブクラスを登録
- `get_sketch(name)` / `list_sketches()` / `is_sketch_registered(name)` / `clear_registry()`
- `get_registry()`: 読み取り専用ビュー（テスト/診断用）
"""

from __future__ import annotations

import inspect
from typing import Any, Mapping

from common.base_registry import BaseRegistry
from engine.drawable import Drawable

# 共通レジストリ
_sketch_registry = BaseRegistry()


def sketch(arg: Any | None = None, /, name: str | None = None):
    """スケッチクラスを登録するデコレータ。

    使用例:
    - `@sketch` / `@sketch()`                → クラス名から自動推論（`MaskedDots` → `masked_dots`）。
    - `@sketch("custom")` / `@sketch(name="custom")` → 明示名で登録。

    例外:
    - TypeError: Drawable のサブクラス以外を登録しようとした場合。
    """

    def _register_checked(obj: Any, resolved_name: str | None = None):
        if not (inspect.isclass(obj) and issubclass(obj, Drawable)):
            raise TypeError(f"@sketch は Drawable のサブクラスのみ登録可能です: got {obj!r}")
        return _sketch_registry.register(resolved_name)(obj)

    # 直付け (@sketch)
    if inspect.isclass(arg) and name is None:
        return _register_checked(arg, None)

    # 位置引数で名前を渡した (@sketch("name"))
    if isinstance(arg, str) and name is None:

        def _decorator_named(obj: Any):
            return _register_checked(obj, arg)

        return _decorator_named

    def _decorator_generic(obj: Any):
        return _register_checked(obj, name)

    return _decorator_generic


def get_sketch(name: str) -> type[Drawable]:
    """登録されたスケッチクラスを取得。

    例外:
    - KeyError: 未登録名の場合。
    """
    return _sketch_registry.get(name)


def list_sketches() -> list[str]:
    """登録済みスケッチ名をソートして返す。"""
    return sorted(_sketch_registry.list_all())


def is_sketch_registered(name: str) -> bool:
    return _sketch_registry.is_registered(name)


def clear_registry() -> None:
    """レジストリをクリア（テスト用途）。"""
    _sketch_registry.clear()


def unregister(name: str) -> None:
    _sketch_registry.unregister(name)


def get_registry() -> Mapping[str, Any]:
    """読み取り専用ビューとしてレジストリ辞書を返す。"""
    return _sketch_registry.registry


__all__ = [
    "clear_registry",
    "get_registry",
    "get_sketch",
    "is_sketch_registered",
    "list_sketches",
    "sketch",
    "unregister",
]
