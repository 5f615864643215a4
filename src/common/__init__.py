"""
どこで: `common` パッケージ。
何を: engine/sketches/api から使う軽量ユーティリティ（レジストリ・イベント・設定・型）。
なぜ: 共通基盤を分離し、依存の向きを単純化するため。
"""

from .base_registry import BaseRegistry
from .events import EventEmitter

__all__ = [
    "BaseRegistry",
    "EventEmitter",
]
