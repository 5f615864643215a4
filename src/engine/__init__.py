"""
どこで: `engine` パッケージ。
何を: 描画キュー実行エンジン（Drawable/アクション/キュー/ホスト/ラスタ面）の公開入口。
なぜ: スケッチと API 層が `from engine import Drawable, Surface` のように最小の import で済むようにするため。
"""

from .core.canvas import Surface
from .core.random import SeededRandom
from .drawable import COMPLETED, ERROR, Drawable, DrawableState, SizeSpec
from .errors import ActionError, ConfigurationError, DrawableError, QueueError, StateError
from .runtime.host import AsyncioHost, InlineHost, PygletHost
from .runtime.surfaces import CompositingSurfaces

__all__ = [
    "ActionError",
    "AsyncioHost",
    "COMPLETED",
    "ERROR",
    "CompositingSurfaces",
    "ConfigurationError",
    "Drawable",
    "DrawableError",
    "DrawableState",
    "InlineHost",
    "PygletHost",
    "QueueError",
    "SeededRandom",
    "SizeSpec",
    "StateError",
    "Surface",
]
