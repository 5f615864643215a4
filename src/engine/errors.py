"""
どこで: `engine.errors`。
何を: 描画エンジンの例外階層（構成/キュー/アクション/状態遷移）。
なぜ: プログラマ/構成ミスは呼び出し地点で即座に失敗させ、種類ごとに捕捉できるようにするため。
"""

from __future__ import annotations


class DrawableError(Exception):
    """エンジン由来の例外の基底。"""


class ConfigurationError(DrawableError):
    """必須の協調オブジェクト（canvas/palettes/name）が欠けている。"""


class QueueError(DrawableError):
    """描画キューの誤用（None を積む等）。"""


class ActionError(DrawableError):
    """アクション内部状態の不正（op_order 不正・必須オプション欠落等）。"""


class StateError(DrawableError):
    """ライフサイクル順序の誤用（init 前の execute、再 init 等）。"""


__all__ = [
    "ActionError",
    "ConfigurationError",
    "DrawableError",
    "QueueError",
    "StateError",
]
