"""
どこで: `engine.runtime` サブパッケージ。
何を: 描画キュー（DrawQueue）・ティックのスケジューリング戦略（Host 群）・合成用スクラッチ面を提供。
なぜ: Drawable のドレイン手順から「何を積むか」「いつ次を回すか」「どこへ合成するか」を分離するため。
"""

from .host import AsyncioHost, Host, InlineHost, PygletHost
from .queue import DrawQueue, QueueEntry
from .surfaces import CompositingSurfaces

__all__ = [
    "AsyncioHost",
    "CompositingSurfaces",
    "DrawQueue",
    "Host",
    "InlineHost",
    "PygletHost",
    "QueueEntry",
]
