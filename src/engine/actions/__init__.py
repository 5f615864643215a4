"""
どこで: `engine.actions` パッケージ。
何を: 描画アクションの基底契約・基本図形・マスク・塗り戦略を再エクスポートする。
なぜ: スケッチ側が `from engine.actions import DrawDot, CircleMask` のように 1 箇所から import できるようにするため。
"""

from .action import Action, SupportsDraw, validate_op_order
from .basics import DrawArc, DrawDot, DrawLine, DrawPolygon, DrawRect
from .fill import Fill, HatchFill, NoiseFill
from .mask import BlockMask, CircleMask, Mask, RectMask

__all__ = [
    "Action",
    "BlockMask",
    "CircleMask",
    "DrawArc",
    "DrawDot",
    "DrawLine",
    "DrawPolygon",
    "DrawRect",
    "Fill",
    "HatchFill",
    "Mask",
    "NoiseFill",
    "RectMask",
    "SupportsDraw",
    "validate_op_order",
]
