"""
どこで: `sketches` パッケージ。
何を: 個々の生成スケッチ（Drawable サブクラス）を登録し、名前で引けるようにする。
なぜ: CLI/プレビュー/レンダ API がスケッチの実装を知らずに名前だけで起動できるよう、拡張点を一箇所に集約するため。
"""

# スケッチを登録
from . import masked_dots  # noqa: F401
from . import noise_lines  # noqa: F401
from . import palette_map  # noqa: F401
from . import rings  # noqa: F401
from .base import Sketch
from .registry import get_sketch, is_sketch_registered, list_sketches, sketch

__all__ = [
    "Sketch",
    "get_sketch",
    "is_sketch_registered",
    "list_sketches",
    "sketch",
]
