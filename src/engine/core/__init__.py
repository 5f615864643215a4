"""
どこで: `engine.core` サブパッケージ。
何を: ラスタ面（Surface/Context2D）・乱数/ノイズ・幾何ヘルパ・フレーム駆動（Tickable/FrameClock）を提供。
なぜ: 描画キューの実行系（runtime/drawable）とスケッチが共通に依存する最下層をまとめるため。
"""

from .canvas import Surface
from .context import Context2D
from .frame_clock import FrameClock
from .geometry import TAU
from .noise import PerlinNoise
from .random import SeededRandom, generate_seed
from .tickable import Tickable

__all__ = [
    "Context2D",
    "FrameClock",
    "PerlinNoise",
    "SeededRandom",
    "Surface",
    "TAU",
    "Tickable",
    "generate_seed",
]
