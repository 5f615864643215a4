"""
どこで: `engine.core` の乱数源。
何を: 1 回の描画実行ぶんのシード付き乱数 `SeededRandom`（numpy `Generator` の薄いラッパ）。
なぜ: プロセス全体の乱数状態に頼らず、パレット選択・スケッチ・ノイズ生成へ同じ生成器を明示的に渡して
      「同じシードなら同じ描画列」を保証するため。
"""

from __future__ import annotations

from typing import Sequence, TypeVar

import numpy as np

T = TypeVar("T")

# 自動採番するシードの上限（排他的）
MAX_SEED = 2**20


def generate_seed() -> int:
    """未指定時のシード（1 以上 `MAX_SEED` 未満）を OS エントロピーから作る。"""
    return int(np.random.default_rng().integers(1, MAX_SEED))


def _is_integral(v: float) -> bool:
    return float(v).is_integer()


class SeededRandom:
    """シード固定の乱数ヘルパ。

    Parameters
    ----------
    seed : int
        生成器のシード。`numpy.random.default_rng(seed)` に渡す。

    Notes
    -----
    - `rnd_range(a, b)` は両端が整数値なら両端を含む整数、そうでなければ [min, max) の実数を返す。
    - 同じシードで作った 2 つのインスタンスは同じ呼び出し列に同じ値を返す。
    """

    def __init__(self, seed: int) -> None:
        self.seed = int(seed)
        self.generator = np.random.default_rng(self.seed)

    def random(self) -> float:
        """[0, 1) の一様乱数。"""
        return float(self.generator.random())

    def rnd_range(self, v1: float, v2: float) -> float:
        lo, hi = min(v1, v2), max(v1, v2)
        if _is_integral(v1) and _is_integral(v2):
            return int(self.generator.integers(int(lo), int(hi), endpoint=True))
        return lo + self.random() * (hi - lo)

    def nrand(self, mean: float = 0.0, stddev: float = 1.0) -> float:
        """正規乱数。"""
        return float(self.generator.normal(mean, stddev))

    def choose(self, choices: Sequence[T]) -> T:
        if len(choices) == 0:
            raise ValueError("choose() requires a non-empty sequence")
        return choices[int(self.generator.integers(len(choices)))]

    def permutation(self, n: int) -> np.ndarray:
        return self.generator.permutation(n)

    def __repr__(self) -> str:
        return f"SeededRandom(seed={self.seed})"


__all__ = ["MAX_SEED", "SeededRandom", "generate_seed"]
