"""
どこで: `engine.core` の数学ヘルパ。
何を: 回転単位 `TAU` と範囲の再写像 `rescale`。
なぜ: アクションと塗り戦略が回転量とノイズ値の換算を同じ式で行うため。
"""

from __future__ import annotations

import math

# 1 回転（ラジアン）。アクションの `rotate` はこの単位の分数で表す。
TAU = 2.0 * math.pi


def rescale(sl: float, sh: float, dl: float, dh: float, v: float) -> float:
    """範囲 [sl, sh] の `v` を [dl, dh] へ線形に写す（範囲外もそのまま外挿）。

    `v` は numpy 配列でもよい（要素ごとに写す）。
    """
    if sh == sl:
        raise ValueError("source range must not be empty")
    return dl + ((v - sl) * (dh - dl)) / (sh - sl)


__all__ = ["TAU", "rescale"]
