"""
どこで: `engine.core` のコヒーレントノイズ。
何を: 実行ごとの乱数から置換表を作る 2D/3D Perlin ノイズ `PerlinNoise`（Numba カーネル）。
なぜ: ノイズ場も描画シードから決定的に導出し、同じシードで同じ模様を再現するため。

値域はおおよそ [-1, 1]。
"""

from __future__ import annotations

import numpy as np
from numba import njit  # type: ignore[attr-defined]

from .random import SeededRandom

# 3D Perlin の 12 方向勾配
GRAD3 = np.array(
    [
        [1, 1, 0],
        [-1, 1, 0],
        [1, -1, 0],
        [-1, -1, 0],
        [1, 0, 1],
        [-1, 0, 1],
        [1, 0, -1],
        [-1, 0, -1],
        [0, 1, 1],
        [0, -1, 1],
        [0, 1, -1],
        [0, -1, -1],
    ],
    dtype=np.float64,
)


@njit(fastmath=True, cache=True)
def fade(t):
    return t * t * t * (t * (t * 6 - 15) + 10)


@njit(fastmath=True, cache=True)
def lerp(a, b, t):
    return a + t * (b - a)


@njit(fastmath=True, cache=True)
def grad(hash_val, x, y, z, grad3_array):
    idx = int(hash_val) % 12
    g = grad3_array[idx]
    return g[0] * x + g[1] * y + g[2] * z


@njit(fastmath=True, cache=True)
def perlin_noise_3d(x, y, z, perm_table, grad3_array):
    """3次元Perlinノイズ生成"""
    X = int(np.floor(x)) & 255
    Y = int(np.floor(y)) & 255
    Z = int(np.floor(z)) & 255

    x -= np.floor(x)
    y -= np.floor(y)
    z -= np.floor(z)

    u = fade(x)
    v = fade(y)
    w = fade(z)

    A = perm_table[X] + Y
    AA = perm_table[A & 511] + Z
    AB = perm_table[(A + 1) & 511] + Z
    B = perm_table[(X + 1) & 255] + Y
    BA = perm_table[B & 511] + Z
    BB = perm_table[(B + 1) & 511] + Z

    gAA = grad(perm_table[AA & 511], x, y, z, grad3_array)
    gBA = grad(perm_table[BA & 511], x - 1, y, z, grad3_array)
    gAB = grad(perm_table[AB & 511], x, y - 1, z, grad3_array)
    gBB = grad(perm_table[BB & 511], x - 1, y - 1, z, grad3_array)
    gAA1 = grad(perm_table[(AA + 1) & 511], x, y, z - 1, grad3_array)
    gBA1 = grad(perm_table[(BA + 1) & 511], x - 1, y, z - 1, grad3_array)
    gAB1 = grad(perm_table[(AB + 1) & 511], x, y - 1, z - 1, grad3_array)
    gBB1 = grad(perm_table[(BB + 1) & 511], x - 1, y - 1, z - 1, grad3_array)

    return lerp(
        lerp(lerp(gAA, gBA, u), lerp(gAB, gBB, u), v),
        lerp(lerp(gAA1, gBA1, u), lerp(gAB1, gBB1, u), v),
        w,
    )


@njit(fastmath=True, cache=True)
def perlin_grid(xs, ys, z, perm_table, grad3_array):
    """`xs`(W,) x `ys`(H,) の格子上のノイズを (H, W) で返す。"""
    out = np.empty((ys.shape[0], xs.shape[0]), dtype=np.float64)
    for j in range(ys.shape[0]):
        for i in range(xs.shape[0]):
            out[j, i] = perlin_noise_3d(xs[i], ys[j], z, perm_table, grad3_array)
    return out


def permutation_table(rng: SeededRandom) -> np.ndarray:
    """0..255 の置換を 2 回連結した長さ 512 の表。"""
    p = rng.permutation(256).astype(np.int64)
    return np.concatenate((p, p))


class PerlinNoise:
    """シード付き Perlin ノイズ。

    Parameters
    ----------
    rng : SeededRandom
        置換表の生成に使う実行ごとの乱数。構築時に 256 要素ぶん消費する。
    """

    def __init__(self, rng: SeededRandom) -> None:
        if rng is None:
            raise ValueError("PerlinNoise requires a SeededRandom")
        self._perm = permutation_table(rng)

    def noise3d(self, x: float, y: float, z: float) -> float:
        return float(perlin_noise_3d(float(x), float(y), float(z), self._perm, GRAD3))

    def noise2d(self, x: float, y: float) -> float:
        return self.noise3d(x, y, 0.0)

    def grid(self, xs: np.ndarray, ys: np.ndarray, z: float = 0.0) -> np.ndarray:
        return perlin_grid(
            np.asarray(xs, dtype=np.float64),
            np.asarray(ys, dtype=np.float64),
            float(z),
            self._perm,
            GRAD3,
        )


__all__ = ["GRAD3", "PerlinNoise", "perlin_noise_3d", "permutation_table"]
