"""
どこで: `engine.core` の軽量 2D アフィン変換ユーティリティ。
何を: 3x3 同次行列の生成・合成・点列適用を小さな純関数として提供。
なぜ: Context2D の変換状態（translate/rotate/scale）と描画パスの座標変換を分離し、責務を明確化するため。

行列は Canvas 2D と同じく「後から掛けた変換が先にローカル座標へ効く」右乗算で合成する。
"""

from __future__ import annotations

import math

import numpy as np


def identity() -> np.ndarray:
    return np.eye(3, dtype=np.float64)


def translation(tx: float, ty: float) -> np.ndarray:
    m = identity()
    m[0, 2] = float(tx)
    m[1, 2] = float(ty)
    return m


def rotation(angle_rad: float) -> np.ndarray:
    c = math.cos(angle_rad)
    s = math.sin(angle_rad)
    return np.array([[c, -s, 0.0], [s, c, 0.0], [0.0, 0.0, 1.0]], dtype=np.float64)


def scaling(sx: float, sy: float) -> np.ndarray:
    return np.array([[float(sx), 0.0, 0.0], [0.0, float(sy), 0.0], [0.0, 0.0, 1.0]])


def from_abcdef(a: float, b: float, c: float, d: float, e: float, f: float) -> np.ndarray:
    """Canvas 2D の `setTransform(a, b, c, d, e, f)` 形式から行列を作る。"""
    return np.array([[a, c, e], [b, d, f], [0.0, 0.0, 1.0]], dtype=np.float64)


def apply(m: np.ndarray, points: np.ndarray) -> np.ndarray:
    """(N, 2) 点列へ行列を適用した (N, 2) 配列を返す。"""
    pts = np.asarray(points, dtype=np.float64).reshape(-1, 2)
    return pts @ m[:2, :2].T + m[:2, 2]


def apply_point(m: np.ndarray, x: float, y: float) -> tuple[float, float]:
    return (
        float(m[0, 0] * x + m[0, 1] * y + m[0, 2]),
        float(m[1, 0] * x + m[1, 1] * y + m[1, 2]),
    )


def scale_factor(m: np.ndarray) -> float:
    """線幅/半径の換算に使う等方スケール（行列式の平方根）。"""
    return math.sqrt(abs(float(m[0, 0] * m[1, 1] - m[0, 1] * m[1, 0])))


def is_translation_only(m: np.ndarray, *, eps: float = 1e-12) -> bool:
    return bool(np.allclose(m[:2, :2], np.eye(2), atol=eps))


__all__ = [
    "apply",
    "apply_point",
    "from_abcdef",
    "identity",
    "is_translation_only",
    "rotation",
    "scale_factor",
    "scaling",
    "translation",
]
