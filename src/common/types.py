"""
どこで: `common` の型定義。
何を: Vec2/HSV/Point などの軽量エイリアス（組込みジェネリックで記述）。
なぜ: 依存の少ない場所に配置して循環と分散定義を避けるため。
"""

from __future__ import annotations

from typing import NamedTuple, Union

Vec2 = tuple[float, float]

# (hue 0–360, saturation 0–100, value 0–100)
HSV = tuple[float, float, float]

# キューに積む色: HSV タプルまたは "#rrggbb"
Colour = Union[HSV, str]


class Point(NamedTuple):
    """キャンバス幅/高さに対する分数座標（0..1）。"""

    x: float = 0.0
    y: float = 0.0


class Circle(NamedTuple):
    """中心 (x, y) と半径 r。半径は幅基準の分数。"""

    x: float
    y: float
    r: float


class Rect(NamedTuple):
    """左上 (x, y) と寸法 (w, h)。キャンバス幅/高さに対する分数。"""

    x: float
    y: float
    w: float
    h: float


def as_point(value: object) -> Point:
    """`Point`/(x, y)/{"x":…, "y":…} を `Point` に正規化する。"""
    if isinstance(value, Point):
        return value
    if isinstance(value, dict):
        return Point(float(value.get("x", 0.0)), float(value.get("y", 0.0)))
    if isinstance(value, (tuple, list)) and len(value) == 2:
        return Point(float(value[0]), float(value[1]))
    raise TypeError(f"point must be Point, (x, y) or mapping: got {value!r}")


__all__ = ["Circle", "Colour", "HSV", "Point", "Rect", "Vec2", "as_point"]
