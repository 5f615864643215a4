"""
どこで: `engine.core` のパス構築/平坦化ユーティリティ。
何を: Canvas 2D 風のサブパス列（デバイス座標の折れ線）と、円弧/楕円/ベジェの折れ線近似。
なぜ: ラスタライザ（Pillow の polygon/line）が折れ線しか扱えないため、曲線をここで一括して平坦化する。
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

import numpy as np

_MIN_SEGMENTS = 8
_MAX_SEGMENTS = 720


def arc_segments(radius_px: float, sweep: float) -> int:
    """デバイス半径と掃引角から分割数を決める（おおよそ 1.5px 刻み）。"""
    if radius_px <= 0 or sweep == 0:
        return 1
    n = int(math.ceil(abs(sweep) * radius_px / 1.5))
    return max(_MIN_SEGMENTS, min(_MAX_SEGMENTS, n))


def normalize_sweep(start: float, end: float, counterclockwise: bool) -> float:
    """Canvas 2D の arc と同じ規則で掃引角（符号付き）を返す。"""
    tau = 2.0 * math.pi
    sweep = end - start
    if not counterclockwise:
        if sweep >= tau:
            return tau
        if sweep < 0:
            sweep = sweep % tau
        return sweep
    if sweep <= -tau:
        return -tau
    if sweep > 0:
        sweep = sweep % tau - tau
    return sweep


def ellipse_points(
    cx: float,
    cy: float,
    rx: float,
    ry: float,
    rotation: float,
    start: float,
    end: float,
    counterclockwise: bool,
    *,
    device_scale: float = 1.0,
) -> np.ndarray:
    """ローカル座標での楕円弧の折れ線 (N, 2) を返す（始点/終点を含む）。"""
    sweep = normalize_sweep(start, end, counterclockwise)
    n = arc_segments(max(rx, ry) * device_scale, sweep)
    theta = start + sweep * np.linspace(0.0, 1.0, n + 1)
    x = rx * np.cos(theta)
    y = ry * np.sin(theta)
    if rotation:
        c, s = math.cos(rotation), math.sin(rotation)
        x, y = x * c - y * s, x * s + y * c
    return np.column_stack((x + cx, y + cy))


def cubic_points(p0, p1, p2, p3, *, segments: int = 24) -> np.ndarray:
    """3 次ベジェを `segments` 分割した点列（始点を除く）を返す。"""
    t = np.linspace(0.0, 1.0, segments + 1)[1:, None]
    a, b, c, d = (np.asarray(p, dtype=np.float64) for p in (p0, p1, p2, p3))
    mt = 1.0 - t
    return mt**3 * a + 3 * mt**2 * t * b + 3 * mt * t**2 * c + t**3 * d


def quadratic_points(p0, p1, p2, *, segments: int = 16) -> np.ndarray:
    """2 次ベジェを `segments` 分割した点列（始点を除く）を返す。"""
    t = np.linspace(0.0, 1.0, segments + 1)[1:, None]
    a, b, c = (np.asarray(p, dtype=np.float64) for p in (p0, p1, p2))
    mt = 1.0 - t
    return mt**2 * a + 2 * mt * t * b + t**2 * c


@dataclass
class Subpath:
    points: list[tuple[float, float]] = field(default_factory=list)
    closed: bool = False


class Path:
    """デバイス座標で保持するサブパスの集合。

    `Context2D` が現在の変換を適用した後の点を積む。閉じていないサブパスも
    fill 時には暗黙に閉じる（Canvas 2D と同じ）。
    """

    def __init__(self) -> None:
        self.subpaths: list[Subpath] = []

    @property
    def current(self) -> Subpath | None:
        return self.subpaths[-1] if self.subpaths else None

    def move_to(self, x: float, y: float) -> None:
        self.subpaths.append(Subpath([(x, y)]))

    def line_to(self, x: float, y: float) -> None:
        cur = self.current
        if cur is None or cur.closed:
            # 閉じたサブパスの後は終点から新しいサブパスを始める
            start = cur.points[0] if cur is not None and cur.points else (x, y)
            self.subpaths.append(Subpath([start]))
            cur = self.subpaths[-1]
        cur.points.append((x, y))

    def extend(self, pts: np.ndarray, *, connect: bool = True) -> None:
        """点列を追加する。`connect=False` なら新しいサブパスを始める。"""
        if len(pts) == 0:
            return
        first = (float(pts[0][0]), float(pts[0][1]))
        if connect and self.current is not None and not self.current.closed:
            self.current.points.append(first)
        else:
            self.move_to(*first)
        self.current.points.extend((float(x), float(y)) for x, y in pts[1:])

    def close(self) -> None:
        cur = self.current
        if cur is not None and cur.points:
            cur.closed = True

    def last_point(self) -> tuple[float, float] | None:
        cur = self.current
        if cur is None or not cur.points:
            return None
        return cur.points[-1]

    def is_empty(self) -> bool:
        return not any(len(sp.points) for sp in self.subpaths)

    def bounds(self) -> tuple[float, float, float, float] | None:
        pts = [p for sp in self.subpaths for p in sp.points]
        if not pts:
            return None
        arr = np.asarray(pts, dtype=np.float64)
        x0, y0 = arr.min(axis=0)
        x1, y1 = arr.max(axis=0)
        return float(x0), float(y0), float(x1), float(y1)


__all__ = [
    "Path",
    "Subpath",
    "arc_segments",
    "cubic_points",
    "ellipse_points",
    "normalize_sweep",
    "quadratic_points",
]
