"""
どこで: `util.color`。
何を: Context2D の `fill_style`/`stroke_style` に渡せる色指定を RGBA(0–1) へ正規化する。
なぜ: スケッチ/キャプション/パレットマップが同一の受理仕様とエラーメッセージを共有するため。

受理形式:
- Hex 文字列 "#RRGGBB" / "#RRGGBBAA" / "#RGB"
- CSS 風の関数表記 "rgb(r, g, b)" / "rgba(r, g, b, a)" / "hsl(h, s%, l%)"
- 名前 "white" / "black" / "transparent"
- (r, g, b[, a]) タプル（0–1 または 0–255）
"""

from __future__ import annotations

import colorsys
import re
from typing import Sequence

RGBA = tuple[float, float, float, float]

_NAMED: dict[str, RGBA] = {
    "white": (1.0, 1.0, 1.0, 1.0),
    "black": (0.0, 0.0, 0.0, 1.0),
    "transparent": (0.0, 0.0, 0.0, 0.0),
}

_FUNC_RE = re.compile(r"^(rgba?|hsla?)\((.*)\)$")


def _clamp01(x: float) -> float:
    return 0.0 if x < 0.0 else 1.0 if x > 1.0 else float(x)


def parse_hex_color_str(s: str) -> RGBA:
    """Hex 文字列から RGBA(0–1) を返す。"""
    t = s.strip()
    if t.startswith("#"):
        t = t[1:]
    if len(t) == 3:
        t = "".join(c * 2 for c in t)
    if len(t) not in (6, 8):
        raise ValueError(f"invalid hex color length: '{s}' (expected RGB, RRGGBB or RRGGBBAA)")
    try:
        r = int(t[0:2], 16)
        g = int(t[2:4], 16)
        b = int(t[4:6], 16)
        a = int(t[6:8], 16) if len(t) == 8 else 255
    except ValueError as e:
        raise ValueError(f"invalid hex color: '{s}'") from e
    return (r / 255.0, g / 255.0, b / 255.0, a / 255.0)


def _parse_functional(name: str, body: str, original: str) -> RGBA:
    parts = [p.strip() for p in body.split(",")]
    if len(parts) not in (3, 4):
        raise ValueError(f"invalid color function: '{original}'")
    try:
        alpha = float(parts[3]) if len(parts) == 4 else 1.0
        if name.startswith("rgb"):
            r, g, b = (float(p) for p in parts[:3])
            return (_clamp01(r / 255.0), _clamp01(g / 255.0), _clamp01(b / 255.0), _clamp01(alpha))
        h = float(parts[0])
        s = float(parts[1].rstrip("%")) / 100.0
        light = float(parts[2].rstrip("%")) / 100.0
    except ValueError as e:
        raise ValueError(f"invalid color function: '{original}'") from e
    r, g, b = colorsys.hls_to_rgb((h % 360.0) / 360.0, _clamp01(light), _clamp01(s))
    return (r, g, b, _clamp01(alpha))


def parse_color_str(s: str) -> RGBA:
    """文字列の色指定を RGBA(0–1) に変換する。"""
    t = s.strip().lower()
    if t in _NAMED:
        return _NAMED[t]
    m = _FUNC_RE.match(t.replace(" ", ""))
    if m is not None:
        return _parse_functional(m.group(1), m.group(2), s)
    return parse_hex_color_str(t)


def _as_sequence(value: object) -> Sequence[float | int] | None:
    if isinstance(value, (list, tuple)):
        return value  # type: ignore[return-value]
    return None


def normalize_color(value: object) -> RGBA:
    """色を RGBA(0–1) へ正規化する。

    - タプルは全要素が 0..1 ならそのまま、そうでなければ 0–255 とみなす。
    """
    if isinstance(value, str):
        return parse_color_str(value)
    seq = _as_sequence(value)
    if seq is None:
        raise ValueError(f"unsupported color type: {type(value)!r}")
    if len(seq) not in (3, 4):
        raise ValueError("color tuple/list must be length 3 or 4")
    try:
        vals = [float(v) for v in seq]
    except (TypeError, ValueError) as e:
        raise ValueError(f"invalid color tuple/list: {value!r}") from e
    if len(vals) == 3:
        vals.append(1.0 if all(0.0 <= v <= 1.0 for v in vals) else 255.0)
    if all(0.0 <= v <= 1.0 for v in vals):
        r, g, b, a = vals
        return (_clamp01(r), _clamp01(g), _clamp01(b), _clamp01(a))
    r, g, b, a = (max(0, min(255, int(round(v)))) / 255.0 for v in vals)
    return (r, g, b, a)


def to_u8_rgba(value: object) -> tuple[int, int, int, int]:
    """色を RGBA(0–255) へ変換する。"""
    r, g, b, a = normalize_color(value)
    return (int(round(r * 255)), int(round(g * 255)), int(round(b * 255)), int(round(a * 255)))


__all__ = [
    "RGBA",
    "normalize_color",
    "parse_color_str",
    "parse_hex_color_str",
    "to_u8_rgba",
]
