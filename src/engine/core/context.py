"""
どこで: `engine.core` の 2D 描画コンテキスト。
何を: Canvas 2D 互換の最小 API（変換/パス/塗り/線/クリップ/save-restore/文字/画像合成）を
      Pillow の `ImageDraw` と numpy の RGBA バッファで実装する `Context2D`。
なぜ: Drawable とアクションがブラウザの canvas と同じ語彙で描けるようにしつつ、
      ヘッドレス環境でも決定的なピクセル出力を得るため。

設計メモ:
- パスは追加時点の変換でデバイス座標へ写して保持する（Canvas 2D と同じ意味論）。
- 曲線は `engine.core.path` で折れ線化する。塗りは画素中心サンプリングのスキャンライン（numpy）、
  線は `ImageDraw.line` で 8bit マスクへ描いてから float 合成する。アンチエイリアスは行わない。
- 合成は非乗算 RGBA 上の Porter-Duff（source-over / destination-out / destination-in）。
- クリップは float のカバレッジ配列として状態に持ち、`clip()` ごとに積で交差する。
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, replace
from functools import lru_cache
from typing import TYPE_CHECKING, Sequence

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from common import settings as _settings
from util.color import RGBA, normalize_color

from . import affine_ops as aff
from .path import Path, cubic_points, ellipse_points, quadratic_points

if TYPE_CHECKING:
    from .canvas import Surface


COMPOSITE_OPERATIONS = ("source-over", "destination-out", "destination-in")
LINE_CAPS = ("butt", "round", "square")

_FONT_PX_RE = re.compile(r"(\d+(?:\.\d+)?)px")
_BASELINE_ANCHOR = {
    "top": "a",
    "hanging": "a",
    "middle": "m",
    "alphabetic": "s",
    "ideographic": "d",
    "bottom": "d",
}
_ALIGN_ANCHOR = {"start": "l", "left": "l", "center": "m", "right": "r", "end": "r"}


@dataclass(frozen=True)
class TextMetrics:
    width: float


@dataclass
class _State:
    """`save()`/`restore()` で退避される描画状態。"""

    matrix: np.ndarray
    fill_style: object = "#000000"
    fill_rgba: RGBA = (0.0, 0.0, 0.0, 1.0)
    stroke_style: object = "#000000"
    stroke_rgba: RGBA = (0.0, 0.0, 0.0, 1.0)
    line_width: float = 1.0
    line_cap: str = "butt"
    global_alpha: float = 1.0
    composite: str = "source-over"
    font: str = "10px sans-serif"
    font_size: float = 10.0
    text_baseline: str = "alphabetic"
    text_align: str = "start"
    # (H, W) float32。None はクリップなし。配列はその場で書き換えない。
    clip: np.ndarray | None = None

    def copy(self) -> "_State":
        return replace(self, matrix=self.matrix.copy())


@lru_cache(maxsize=32)
def _load_font(size_px: int, font_path: str | None) -> ImageFont.ImageFont | ImageFont.FreeTypeFont:
    if font_path:
        return ImageFont.truetype(font_path, size_px)
    return ImageFont.load_default(size=size_px)


class Context2D:
    """`Surface` に描く 2D コンテキスト（`Surface.get_context("2d")` から取得）。"""

    def __init__(self, surface: "Surface") -> None:
        self.canvas = surface
        self._state = _State(matrix=aff.identity())
        self._stack: list[_State] = []
        self._path = Path()

    def reset(self) -> None:
        """状態スタックとパスを初期化する（面のリサイズ時に呼ばれる）。"""
        self._state = _State(matrix=aff.identity())
        self._stack.clear()
        self._path = Path()

    # ------------------------------------------------------------------
    # 状態スタック
    # ------------------------------------------------------------------
    def save(self) -> None:
        self._stack.append(self._state.copy())

    def restore(self) -> None:
        # 対応する save が無い restore は無視（Canvas 2D と同じ）
        if self._stack:
            self._state = self._stack.pop()

    @property
    def save_depth(self) -> int:
        return len(self._stack)

    # ------------------------------------------------------------------
    # スタイル
    # ------------------------------------------------------------------
    @property
    def fill_style(self) -> object:
        return self._state.fill_style

    @fill_style.setter
    def fill_style(self, value: object) -> None:
        self._state.fill_rgba = normalize_color(value)
        self._state.fill_style = value

    @property
    def stroke_style(self) -> object:
        return self._state.stroke_style

    @stroke_style.setter
    def stroke_style(self, value: object) -> None:
        self._state.stroke_rgba = normalize_color(value)
        self._state.stroke_style = value

    @property
    def line_width(self) -> float:
        return self._state.line_width

    @line_width.setter
    def line_width(self, value: float) -> None:
        v = float(value)
        if v > 0 and math.isfinite(v):
            self._state.line_width = v

    @property
    def line_cap(self) -> str:
        return self._state.line_cap

    @line_cap.setter
    def line_cap(self, value: str) -> None:
        if value not in LINE_CAPS:
            raise ValueError(f"line_cap must be one of {LINE_CAPS}: got {value!r}")
        self._state.line_cap = value

    @property
    def global_alpha(self) -> float:
        return self._state.global_alpha

    @global_alpha.setter
    def global_alpha(self, value: float) -> None:
        v = float(value)
        if not math.isfinite(v):
            raise ValueError(f"global_alpha must be finite: got {value!r}")
        self._state.global_alpha = min(1.0, max(0.0, v))

    @property
    def global_composite_operation(self) -> str:
        return self._state.composite

    @global_composite_operation.setter
    def global_composite_operation(self, value: str) -> None:
        if value not in COMPOSITE_OPERATIONS:
            raise ValueError(
                f"unsupported composite operation: {value!r} (expected one of {COMPOSITE_OPERATIONS})"
            )
        self._state.composite = value

    @property
    def font(self) -> str:
        return self._state.font

    @font.setter
    def font(self, value: str) -> None:
        m = _FONT_PX_RE.search(value)
        if m is None:
            raise ValueError(f"font must specify a pixel size like '12px sans-serif': got {value!r}")
        self._state.font = value
        self._state.font_size = float(m.group(1))

    @property
    def text_baseline(self) -> str:
        return self._state.text_baseline

    @text_baseline.setter
    def text_baseline(self, value: str) -> None:
        if value not in _BASELINE_ANCHOR:
            raise ValueError(f"unsupported text_baseline: {value!r}")
        self._state.text_baseline = value

    @property
    def text_align(self) -> str:
        return self._state.text_align

    @text_align.setter
    def text_align(self, value: str) -> None:
        if value not in _ALIGN_ANCHOR:
            raise ValueError(f"unsupported text_align: {value!r}")
        self._state.text_align = value

    # ------------------------------------------------------------------
    # 変換
    # ------------------------------------------------------------------
    def translate(self, x: float, y: float) -> None:
        self._state.matrix = self._state.matrix @ aff.translation(x, y)

    def rotate(self, angle: float) -> None:
        self._state.matrix = self._state.matrix @ aff.rotation(angle)

    def scale(self, sx: float, sy: float) -> None:
        self._state.matrix = self._state.matrix @ aff.scaling(sx, sy)

    def transform(self, a: float, b: float, c: float, d: float, e: float, f: float) -> None:
        self._state.matrix = self._state.matrix @ aff.from_abcdef(a, b, c, d, e, f)

    def set_transform(self, a: float, b: float, c: float, d: float, e: float, f: float) -> None:
        self._state.matrix = aff.from_abcdef(a, b, c, d, e, f)

    def reset_transform(self) -> None:
        self._state.matrix = aff.identity()

    def get_transform(self) -> np.ndarray:
        return self._state.matrix.copy()

    # ------------------------------------------------------------------
    # パス構築
    # ------------------------------------------------------------------
    def _dev(self, x: float, y: float) -> tuple[float, float]:
        return aff.apply_point(self._state.matrix, x, y)

    def begin_path(self) -> None:
        self._path = Path()

    def move_to(self, x: float, y: float) -> None:
        self._path.move_to(*self._dev(x, y))

    def line_to(self, x: float, y: float) -> None:
        self._path.line_to(*self._dev(x, y))

    def close_path(self) -> None:
        self._path.close()

    def rect(self, x: float, y: float, w: float, h: float) -> None:
        self.move_to(x, y)
        self.line_to(x + w, y)
        self.line_to(x + w, y + h)
        self.line_to(x, y + h)
        self.close_path()

    def arc(
        self,
        x: float,
        y: float,
        radius: float,
        start_angle: float,
        end_angle: float,
        counterclockwise: bool = False,
    ) -> None:
        self.ellipse(x, y, radius, radius, 0.0, start_angle, end_angle, counterclockwise)

    def ellipse(
        self,
        x: float,
        y: float,
        radius_x: float,
        radius_y: float,
        rotation: float,
        start_angle: float,
        end_angle: float,
        counterclockwise: bool = False,
    ) -> None:
        if radius_x < 0 or radius_y < 0:
            raise ValueError(f"radius must be non-negative: got ({radius_x}, {radius_y})")
        m = self._state.matrix
        local = ellipse_points(
            x,
            y,
            radius_x,
            radius_y,
            rotation,
            start_angle,
            end_angle,
            counterclockwise,
            device_scale=aff.scale_factor(m),
        )
        self._path.extend(aff.apply(m, local), connect=True)

    def bezier_curve_to(
        self, cp1x: float, cp1y: float, cp2x: float, cp2y: float, x: float, y: float
    ) -> None:
        start = self._path.last_point()
        c1 = self._dev(cp1x, cp1y)
        if start is None:
            self._path.move_to(*c1)
            start = c1
        pts = cubic_points(start, c1, self._dev(cp2x, cp2y), self._dev(x, y))
        self._path.extend(np.vstack(([start], pts)), connect=True)

    def quadratic_curve_to(self, cpx: float, cpy: float, x: float, y: float) -> None:
        start = self._path.last_point()
        c = self._dev(cpx, cpy)
        if start is None:
            self._path.move_to(*c)
            start = c
        pts = quadratic_points(start, c, self._dev(x, y))
        self._path.extend(np.vstack(([start], pts)), connect=True)

    # ------------------------------------------------------------------
    # ラスタライズ
    # ------------------------------------------------------------------
    def _region(self, bounds: tuple[float, float, float, float] | None, pad: float = 0.0):
        """デバイス座標の bbox をキャンバス内の整数範囲へ丸める（空なら None）。"""
        if bounds is None:
            return None
        W, H = self.canvas.width, self.canvas.height
        x0 = max(0, int(math.floor(bounds[0] - pad)))
        y0 = max(0, int(math.floor(bounds[1] - pad)))
        x1 = min(W, int(math.ceil(bounds[2] + pad)) + 1)
        y1 = min(H, int(math.ceil(bounds[3] + pad)) + 1)
        if x1 <= x0 or y1 <= y0:
            return None
        return x0, y0, x1, y1

    def _fill_coverage(self, path: Path, region, fill_rule: str) -> np.ndarray:
        """画素中心 `(x + 0.5, y + 0.5)` が内側にある画素を 1 とするスキャンライン塗り。

        各行の中心線と辺の交点で巻き数の増減を差分配列へ積み、行方向の累積和で内外を決める。
        辺は半開区間 `[min_y, max_y)` で数えるため、隣接する矩形は重ならない。
        """
        x0, y0, x1, y1 = region
        w, h = x1 - x0, y1 - y0
        edges = []
        for sp in path.subpaths:
            if len(sp.points) < 3:
                continue
            pts = np.asarray(sp.points, dtype=np.float64)
            edges.append(np.concatenate([pts, np.roll(pts, -1, axis=0)], axis=1))
        if not edges:
            return np.zeros((h, w), dtype=np.float32)
        ax, ay, bx, by = np.concatenate(edges).T

        yc = (y0 + np.arange(h, dtype=np.float64) + 0.5)[:, None]
        up = (ay <= yc) & (yc < by)
        down = (by <= yc) & (yc < ay)
        rows, idx = np.nonzero(up | down)
        if rows.size == 0:
            return np.zeros((h, w), dtype=np.float32)

        dy = by - ay
        t = (yc[rows, 0] - ay[idx]) / dy[idx]
        xs = ax[idx] + t * (bx[idx] - ax[idx])
        # 中心が交点以上にある最初の列
        cols = np.clip(np.ceil(xs - 0.5 - x0), 0, w).astype(np.intp)
        winding = np.where(up[rows, idx], 1, -1).astype(np.int32)

        diff = np.zeros((h, w + 1), dtype=np.int32)
        np.add.at(diff, (rows, cols), winding)
        acc = np.cumsum(diff[:, :w], axis=1)
        inside = (acc % 2 != 0) if fill_rule == "evenodd" else (acc != 0)
        return inside.astype(np.float32)

    def _stroke_coverage(self, path: Path, region, width_px: float) -> np.ndarray:
        x0, y0, x1, y1 = region
        mask = Image.new("L", (x1 - x0, y1 - y0), 0)
        draw = ImageDraw.Draw(mask)
        w = max(1, int(round(width_px)))
        r = width_px / 2.0
        for sp in path.subpaths:
            pts = [(px - x0, py - y0) for px, py in sp.points]
            if sp.closed and len(pts) > 2:
                pts.append(pts[0])
            if len(pts) >= 2:
                draw.line(pts, fill=255, width=w, joint="curve")
            if self._state.line_cap == "round" and not sp.closed and pts:
                for px, py in (pts[0], pts[-1]):
                    draw.ellipse((px - r, py - r, px + r, py + r), fill=255)
        return (np.asarray(mask, dtype=np.uint8) > 0).astype(np.float32)

    def _composite(self, region, src_rgb, src_alpha: np.ndarray) -> None:
        """`region` に源色（一様色または画素ごと）をアルファ `src_alpha` で合成する。"""
        x0, y0, x1, y1 = region
        st = self._state
        a = src_alpha * np.float32(st.global_alpha)
        if st.clip is not None:
            a = a * st.clip[y0:y1, x0:x1]
        px = self.canvas.pixels

        if st.composite == "destination-in":
            # 源が無い場所も消えるため、クリップ内のキャンバス全域を対象にする
            full = np.zeros(px.shape[:2], dtype=np.float32)
            full[y0:y1, x0:x1] = a
            keep = full if st.clip is None else full + (1.0 - st.clip)
            px[..., 3] *= np.clip(keep, 0.0, 1.0)
            return

        dst = px[y0:y1, x0:x1]
        da = dst[..., 3]
        if st.composite == "destination-out":
            dst[..., 3] = da * (1.0 - a)
            return

        out_a = a + da * (1.0 - a)
        src = np.broadcast_to(np.asarray(src_rgb, dtype=np.float32), dst[..., :3].shape)
        num = src * a[..., None] + dst[..., :3] * (da * (1.0 - a))[..., None]
        with np.errstate(invalid="ignore", divide="ignore"):
            rgb = np.where(out_a[..., None] > 0, num / out_a[..., None], 0.0)
        dst[..., :3] = rgb
        dst[..., 3] = out_a

    def _paint(self, path: Path, rgba: RGBA, *, stroke: bool, fill_rule: str = "nonzero") -> None:
        width_px = self._state.line_width * aff.scale_factor(self._state.matrix) if stroke else 0.0
        region = self._region(path.bounds(), pad=width_px)
        if region is None:
            return
        if stroke:
            cov = self._stroke_coverage(path, region, width_px)
        else:
            cov = self._fill_coverage(path, region, fill_rule)
        self._composite(region, rgba[:3], cov * np.float32(rgba[3]))

    def fill(self, fill_rule: str = "nonzero") -> None:
        if fill_rule not in ("nonzero", "evenodd"):
            raise ValueError(f"fill_rule must be 'nonzero' or 'evenodd': got {fill_rule!r}")
        self._paint(self._path, self._state.fill_rgba, stroke=False, fill_rule=fill_rule)

    def stroke(self) -> None:
        self._paint(self._path, self._state.stroke_rgba, stroke=True)

    def _rect_path(self, x: float, y: float, w: float, h: float) -> Path:
        p = Path()
        p.move_to(*self._dev(x, y))
        p.line_to(*self._dev(x + w, y))
        p.line_to(*self._dev(x + w, y + h))
        p.line_to(*self._dev(x, y + h))
        p.close()
        return p

    def fill_rect(self, x: float, y: float, w: float, h: float) -> None:
        self._paint(self._rect_path(x, y, w, h), self._state.fill_rgba, stroke=False)

    def stroke_rect(self, x: float, y: float, w: float, h: float) -> None:
        self._paint(self._rect_path(x, y, w, h), self._state.stroke_rgba, stroke=True)

    def clear_rect(self, x: float, y: float, w: float, h: float) -> None:
        """矩形内を透明にする（global_alpha/合成モードは無視、クリップは有効）。"""
        path = self._rect_path(x, y, w, h)
        region = self._region(path.bounds())
        if region is None:
            return
        x0, y0, x1, y1 = region
        cov = self._fill_coverage(path, region, "nonzero")
        if self._state.clip is not None:
            cov = cov * self._state.clip[y0:y1, x0:x1]
        dst = self.canvas.pixels[y0:y1, x0:x1]
        dst[..., 3] *= 1.0 - cov
        dst[..., :3] *= (dst[..., 3] > 0)[..., None]

    def clip(self, fill_rule: str = "nonzero") -> None:
        """現在のパスで既存クリップを交差させる。"""
        W, H = self.canvas.width, self.canvas.height
        cov = np.zeros((H, W), dtype=np.float32)
        region = self._region(self._path.bounds())
        if region is not None:
            x0, y0, x1, y1 = region
            cov[y0:y1, x0:x1] = self._fill_coverage(self._path, region, fill_rule)
        self._state.clip = cov if self._state.clip is None else self._state.clip * cov

    # ------------------------------------------------------------------
    # 文字
    # ------------------------------------------------------------------
    def _font(self, scale: float = 1.0):
        size = max(1, int(round(self._state.font_size * scale)))
        return _load_font(size, _settings.get().TEXT_FONT)

    def measure_text(self, text: str) -> TextMetrics:
        font = self._font()
        return TextMetrics(width=float(font.getlength(text)))

    def fill_text(self, text: str, x: float, y: float) -> None:
        """文字を塗る。回転/せん断は無視し、平行移動と等方スケールのみ反映する。"""
        m = self._state.matrix
        font = self._font(aff.scale_factor(m))
        dx, dy = self._dev(x, y)
        anchor = _ALIGN_ANCHOR[self._state.text_align] + _BASELINE_ANCHOR[self._state.text_baseline]
        W, H = self.canvas.width, self.canvas.height
        mask = Image.new("L", (W, H), 0)
        ImageDraw.Draw(mask).text((dx, dy), text, fill=255, font=font, anchor=anchor)
        cov = np.asarray(mask, dtype=np.float32) / 255.0
        rgba = self._state.fill_rgba
        self._composite((0, 0, W, H), rgba[:3], cov * np.float32(rgba[3]))

    # ------------------------------------------------------------------
    # 画像合成
    # ------------------------------------------------------------------
    def draw_image(
        self,
        image: "Surface | Image.Image",
        dx: float = 0.0,
        dy: float = 0.0,
        dw: float | None = None,
        dh: float | None = None,
    ) -> None:
        """別の面（または Pillow 画像）を現在の変換・合成モードで描く。"""
        if isinstance(image, Image.Image):
            src = np.asarray(image.convert("RGBA"), dtype=np.float32) / 255.0
        else:
            src = image.pixels
        ih, iw = src.shape[:2]
        if iw == 0 or ih == 0:
            return
        sx = 1.0 if dw is None else dw / iw
        sy = 1.0 if dh is None else dh / ih
        m = self._state.matrix @ aff.translation(dx, dy) @ aff.scaling(sx, sy)

        W, H = self.canvas.width, self.canvas.height
        if aff.is_translation_only(m):
            ox, oy = int(round(m[0, 2])), int(round(m[1, 2]))
            region = (max(0, ox), max(0, oy), min(W, ox + iw), min(H, oy + ih))
            if region[2] <= region[0] or region[3] <= region[1]:
                return
            x0, y0, x1, y1 = region
            patch = src[y0 - oy : y1 - oy, x0 - ox : x1 - ox].copy()
            self._composite(region, patch[..., :3], patch[..., 3])
            return

        warped = _warp(src, m, (W, H))
        self._composite((0, 0, W, H), warped[..., :3], warped[..., 3])


def _warp(src: np.ndarray, m: np.ndarray, size: tuple[int, int]) -> np.ndarray:
    """乗算済みに直してから各チャンネルを Pillow の AFFINE で写像する。"""
    inv = np.linalg.inv(m)
    data = (inv[0, 0], inv[0, 1], inv[0, 2], inv[1, 0], inv[1, 1], inv[1, 2])
    alpha = src[..., 3]
    planes: Sequence[np.ndarray] = (
        src[..., 0] * alpha,
        src[..., 1] * alpha,
        src[..., 2] * alpha,
        alpha,
    )
    out = []
    for plane in planes:
        img = Image.fromarray(np.ascontiguousarray(plane, dtype=np.float32))
        warped = img.transform(size, Image.Transform.AFFINE, data, resample=Image.Resampling.BILINEAR)
        out.append(np.asarray(warped, dtype=np.float32))
    res = np.stack(out, axis=-1)
    a = res[..., 3]
    with np.errstate(invalid="ignore", divide="ignore"):
        res[..., :3] = np.where(a[..., None] > 0, res[..., :3] / a[..., None], 0.0)
    return np.clip(res, 0.0, 1.0)


__all__ = ["COMPOSITE_OPERATIONS", "Context2D", "TextMetrics"]
