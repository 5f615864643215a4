"""
どこで: `engine.export.image`。
何を: 描画済み `Surface` を PNG として保存するラッパ（Pillow）。
なぜ: CLI/レンダ API が「保存先の解決 → 衝突回避 → 書き出し」を同じ手順で行えるようにするため。
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from util.paths import default_png_name, ensure_output_dir

if TYPE_CHECKING:
    from engine.core.canvas import Surface

logger = logging.getLogger(__name__)


def save_png(
    surface: "Surface",
    path: Path | str | None = None,
    *,
    sketch: str = "sketch",
    seed: int = 0,
    overwrite: bool = True,
) -> Path:
    """面の内容を PNG として保存する。

    Parameters
    ----------
    surface : Surface
        保存対象。
    path : Path | str | None
        出力先パス。None の場合は出力ディレクトリに `{sketch}_{seed}.png` で保存。
    sketch, seed :
        既定ファイル名に使う値。
    overwrite : bool, default True
        False なら既存ファイルと衝突しないよう連番を付ける。

    Returns
    -------
    Path
        保存先のファイルパス。
    """
    if path is None:
        out = ensure_output_dir() / default_png_name(sketch, seed)
    else:
        out = Path(path).expanduser()
        out.parent.mkdir(parents=True, exist_ok=True)
    if out.suffix.lower() != ".png":
        raise ValueError(f"output path must end with .png: {out}")
    if not overwrite:
        out = _unique_path(out)

    try:
        surface.to_image().save(out, format="PNG")
    except OSError as e:
        raise RuntimeError(f"PNG 書き出しに失敗: {e}") from e
    logger.info("saved %s (%dx%d)", out, surface.width, surface.height)
    return out


def _unique_path(path: Path) -> Path:
    if not path.exists():
        return path
    stem, suffix = path.stem, path.suffix
    i = 1
    while True:
        candidate = path.with_name(f"{stem}-{i}{suffix}")
        if not candidate.exists():
            return candidate
        i += 1


__all__ = ["save_png"]
