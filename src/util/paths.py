"""
どこで: `util.paths`。
何を: PNG 出力先ディレクトリの生成と既定ファイル名の解決ユーティリティを提供する。
なぜ: CLI から簡潔に保存先を扱え、並行呼び出しでも安全に作成できるようにするため。
"""

from __future__ import annotations

from pathlib import Path

from .utils import _find_project_root, load_config


def ensure_output_dir(path: str | Path | None = None) -> Path:
    """PNG 出力先を作成して返す。

    - `path` 指定時はそれを、未指定時は構成 `output_dir`、それも無ければ
      プロジェクトルート直下の `output/` を使う。
    - 並行呼び出しに対して `exist_ok=True` で安全。
    """
    if path is None:
        raw = load_config().get("output_dir")
        if isinstance(raw, str) and raw.strip():
            out = Path(raw).expanduser()
        else:
            out = _find_project_root(Path(__file__).parent) / "output"
    else:
        out = Path(path).expanduser()
    out.mkdir(parents=True, exist_ok=True)
    return out


def default_png_name(sketch: str, seed: int) -> str:
    """`{sketch}_{seed}.png` 形式の既定ファイル名を返す。"""
    return f"{sketch}_{int(seed)}.png"


__all__ = ["default_png_name", "ensure_output_dir"]
