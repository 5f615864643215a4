"""
どこで: `api.cli`（コマンドライン入口）。
何を: `python -m api.cli <sketch> --seed N --out file.png` でスケッチを描いて PNG 保存、`--list` で一覧表示。
なぜ: シードを指定して同じ作品を再生成したり、一覧から試したりを 1 コマンドで行えるようにするため。

使用例:
    python -m api.cli --list
    python -m api.cli rings --seed 1234 --out out/rings.png
    python -m api.cli masked_dots --width 4 --height 4 --dpi 100 --no-text
    python -m api.cli noise_lines --preview
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from common.logging import setup_default_logging
from engine.errors import DrawableError

from .registry import list_sketches

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="sketchbook", description="Render a seeded generative sketch to PNG.")
    p.add_argument("sketch", nargs="?", help="registered sketch name")
    p.add_argument("--list", action="store_true", help="list registered sketches and exit")
    p.add_argument("--seed", type=int, default=None, help="seed to reproduce a drawing")
    p.add_argument("--out", default=None, help="output PNG path (default: <output_dir>/<sketch>_<seed>.png)")
    p.add_argument("--width", type=float, default=None, help="width in inches")
    p.add_argument("--height", type=float, default=None, help="height in inches")
    p.add_argument("--dpi", type=float, default=None, help="pixels per inch")
    p.add_argument("--border", type=float, default=None, help="border as a fraction of the width")
    p.add_argument("--palettes", default=None, help="palette JSON file (default: bundled palettes)")
    p.add_argument("--neutral", action="store_true", help="use the first (neutral) palette")
    p.add_argument("--no-text", action="store_true", help="do not draw the seed caption")
    p.add_argument("--preview", action="store_true", help="draw in a pyglet window instead of saving")
    p.add_argument("--fps", type=int, default=None, help="preview frame rate")
    p.add_argument("--log-level", default=None, help="logging level (default: SKB_LOG_LEVEL or INFO)")
    return p


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_default_logging(args.log_level)

    if args.list:
        for name in list_sketches():
            print(name)
        return 0
    if not args.sketch:
        parser.error("a sketch name is required (see --list)")

    kwargs = dict(
        width=args.width,
        height=args.height,
        dpi=args.dpi,
        border=args.border,
        neutral=args.neutral,
        show_text=False if args.no_text else None,
        palettes=args.palettes,
    )
    try:
        if args.preview:
            from .preview import preview

            preview(args.sketch, args.seed, fps=args.fps, **kwargs)
            return 0

        from .render import render

        result = render(args.sketch, args.seed, out=args.out, save=True, **kwargs)
    except KeyError as e:
        print(e.args[0] if e.args else str(e), file=sys.stderr)
        return 2
    except (DrawableError, ValueError) as e:
        logger.error("%s: %s", args.sketch, e)
        return 1

    print(result.path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
