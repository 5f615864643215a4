"""
どこで: `engine.export` サブパッケージ。
何を: 描画結果の書き出し（PNG）。
"""

from .image import save_png

__all__ = ["save_png"]
