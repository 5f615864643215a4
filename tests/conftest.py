"""共通フィクスチャ。

- 小さなパレット集合
- 呼び出しを記録するキャンバス（RecordingSurface）
- 記録用アクションを積んだ Drawable を作るファクトリ
"""

from __future__ import annotations

from typing import Any, Callable

import pytest

from engine.drawable import Drawable, SizeSpec
from engine.runtime.host import InlineHost
from palette import PaletteSet
from tests._utils.recording import RecordingAction, RecordingSurface


class QueueSketch(Drawable):
    """`draw()` で渡されたアクション列をそのまま積むだけの Drawable。"""

    def __init__(self, actions: list[Any] | None = None, **kwargs: Any) -> None:
        kwargs.setdefault("name", "queue_sketch")
        super().__init__(**kwargs)
        self.actions = list(actions or [])

    def draw(self, seed: int | None = None, **options: Any) -> None:
        if seed is not None:
            self.set_seed(seed)
        self.init(options.get("size"), neutral=bool(options.get("neutral", False)))
        for action in self.actions:
            self.enqueue(action, options.get("colour", "#ffffff"))
        self.execute()


@pytest.fixture()
def palettes() -> PaletteSet:
    return PaletteSet.from_lists(
        [
            [(0, 0, 0), (0, 0, 100)],
            [(200, 50, 50), (200, 50, 90), (0, 0, 0)],
            [(47, 6, 100), (10, 80, 70), (120, 40, 40)],
        ]
    )


@pytest.fixture()
def recording_surface() -> RecordingSurface:
    return RecordingSurface()


@pytest.fixture()
def size_100() -> SizeSpec:
    """100 x 100 px（1 単位 = 1 px）。"""
    return SizeSpec(width=100, height=100, dpi=1)


@pytest.fixture()
def make_sketch(palettes: PaletteSet) -> Callable[..., QueueSketch]:
    """`make_sketch(n, log=..., **kwargs)` で記録用アクション n 件を持つ Drawable を作る。"""

    def _make(n: int = 0, log: list | None = None, **kwargs: Any) -> QueueSketch:
        log = [] if log is None else log
        kwargs.setdefault("canvas", RecordingSurface())
        kwargs.setdefault("palettes", palettes)
        kwargs.setdefault("show_text", False)
        kwargs.setdefault("host", InlineHost())
        actions = [RecordingAction(f"a{i}", log) for i in range(n)]
        return QueueSketch(actions, **kwargs)

    return _make
