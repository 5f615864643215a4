"""
どこで: `engine.runtime` の描画キュー。
何を: `(action, colour)` の厳密な FIFO `DrawQueue` と、その要素 `QueueEntry`。
なぜ: 積んだ順（画家のアルゴリズム順）を崩さずに 1 件ずつ取り出す契約を型として固定するため。
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Any, Iterator

from common.types import Colour
from engine.errors import QueueError

DEFAULT_COLOUR: Colour = "#ffffff"


@dataclass(slots=True, frozen=True)
class QueueEntry:
    """キューの 1 要素。`action` は `draw(ctx, colour, surfaces)` を持つことが期待される。"""

    action: Any
    colour: Colour = DEFAULT_COLOUR


class DrawQueue:
    """末尾追加・先頭取り出しのみの FIFO（並べ替え/重複排除なし）。"""

    def __init__(self) -> None:
        self._entries: deque[QueueEntry] = deque()

    def enqueue(self, action: Any, colour: Colour = DEFAULT_COLOUR) -> QueueEntry:
        """末尾へ追加する。`action` が None なら `QueueError`（キューは変更しない）。"""
        if action is None:
            raise QueueError("cannot enqueue a missing action (got None)")
        entry = QueueEntry(action, colour)
        self._entries.append(entry)
        return entry

    def shift(self) -> QueueEntry | None:
        """先頭を取り除いて返す。空なら None。"""
        if not self._entries:
            return None
        return self._entries.popleft()

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)

    def __iter__(self) -> Iterator[QueueEntry]:
        return iter(tuple(self._entries))


__all__ = ["DEFAULT_COLOUR", "DrawQueue", "QueueEntry"]
