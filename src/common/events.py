"""
どこで: `common.events`。
何を: 名前付きイベントの購読/発火（on/once/off/emit/remove_all_listeners）を提供する。
なぜ: Drawable の完了通知（"completed"）を、ホスト種別に依存しない形で呼び出し側へ届けるため。

購読コールバックは `emit()` を呼んだスレッド上で同期的に呼ばれる。
"""

from __future__ import annotations

import threading
from collections import defaultdict
from typing import Any, Callable

Listener = Callable[..., Any]


class EventEmitter:
    """最小の publish/subscribe。

    Notes
    -----
    コールバック内で例外が起きた場合は握り潰さずに `emit()` の呼び出し元へ伝播する。
    """

    def __init__(self) -> None:
        self._subscribers: dict[str, list[Listener]] = defaultdict(list)
        self._lock = threading.Lock()

    def on(self, event_name: str, callback: Listener) -> Listener:
        """イベントを購読する（同一コールバックの重複登録は無視）。"""
        with self._lock:
            if callback not in self._subscribers[event_name]:
                self._subscribers[event_name].append(callback)
        return callback

    def once(self, event_name: str, callback: Listener) -> Listener:
        """1 度だけ呼ばれる購読を登録し、解除用のラッパを返す。"""

        def _wrapper(*args: Any, **kwargs: Any) -> Any:
            self.off(event_name, _wrapper)
            return callback(*args, **kwargs)

        return self.on(event_name, _wrapper)

    def off(self, event_name: str, callback: Listener) -> None:
        """購読を解除する（未登録なら何もしない）。"""
        with self._lock:
            try:
                self._subscribers[event_name].remove(callback)
            except ValueError:
                pass

    def emit(self, event_name: str, *args: Any, **kwargs: Any) -> int:
        """イベントを発火し、呼び出したコールバック数を返す。"""
        with self._lock:
            callbacks = list(self._subscribers[event_name])
        for callback in callbacks:
            callback(*args, **kwargs)
        return len(callbacks)

    def listener_count(self, event_name: str) -> int:
        with self._lock:
            return len(self._subscribers.get(event_name, ()))

    def remove_all_listeners(self, event_name: str | None = None) -> None:
        """購読をすべて（または指定イベントのみ）削除する。"""
        with self._lock:
            if event_name is None:
                self._subscribers.clear()
            else:
                self._subscribers.pop(event_name, None)


__all__ = ["EventEmitter", "Listener"]
