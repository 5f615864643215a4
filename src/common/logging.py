"""
どこで: `common.logging`。
何を: CLI/プレビュー起動時に 1 度だけ適用する最小ロギング設定を提供する。
なぜ: ライブラリ側は `logging.getLogger(__name__)` だけを使い、ハンドラ構成はアプリ入口に寄せるため。

要点:
- 各モジュールは `logger = logging.getLogger(__name__)` でロガーを取得する。
- ルートロガーにハンドラが無い場合のみ `basicConfig` を適用する（既存設定は尊重）。
- レベル未指定時は環境変数 `SKB_LOG_LEVEL`（既定 INFO）を使う。
"""

from __future__ import annotations

import logging

from .env import env_str

DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def resolve_level(level: int | str | None) -> int:
    """レベル指定（名前/数値/None）を logging の整数レベルへ解決する。"""
    if level is None:
        level = env_str("SKB_LOG_LEVEL", "INFO") or "INFO"
    if isinstance(level, str):
        return getattr(logging, level.strip().upper(), logging.INFO)
    return int(level)


def setup_default_logging(level: int | str | None = None, *, fmt: str = DEFAULT_FORMAT) -> None:
    """最小限のロギング設定を 1 度だけ適用する。

    - ルートロガーにハンドラが既にあれば何もしない（no-op）
    - 上位のランナー/CLI から呼び出す想定
    """
    root = logging.getLogger()
    if root.handlers:
        # アプリ側で設定済み
        return
    logging.basicConfig(level=resolve_level(level), format=fmt)


__all__ = ["DEFAULT_FORMAT", "resolve_level", "setup_default_logging"]
