"""
どこで: `common.settings`
何を: プロジェクトの環境変数を型付きで一元管理し、起動時に読み込む。
なぜ: `os.getenv` の散在を解消し、既定値/型の一貫性とテスト容易性を高めるため。
"""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_bool, env_float, env_int, env_str


@dataclass
class _Settings:
    # サイズ既定（論理単位 = インチ）
    DEFAULT_WIDTH: float = 6.5
    DEFAULT_HEIGHT: float = 6.5
    DEFAULT_DPI: int = 220

    # 実行
    SHOW_TEXT: bool = True
    YIELD_BETWEEN_TICKS: bool = False

    # キャプション
    TEXT_FONT: str | None = None


_settings = _Settings()


def reload_from_env() -> None:
    """環境変数から設定を再読込。

    - bool は `env_bool`、int は `env_int`、float は `env_float` を使用。
    - 数値は下限丸めを適用する。
    """
    _settings.DEFAULT_WIDTH = env_float("SKB_DEFAULT_WIDTH", 6.5, min_value=0.01) or 6.5
    _settings.DEFAULT_HEIGHT = env_float("SKB_DEFAULT_HEIGHT", 6.5, min_value=0.01) or 6.5
    _settings.DEFAULT_DPI = env_int("SKB_DEFAULT_DPI", 220, min_value=1) or 220

    _settings.SHOW_TEXT = env_bool("SKB_SHOW_TEXT", True)
    _settings.YIELD_BETWEEN_TICKS = env_bool("SKB_YIELD_BETWEEN_TICKS", False)

    _settings.TEXT_FONT = env_str("SKB_TEXT_FONT", None)


def get() -> _Settings:
    """現在の設定スナップショットを返す。"""
    return _settings


# 初期ロード
reload_from_env()


__all__ = ["get", "reload_from_env", "_Settings"]
