"""
どこで: `common.base_registry`。
何を: 名前 → クラスの登録表（スケッチ Drawable の登録に使う）。
なぜ: CLI/プレビュー/レンダ API が同一の名前解決規則を共有するため。
"""

import re
from abc import ABC
from typing import Any, Callable


class BaseRegistry(ABC):
    """レジストリの基底クラス。

    - 文字列キーは正規化されます（大文字小文字・キャメル→スネークを吸収）。
    - デコレータは名前省略可。省略時はクラス名から自動推論します。
    """

    def __init__(self):
        self._registry: dict[str, Any] = {}

    # === 内部ユーティリティ ===
    @staticmethod
    def _camel_to_snake(name: str) -> str:
        s1 = re.sub(r"(.)([A-Z][a-z]+)", r"\1_\2", name)
        s2 = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", s1)
        return s2.lower()

    @classmethod
    def _normalize_key(cls, name: str) -> str:
        """レジストリキーの正規化（例: "MaskedDots" -> "masked_dots"）。"""
        if not isinstance(name, str):
            raise TypeError("レジストリキーは str である必要があります")
        if not name:
            raise ValueError("レジストリキーは空であってはなりません")
        name = name.replace("-", "_")
        # 大文字を含む場合のみキャメル→スネーク変換
        return cls._camel_to_snake(name) if any(c.isupper() for c in name) else name.lower()

    def register(self, name: str | None = None) -> Callable:
        """クラスをレジストリに登録するデコレータ。"""

        def decorator(obj: Any) -> Any:
            key = self._normalize_key(name) if name else self._normalize_key(obj.__name__)
            if key in self._registry and self._registry[key] is not obj:
                raise ValueError(f"'{key}' は既に登録されています")
            self._registry[key] = obj
            return obj

        return decorator

    def get(self, name: str) -> Any:
        """登録されたクラスを取得。"""
        key = self._normalize_key(name)
        if key not in self._registry:
            raise KeyError(f"'{name}' は登録されていません")
        return self._registry[key]

    def list_all(self) -> list[str]:
        """登録されているすべての名前を登録順で取得。"""
        return list(self._registry.keys())

    def is_registered(self, name: str) -> bool:
        """指定された名前が登録されているかチェック"""
        return self._normalize_key(name) in self._registry

    def unregister(self, name: str) -> None:
        """レジストリから削除（名前が存在しない場合は無視）。"""
        key = self._normalize_key(name)
        if key in self._registry:
            del self._registry[key]

    def clear(self) -> None:
        """レジストリをクリア"""
        self._registry.clear()

    @property
    def registry(self) -> dict[str, Any]:
        """レジストリの読み取り専用アクセス"""
        return self._registry.copy()
