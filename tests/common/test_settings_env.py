from __future__ import annotations

import logging

import pytest

from common import settings
from common.env import env_bool, env_float, env_int, env_str
from common.logging import resolve_level, setup_default_logging


def test_env_helpers(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SKB_T_INT", "5")
    monkeypatch.setenv("SKB_T_BAD", "x")
    monkeypatch.setenv("SKB_T_BOOL", "yes")
    monkeypatch.setenv("SKB_T_EMPTY", "   ")
    assert env_int("SKB_T_INT", 1) == 5
    assert env_int("SKB_T_INT", 1, min_value=10) == 10
    assert env_int("SKB_T_BAD", 1) == 1
    assert env_float("SKB_T_INT") == 5.0
    assert env_bool("SKB_T_BOOL") is True
    assert env_bool("SKB_T_BAD", True) is True
    assert env_str("SKB_T_EMPTY", "d") == "d"
    assert env_int("SKB_T_MISSING") is None


def test_settings_reload(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SKB_DEFAULT_DPI", "72")
    monkeypatch.setenv("SKB_SHOW_TEXT", "0")
    monkeypatch.setenv("SKB_YIELD_BETWEEN_TICKS", "1")
    try:
        settings.reload_from_env()
        s = settings.get()
        assert s.DEFAULT_DPI == 72
        assert s.SHOW_TEXT is False
        assert s.YIELD_BETWEEN_TICKS is True
    finally:
        monkeypatch.undo()
        settings.reload_from_env()
    assert settings.get().DEFAULT_DPI == 220
    assert settings.get().SHOW_TEXT is True


def test_resolve_level(monkeypatch: pytest.MonkeyPatch) -> None:
    assert resolve_level("debug") == logging.DEBUG
    assert resolve_level(logging.WARNING) == logging.WARNING
    assert resolve_level("nonsense") == logging.INFO
    monkeypatch.setenv("SKB_LOG_LEVEL", "ERROR")
    assert resolve_level(None) == logging.ERROR


def test_setup_default_logging_respects_existing_handlers() -> None:
    root = logging.getLogger()
    handler = logging.NullHandler()
    root.addHandler(handler)
    try:
        before = list(root.handlers)
        setup_default_logging("DEBUG")
        assert root.handlers == before
    finally:
        root.removeHandler(handler)
