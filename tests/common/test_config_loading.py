from __future__ import annotations

from pathlib import Path

from util.paths import default_png_name, ensure_output_dir
from util.utils import config_float, config_section, load_config


def _write(root: Path, rel: str, text: str) -> None:
    p = root / rel
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(text, encoding="utf-8")


def test_root_config_overrides_default(tmp_path: Path) -> None:
    _write(tmp_path, "configs/default.yaml", "size:\n  dpi: 100\noutput_dir: out\n")
    _write(tmp_path, "config.yaml", "size:\n  width: 3\n")
    cfg = load_config(tmp_path)
    # トップレベル単位の上書き
    assert cfg["size"] == {"width": 3}
    assert cfg["output_dir"] == "out"


def test_malformed_or_missing_config_is_empty(tmp_path: Path) -> None:
    assert load_config(tmp_path) == {}
    _write(tmp_path, "configs/default.yaml", "size: [unclosed\n")
    assert load_config(tmp_path) == {}
    _write(tmp_path, "configs/default.yaml", "- just\n- a list\n")
    assert load_config(tmp_path) == {}


def test_section_and_float_helpers() -> None:
    cfg = {"size": {"dpi": "150", "width": "wide"}, "preview": 3}
    sec = config_section(cfg, "size")
    assert config_float(sec, "dpi", None) == 150.0
    assert config_float(sec, "width", 6.5) == 6.5
    assert config_float(sec, "height", None) is None
    assert config_section(cfg, "preview") == {}


def test_repository_default_config_is_loadable() -> None:
    cfg = load_config()
    assert config_float(config_section(cfg, "size"), "dpi", None) == 220.0


def test_output_dir_helpers(tmp_path: Path) -> None:
    out = ensure_output_dir(tmp_path / "a" / "b")
    assert out.is_dir()
    assert default_png_name("rings", 42) == "rings_42.png"
