"""
core/tests/test_config_service.py

Layering and typing of the ConfigService.
"""

from __future__ import annotations

from pathlib import Path

from core.config.config_service import DEFAULTS_INI, ConfigService


def _service(tmp_path: Path, *, environ=None, user_ini: str | None = None, defaults=DEFAULTS_INI) -> ConfigService:
    user = tmp_path / "config.ini"
    if user_ini is not None:
        user.write_text(user_ini, encoding="utf-8")
    return ConfigService(defaults_ini=defaults, user_ini=user, environ=environ or {})


def test_defaults_are_typed(tmp_path):
    cfg = _service(tmp_path)
    assert (cfg.page.width, cfg.page.height, cfg.page.padding) == (794.0, 1123.0, 60.0)
    assert cfg.overlay.min_width == 50.0
    assert cfg.export.jpeg_quality == 95
    assert isinstance(cfg.export.jpeg_quality, int)
    assert isinstance(cfg.export.output_dir, Path)
    assert cfg.general.language == "en"


def test_embedded_defaults_without_ini(tmp_path):
    cfg = _service(tmp_path, defaults=tmp_path / "missing.ini")
    assert cfg.overlay.default_width == 150.0
    assert cfg.meta_source("Overlay", "default_width")["layer"] == "code"


def test_defaults_ini_layer_is_recorded(tmp_path):
    cfg = _service(tmp_path)
    assert cfg.meta_source("Page", "width")["layer"] == "defaults.ini"


def test_environment_overrides_defaults(tmp_path):
    cfg = _service(tmp_path, environ={
        "LETTERPAD_EXPORT__JPEG_QUALITY": "80",
        "LETTERPAD_GENERAL__LANGUAGE": "zh-TW",
        "LETTERPAD_NOSECTION": "ignored",
        "OTHER_EXPORT__JPEG_QUALITY": "10",
    })
    assert cfg.export.jpeg_quality == 80
    assert cfg.general.language == "zh-TW"
    assert cfg.meta_source("Export", "jpeg_quality") == {"layer": "env", "source": "os.environ"}


def test_user_ini_wins_over_environment(tmp_path):
    cfg = _service(
        tmp_path,
        environ={"LETTERPAD_EXPORT__JPEG_QUALITY": "80"},
        user_ini="[Export]\njpeg_quality = 70\npage_format = LETTER\n",
    )
    assert cfg.export.jpeg_quality == 70
    assert cfg.export.page_format == "LETTER"
    assert cfg.meta_source("Export", "jpeg_quality")["layer"] == "user"


def test_get_with_cast(tmp_path):
    cfg = _service(tmp_path)
    assert cfg.get("Overlay", "min_width", cast=float) == 50.0
    assert cfg.get("Export", "supersample", cast=int) == 2
    assert cfg.get("Export", "nope") is None


def test_reload_picks_up_changes(tmp_path):
    cfg = _service(tmp_path, user_ini="[Page]\npadding = 40\n")
    assert cfg.page.padding == 40.0
    (tmp_path / "config.ini").write_text("[Page]\npadding = 72\n", encoding="utf-8")
    cfg.reload()
    assert cfg.page.padding == 72.0
