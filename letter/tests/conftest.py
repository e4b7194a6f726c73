"""Shared fixtures for the letter feature tests."""
from __future__ import annotations

import io
from pathlib import Path

import pytest
from PIL import Image

from core.config.config_service import DEFAULTS_INI, ConfigService
from letter.logic.letter_service import LetterService
from letter.models.gesture import ScreenRect
from letter.models.overlay_geometry import OverlayGeometry, OverlayImage


def make_png(size=(300, 100), color=(0, 0, 0, 255)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGBA", size, color).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def png_bytes() -> bytes:
    return make_png()


@pytest.fixture
def overlay_image() -> OverlayImage:
    # aspect 1/3: width 150 → height 50
    return OverlayImage(image=Image.new("RGBA", (300, 100), (0, 0, 0, 255)), name="sig.png")


@pytest.fixture
def geometry(overlay_image) -> OverlayGeometry:
    return OverlayGeometry(image=overlay_image, x=400, y=700, width=150, rotation=0)


@pytest.fixture
def config(tmp_path: Path) -> ConfigService:
    return ConfigService(
        defaults_ini=DEFAULTS_INI,
        user_ini=tmp_path / "no-user-config.ini",
        environ={"LETTERPAD_EXPORT__OUTPUT_DIR": str(tmp_path / "out")},
    )


class RecordingAudit:
    def __init__(self) -> None:
        self.events = []

    def log(self, feature, event, *, level="INFO", reference_id=None, message=None):
        self.events.append((feature, event, level))


@pytest.fixture
def audit() -> RecordingAudit:
    return RecordingAudit()


@pytest.fixture
def notices() -> list:
    return []


@pytest.fixture
def service(config, audit, notices) -> LetterService:
    return LetterService(config, language="en", audit=audit, notify_failure=notices.append)


class FakeBinder:
    """Stands in for the Tk global listeners."""

    def __init__(self) -> None:
        self.installed = 0
        self.removed = 0
        self.on_move = None
        self.on_release = None

    @property
    def active(self) -> bool:
        return self.installed > self.removed

    def install(self, on_move, on_release):
        self.installed += 1
        self.on_move, self.on_release = on_move, on_release

        def uninstall():
            self.removed += 1
            self.on_move = self.on_release = None

        return uninstall

    def move(self, sx, sy):
        self.on_move(sx, sy)

    def release(self, sx, sy):
        self.on_release(sx, sy)


@pytest.fixture
def binder() -> FakeBinder:
    return FakeBinder()


def page_rect(scale: float, left: float = 10.0, top: float = 20.0) -> ScreenRect:
    return ScreenRect(left, top, 794 * scale, 1123 * scale)
