"""Live display scale factor and screen ↔ canonical conversion."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from ..models.gesture import ScreenRect
from ..models.page import CanonicalPage

MOBILE_BREAKPOINT = 640
TABLET_BREAKPOINT = 1024
MOBILE_REFERENCE_WIDTH = 850.0
TABLET_SCALE = 0.6
DESKTOP_SCALE = 0.7


def preview_scale_for_viewport(viewport_width: float) -> float:
    """Display scale for a viewport ``viewport_width`` screen pixels wide."""
    if viewport_width < MOBILE_BREAKPOINT:
        return max(0.05, viewport_width / MOBILE_REFERENCE_WIDTH)
    if viewport_width < TABLET_BREAKPOINT:
        return TABLET_SCALE
    return DESKTOP_SCALE


@dataclass(frozen=True)
class ScaledBox:
    """Footprint of the scaled page inside the surrounding layout."""
    width: float
    height: float
    # negative margin that gives back the space the unscaled box would take
    bottom_compensation: float


def scaled_box(page: CanonicalPage, scale: float) -> ScaledBox:
    return ScaledBox(
        width=page.width * scale,
        height=page.height * scale,
        bottom_compensation=-(page.height - page.height * scale),
    )


@dataclass(frozen=True)
class DisplayTransform:
    """Maps canonical units to screen pixels: ``screen = origin + canonical * scale``."""
    scale: float
    origin_x: float = 0.0
    origin_y: float = 0.0

    @classmethod
    def from_rect(cls, rect: ScreenRect, scale: float) -> "DisplayTransform":
        return cls(scale=scale, origin_x=rect.left, origin_y=rect.top)

    def to_screen(self, x: float, y: float) -> Tuple[float, float]:
        return self.origin_x + x * self.scale, self.origin_y + y * self.scale

    def to_canonical(self, sx: float, sy: float) -> Tuple[float, float]:
        return (sx - self.origin_x) / self.scale, (sy - self.origin_y) / self.scale

    def length_to_canonical(self, d: float) -> float:
        return d / self.scale
