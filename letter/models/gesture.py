from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class GestureMode(str, Enum):
    MOVE = "move"
    RESIZE = "resize"
    ROTATE = "rotate"


@dataclass(frozen=True)
class ScreenRect:
    """On-screen rectangle of the scaled page, in screen pixels."""
    left: float
    top: float
    width: float
    height: float

    @property
    def measurable(self) -> bool:
        return self.width > 0 and self.height > 0


@dataclass(frozen=True)
class HandleSpec:
    """
    Handle placement. Radii/offsets are screen pixels at the handle's
    on-screen size; the rotate handle sits ``rotate_offset`` canonical units
    above the overlay's top edge.
    """
    radius_px: float = 9.0
    rotate_offset: float = 28.0

    @classmethod
    def from_config(cls, cfg) -> "HandleSpec":
        return cls(radius_px=float(cfg.handle_radius_px), rotate_offset=float(cfg.rotate_handle_offset))
