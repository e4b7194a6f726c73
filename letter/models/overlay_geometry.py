from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from typing import Optional, Tuple

from PIL import Image

MIN_WIDTH = 50.0
DEFAULT_WIDTH = 150.0
DEFAULT_X = 400.0
DEFAULT_Y = 700.0
SIZE_STEP = 10.0
ROTATION_STEP = 90.0


@dataclass(frozen=True, eq=False)
class OverlayImage:
    """
    Decoded signature/stamp image.

    ``image`` is always RGBA; ``source`` keeps the uploaded bytes so the same
    overlay can be handed to another surface without re-encoding.
    """
    image: Image.Image
    source: bytes = field(repr=False, default=b"")
    name: str = ""

    @property
    def intrinsic_size(self) -> Tuple[int, int]:
        return self.image.size

    @property
    def aspect(self) -> float:
        """Height / width of the intrinsic image."""
        w, h = self.image.size
        return h / w if w > 0 else 1.0


@dataclass(frozen=True)
class OverlayLimits:
    """Constants the geometry invariants are enforced with."""
    min_width: float = MIN_WIDTH
    default_width: float = DEFAULT_WIDTH
    size_step: float = SIZE_STEP
    rotation_step: float = ROTATION_STEP

    @classmethod
    def from_config(cls, cfg) -> "OverlayLimits":
        return cls(
            min_width=float(cfg.min_width),
            default_width=float(cfg.default_width),
            size_step=float(cfg.size_step),
            rotation_step=float(cfg.rotation_step),
        )


DEFAULT_LIMITS = OverlayLimits()


@dataclass(frozen=True)
class OverlayGeometry:
    """
    Position, size and rotation of the signature overlay in canonical units.

    Every change returns a new value. ``height`` is derived from the image's
    aspect ratio and never stored; ``rotation`` is in degrees, clockwise,
    unbounded. ``image is None`` means nothing is rendered and gestures are
    ignored.
    """
    image: Optional[OverlayImage] = None
    x: float = DEFAULT_X
    y: float = DEFAULT_Y
    width: float = DEFAULT_WIDTH
    rotation: float = 0.0

    # ---------------- derived
    @property
    def active(self) -> bool:
        return self.image is not None

    @property
    def height(self) -> float:
        return self.width * (self.image.aspect if self.image else 1.0)

    @property
    def center(self) -> Tuple[float, float]:
        return self.x + self.width / 2.0, self.y + self.height / 2.0

    @property
    def display_rotation(self) -> float:
        """Rotation folded into [0, 360) for labels; stored value stays unbounded."""
        return self.rotation % 360.0

    def to_local(self, px: float, py: float) -> Tuple[float, float]:
        """Canonical point → overlay-local frame (origin at center, unrotated)."""
        cx, cy = self.center
        rad = math.radians(-self.rotation)
        dx, dy = px - cx, py - cy
        return dx * math.cos(rad) - dy * math.sin(rad), dx * math.sin(rad) + dy * math.cos(rad)

    def to_canonical(self, lx: float, ly: float) -> Tuple[float, float]:
        """Overlay-local point (origin at center) → canonical page point."""
        cx, cy = self.center
        rad = math.radians(self.rotation)
        return (
            cx + lx * math.cos(rad) - ly * math.sin(rad),
            cy + lx * math.sin(rad) + ly * math.cos(rad),
        )

    # ---------------- replace-whole-value updates
    def moved_to(self, x: float, y: float) -> "OverlayGeometry":
        return replace(self, x=float(x), y=float(y))

    def resized_to(self, width: float, limits: OverlayLimits = DEFAULT_LIMITS) -> "OverlayGeometry":
        return replace(self, width=max(limits.min_width, float(width)))

    def rotated_to(self, rotation: float) -> "OverlayGeometry":
        return replace(self, rotation=float(rotation))

    def with_image(self, image: OverlayImage, limits: OverlayLimits = DEFAULT_LIMITS) -> "OverlayGeometry":
        """New upload: keep position, reset width and rotation."""
        return replace(self, image=image, width=limits.default_width, rotation=0.0)

    def cleared(self) -> "OverlayGeometry":
        return replace(self, image=None)

    # ---------------- stepped controls (non-drag path)
    def resized_by_step(self, steps: int, limits: OverlayLimits = DEFAULT_LIMITS) -> "OverlayGeometry":
        return self.resized_to(self.width + steps * limits.size_step, limits)

    def rotated_by_step(self, steps: int, limits: OverlayLimits = DEFAULT_LIMITS) -> "OverlayGeometry":
        return self.rotated_to(self.rotation + steps * limits.rotation_step)
