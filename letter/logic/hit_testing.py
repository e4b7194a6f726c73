"""Handle placement and pointer hit-testing for the rotated overlay box."""
from __future__ import annotations

import math
from typing import Dict, Optional, Tuple

from ..models.gesture import GestureMode, HandleSpec
from ..models.overlay_geometry import OverlayGeometry

Point = Tuple[float, float]


def handle_positions(geom: OverlayGeometry, spec: HandleSpec) -> Dict[GestureMode, Point]:
    """
    Canonical centers of the resize (bottom-right corner) and rotate (above
    top-center) handles, following the overlay's rotation.
    """
    hw, hh = geom.width / 2.0, geom.height / 2.0
    return {
        GestureMode.RESIZE: geom.to_canonical(hw, hh),
        GestureMode.ROTATE: geom.to_canonical(0.0, -hh - spec.rotate_offset),
    }


def corner_points(geom: OverlayGeometry) -> Tuple[Point, Point, Point, Point]:
    """Rotated outline, clockwise from top-left."""
    hw, hh = geom.width / 2.0, geom.height / 2.0
    return (
        geom.to_canonical(-hw, -hh),
        geom.to_canonical(hw, -hh),
        geom.to_canonical(hw, hh),
        geom.to_canonical(-hw, hh),
    )


def contains(geom: OverlayGeometry, point: Point) -> bool:
    lx, ly = geom.to_local(*point)
    return abs(lx) <= geom.width / 2.0 and abs(ly) <= geom.height / 2.0


def hit_test(geom: OverlayGeometry, point: Point, spec: HandleSpec, scale: float) -> Optional[GestureMode]:
    """
    Gesture a press at canonical ``point`` starts. Handles win over the body;
    handle radius is constant in screen pixels, hence divided by ``scale``.
    """
    if not geom.active:
        return None
    radius = spec.radius_px / scale if scale > 0 else spec.radius_px
    handles = handle_positions(geom, spec)
    for mode in (GestureMode.RESIZE, GestureMode.ROTATE):
        hx, hy = handles[mode]
        if math.hypot(point[0] - hx, point[1] - hy) <= radius:
            return mode
    if contains(geom, point):
        return GestureMode.MOVE
    return None
