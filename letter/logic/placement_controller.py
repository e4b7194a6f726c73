# letter/logic/placement_controller.py
"""
Placement controller: pointer input → canonical overlay geometry.

Gesture lifecycle is an explicit state machine::

    idle ──press on handle/body──▶ dragging(mode) ──release──▶ idle

Entering ``dragging`` installs global move/release listeners through an
``InputBinder``; leaving it removes them. Pointer coordinates arrive in screen
pixels and are divided by the display scale before touching geometry, so the
same on-screen gesture gives the same canonical result at every zoom level.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, Optional, Protocol

from ..models.gesture import GestureMode, HandleSpec, ScreenRect
from ..models.overlay_geometry import DEFAULT_LIMITS, OverlayGeometry, OverlayLimits
from ..models.page import CanonicalPage
from .hit_testing import hit_test
from .session_state import StateCell
from .viewport import DisplayTransform

logger = logging.getLogger(__name__)

PointerCallback = Callable[[float, float], None]


class InputBinder(Protocol):
    """Installs global pointer listeners; returns a callable that removes them."""

    def install(self, on_move: PointerCallback, on_release: PointerCallback) -> Callable[[], None]:
        ...


@dataclass
class _Gesture:
    mode: GestureMode
    transform: DisplayTransform
    start_pointer: tuple[float, float]      # screen px
    start: OverlayGeometry
    center: tuple[float, float]             # canonical
    start_distance: float = 0.0             # canonical
    last_angle: float = 0.0                 # degrees
    sweep: float = 0.0                      # accumulated signed degrees
    uninstall: Optional[Callable[[], None]] = None


def _angle(center: tuple[float, float], point: tuple[float, float]) -> float:
    return math.degrees(math.atan2(point[1] - center[1], point[0] - center[0]))


def _signed_delta(a: float, b: float) -> float:
    """Smallest signed rotation from angle ``b`` to angle ``a`` in (-180, 180]."""
    d = (a - b) % 360.0
    return d - 360.0 if d > 180.0 else d


class PlacementController:
    """
    Drag-to-move, corner-handle resize and top-handle rotate for the overlay.

    Only one gesture is active at a time. Each processed pointer frame commits
    a complete new OverlayGeometry into ``overlay``.
    """

    def __init__(
        self,
        *,
        overlay: StateCell[OverlayGeometry],
        display_scale: StateCell[float],
        page: CanonicalPage,
        binder: InputBinder,
        rect_provider: Callable[[], Optional[ScreenRect]],
        limits: OverlayLimits = DEFAULT_LIMITS,
        handles: HandleSpec = HandleSpec(),
        bound_to_page: bool = True,
    ) -> None:
        self._overlay = overlay
        self._scale = display_scale
        self._page = page
        self._binder = binder
        self._rect_provider = rect_provider
        self._limits = limits
        self._handles = handles
        self._bound_to_page = bound_to_page
        self._gesture: Optional[_Gesture] = None

    # ------------------------------------------------------------------ state
    @property
    def active_mode(self) -> Optional[GestureMode]:
        return self._gesture.mode if self._gesture else None

    @property
    def is_idle(self) -> bool:
        return self._gesture is None

    def _transform(self) -> Optional[DisplayTransform]:
        rect = self._rect_provider()
        scale = float(self._scale.get())
        if rect is None or not rect.measurable or scale <= 0:
            return None
        return DisplayTransform.from_rect(rect, scale)

    # ------------------------------------------------------------------ entry
    def press(self, sx: float, sy: float) -> Optional[GestureMode]:
        """
        Pointer-down at screen ``(sx, sy)``: hit-test handles first, then the
        body, and start the matching gesture. Returns the mode started.
        """
        if self._gesture is not None:
            return None
        transform = self._transform()
        geom = self._overlay.get()
        if transform is None or not geom.active:
            return None
        mode = hit_test(geom, transform.to_canonical(sx, sy), self._handles, transform.scale)
        if mode is None:
            return None
        return mode if self.begin(mode, sx, sy) else None

    def begin(self, mode: GestureMode, sx: float, sy: float) -> bool:
        """Start ``mode`` explicitly (e.g. a press on a handle widget)."""
        if self._gesture is not None:
            return False
        geom = self._overlay.get()
        transform = self._transform()
        if transform is None or not geom.active:
            logger.debug("Gesture %s ignored: no measurable page or no overlay", mode.value)
            return False

        pointer = transform.to_canonical(sx, sy)
        center = geom.center
        gesture = _Gesture(
            mode=GestureMode(mode),
            transform=transform,
            start_pointer=(sx, sy),
            start=geom,
            center=center,
            start_distance=math.hypot(pointer[0] - center[0], pointer[1] - center[1]),
            last_angle=_angle(center, pointer),
        )
        self._gesture = gesture
        gesture.uninstall = self._binder.install(self._on_move, self._on_release)
        logger.debug("Gesture %s started at scale %.3f", gesture.mode.value, transform.scale)
        return True

    # ------------------------------------------------------------------ frames
    def _on_move(self, sx: float, sy: float) -> None:
        g = self._gesture
        if g is None:
            return
        if not self._overlay.get().active:
            # overlay removed mid-gesture
            self._end()
            return
        updated = self._apply(g, sx, sy)
        if updated is not None:
            self._overlay.set(updated)

    def _on_release(self, sx: float, sy: float) -> None:
        if self._gesture is None:
            return
        self._on_move(sx, sy)
        self._end()

    def abort(self) -> None:
        """Tear down listeners; the last committed geometry stays."""
        self._end()

    def _end(self) -> None:
        g, self._gesture = self._gesture, None
        if g is None:
            return
        if g.uninstall is not None:
            g.uninstall()
        geom = self._overlay.get()
        logger.debug(
            "Gesture %s committed: x=%.1f y=%.1f w=%.1f rot=%.1f",
            g.mode.value, geom.x, geom.y, geom.width, geom.rotation,
        )

    # ------------------------------------------------------------------ math
    def _apply(self, g: _Gesture, sx: float, sy: float) -> Optional[OverlayGeometry]:
        current = self._overlay.get()
        if g.mode is GestureMode.MOVE:
            return self._move(g, current, sx, sy)
        if g.mode is GestureMode.RESIZE:
            return self._resize(g, current, sx, sy)
        return self._rotate(g, current, sx, sy)

    def _move(self, g: _Gesture, current: OverlayGeometry, sx: float, sy: float) -> OverlayGeometry:
        x = g.start.x + g.transform.length_to_canonical(sx - g.start_pointer[0])
        y = g.start.y + g.transform.length_to_canonical(sy - g.start_pointer[1])
        if self._bound_to_page:
            x = max(0.0, min(x, self._page.width - current.width))
            y = max(0.0, min(y, self._page.height - current.height))
        return current.moved_to(x, y)

    def _resize(self, g: _Gesture, current: OverlayGeometry, sx: float, sy: float) -> Optional[OverlayGeometry]:
        if g.start_distance <= 1e-9:
            return None
        px, py = g.transform.to_canonical(sx, sy)
        distance = math.hypot(px - g.center[0], py - g.center[1])
        return current.resized_to(g.start.width * (distance / g.start_distance), self._limits)

    def _rotate(self, g: _Gesture, current: OverlayGeometry, sx: float, sy: float) -> OverlayGeometry:
        px, py = g.transform.to_canonical(sx, sy)
        if math.hypot(px - g.center[0], py - g.center[1]) <= 1e-9:
            return current
        angle = _angle(g.center, (px, py))
        g.sweep += _signed_delta(angle, g.last_angle)
        g.last_angle = angle
        return current.rotated_to(g.start.rotation + g.sweep)
