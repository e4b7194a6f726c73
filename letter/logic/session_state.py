# letter/logic/session_state.py
"""
Explicit session state with replace semantics.

Each piece of state sits in a ``StateCell``: readers get the current immutable
snapshot, writers hand in a complete new value, observers are notified after
every replacement. Components receive the cells they need; nothing reads
ambient globals.
"""
from __future__ import annotations

import inspect
import logging
import weakref
from typing import Callable, Generic, List, TypeVar

from ..models.document_content import DocumentContent, FooterMode
from ..models.overlay_geometry import OverlayGeometry

T = TypeVar("T")

logger = logging.getLogger(__name__)


class StateCell(Generic[T]):
    """Holds one immutable value; ``set`` replaces it whole."""

    def __init__(self, value: T, *, name: str = "") -> None:
        self._value = value
        self._name = name
        self._observers: List[Callable[[T], None] | weakref.WeakMethod] = []

    def get(self) -> T:
        return self._value

    def set(self, value: T) -> None:
        if value is self._value:
            return
        self._value = value
        self._notify()

    def update(self, fn: Callable[[T], T]) -> T:
        """Derive a new value from the current one and commit it."""
        self.set(fn(self._value))
        return self._value

    # ---------- observers
    def subscribe(self, cb: Callable[[T], None]) -> None:
        # bound methods are held weakly so closed views do not leak
        ref = weakref.WeakMethod(cb) if inspect.ismethod(cb) else cb
        self._observers.append(ref)

    def unsubscribe(self, cb: Callable[[T], None]) -> None:
        kept = []
        for ref in self._observers:
            fn = ref() if isinstance(ref, weakref.WeakMethod) else ref
            if fn is None or fn == cb:
                continue
            kept.append(ref)
        self._observers = kept

    def _notify(self) -> None:
        alive = []
        for ref in list(self._observers):
            fn = ref() if isinstance(ref, weakref.WeakMethod) else ref
            if fn is None:
                continue
            alive.append(ref)
            try:
                fn(self._value)
            except Exception:
                logger.exception("Observer of %s failed", self._name or "state cell")
        self._observers = alive


class LetterSession:
    """All mutable state of one composing session, as explicit cells."""

    def __init__(
        self,
        *,
        content: DocumentContent,
        overlay: OverlayGeometry | None = None,
        footer_mode: FooterMode = FooterMode.FLOW,
        display_scale: float = 1.0,
    ) -> None:
        self.content: StateCell[DocumentContent] = StateCell(content, name="content")
        self.footer_mode: StateCell[FooterMode] = StateCell(footer_mode, name="footer_mode")
        self.overlay: StateCell[OverlayGeometry] = StateCell(overlay or OverlayGeometry(), name="overlay")
        self.display_scale: StateCell[float] = StateCell(float(display_scale), name="display_scale")
