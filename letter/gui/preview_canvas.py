# letter/gui/preview_canvas.py
from __future__ import annotations

import tkinter as tk
from typing import Callable, Optional

from PIL import ImageTk

from ..logic.hit_testing import corner_points, handle_positions, hit_test
from ..logic.letter_service import LetterService
from ..logic.placement_controller import PlacementController, PointerCallback
from ..logic.session_state import LetterSession
from ..logic.viewport import DisplayTransform, scaled_box
from ..models.gesture import GestureMode, ScreenRect
from ..models.overlay_geometry import OverlayGeometry

OUTLINE_COLOR = "#0a84ff"
HANDLE_FILL = "#ffffff"
CURSORS = {
    GestureMode.MOVE: "fleur",
    GestureMode.RESIZE: "bottom_right_corner",
    GestureMode.ROTATE: "exchange",
}


class TkInputBinder:
    """
    Globale Maus-Listener für die Dauer einer Geste.

    Bindet Motion/Release applikationsweit (``bind_all``), damit die Geste
    auch außerhalb des Canvas weiterläuft; Koordinaten sind Bildschirm-Pixel.
    """

    def __init__(self, widget: tk.Misc) -> None:
        self._widget = widget

    def install(self, on_move: PointerCallback, on_release: PointerCallback) -> Callable[[], None]:
        w = self._widget
        w.bind_all("<B1-Motion>", lambda e: on_move(e.x_root, e.y_root))
        w.bind_all("<ButtonRelease-1>", lambda e: on_release(e.x_root, e.y_root))

        def uninstall() -> None:
            w.unbind_all("<B1-Motion>")
            w.unbind_all("<ButtonRelease-1>")

        return uninstall


class PreviewCanvas(tk.Canvas):
    """
    Live-Vorschau der Seite bei aktuellem Anzeige-Maßstab.

    Textebene und Signatur werden aus demselben kanonischen Layout gerendert
    wie der Export; der Canvas hat exakt die skalierte Seitengröße.
    """

    def __init__(self, parent: tk.Misc, *, service: LetterService, session: LetterSession, **kwargs) -> None:
        super().__init__(parent, bg="#ffffff", highlightthickness=0, bd=0, **kwargs)
        self._service = service
        self._session = session
        self._text_tk: Optional[ImageTk.PhotoImage] = None
        self._sprite_tk: Optional[ImageTk.PhotoImage] = None

        self.controller = PlacementController(
            overlay=session.overlay,
            display_scale=session.display_scale,
            page=service.page,
            binder=TkInputBinder(self),
            rect_provider=self._page_rect,
            limits=service.limits,
            handles=service.handles,
        )

        self.bind("<ButtonPress-1>", self._on_press)
        self.bind("<Motion>", self._on_hover)
        self.bind("<Destroy>", self._on_destroy, add="+")

        session.content.subscribe(self._on_content)
        session.footer_mode.subscribe(self._on_content)
        session.overlay.subscribe(self._on_overlay)
        session.display_scale.subscribe(self._on_scale)

        self._resize_to_scale()
        self.redraw()

    # ------------------------------------------------------------------ geometry
    @property
    def scale(self) -> float:
        return float(self._session.display_scale.get())

    def _resize_to_scale(self) -> None:
        box = scaled_box(self._service.page, self.scale)
        self.configure(width=round(box.width), height=round(box.height))

    def _page_rect(self) -> Optional[ScreenRect]:
        if not self.winfo_ismapped():
            return None
        box = scaled_box(self._service.page, self.scale)
        return ScreenRect(self.winfo_rootx(), self.winfo_rooty(), box.width, box.height)

    def _local_transform(self) -> DisplayTransform:
        return DisplayTransform(scale=self.scale)

    # ------------------------------------------------------------------ drawing
    def redraw(self) -> None:
        self._draw_text()
        self._draw_overlay()

    def _draw_text(self) -> None:
        self.delete("page")
        img = self._service.render_preview_text(self._session)
        self._text_tk = ImageTk.PhotoImage(img)
        self.create_image(0, 0, image=self._text_tk, anchor="nw", tags=("page",))
        self.tag_lower("page")

    def _draw_overlay(self) -> None:
        self.delete("overlay")
        self._sprite_tk = None
        geom: OverlayGeometry = self._session.overlay.get()
        if not geom.active:
            return
        sprite = self._service.renderer.overlay_sprite(geom, self.scale)
        if sprite is not None:
            bitmap, (left, top) = sprite
            self._sprite_tk = ImageTk.PhotoImage(bitmap)
            self.create_image(left, top, image=self._sprite_tk, anchor="nw", tags=("overlay",))

        tr = self._local_transform()
        outline = [c for p in corner_points(geom) for c in tr.to_screen(*p)]
        self.create_polygon(*outline, outline=OUTLINE_COLOR, fill="", dash=(4, 2), tags=("overlay",))

        r = self._service.handles.radius_px
        handles = handle_positions(geom, self._service.handles)
        top_mid = tr.to_screen(*geom.to_canonical(0.0, -geom.height / 2.0))
        rot = tr.to_screen(*handles[GestureMode.ROTATE])
        self.create_line(*top_mid, *rot, fill=OUTLINE_COLOR, tags=("overlay",))
        for mode, point in handles.items():
            hx, hy = tr.to_screen(*point)
            self.create_oval(hx - r, hy - r, hx + r, hy + r, fill=HANDLE_FILL, outline=OUTLINE_COLOR,
                             width=2, tags=("overlay", f"handle-{mode.value}"))

    # ------------------------------------------------------------------ events
    def _on_press(self, e) -> None:
        mode = self.controller.press(e.x_root, e.y_root)
        if mode is not None:
            self.configure(cursor=CURSORS[mode])

    def _on_hover(self, e) -> None:
        if not self.controller.is_idle:
            return
        point = self._local_transform().to_canonical(e.x, e.y)
        mode = hit_test(self._session.overlay.get(), point, self._service.handles, self.scale)
        self.configure(cursor=CURSORS.get(mode, ""))

    def _on_content(self, _value) -> None:
        self._draw_text()

    def _on_overlay(self, _geom) -> None:
        self._draw_overlay()

    def _on_scale(self, _scale) -> None:
        self._resize_to_scale()
        self.redraw()

    def _on_destroy(self, e) -> None:
        if e.widget is self:
            self.controller.abort()
