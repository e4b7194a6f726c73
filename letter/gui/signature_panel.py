from __future__ import annotations

import tkinter as tk
from tkinter import filedialog, messagebox, ttk

from core.i18n.translation_manager import T

from ..exceptions.errors import ImageDecodeError
from ..logic.letter_service import LetterService
from ..logic.session_state import LetterSession
from ..models.overlay_geometry import OverlayGeometry

IMAGE_TYPES = [
    ("Images", "*.png *.jpg *.jpeg *.gif *.webp *.bmp"),
    ("PNG", "*.png"),
    ("*", "*.*"),
]


class SignaturePanel(ttk.LabelFrame):
    """
    Signatur-Steuerung:
      • Bild hochladen / entfernen
      • Größe in festen Schritten (+/-)
      • Drehen in 90°-Schritten
    """

    def __init__(self, parent: tk.Misc, *, service: LetterService, session: LetterSession) -> None:
        super().__init__(parent, text=T("letter.signature"))
        self._service = service
        self._session = session
        self._info = tk.StringVar(value="")

        ttk.Button(self, text=T("letter.signature.upload"), command=self._upload).grid(
            row=0, column=0, columnspan=2, sticky="ew", padx=6, pady=(6, 2))
        self._remove_btn = ttk.Button(self, text=T("letter.signature.remove"), command=self._remove)
        self._remove_btn.grid(row=0, column=2, columnspan=2, sticky="ew", padx=6, pady=(6, 2))

        self._step_buttons = [
            ttk.Button(self, text=T("letter.signature.smaller"), command=lambda: service.step_size(session, -1)),
            ttk.Button(self, text=T("letter.signature.larger"), command=lambda: service.step_size(session, 1)),
            ttk.Button(self, text=T("letter.signature.rotate_left"), command=lambda: service.step_rotation(session, -1)),
            ttk.Button(self, text=T("letter.signature.rotate_right"), command=lambda: service.step_rotation(session, 1)),
        ]
        for col, btn in enumerate(self._step_buttons):
            btn.grid(row=1, column=col, sticky="ew", padx=2, pady=2)
            self.columnconfigure(col, weight=1)

        ttk.Label(self, textvariable=self._info, foreground="#475569").grid(
            row=2, column=0, columnspan=4, sticky="w", padx=6, pady=(2, 6))

        session.overlay.subscribe(self._on_overlay)
        self._on_overlay(session.overlay.get())

    def _upload(self) -> None:
        path = filedialog.askopenfilename(parent=self, filetypes=IMAGE_TYPES, title=T("letter.signature.choose"))
        if not path:
            return
        try:
            self._service.upload_signature(self._session, path)
        except ImageDecodeError as ex:
            messagebox.showerror(T("common.error"), f"{T('letter.signature.decode_failed')}\n\n{ex}", parent=self)

    def _remove(self) -> None:
        self._service.remove_signature(self._session)

    def _on_overlay(self, geom: OverlayGeometry) -> None:
        state = "normal" if geom.active else "disabled"
        self._remove_btn.configure(state=state)
        for btn in self._step_buttons:
            btn.configure(state=state)
        if geom.active:
            self._info.set(T("letter.signature.info", width=geom.width, rotation=geom.display_rotation))
        else:
            self._info.set(T("letter.signature.none"))
