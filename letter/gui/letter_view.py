from __future__ import annotations

import tkinter as tk
from tkinter import filedialog, messagebox, ttk
from typing import Optional

from core.app_logging.gui.log_view import LogView
from core.common.app_context import AppContext, T

from ..logic.letter_service import LetterService
from ..logic.session_state import LetterSession
from ..models.document_content import FooterMode, SectionId, SECTION_ORDER, TextAlign
from .preview_canvas import PreviewCanvas
from .section_editor import SectionEditor
from .signature_panel import SignaturePanel


class LetterView(ttk.Frame):
    """
    Haupt-View des Brief-Editors:
      • links die Abschnitts-Editoren, Fußzeilen-Modus und Signatur-Steuerung
      • rechts die skalierte Live-Vorschau mit Anfassern
      • unten Export und Log-Ansicht
    """

    def __init__(self, parent, *, service: Optional[LetterService] = None, **kwargs):
        super().__init__(parent, **kwargs)
        self._service = service or LetterService(
            AppContext.config,
            translate=T,
            language=AppContext.translations.language,
            audit=AppContext.logger,
            notify_failure=self._show_export_failure,
        )
        self._session: LetterSession = self._service.new_session(viewport_width=parent.winfo_screenwidth())
        self._footer_pinned = tk.BooleanVar(value=self._session.footer_mode.get() is FooterMode.PINNED_BOTTOM)
        self._status = tk.StringVar(value="")
        self._make_ui()
        self.bind("<Configure>", self._on_configure)

    @property
    def session(self) -> LetterSession:
        return self._session

    # ------------------------------------------------------------------ UI
    def _make_ui(self) -> None:
        self.columnconfigure(1, weight=1)
        self.rowconfigure(0, weight=1)

        left = ttk.Frame(self)
        left.grid(row=0, column=0, sticky="nsw", padx=(12, 6), pady=10)
        content = self._session.content.get()
        for row, sid in enumerate(SECTION_ORDER):
            SectionEditor(left, sid, content.section(sid), self._on_section_change).grid(
                row=row, column=0, sticky="ew", pady=2)
        ttk.Checkbutton(left, text=T("letter.footer.pinned"), variable=self._footer_pinned,
                        command=self._on_footer_mode).grid(row=len(SECTION_ORDER), column=0, sticky="w", pady=(6, 2))
        SignaturePanel(left, service=self._service, session=self._session).grid(
            row=len(SECTION_ORDER) + 1, column=0, sticky="ew", pady=(6, 0))

        right = ttk.Frame(self, padding=12)
        right.grid(row=0, column=1, sticky="nsew")
        self._preview = PreviewCanvas(right, service=self._service, session=self._session)
        self._preview.pack(anchor="n")

        bar = ttk.Frame(self)
        bar.grid(row=1, column=0, columnspan=2, sticky="ew", padx=12, pady=(0, 10))
        ttk.Label(bar, textvariable=self._status).pack(side="left")
        ttk.Button(bar, text=T("log.open"), command=self._open_logs).pack(side="right", padx=(6, 0))
        self._export_btn = ttk.Button(bar, text=T("letter.export"), command=self._export)
        self._export_btn.pack(side="right")

    # ------------------------------------------------------------------ events
    def _on_section_change(self, sid: SectionId, text: Optional[str], align: Optional[TextAlign]) -> None:
        self._service.edit_section(self._session, sid, text=text, align=align)

    def _on_footer_mode(self) -> None:
        mode = FooterMode.PINNED_BOTTOM if self._footer_pinned.get() else FooterMode.FLOW
        self._service.set_footer_mode(self._session, mode)

    def _on_configure(self, e) -> None:
        if e.widget is self:
            self._service.set_viewport_width(self._session, e.width)

    def _open_logs(self) -> None:
        LogView(self, AppContext.logger)

    # ------------------------------------------------------------------ export
    def _export(self) -> None:
        if self._service.exporter.busy:
            return
        path = filedialog.asksaveasfilename(
            parent=self,
            title=T("letter.export"),
            defaultextension=".pdf",
            filetypes=[("PDF", "*.pdf")],
            initialdir=str(AppContext.config.export.output_dir),
            initialfile=self._service.suggest_filename(self._session),
        )
        if not path:
            return
        self._export_btn.configure(state="disabled")
        self._status.set(T("letter.export.running"))
        self.update_idletasks()
        try:
            out = self._service.export_pdf(self._session, path)
        finally:
            self._export_btn.configure(state="normal")
        if out is not None:
            self._status.set(T("letter.export.done", path=out))
        else:
            self._status.set("")

    def _show_export_failure(self, message: str) -> None:
        messagebox.showerror(T("common.error"), message, parent=self)
