from __future__ import annotations

import tkinter as tk
from tkinter import ttk
from typing import Callable, Optional

from core.i18n.translation_manager import T

from ..models.document_content import DocumentSection, SectionId, TextAlign

# Sections edited in a multi-line text box; the rest get a single Entry.
MULTILINE = {SectionId.HEADER: 2, SectionId.BODY: 8, SectionId.SIGNER: 2}

OnChange = Callable[[SectionId, Optional[str], Optional[TextAlign]], None]


class SectionEditor(ttk.LabelFrame):
    """Ein Abschnitt des Briefs: Text plus Ausrichtung (links / Mitte / rechts)."""

    def __init__(self, parent: tk.Misc, sid: SectionId, section: DocumentSection, on_change: OnChange) -> None:
        super().__init__(parent, text=T(f"letter.section.{sid.value}"))
        self._sid = sid
        self._on_change = on_change
        self._align = tk.StringVar(value=section.align.value)
        self.columnconfigure(0, weight=1)

        if sid in MULTILINE:
            self._text = tk.Text(self, height=MULTILINE[sid], wrap="word", undo=False)
            self._text.insert("1.0", section.text)
            self._text.bind("<<Modified>>", self._on_text_modified)
            self._text.edit_modified(False)
            self._text.grid(row=0, column=0, columnspan=4, sticky="ew", padx=6, pady=(4, 2))
            self._var = None
        else:
            self._var = tk.StringVar(value=section.text)
            ttk.Entry(self, textvariable=self._var).grid(row=0, column=0, columnspan=4, sticky="ew", padx=6, pady=(4, 2))
            self._var.trace_add("write", lambda *_: self._on_change(self._sid, self._var.get(), None))
            self._text = None

        ttk.Label(self, text=T("letter.align")).grid(row=1, column=0, sticky="e", padx=(6, 4), pady=(0, 4))
        for col, align in enumerate(TextAlign, start=1):
            ttk.Radiobutton(
                self, text=T(f"letter.align.{align.value}"), value=align.value,
                variable=self._align, command=self._on_align,
            ).grid(row=1, column=col, sticky="w", padx=2, pady=(0, 4))

    def _on_text_modified(self, _e=None) -> None:
        if not self._text.edit_modified():
            return
        # Tk appends a trailing newline to every Text widget
        self._on_change(self._sid, self._text.get("1.0", "end-1c"), None)
        self._text.edit_modified(False)

    def _on_align(self) -> None:
        self._on_change(self._sid, None, TextAlign(self._align.get()))
