"""
log_view.py

Tkinter-GUI für die Anzeige und Filterung der Sitzungs-Logs.
"""

from __future__ import annotations

import tkinter as tk
from tkinter import ttk

from core.i18n.translation_manager import T
from core.app_logging.logic.logger import Logger, logger as default_logger


class LogView(tk.Toplevel):
    def __init__(self, parent, log: Logger | None = None):
        super().__init__(parent)
        self.title(T("log.title"))
        self.geometry("720x360")
        self._log = log or default_logger

        self._build_ui()
        self._load_logs()

    def _build_ui(self) -> None:
        filter_frame = ttk.Frame(self)
        filter_frame.pack(fill="x", padx=5, pady=5)

        self.filter_feature_var = tk.StringVar()
        self.filter_level_var = tk.StringVar()

        ttk.Label(filter_frame, text=T("log.feature")).pack(side="left")
        self.filter_feature_cb = ttk.Combobox(filter_frame, textvariable=self.filter_feature_var, width=16)
        self.filter_feature_cb.pack(side="left", padx=5)

        ttk.Label(filter_frame, text=T("log.level")).pack(side="left")
        self.filter_level_cb = ttk.Combobox(
            filter_frame,
            textvariable=self.filter_level_var,
            values=["", "DEBUG", "INFO", "WARNING", "ERROR"],
            width=10,
        )
        self.filter_level_cb.pack(side="left", padx=5)

        ttk.Button(filter_frame, text=T("log.apply"), command=self._load_logs).pack(side="left", padx=10)

        cols = ("timestamp", "log_level", "feature", "event", "message")
        self.tree = ttk.Treeview(self, columns=cols, show="headings")
        for col, label in zip(cols, ("log.time", "log.level", "log.feature", "log.event", "log.message")):
            self.tree.heading(col, text=T(label))
        self.tree.column("message", width=280)
        self.tree.pack(fill="both", expand=True, padx=5, pady=5)

    def _load_logs(self) -> None:
        entries = self._log.query_logs(
            feature=self.filter_feature_var.get() or None,
            level=self.filter_level_var.get() or None,
        )
        self.filter_feature_cb["values"] = [""] + sorted({e.feature for e in self._log.query_logs()})

        for i in self.tree.get_children():
            self.tree.delete(i)

        for entry in entries:
            row = entry.as_dict()
            self.tree.insert(
                "", "end",
                values=(row["timestamp"], row["log_level"], row["feature"], row["event"], row["message"] or ""),
            )
