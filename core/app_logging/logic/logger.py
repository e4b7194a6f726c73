"""
core/app_logging/logic/logger.py
============================

Thread-sicherer Singleton-Logger für die laufende Sitzung.

Entries are kept in a bounded in-memory list (the session is never
persisted) and forwarded to the stdlib ``logging`` hierarchy under
``letterpad.<feature>`` so console/file handlers see them as well.
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from typing import Deque, List, Optional

from core.helpers.date_time_helper import utc_now
from core.app_logging.models.log_entry import LogEntry

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

MAX_ENTRIES = 2_000


def configure_logging(level: str = "INFO") -> None:
    """Install a console handler on the root logger (idempotent)."""
    root = logging.getLogger()
    root.setLevel(_LEVELS.get(str(level).upper(), logging.INFO))
    if not any(getattr(h, "_letterpad", False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)-7s %(name)s: %(message)s")
        )
        handler._letterpad = True  # type: ignore[attr-defined]
        root.addHandler(handler)


# --------------------------------------------------------------------------- #
#  Singleton-Klasse                                                           #
# --------------------------------------------------------------------------- #
class Logger:
    """Thread-sicherer Singleton-Logger."""

    _instance: "Logger | None" = None
    _instance_lock = threading.Lock()

    def __new__(cls) -> "Logger":  # noqa: D401
        if cls._instance is None:
            with cls._instance_lock:
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
                    cls._instance._initialized = False  # type: ignore[attr-defined]
        return cls._instance  # type: ignore[return-value]

    def __init__(self) -> None:
        if getattr(self, "_initialized", False):
            return
        self._initialized = True

        self._lock = threading.Lock()
        self._next_id = 1
        self.entries: Deque[LogEntry] = deque(maxlen=MAX_ENTRIES)

    # ------------------------------------------------------------------ #
    #  Öffentliche API: log                                              #
    # ------------------------------------------------------------------ #
    def log(
        self,
        feature: str,
        event: str,
        *,
        level: str = "INFO",
        reference_id: Optional[str] = None,
        message: Optional[str] = None,
    ) -> LogEntry:
        level = str(level).upper()
        with self._lock:
            entry = LogEntry(
                id=self._next_id,
                timestamp=utc_now(),
                log_level=level,
                feature=feature,
                event=event,
                reference_id=reference_id,
                message=message,
            )
            self._next_id += 1
            self.entries.append(entry)

        std = logging.getLogger(f"letterpad.{feature}")
        std.log(_LEVELS.get(level, logging.INFO), "%s%s", event, f": {message}" if message else "")
        return entry

    # ------------------------------------------------------------------ #
    #  Query / Clear                                                     #
    # ------------------------------------------------------------------ #
    def query_logs(
        self,
        *,
        feature: Optional[str] = None,
        event: Optional[str] = None,
        level: Optional[str] = None,
        limit: int = 1_000,
    ) -> List[LogEntry]:
        """Newest first."""
        with self._lock:
            snapshot = list(self.entries)
        result = [
            e for e in reversed(snapshot)
            if (feature is None or e.feature == feature)
            and (event is None or e.event == event)
            and (level is None or e.log_level == level.upper())
        ]
        return result[:limit]

    def clear(self) -> None:
        with self._lock:
            self.entries.clear()


logger = Logger()
