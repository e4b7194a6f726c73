"""
log_entry.py

Dataclass für einen Logeintrag der laufenden Sitzung.

• as_dict()  – gibt für die GUI ein Dict mit
               - timestamp_utc (ISO-UTC)
               - timestamp      (lokale Zeit)
               zurück.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

import core.helpers.date_time_helper as dt


@dataclass(frozen=True)
class LogEntry:
    id: int
    timestamp: datetime          # immer UTC
    log_level: str
    feature: str
    event: str
    reference_id: Optional[str] = None
    message: Optional[str] = None

    # -------------------- Dict für GUI ------------------------------- #
    def as_dict(self) -> dict:
        utc_iso = self.timestamp.replace(microsecond=0).isoformat()
        return {
            "id": self.id,
            "timestamp_utc": utc_iso,
            "timestamp": dt.utc_to_local_str(utc_iso),
            "log_level": self.log_level,
            "feature": self.feature,
            "event": self.event,
            "reference_id": self.reference_id,
            "message": self.message,
        }
