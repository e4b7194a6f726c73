"""
date_time_helper.py

Helper functions for formatting date and time values: UTC timestamps for the
session log and the localized default date printed on a letter.

All features and modules should use ONLY these helpers for date/time logic.
"""

from __future__ import annotations

from datetime import date, datetime, timezone

_EN_MONTHS = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


def utc_now() -> datetime:
    """Current UTC time, used for log entries."""
    return datetime.now(timezone.utc)


def utc_to_local_str(utc_iso: str) -> str:
    """
    Formats a UTC ISO8601 timestamp as a human-readable string in the
    machine's local timezone.

    :param utc_iso: UTC time as ISO string
    :return: String in format "YYYY-MM-DD HH:mm:ss" (local time)
    """
    dt_utc = datetime.fromisoformat(utc_iso)
    return dt_utc.astimezone().strftime("%Y-%m-%d %H:%M:%S")


def format_letter_date(day: date, language: str) -> str:
    """
    Long-form date as written under a letter's signature block.

    zh-TW / zh: "2026年10月19日", everything else: "October 19, 2026".
    """
    if language.lower().startswith("zh"):
        return f"{day.year}年{day.month}月{day.day}日"
    return f"{_EN_MONTHS[day.month - 1]} {day.day}, {day.year}"
