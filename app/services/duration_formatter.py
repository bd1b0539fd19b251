# app/services/duration_formatter.py
from __future__ import annotations

from datetime import datetime

ONGOING = "Ongoing"


def format_duration(start: datetime, end: datetime | None) -> str:
    """
    Format the elapsed time between `start` and `end`.

    Returns "Ongoing" when `end` is missing and "0m" when the interval is
    empty or negative. Otherwise whole hours and minutes are reported, with
    the hour part omitted when zero: "5m", "1h 5m", "2h 0m".
    """
    if end is None:
        return ONGOING

    elapsed_seconds = (end - start).total_seconds()
    if elapsed_seconds <= 0:
        return "0m"

    total_minutes = int(elapsed_seconds // 60)
    hours, minutes = divmod(total_minutes, 60)

    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"
