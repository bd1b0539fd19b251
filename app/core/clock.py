# app/core/clock.py
from datetime import datetime, timezone
from typing import Callable

# Zero-argument callable returning an aware UTC datetime.
Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)
