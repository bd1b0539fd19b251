from datetime import datetime, timedelta, timezone

import pytest

from app.services.duration_formatter import ONGOING, format_duration

START = datetime(2025, 1, 10, 10, 30, tzinfo=timezone.utc)


def test_missing_end_is_ongoing():
    assert format_duration(START, None) == "Ongoing"
    assert ONGOING == "Ongoing"


def test_zero_elapsed_is_zero_minutes():
    assert format_duration(START, START) == "0m"


def test_end_before_start_is_zero_minutes():
    assert format_duration(START, START - timedelta(minutes=5)) == "0m"


@pytest.mark.parametrize(
    "elapsed, expected",
    [
        (timedelta(minutes=5), "5m"),
        (timedelta(minutes=65), "1h 5m"),
        (timedelta(hours=2), "2h 0m"),
        (timedelta(seconds=59), "0m"),
        (timedelta(minutes=59, seconds=59), "59m"),
        (timedelta(hours=25, minutes=1), "25h 1m"),
    ],
)
def test_whole_hours_and_minutes(elapsed, expected):
    assert format_duration(START, START + elapsed) == expected
