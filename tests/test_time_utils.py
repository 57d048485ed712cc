from datetime import UTC, date

import pytest

from backend.app.core.time import format_date, now_iso, now_ms, parse_date, utc_now


def test_utc_now_is_timezone_aware_utc():
    value = utc_now()
    assert value.tzinfo is UTC


def test_now_ms_is_unix_milliseconds():
    value = now_ms()
    assert isinstance(value, int)
    assert abs(value - int(utc_now().timestamp() * 1000)) < 5000


def test_now_iso_carries_utc_offset():
    assert now_iso().endswith("+00:00")


def test_business_dates_round_trip():
    assert parse_date("2024-02-29") == date(2024, 2, 29)
    assert format_date(date(2024, 1, 5)) == "2024-01-05"


def test_invalid_business_date_raises():
    with pytest.raises(ValueError):
        parse_date("2023-02-29")
