"""Time utilities for timezone-aware UTC datetimes and persisted timestamps."""

from datetime import UTC, date, datetime


def utc_now() -> datetime:
    """Return a timezone-aware UTC datetime for defaults and onupdate hooks."""
    return datetime.now(UTC)


def now_ms() -> int:
    """Return the current time as Unix milliseconds, the persisted timestamp format."""
    return int(utc_now().timestamp() * 1000)


def now_iso() -> str:
    """Return the current time as an ISO-8601 string for status history entries."""
    return utc_now().isoformat()


def today_str() -> str:
    return date.today().isoformat()


def parse_date(value: str) -> date:
    """Parse a "yyyy-MM-dd" business date."""
    return date.fromisoformat(value)


def format_date(value: date) -> str:
    return value.strftime("%Y-%m-%d")
