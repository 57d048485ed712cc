"""Expansion of a billing period into per-day work-hours records."""

from datetime import date, timedelta

from backend.app.core.time import format_date, parse_date

SATURDAY = 5


def is_weekend(day: date) -> bool:
    return day.weekday() >= SATURDAY


def _as_date(value: date | str) -> date:
    return parse_date(value) if isinstance(value, str) else value


def generate_work_hours(start: date | str, end: date | str, default_hours: float) -> list[dict]:
    """
    Return one record per calendar day from start to end inclusive.

    Every day carries the default hours so the calendar shows them, but only
    weekdays are flagged as workdays and therefore count towards totals.
    """
    start, end = _as_date(start), _as_date(end)
    if end < start:
        raise ValueError("Period end must not be before period start")

    days = []
    current = start
    while current <= end:
        days.append(
            {
                "date": format_date(current),
                "hours": default_hours,
                "is_workday": not is_weekend(current),
            }
        )
        current += timedelta(days=1)
    return days


def calculate_work_totals(days) -> tuple[int, float]:
    """Count days and sum hours over workdays that actually have hours."""
    worked = [day for day in days if _field(day, "is_workday") and (_field(day, "hours") or 0) > 0]
    return len(worked), sum(float(_field(day, "hours")) for day in worked)


def _field(day, name):
    if isinstance(day, dict):
        return day.get(name)
    return getattr(day, name)


def check_work_hours_calendar(days, period_start: date | str | None = None, period_end: date | str | None = None) -> None:
    """
    Raise ValueError unless every date appears at most once and, when the
    period has both ends, falls inside it.
    """
    start = _as_date(period_start) if period_start else None
    end = _as_date(period_end) if period_end else None
    bounded = start is not None and end is not None
    if bounded and end < start:
        raise ValueError("Period end must not be before period start")

    seen = set()
    for day in days or []:
        key = _field(day, "date")
        if key in seen:
            raise ValueError(f"Work hours date {key} appears more than once")
        seen.add(key)
        if bounded and not start <= _as_date(key) <= end:
            raise ValueError(f"Work hours date {key} is outside the invoice period")
