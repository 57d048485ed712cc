"""Semi-monthly billing period arithmetic.

A month is split into two batches: the 1st batch covers days 1-15 and the
2nd batch covers day 16 through the last day of the month. All functions
here work on calendar dates only and never look at the clock unless the
caller leaves the reference date out.
"""

import calendar
from dataclasses import dataclass
from datetime import date

from backend.app.core.time import format_date
from backend.app.models.enums import BatchType, ScheduleFrequency

FIRST_BATCH_LAST_DAY = 15


@dataclass(frozen=True)
class BillingPeriod:
    start: str
    end: str
    label: str
    batch: BatchType
    is_auto_detected: bool = False


def last_day_of_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def _previous_month(year: int, month: int) -> tuple[int, int]:
    if month == 1:
        return year - 1, 12
    return year, month - 1


def _following_month(year: int, month: int) -> tuple[int, int]:
    if month == 12:
        return year + 1, 1
    return year, month + 1


def ordinal_suffix(day: int) -> str:
    if 11 <= day <= 13:
        return "th"
    return {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")


def _first_batch(year: int, month: int, label: str, auto: bool = False) -> BillingPeriod:
    return BillingPeriod(
        start=format_date(date(year, month, 1)),
        end=format_date(date(year, month, FIRST_BATCH_LAST_DAY)),
        label=label,
        batch=BatchType.FIRST_BATCH,
        is_auto_detected=auto,
    )


def _second_batch(year: int, month: int, label: str, auto: bool = False) -> BillingPeriod:
    return BillingPeriod(
        start=format_date(date(year, month, FIRST_BATCH_LAST_DAY + 1)),
        end=format_date(date(year, month, last_day_of_month(year, month))),
        label=label,
        batch=BatchType.SECOND_BATCH,
        is_auto_detected=auto,
    )


def _whole_month(year: int, month: int, label: str, auto: bool = False) -> BillingPeriod:
    return BillingPeriod(
        start=format_date(date(year, month, 1)),
        end=format_date(date(year, month, last_day_of_month(year, month))),
        label=label,
        batch=BatchType.WHOLE_MONTH,
        is_auto_detected=auto,
    )


def _month_label(year: int, month: int) -> str:
    return date(year, month, 1).strftime("%b %Y")


def _first_half_label(year: int, month: int) -> str:
    return f"1st - 15th {_month_label(year, month)}"


def _second_half_label(year: int, month: int) -> str:
    last = last_day_of_month(year, month)
    return f"16th - {last}{ordinal_suffix(last)} {_month_label(year, month)}"


def _full_month_label(year: int, month: int) -> str:
    return f"Full {date(year, month, 1).strftime('%B %Y')}"


def next_billing_period(latest_period_end: date | None, today: date | None = None) -> BillingPeriod:
    """
    Derive the period that follows the most recent invoice.

    With no prior invoice the 1st batch of the current month is returned. A
    prior period ending on or before the 15th is followed by the 2nd batch of
    the same month; anything later is followed by the 1st batch of the next
    month.
    """
    if latest_period_end is None:
        reference = today or date.today()
        return _first_batch(reference.year, reference.month, _month_label(reference.year, reference.month), auto=True)

    year, month = latest_period_end.year, latest_period_end.month
    if latest_period_end.day <= FIRST_BATCH_LAST_DAY:
        return _second_batch(year, month, _month_label(year, month), auto=True)

    year, month = _following_month(year, month)
    return _first_batch(year, month, _month_label(year, month), auto=True)


def get_batch_period(batch: BatchType, reference: date | None = None) -> BillingPeriod:
    reference = reference or date.today()
    year, month = reference.year, reference.month
    short_month = reference.strftime("%b")
    if batch == BatchType.FIRST_BATCH:
        return _first_batch(year, month, f"1st Batch (1-15 {short_month})")
    if batch == BatchType.SECOND_BATCH:
        last = last_day_of_month(year, month)
        return _second_batch(year, month, f"2nd Batch (16-{last} {short_month})")
    return _whole_month(year, month, f"Whole Month ({reference.strftime('%B')})")


def detect_invoice_period(frequency: ScheduleFrequency, today: date | None = None) -> BillingPeriod:
    """Pick the period an invoice issued today most likely covers."""
    today = today or date.today()
    year, month = today.year, today.month
    prev_year, prev_month = _previous_month(year, month)

    if frequency == ScheduleFrequency.BOTH_15TH_AND_LAST:
        if today.day > FIRST_BATCH_LAST_DAY:
            return _first_batch(year, month, _first_half_label(year, month), auto=True)
        return _second_batch(prev_year, prev_month, _second_half_label(prev_year, prev_month), auto=True)

    if frequency == ScheduleFrequency.EVERY_15TH:
        if today.day > FIRST_BATCH_LAST_DAY:
            return _first_batch(year, month, _first_half_label(year, month), auto=True)
        return _first_batch(prev_year, prev_month, _first_half_label(prev_year, prev_month), auto=True)

    if frequency == ScheduleFrequency.EVERY_LAST_DAY:
        if today.day > FIRST_BATCH_LAST_DAY:
            return _second_batch(year, month, _second_half_label(year, month), auto=True)
        return _second_batch(prev_year, prev_month, _second_half_label(prev_year, prev_month), auto=True)

    return _whole_month(year, month, _full_month_label(year, month), auto=True)


def get_period_options(reference: date | None = None) -> list[BillingPeriod]:
    """Periods offered for manual override, current month first."""
    reference = reference or date.today()
    year, month = reference.year, reference.month
    prev_year, prev_month = _previous_month(year, month)
    return [
        _first_batch(year, month, _first_half_label(year, month)),
        _second_batch(year, month, _second_half_label(year, month)),
        _first_batch(prev_year, prev_month, _first_half_label(prev_year, prev_month)),
        _second_batch(prev_year, prev_month, _second_half_label(prev_year, prev_month)),
        _whole_month(year, month, _full_month_label(year, month)),
        _whole_month(prev_year, prev_month, _full_month_label(prev_year, prev_month)),
    ]
