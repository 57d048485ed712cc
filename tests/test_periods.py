from datetime import date

from backend.app.models.enums import BatchType, ScheduleFrequency
from backend.app.services.periods import (
    detect_invoice_period,
    get_batch_period,
    get_period_options,
    next_billing_period,
    ordinal_suffix,
)


def test_no_prior_invoice_starts_with_first_batch_of_current_month():
    period = next_billing_period(None, today=date(2024, 3, 20))
    assert (period.start, period.end) == ("2024-03-01", "2024-03-15")
    assert period.batch == BatchType.FIRST_BATCH
    assert period.is_auto_detected is True


def test_first_half_is_followed_by_second_half_of_leap_february():
    period = next_billing_period(date(2024, 2, 10))
    assert (period.start, period.end) == ("2024-02-16", "2024-02-29")
    assert period.batch == BatchType.SECOND_BATCH


def test_first_half_is_followed_by_second_half_of_common_february():
    period = next_billing_period(date(2023, 2, 15))
    assert (period.start, period.end) == ("2023-02-16", "2023-02-28")


def test_first_half_of_april_is_followed_by_second_half_ending_on_the_30th():
    period = next_billing_period(date(2024, 4, 15))
    assert (period.start, period.end) == ("2024-04-16", "2024-04-30")
    assert period.batch == BatchType.SECOND_BATCH


def test_second_half_is_followed_by_first_half_of_next_month():
    period = next_billing_period(date(2024, 4, 30))
    assert (period.start, period.end) == ("2024-05-01", "2024-05-15")
    assert period.batch == BatchType.FIRST_BATCH


def test_december_rolls_over_to_january():
    period = next_billing_period(date(2024, 12, 31))
    assert (period.start, period.end) == ("2025-01-01", "2025-01-15")


def test_get_batch_period_labels():
    first = get_batch_period(BatchType.FIRST_BATCH, date(2024, 2, 5))
    assert first.label == "1st Batch (1-15 Feb)"
    second = get_batch_period(BatchType.SECOND_BATCH, date(2024, 2, 5))
    assert second.end == "2024-02-29"
    assert second.label == "2nd Batch (16-29 Feb)"
    whole = get_batch_period(BatchType.WHOLE_MONTH, date(2024, 2, 5))
    assert (whole.start, whole.end) == ("2024-02-01", "2024-02-29")
    assert whole.label == "Whole Month (February)"


def test_detect_period_early_in_month_bills_previous_second_half():
    period = detect_invoice_period(ScheduleFrequency.BOTH_15TH_AND_LAST, date(2024, 3, 10))
    assert (period.start, period.end) == ("2024-02-16", "2024-02-29")
    assert period.label == "16th - 29th Feb 2024"


def test_detect_period_late_in_month_bills_current_first_half():
    period = detect_invoice_period(ScheduleFrequency.EVERY_15TH, date(2024, 3, 20))
    assert (period.start, period.end) == ("2024-03-01", "2024-03-15")
    assert period.label == "1st - 15th Mar 2024"


def test_detect_period_in_january_looks_at_previous_december():
    period = detect_invoice_period(ScheduleFrequency.EVERY_LAST_DAY, date(2025, 1, 5))
    assert (period.start, period.end) == ("2024-12-16", "2024-12-31")
    assert period.label == "16th - 31st Dec 2024"


def test_detect_period_custom_schedule_uses_whole_month():
    period = detect_invoice_period(ScheduleFrequency.CUSTOM, date(2024, 6, 3))
    assert (period.start, period.end) == ("2024-06-01", "2024-06-30")
    assert period.batch == BatchType.WHOLE_MONTH


def test_period_options_cover_current_and_previous_month():
    options = get_period_options(date(2024, 1, 10))
    assert len(options) == 6
    assert (options[0].start, options[0].end) == ("2024-01-01", "2024-01-15")
    assert (options[3].start, options[3].end) == ("2023-12-16", "2023-12-31")
    assert options[-1].label == "Full December 2023"


def test_ordinal_suffix():
    assert [ordinal_suffix(day) for day in (1, 2, 3, 4, 11, 12, 13, 21, 22, 23, 30, 31)] == [
        "st", "nd", "rd", "th", "th", "th", "th", "st", "nd", "rd", "th", "st",
    ]
