from datetime import date

import pytest

from backend.app.services.work_hours import calculate_work_totals, check_work_hours_calendar, generate_work_hours


def test_generate_work_hours_covers_every_day_inclusive():
    # 2024-03-01 is a Friday
    days = generate_work_hours("2024-03-01", "2024-03-04", 8)
    assert [day["date"] for day in days] == ["2024-03-01", "2024-03-02", "2024-03-03", "2024-03-04"]
    assert [day["is_workday"] for day in days] == [True, False, False, True]
    assert all(day["hours"] == 8 for day in days)


def test_generate_work_hours_single_day():
    days = generate_work_hours("2024-03-05", "2024-03-05", 7.5)
    assert days == [{"date": "2024-03-05", "hours": 7.5, "is_workday": True}]


def test_generate_work_hours_rejects_inverted_range():
    with pytest.raises(ValueError):
        generate_work_hours("2024-03-10", "2024-03-01", 8)


def test_weekends_do_not_count_towards_totals():
    days = generate_work_hours("2024-03-01", "2024-03-15", 8)
    total_days, total_hours = calculate_work_totals(days)
    assert total_days == 11
    assert total_hours == 88


def test_zero_hour_workdays_are_not_counted():
    days = [
        {"date": "2024-03-04", "hours": 8, "is_workday": True},
        {"date": "2024-03-05", "hours": 0, "is_workday": True},
        {"date": "2024-03-06", "hours": 4.5, "is_workday": True},
        {"date": "2024-03-09", "hours": 6, "is_workday": False},
    ]
    assert calculate_work_totals(days) == (2, 12.5)


def test_range_across_a_year_boundary():
    days = generate_work_hours("2024-12-30", "2025-01-02", 8)
    assert [day["date"] for day in days] == ["2024-12-30", "2024-12-31", "2025-01-01", "2025-01-02"]
    assert all(day["is_workday"] for day in days)


@pytest.mark.parametrize(
    "start,end,expected",
    [
        ("2024-02-28", "2024-03-01", ["2024-02-28", "2024-02-29", "2024-03-01"]),
        ("2023-02-27", "2023-03-01", ["2023-02-27", "2023-02-28", "2023-03-01"]),
    ],
)
def test_end_of_february_in_leap_and_common_years(start, end, expected):
    assert [day["date"] for day in generate_work_hours(start, end, 8)] == expected


def test_long_range_has_one_record_per_day_in_ascending_order():
    start, end = date(2024, 1, 20), date(2024, 4, 5)
    days = generate_work_hours(start, end, 6)
    assert len(days) == (end - start).days + 1
    dates = [day["date"] for day in days]
    assert dates == sorted(set(dates))
    for day in days:
        weekend = date.fromisoformat(day["date"]).weekday() >= 5
        assert day["is_workday"] is not weekend
        assert day["hours"] == 6


def test_generation_is_repeatable():
    assert generate_work_hours("2024-02-26", "2024-03-10", 7.5) == generate_work_hours("2024-02-26", "2024-03-10", 7.5)


def test_calendar_check_accepts_generated_days():
    check_work_hours_calendar(generate_work_hours("2024-03-01", "2024-03-15", 8), "2024-03-01", "2024-03-15")
    check_work_hours_calendar([{"date": "2030-01-01", "hours": 8}])


@pytest.mark.parametrize(
    "days,start,end",
    [
        ([{"date": "2024-03-04", "hours": 8}, {"date": "2024-03-04", "hours": 8}], None, None),
        ([{"date": "2024-03-04", "hours": 8}, {"date": "2030-01-01", "hours": 8}], "2024-03-04", "2024-03-04"),
        ([], "2024-03-05", "2024-03-04"),
    ],
)
def test_calendar_check_rejects_repeats_strays_and_inverted_periods(days, start, end):
    with pytest.raises(ValueError):
        check_work_hours_calendar(days, start, end)
