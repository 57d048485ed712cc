import pytest
from pydantic import ValidationError

from backend.app.schemas.invoice import DailyWorkHours
from backend.app.services.draft_state import (
    InvoiceDraft,
    add_line_item,
    remove_line_item,
    reset_draft,
    set_daily_work_hours,
    set_default_hours_for_period,
    set_discount_percent,
    set_hourly_rate,
    set_tax_percent,
    toggle_workday,
    update_bank_details,
    update_day_hours,
    update_draft,
    update_from_info,
    update_line_item,
    update_to_info,
)
from backend.app.services.work_hours import generate_work_hours


def test_reducers_return_new_drafts_with_totals():
    draft = reset_draft("INV-001")
    updated = set_hourly_rate(
        set_daily_work_hours(draft, [DailyWorkHours(date="2024-03-04", hours=8)]),
        50,
    )
    assert draft.total_amount == 0
    assert updated.total_hours == 8
    assert updated.total_amount == 400
    assert updated.invoice_number == "INV-001"


def test_drafts_are_immutable():
    draft = InvoiceDraft()
    with pytest.raises(Exception):
        draft.hourly_rate = 10


def test_default_hours_for_period_keeps_existing_days():
    draft = update_day_hours(InvoiceDraft(), "2024-03-04", 4)
    # 2024-03-02 and 03 are a weekend
    draft = set_default_hours_for_period(draft, "2024-03-01", "2024-03-05", 8)
    hours = {day.date: (day.hours, day.is_workday) for day in draft.daily_work_hours}
    assert hours == {
        "2024-03-01": (8, True),
        "2024-03-02": (8, False),
        "2024-03-03": (8, False),
        "2024-03-04": (4, True),
        "2024-03-05": (8, True),
    }
    assert draft.total_hours == 20
    assert (draft.period_start, draft.period_end) == ("2024-03-01", "2024-03-05")


def test_toggle_workday_removes_hours_from_totals():
    draft = set_default_hours_for_period(InvoiceDraft(), "2024-03-04", "2024-03-05", 8)
    draft = toggle_workday(draft, "2024-03-05")
    assert draft.total_days == 1
    assert draft.total_hours == 8


def test_line_item_lifecycle():
    draft = add_line_item(InvoiceDraft(), "Hosting", 2, 25)
    item_id = draft.line_items[0].id
    assert draft.line_items[0].amount == 50
    assert draft.subtotal == 50

    draft = update_line_item(draft, item_id, quantity=3)
    assert draft.line_items[0].amount == 75
    assert draft.subtotal == 75

    draft = remove_line_item(draft, item_id)
    assert draft.line_items == []
    assert draft.subtotal == 0


def test_discount_then_tax():
    draft = add_line_item(InvoiceDraft(), "Work", 1, 1000)
    draft = set_tax_percent(set_discount_percent(draft, 10), 10)
    assert draft.discount_amount == 100
    assert draft.tax_amount == pytest.approx(90)
    assert draft.total_amount == pytest.approx(990)


def test_party_updates_merge_fields():
    draft = update_from_info(InvoiceDraft(), name="Acme", email="billing@acme.test")
    draft = update_from_info(draft, phone="555")
    assert draft.from_party.name == "Acme"
    assert draft.from_party.email == "billing@acme.test"
    assert draft.from_party.phone == "555"


def test_client_and_bank_details_start_empty_and_merge():
    draft = update_to_info(InvoiceDraft(), name="Client Co")
    draft = update_bank_details(draft, bank_name="First Bank")
    draft = update_bank_details(draft, iban="DE00123")
    assert draft.to_party.name == "Client Co"
    assert draft.from_party.name == ""
    assert draft.bank_details.bank_name == "First Bank"
    assert draft.bank_details.iban == "DE00123"


def test_generic_update_recomputes_totals():
    draft = set_daily_work_hours(InvoiceDraft(), [DailyWorkHours(date="2024-03-04", hours=8)])
    draft = update_draft(draft, hourly_rate=50, tax_percent=10)
    assert draft.subtotal == 400
    assert draft.total_amount == pytest.approx(440)


def test_period_calendar_matches_the_work_hours_generator():
    draft = set_default_hours_for_period(InvoiceDraft(), "2024-03-01", "2024-03-03", 8)
    generated = generate_work_hours("2024-03-01", "2024-03-03", 8)
    assert [(d.date, d.hours, d.is_workday) for d in draft.daily_work_hours] == [
        (d["date"], d["hours"], d["is_workday"]) for d in generated
    ]
    assert draft.total_days == 1
    assert draft.total_hours == 8


@pytest.mark.parametrize("hours", [25, 0.3, -1])
def test_day_hours_are_validated(hours):
    draft = set_default_hours_for_period(InvoiceDraft(), "2024-03-04", "2024-03-04", 8)
    with pytest.raises(ValidationError):
        update_day_hours(draft, "2024-03-04", hours)
    with pytest.raises(ValidationError):
        update_day_hours(draft, "2024-03-05", hours)


def test_generic_update_validates_nested_work_hours():
    with pytest.raises(ValidationError):
        update_draft(InvoiceDraft(), daily_work_hours=[{"date": "2024-03-04", "hours": 30}])
    with pytest.raises(ValidationError):
        update_draft(InvoiceDraft(), daily_work_hours=[{"date": "not-a-date", "hours": 8}])
