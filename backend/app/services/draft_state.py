"""
In-progress invoice draft and the reducers that edit it.

An `InvoiceDraft` is never mutated: every reducer takes a draft and returns a
new one. Reducers touching hours, rate, line items, discount or tax return a
draft with totals already recomputed.
"""

from typing import List, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from backend.app.core.time import today_str
from backend.app.models.enums import Currency, InvoiceStatus, PageSize, PaymentTerms
from backend.app.schemas.invoice import BankDetails, DailyWorkHours, LineItem, PartyInfo
from backend.app.services.billing import calculate_invoice_totals, line_item_amount, recalculate_line_items
from backend.app.services.work_hours import generate_work_hours


class InvoiceDraft(BaseModel):
    model_config = ConfigDict(frozen=True)

    invoice_number: str = ""
    status: InvoiceStatus = InvoiceStatus.DRAFT
    issue_date: str = Field(default_factory=today_str)
    due_date: Optional[str] = None
    period_start: Optional[str] = None
    period_end: Optional[str] = None

    from_party: PartyInfo = Field(default_factory=PartyInfo)
    to_party: PartyInfo = Field(default_factory=PartyInfo)
    bank_details: Optional[BankDetails] = None

    hourly_rate: float = 0
    default_hours_per_day: float = 8
    daily_work_hours: List[DailyWorkHours] = Field(default_factory=list)
    line_items: List[LineItem] = Field(default_factory=list)

    discount_percent: float = 0
    tax_percent: float = 0
    currency: Currency = Currency.USD
    payment_terms: PaymentTerms = PaymentTerms.NET_30
    page_size: PageSize = PageSize.A4
    background_design_id: Optional[str] = None

    notes: Optional[str] = None
    terms: Optional[str] = None
    job_title: Optional[str] = None

    total_days: int = 0
    total_hours: float = 0
    subtotal: float = 0
    discount_amount: float = 0
    tax_amount: float = 0
    total_amount: float = 0


def recalculate(draft: InvoiceDraft) -> InvoiceDraft:
    totals = calculate_invoice_totals(
        draft.daily_work_hours,
        draft.hourly_rate,
        draft.line_items,
        draft.discount_percent,
        draft.tax_percent,
    )
    line_items = [LineItem(**item) for item in recalculate_line_items(draft.line_items)]
    return draft.model_copy(update={**totals.as_dict(), "line_items": line_items})


def _plain(value):
    if isinstance(value, BaseModel):
        return value.model_dump()
    if isinstance(value, list):
        return [_plain(item) for item in value]
    return value


def _replace(draft: InvoiceDraft, **changes) -> InvoiceDraft:
    """Copy a draft with changes, validated like a freshly built draft."""
    data = draft.model_dump()
    data.update({field: _plain(value) for field, value in changes.items()})
    return InvoiceDraft.model_validate(data)


def _with_totals(draft: InvoiceDraft, **changes) -> InvoiceDraft:
    return recalculate(_replace(draft, **changes))


def update_draft(draft: InvoiceDraft, **changes) -> InvoiceDraft:
    """Generic field update. Totals follow whatever changed."""
    return _with_totals(draft, **changes)


def reset_draft(invoice_number: Optional[str] = None) -> InvoiceDraft:
    return InvoiceDraft(invoice_number=invoice_number or "")


def update_from_info(draft: InvoiceDraft, **info) -> InvoiceDraft:
    return _replace(draft, from_party={**draft.from_party.model_dump(), **info})


def update_to_info(draft: InvoiceDraft, **info) -> InvoiceDraft:
    return _replace(draft, to_party={**draft.to_party.model_dump(), **info})


def update_bank_details(draft: InvoiceDraft, **details) -> InvoiceDraft:
    current = draft.bank_details or BankDetails()
    return _replace(draft, bank_details={**current.model_dump(), **details})


def set_daily_work_hours(draft: InvoiceDraft, days: List[DailyWorkHours]) -> InvoiceDraft:
    return _with_totals(draft, daily_work_hours=list(days))


def update_day_hours(draft: InvoiceDraft, day: str, hours: float, notes: Optional[str] = None) -> InvoiceDraft:
    """Set the hours of one day, adding it as a workday when it is not in the calendar yet."""
    days = list(draft.daily_work_hours)
    for index, entry in enumerate(days):
        if entry.date == day:
            days[index] = DailyWorkHours(**{**entry.model_dump(), "hours": hours, "notes": notes if notes is not None else entry.notes})
            break
    else:
        days.append(DailyWorkHours(date=day, hours=hours, is_workday=True, notes=notes))
    return _with_totals(draft, daily_work_hours=days)


def toggle_workday(draft: InvoiceDraft, day: str) -> InvoiceDraft:
    days = [
        DailyWorkHours(**{**entry.model_dump(), "is_workday": not entry.is_workday}) if entry.date == day else entry
        for entry in draft.daily_work_hours
    ]
    return _with_totals(draft, daily_work_hours=days)


def set_default_hours_for_period(draft: InvoiceDraft, start: str, end: str, default_hours: float) -> InvoiceDraft:
    """
    Rebuild the calendar for a period from the work-hours generator. Days
    already in the draft keep their values.
    """
    existing = {entry.date: entry for entry in draft.daily_work_hours}
    days = [existing.get(day["date"]) or DailyWorkHours(**day) for day in generate_work_hours(start, end, default_hours)]
    return _with_totals(draft, daily_work_hours=days, period_start=start, period_end=end)


def add_line_item(draft: InvoiceDraft, description: str, quantity: float, unit_price: float) -> InvoiceDraft:
    item = LineItem(
        id=uuid4().hex,
        description=description,
        quantity=quantity,
        unit_price=unit_price,
        amount=line_item_amount(quantity, unit_price),
    )
    return _with_totals(draft, line_items=list(draft.line_items) + [item])


def update_line_item(draft: InvoiceDraft, item_id: str, **changes) -> InvoiceDraft:
    items = []
    for item in draft.line_items:
        if item.id == item_id:
            item = item.model_copy(update=changes)
            item = item.model_copy(update={"amount": line_item_amount(item.quantity, item.unit_price)})
        items.append(item)
    return _with_totals(draft, line_items=items)


def remove_line_item(draft: InvoiceDraft, item_id: str) -> InvoiceDraft:
    return _with_totals(draft, line_items=[item for item in draft.line_items if item.id != item_id])


def set_hourly_rate(draft: InvoiceDraft, rate: float) -> InvoiceDraft:
    return _with_totals(draft, hourly_rate=rate)


def set_discount_percent(draft: InvoiceDraft, percent: float) -> InvoiceDraft:
    return _with_totals(draft, discount_percent=percent)


def set_tax_percent(draft: InvoiceDraft, percent: float) -> InvoiceDraft:
    return _with_totals(draft, tax_percent=percent)
