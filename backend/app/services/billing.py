"""Billing service utilities: invoice totals from work hours and line items."""

from dataclasses import asdict, dataclass
from decimal import ROUND_HALF_UP, Decimal

from backend.app.models.enums import CURRENCY_SYMBOLS, Currency
from backend.app.services.work_hours import calculate_work_totals


@dataclass(frozen=True)
class InvoiceTotals:
    total_days: int
    total_hours: float
    subtotal: float
    discount_amount: float
    tax_amount: float
    total_amount: float

    def as_dict(self) -> dict:
        return asdict(self)


def _value(obj, name, default=None):
    if isinstance(obj, dict):
        return obj.get(name, default)
    return getattr(obj, name, default)


def line_item_amount(quantity: float | None, unit_price: float | None) -> float:
    return float(quantity or 0) * float(unit_price or 0)


def recalculate_line_items(line_items) -> list[dict]:
    """Return line items as dicts with amount recomputed from quantity and unit price."""
    recalculated = []
    for item in line_items or []:
        data = dict(item) if isinstance(item, dict) else item.model_dump()
        data["amount"] = line_item_amount(data.get("quantity"), data.get("unit_price"))
        recalculated.append(data)
    return recalculated


def calculate_invoice_totals(
    daily_work_hours,
    hourly_rate: float | None,
    line_items=None,
    discount_percent: float | None = 0,
    tax_percent: float | None = 0,
) -> InvoiceTotals:
    total_days, total_hours = calculate_work_totals(daily_work_hours or [])
    hourly_subtotal = total_hours * float(hourly_rate or 0)
    # Stored amounts may be stale, always derive them
    items_total = sum(
        line_item_amount(_value(item, "quantity"), _value(item, "unit_price")) for item in line_items or []
    )
    subtotal = hourly_subtotal + items_total

    discount_amount = subtotal * (float(discount_percent or 0) / 100)
    after_discount = subtotal - discount_amount
    tax_amount = after_discount * (float(tax_percent or 0) / 100)

    return InvoiceTotals(
        total_days=total_days,
        total_hours=total_hours,
        subtotal=subtotal,
        discount_amount=discount_amount,
        tax_amount=tax_amount,
        total_amount=after_discount + tax_amount,
    )


def apply_invoice_totals(invoice) -> InvoiceTotals:
    """Recompute and store totals and line item amounts on an Invoice row."""
    invoice.line_items = recalculate_line_items(invoice.line_items)
    totals = calculate_invoice_totals(
        invoice.daily_work_hours,
        invoice.hourly_rate,
        invoice.line_items,
        invoice.discount_percent,
        invoice.tax_percent,
    )
    for field, value in totals.as_dict().items():
        setattr(invoice, field, value)
    return totals


def round_money(value: float | None) -> Decimal:
    return Decimal(str(value or 0)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def format_money(value: float | None, currency: str | Currency = Currency.USD) -> str:
    symbol = CURRENCY_SYMBOLS.get(Currency(currency), "")
    return f"{symbol}{round_money(value):,.2f}"
