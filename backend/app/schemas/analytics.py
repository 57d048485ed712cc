"""Analytics schemas."""

from typing import Dict, List, Optional

from pydantic import BaseModel


class BreakdownEntry(BaseModel):
    count: int
    total: float


class InvoiceAnalytics(BaseModel):
    folder_id: Optional[int] = None
    folder_name: Optional[str] = None
    invoice_count: int
    total_amount: float
    total_hours: float
    total_days: int
    average_amount: float
    average_hours_per_invoice: float
    paid_amount: float
    pending_amount: float
    overdue_amount: float
    draft_count: int
    sent_count: int
    paid_count: int
    overdue_count: int
    currency_breakdown: Dict[str, BreakdownEntry]
    client_breakdown: Dict[str, BreakdownEntry]
    oldest_invoice_date: Optional[str] = None
    newest_invoice_date: Optional[str] = None


class StatusAnalytics(BaseModel):
    count: int
    total_amount: float
    total_hours: float
    average_amount: float


class ClientAnalytics(BaseModel):
    client_name: str
    invoice_count: int
    total_amount: float
    total_hours: float
    paid_amount: float
    pending_amount: float
    average_amount: float
    last_invoice_date: str


class MonthlyAnalytics(BaseModel):
    month: str
    invoiced: float
    paid: float
    hours: float
    count: int


class MonthlyAnalyticsList(BaseModel):
    year: int
    months: List[MonthlyAnalytics]
