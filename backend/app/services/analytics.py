"""Invoice analytics over live, non-archived invoices."""

from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session

from backend.app.crud.crud_invoice import invoice_crud
from backend.app.models.enums import InvoiceStatus
from backend.app.models.invoice import Invoice
from backend.app.models.invoice_folder import InvoiceFolder
from backend.app.services.folders import get_folder, list_folders

UNKNOWN_CLIENT = "Unknown"

PENDING_STATUSES = {
    InvoiceStatus.TO_SEND.value,
    InvoiceStatus.SENT.value,
    InvoiceStatus.VIEWED.value,
    InvoiceStatus.PARTIAL_PAYMENT.value,
}
SENT_STATUSES = {InvoiceStatus.SENT.value, InvoiceStatus.VIEWED.value}
CLOSED_STATUSES = {InvoiceStatus.PAID.value, InvoiceStatus.CANCELLED.value, InvoiceStatus.REFUNDED.value}


def _active(db: Session, owner_id: int, include_archived: bool = False, **filters) -> List[Invoice]:
    query = invoice_crud.query(db, owner_id=owner_id)
    if not include_archived:
        query = query.filter(Invoice.is_archived.is_(False))
    for field, value in filters.items():
        query = query.filter(getattr(Invoice, field) == value)
    return query.order_by(Invoice.created_at.desc()).all()


def _client(invoice: Invoice) -> str:
    return (invoice.to_party or {}).get("name") or UNKNOWN_CLIENT


def _amount(invoices) -> float:
    return sum(invoice.total_amount or 0 for invoice in invoices)


def _breakdown(invoices, key) -> dict:
    breakdown: dict[str, dict] = {}
    for invoice in invoices:
        entry = breakdown.setdefault(key(invoice), {"count": 0, "total": 0.0})
        entry["count"] += 1
        entry["total"] += invoice.total_amount or 0
    return breakdown


def calculate_analytics(invoices: List[Invoice], folder: Optional[InvoiceFolder] = None) -> dict:
    count = len(invoices)
    total_amount = _amount(invoices)
    total_hours = sum(invoice.total_hours or 0 for invoice in invoices)

    def by_status(statuses):
        return [invoice for invoice in invoices if invoice.status in statuses]

    dates = sorted(invoice.issue_date for invoice in invoices if invoice.issue_date)

    return {
        "folder_id": folder.id if folder else None,
        "folder_name": folder.name if folder else None,
        "invoice_count": count,
        "total_amount": total_amount,
        "total_hours": total_hours,
        "total_days": sum(invoice.total_days or 0 for invoice in invoices),
        "average_amount": total_amount / count if count else 0,
        "average_hours_per_invoice": total_hours / count if count else 0,
        "paid_amount": _amount(by_status({InvoiceStatus.PAID.value})),
        "pending_amount": _amount(by_status(PENDING_STATUSES)),
        "overdue_amount": _amount(by_status({InvoiceStatus.OVERDUE.value})),
        "draft_count": len(by_status({InvoiceStatus.DRAFT.value})),
        "sent_count": len(by_status(SENT_STATUSES)),
        "paid_count": len(by_status({InvoiceStatus.PAID.value})),
        "overdue_count": len(by_status({InvoiceStatus.OVERDUE.value})),
        "currency_breakdown": _breakdown(invoices, lambda invoice: invoice.currency),
        "client_breakdown": _breakdown(invoices, _client),
        "oldest_invoice_date": dates[0] if dates else None,
        "newest_invoice_date": dates[-1] if dates else None,
    }


def folder_analytics(db: Session, owner_id: int, folder_id: int) -> dict:
    folder = get_folder(db, owner_id, folder_id)
    return calculate_analytics(_active(db, owner_id, folder_id=folder.id), folder)


def all_folders_analytics(db: Session, owner_id: int) -> List[dict]:
    return [
        calculate_analytics(_active(db, owner_id, folder_id=folder.id), folder) for folder in list_folders(db, owner_id)
    ]


def global_analytics(db: Session, owner_id: int, include_archived: bool = False) -> dict:
    return calculate_analytics(_active(db, owner_id, include_archived=include_archived))


def unfiled_analytics(db: Session, owner_id: int) -> dict:
    return calculate_analytics(_active(db, owner_id, folder_id=None))


def analytics_by_status(db: Session, owner_id: int) -> dict:
    groups: dict[str, list] = {}
    for invoice in _active(db, owner_id):
        groups.setdefault(invoice.status, []).append(invoice)

    result = {}
    for status, invoices in groups.items():
        total_amount = _amount(invoices)
        result[status] = {
            "count": len(invoices),
            "total_amount": total_amount,
            "total_hours": sum(invoice.total_hours or 0 for invoice in invoices),
            "average_amount": total_amount / len(invoices),
        }
    return result


def analytics_by_client(db: Session, owner_id: int) -> List[dict]:
    groups: dict[str, list] = {}
    for invoice in _active(db, owner_id):
        groups.setdefault(_client(invoice), []).append(invoice)

    result = []
    for client_name, invoices in groups.items():
        total_amount = _amount(invoices)
        result.append(
            {
                "client_name": client_name,
                "invoice_count": len(invoices),
                "total_amount": total_amount,
                "total_hours": sum(invoice.total_hours or 0 for invoice in invoices),
                "paid_amount": _amount(i for i in invoices if i.status == InvoiceStatus.PAID.value),
                "pending_amount": _amount(i for i in invoices if i.status not in CLOSED_STATUSES),
                "average_amount": total_amount / len(invoices),
                "last_invoice_date": max(invoice.issue_date or "" for invoice in invoices),
            }
        )
    return sorted(result, key=lambda entry: entry["total_amount"], reverse=True)


def monthly_analytics(db: Session, owner_id: int, year: Optional[int] = None) -> dict:
    year = year or date.today().year
    months = {f"{year}-{month:02d}": {"invoiced": 0.0, "paid": 0.0, "hours": 0.0, "count": 0} for month in range(1, 13)}
    for invoice in _active(db, owner_id):
        key = (invoice.issue_date or "")[:7]
        if key not in months:
            continue
        bucket = months[key]
        bucket["invoiced"] += invoice.total_amount or 0
        bucket["hours"] += invoice.total_hours or 0
        bucket["count"] += 1
        if invoice.status == InvoiceStatus.PAID.value:
            bucket["paid"] += invoice.total_amount or 0
    return {"year": year, "months": [{"month": key, **data} for key, data in sorted(months.items())]}
