"""Status change audit trail shared by single and bulk invoice status updates."""

import logging
from typing import List, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from backend.app.core.errors import ValidationError
from backend.app.core.settings import get_settings
from backend.app.core.time import now_iso, now_ms
from backend.app.models.invoice import Invoice
from backend.app.models.invoice_folder import InvoiceFolder
from backend.app.models.status_log import StatusLog

logger = logging.getLogger(__name__)

RECENT_ACTIVITY_SIZE = 10


def record_status_change(
    db: Session,
    invoice: Invoice,
    previous_status: Optional[str],
    new_status: str,
    notes: Optional[str] = None,
) -> StatusLog:
    """Add a log row to the session. The caller commits with the invoice change."""
    folder = db.get(InvoiceFolder, invoice.folder_id) if invoice.folder_id is not None else None
    log = StatusLog(
        owner_id=invoice.owner_id,
        invoice_id=invoice.id,
        invoice_number=invoice.invoice_number,
        folder_id=invoice.folder_id,
        folder_name=folder.name if folder is not None and folder.deleted_at is None else None,
        previous_status=previous_status,
        new_status=new_status,
        notes=notes,
        changed_at=now_ms(),
        changed_at_str=now_iso(),
    )
    db.add(log)
    return log


def _check_range(date_from: Optional[int], date_to: Optional[int]) -> None:
    if date_from is not None and date_to is not None and date_from > date_to:
        raise ValidationError("date_from must not be after date_to")


def list_status_logs(
    db: Session,
    owner_id: int,
    *,
    invoice_id: Optional[int] = None,
    folder_id: Optional[int] = None,
    status: Optional[str] = None,
    search: Optional[str] = None,
    date_from: Optional[int] = None,
    date_to: Optional[int] = None,
    cursor: Optional[int] = None,
    limit: Optional[int] = None,
) -> tuple[List[StatusLog], Optional[int]]:
    """
    Page through logs newest first.

    `cursor` is the `changed_at` of the last row of the previous page; the
    returned cursor is None once there is nothing left.
    """
    _check_range(date_from, date_to)
    limit = limit or get_settings().status_log_page_size

    query = db.query(StatusLog).filter(StatusLog.owner_id == owner_id)
    if invoice_id is not None:
        query = query.filter(StatusLog.invoice_id == invoice_id)
    if folder_id is not None:
        query = query.filter(StatusLog.folder_id == folder_id)
    if status:
        query = query.filter(StatusLog.new_status == status)
    if date_from is not None:
        query = query.filter(StatusLog.changed_at >= date_from)
    if date_to is not None:
        query = query.filter(StatusLog.changed_at <= date_to)
    if search:
        pattern = f"%{search.lower()}%"
        query = query.filter(
            or_(func.lower(StatusLog.invoice_number).like(pattern), func.lower(StatusLog.folder_name).like(pattern))
        )
    if cursor is not None:
        query = query.filter(StatusLog.changed_at < cursor)

    rows = query.order_by(StatusLog.changed_at.desc(), StatusLog.id.desc()).limit(limit + 1).all()
    has_more = len(rows) > limit
    items = rows[:limit]
    next_cursor = items[-1].changed_at if has_more and items else None
    return items, next_cursor


def logs_for_invoice(db: Session, owner_id: int, invoice_id: int) -> List[StatusLog]:
    return (
        db.query(StatusLog)
        .filter(StatusLog.owner_id == owner_id, StatusLog.invoice_id == invoice_id)
        .order_by(StatusLog.changed_at.desc(), StatusLog.id.desc())
        .all()
    )


def status_log_stats(
    db: Session, owner_id: int, date_from: Optional[int] = None, date_to: Optional[int] = None
) -> dict:
    _check_range(date_from, date_to)
    query = db.query(StatusLog).filter(StatusLog.owner_id == owner_id)
    if date_from is not None:
        query = query.filter(StatusLog.changed_at >= date_from)
    if date_to is not None:
        query = query.filter(StatusLog.changed_at <= date_to)

    logs = query.order_by(StatusLog.changed_at.desc(), StatusLog.id.desc()).all()
    by_status: dict[str, int] = {}
    for log in logs:
        by_status[log.new_status] = by_status.get(log.new_status, 0) + 1

    return {
        "total_changes": len(logs),
        "by_status": by_status,
        "recent_activity": logs[:RECENT_ACTIVITY_SIZE],
    }


def delete_logs_for_invoice(db: Session, owner_id: int, invoice_id: int) -> int:
    deleted = (
        db.query(StatusLog)
        .filter(StatusLog.owner_id == owner_id, StatusLog.invoice_id == invoice_id)
        .delete(synchronize_session=False)
    )
    db.commit()
    logger.info("Deleted %s status logs for invoice %s", deleted, invoice_id)
    return deleted
