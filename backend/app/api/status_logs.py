"""Status log routes."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from backend.app.db.session import get_db
from backend.app.dependencies.auth import get_current_user, get_optional_user
from backend.app.models.enums import InvoiceStatus
from backend.app.models.user import User
from backend.app.schemas.status_log import StatusLogPage, StatusLogRead, StatusLogStats
from backend.app.services import status_logs as status_log_service
from backend.app.services.invoices import get_invoice

router = APIRouter(prefix="/status-logs", tags=["status-logs"])


@router.get("/", response_model=StatusLogPage)
async def list_status_logs(
    invoice_id: Optional[int] = None,
    folder_id: Optional[int] = None,
    status: Optional[InvoiceStatus] = None,
    search: Optional[str] = None,
    date_from: Optional[int] = None,
    date_to: Optional[int] = None,
    cursor: Optional[int] = None,
    limit: Optional[int] = Query(default=None, ge=1),
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user),
):
    if current_user is None:
        return {"items": [], "next_cursor": None}
    items, next_cursor = status_log_service.list_status_logs(
        db,
        current_user.id,
        invoice_id=invoice_id,
        folder_id=folder_id,
        status=status.value if status else None,
        search=search,
        date_from=date_from,
        date_to=date_to,
        cursor=cursor,
        limit=limit,
    )
    return {"items": items, "next_cursor": next_cursor}


@router.get("/stats", response_model=Optional[StatusLogStats])
async def get_status_log_stats(
    date_from: Optional[int] = None,
    date_to: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user),
):
    if current_user is None:
        return None
    return status_log_service.status_log_stats(db, current_user.id, date_from, date_to)


@router.get("/invoice/{invoice_id}", response_model=List[StatusLogRead])
async def list_invoice_status_logs(
    invoice_id: int, db: Session = Depends(get_db), current_user: Optional[User] = Depends(get_optional_user)
):
    if current_user is None:
        return []
    return status_log_service.logs_for_invoice(db, current_user.id, invoice_id)


@router.delete("/invoice/{invoice_id}")
async def delete_invoice_status_logs(
    invoice_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)
):
    get_invoice(db, current_user.id, invoice_id)
    deleted = status_log_service.delete_logs_for_invoice(db, current_user.id, invoice_id)
    return {"deleted": deleted}
