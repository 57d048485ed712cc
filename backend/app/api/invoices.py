"""Invoice routes: listing, lifecycle, numbering, billing helpers and bulk actions."""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from backend.app.core.time import format_date
from backend.app.db.session import get_db
from backend.app.dependencies.auth import get_current_user, get_optional_user
from backend.app.models.enums import InvoiceStatus
from backend.app.models.user import User
from backend.app.schemas.invoice import (
    BillingPeriodRead,
    BulkInvoiceIds,
    BulkMove,
    BulkOperationResult,
    BulkStatusUpdate,
    CalculateRequest,
    DailyWorkHours,
    InvoiceCreate,
    InvoiceDuplicate,
    InvoiceFilters,
    InvoiceMove,
    InvoiceNumberAvailability,
    InvoiceRead,
    InvoiceStatusUpdate,
    InvoiceTotalsRead,
    InvoiceUpdate,
    NextInvoiceNumber,
    QuickCreateRequest,
    WorkHoursRequest,
)
from backend.app.services import invoices as invoice_service
from backend.app.services.draft_state import InvoiceDraft, recalculate
from backend.app.services.folders import resolve_folder
from backend.app.services.numbering import is_invoice_number_available, last_number_in
from backend.app.services.pdf_export import PDF_MEDIA_TYPE, export_invoice_pdf, pdf_filename
from backend.app.services.user_profiles import get_invoice_prefix
from backend.app.services.work_hours import generate_work_hours

router = APIRouter(prefix="/invoices", tags=["invoices"])


@router.get("/", response_model=List[InvoiceRead])
async def list_invoices(
    folder_id: Optional[int] = None,
    unfiled: bool = False,
    status: Optional[InvoiceStatus] = None,
    statuses: Optional[List[InvoiceStatus]] = Query(default=None),
    is_archived: Optional[bool] = False,
    tags: Optional[List[int]] = Query(default=None),
    client_name: Optional[str] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    amount_min: Optional[float] = None,
    amount_max: Optional[float] = None,
    search: Optional[str] = None,
    limit: Optional[int] = Query(default=None, ge=1),
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user),
):
    if current_user is None:
        return []
    filters = InvoiceFilters(
        folder_id=folder_id,
        unfiled=unfiled,
        status=status,
        statuses=statuses,
        is_archived=is_archived,
        tags=tags,
        client_name=client_name,
        date_from=format_date(date_from) if date_from else None,
        date_to=format_date(date_to) if date_to else None,
        amount_min=amount_min,
        amount_max=amount_max,
        search=search,
        limit=limit,
    )
    return invoice_service.list_invoices(db, current_user.id, filters)


@router.get("/recent", response_model=List[InvoiceRead])
async def list_recent_invoices(
    limit: int = Query(default=invoice_service.RECENT_LIMIT, ge=1),
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user),
):
    if current_user is None:
        return []
    return invoice_service.list_recent(db, current_user.id, limit)


@router.get("/archived", response_model=List[InvoiceRead])
async def list_archived_invoices(
    limit: Optional[int] = Query(default=None, ge=1),
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user),
):
    if current_user is None:
        return []
    return invoice_service.list_archived(db, current_user.id, limit)


@router.get("/unfiled", response_model=List[InvoiceRead])
async def list_unfiled_invoices(
    db: Session = Depends(get_db), current_user: Optional[User] = Depends(get_optional_user)
):
    if current_user is None:
        return []
    return invoice_service.list_unfiled(db, current_user.id)


@router.get("/by-client", response_model=List[InvoiceRead])
async def list_invoices_by_client(
    client_name: str,
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user),
):
    if current_user is None:
        return []
    return invoice_service.list_by_client(db, current_user.id, client_name)


@router.get("/next-number", response_model=Optional[NextInvoiceNumber])
async def get_next_number(
    folder_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user),
):
    if current_user is None:
        return None
    resolve_folder(db, current_user.id, folder_id)
    formatted = invoice_service.suggest_invoice_number(db, current_user.id, folder_id)
    return {
        "prefix": get_invoice_prefix(db, current_user.id) or "",
        "number": last_number_in(formatted),
        "formatted": formatted,
    }


@router.get("/check-number", response_model=Optional[InvoiceNumberAvailability])
async def check_invoice_number(
    invoice_number: str,
    folder_id: Optional[int] = None,
    exclude_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user),
):
    if current_user is None:
        return None
    available = is_invoice_number_available(db, current_user.id, invoice_number, folder_id, exclude_invoice_id=exclude_id)
    return {"invoice_number": invoice_number, "available": available}


@router.get("/next-period", response_model=Optional[BillingPeriodRead])
async def get_next_period(
    folder_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user),
):
    if current_user is None:
        return None
    resolve_folder(db, current_user.id, folder_id)
    return invoice_service.get_next_billing_period(db, current_user.id, folder_id)


@router.post("/calculate", response_model=InvoiceTotalsRead)
async def calculate_totals(payload: CalculateRequest):
    """Aggregate an unsaved draft. Nothing is stored."""
    draft = recalculate(InvoiceDraft(**payload.model_dump()))
    return draft.model_dump(include=set(InvoiceTotalsRead.model_fields))


@router.post("/work-hours", response_model=List[DailyWorkHours])
async def build_work_hours(payload: WorkHoursRequest):
    try:
        return generate_work_hours(payload.start, payload.end, payload.default_hours)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


@router.post("/quick-create", response_model=InvoiceRead, status_code=status.HTTP_201_CREATED)
async def quick_create(
    payload: QuickCreateRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return invoice_service.quick_create_invoice(db, current_user.id, payload)


@router.post("/bulk/archive", response_model=BulkOperationResult)
async def bulk_archive(
    payload: BulkInvoiceIds, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)
):
    return invoice_service.bulk_archive(db, current_user.id, payload.invoice_ids)


@router.post("/bulk/delete", response_model=BulkOperationResult)
async def bulk_delete(
    payload: BulkInvoiceIds, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)
):
    return invoice_service.bulk_delete(db, current_user.id, payload.invoice_ids)


@router.post("/bulk/status", response_model=BulkOperationResult)
async def bulk_status(
    payload: BulkStatusUpdate, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)
):
    return invoice_service.bulk_update_status(db, current_user.id, payload.invoice_ids, payload.status, payload.note)


@router.post("/bulk/move", response_model=BulkOperationResult)
async def bulk_move(payload: BulkMove, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return invoice_service.bulk_move(db, current_user.id, payload.invoice_ids, payload.folder_id)


@router.post("/", response_model=InvoiceRead, status_code=status.HTTP_201_CREATED)
async def create_invoice(
    payload: InvoiceCreate, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)
):
    return invoice_service.create_invoice(db, current_user.id, payload)


@router.get("/{invoice_id}", response_model=Optional[InvoiceRead])
async def get_invoice(
    invoice_id: int, db: Session = Depends(get_db), current_user: Optional[User] = Depends(get_optional_user)
):
    if current_user is None:
        return None
    return invoice_service.get_invoice(db, current_user.id, invoice_id)


@router.patch("/{invoice_id}", response_model=InvoiceRead)
async def update_invoice(
    invoice_id: int,
    payload: InvoiceUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return invoice_service.update_invoice(db, current_user.id, invoice_id, payload)


@router.delete("/{invoice_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_invoice(invoice_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    invoice_service.delete_invoice(db, current_user.id, invoice_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{invoice_id}/duplicate", response_model=InvoiceRead, status_code=status.HTTP_201_CREATED)
async def duplicate_invoice(
    invoice_id: int,
    payload: InvoiceDuplicate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return invoice_service.duplicate_invoice(
        db,
        current_user.id,
        invoice_id,
        invoice_number=payload.invoice_number,
        folder_id=payload.folder_id,
        copy_work_hours=payload.copy_work_hours,
        copy_tags=payload.copy_tags,
        keep_folder="folder_id" not in payload.model_fields_set,
    )


@router.post("/{invoice_id}/move", response_model=InvoiceRead)
async def move_invoice(
    invoice_id: int,
    payload: InvoiceMove,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return invoice_service.move_invoice(db, current_user.id, invoice_id, payload.folder_id)


@router.post("/{invoice_id}/lock", response_model=InvoiceRead)
async def toggle_invoice_lock(
    invoice_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)
):
    return invoice_service.toggle_move_lock(db, current_user.id, invoice_id)


@router.post("/{invoice_id}/status", response_model=InvoiceRead)
async def update_invoice_status(
    invoice_id: int,
    payload: InvoiceStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return invoice_service.update_status(db, current_user.id, invoice_id, payload.status, payload.note)


@router.post("/{invoice_id}/archive", response_model=InvoiceRead)
async def archive_invoice(invoice_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return invoice_service.archive_invoice(db, current_user.id, invoice_id)


@router.post("/{invoice_id}/unarchive", response_model=InvoiceRead)
async def unarchive_invoice(
    invoice_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)
):
    return invoice_service.unarchive_invoice(db, current_user.id, invoice_id)


@router.get("/{invoice_id}/pdf")
async def download_invoice_pdf(
    invoice_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)
):
    invoice = invoice_service.get_invoice(db, current_user.id, invoice_id)
    content = export_invoice_pdf(invoice)
    return Response(
        content=content,
        media_type=PDF_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{pdf_filename(invoice)}"'},
    )
