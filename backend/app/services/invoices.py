"""Invoice-related service helpers: lifecycle, moves, status tracking and bulk actions."""

import copy
import logging
from datetime import date, timedelta
from typing import Callable, Iterable, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from backend.app.core.errors import (
    InvoiceNumberConflictError,
    LockedError,
    NotFoundError,
    ValidationError,
)
from backend.app.core.settings import get_settings
from backend.app.core.time import now_iso, now_ms, parse_date, today_str
from backend.app.crud.crud_client_profile import client_profile_crud
from backend.app.crud.crud_invoice import invoice_crud
from backend.app.models.enums import InvoiceStatus, PaymentTerms
from backend.app.models.invoice import Invoice, folder_scope_for
from backend.app.models.invoice_folder import InvoiceFolder
from backend.app.schemas.invoice import InvoiceCreate, InvoiceFilters, InvoiceUpdate, QuickCreateRequest
from backend.app.services.billing import apply_invoice_totals
from backend.app.services.folders import resolve_folder
from backend.app.services.numbering import get_next_invoice_number_for_folder, is_invoice_number_available
from backend.app.services.periods import BillingPeriod, next_billing_period
from backend.app.services.status_logs import record_status_change
from backend.app.services.tags import validate_tag_ids
from backend.app.services.user_profiles import get_profile, profile_party
from backend.app.services.work_hours import check_work_hours_calendar, generate_work_hours

logger = logging.getLogger(__name__)

RECENT_LIMIT = 10

# Status that stamps a date field the first time an invoice reaches it
STATUS_DATE_FIELDS = {
    InvoiceStatus.SENT.value: "sent_at",
    InvoiceStatus.PAID.value: "paid_at",
    InvoiceStatus.VIEWED.value: "viewed_at",
}

PAYMENT_TERMS_DAYS = {
    PaymentTerms.DUE_ON_RECEIPT.value: 0,
    PaymentTerms.NET_7.value: 7,
    PaymentTerms.NET_15.value: 15,
    PaymentTerms.NET_30.value: 30,
    PaymentTerms.NET_45.value: 45,
    PaymentTerms.NET_60.value: 60,
}

# Fields carried over when an invoice is duplicated
DUPLICATED_FIELDS = (
    "from_party",
    "to_party",
    "hourly_rate",
    "default_hours_per_day",
    "line_items",
    "discount_percent",
    "tax_percent",
    "currency",
    "payment_terms",
    "custom_payment_terms",
    "bank_details",
    "notes",
    "terms",
    "job_title",
    "show_detailed_hours",
    "pdf_theme",
    "background_design_id",
    "page_size",
)

NULLABLE_FIELDS = {
    "due_date",
    "period_start",
    "period_end",
    "custom_payment_terms",
    "bank_details",
    "notes",
    "terms",
    "job_title",
    "background_design_id",
}


def get_invoice(db: Session, owner_id: int, invoice_id: int) -> Invoice:
    invoice = invoice_crud.get(db, id=invoice_id, owner_id=owner_id)
    if invoice is None:
        raise NotFoundError("Invoice")
    return invoice


def _client_name(invoice: Invoice) -> str:
    return ((invoice.to_party or {}).get("name") or "").lower()


def list_invoices(db: Session, owner_id: int, filters: InvoiceFilters) -> List[Invoice]:
    if filters.date_from and filters.date_to and filters.date_from > filters.date_to:
        raise ValidationError("date_from must not be after date_to")

    query = invoice_crud.query(db, owner_id=owner_id)
    if filters.folder_id is not None:
        query = query.filter(Invoice.folder_id == filters.folder_id)
    elif filters.unfiled:
        query = query.filter(Invoice.folder_id.is_(None))
    if filters.is_archived is not None:
        query = query.filter(Invoice.is_archived.is_(filters.is_archived))
    if filters.status:
        query = query.filter(Invoice.status == filters.status.value)
    if filters.statuses:
        query = query.filter(Invoice.status.in_([status.value for status in filters.statuses]))
    if filters.date_from:
        query = query.filter(Invoice.issue_date >= filters.date_from)
    if filters.date_to:
        query = query.filter(Invoice.issue_date <= filters.date_to)
    if filters.amount_min is not None:
        query = query.filter(Invoice.total_amount >= filters.amount_min)
    if filters.amount_max is not None:
        query = query.filter(Invoice.total_amount <= filters.amount_max)

    invoices = query.order_by(Invoice.created_at.desc(), Invoice.id.desc()).all()

    # JSON columns are matched in Python
    if filters.tags:
        invoices = [i for i in invoices if all(tag_id in (i.tags or []) for tag_id in filters.tags)]
    if filters.client_name:
        needle = filters.client_name.lower()
        invoices = [i for i in invoices if needle in _client_name(i)]
    if filters.search:
        needle = filters.search.lower()
        invoices = [
            i
            for i in invoices
            if needle in i.invoice_number.lower() or needle in _client_name(i) or needle in (i.job_title or "").lower()
        ]

    if filters.limit:
        return invoices[: filters.limit]
    return invoices


def list_recent(db: Session, owner_id: int, limit: int = RECENT_LIMIT) -> List[Invoice]:
    return (
        invoice_crud.query(db, owner_id=owner_id)
        .order_by(Invoice.created_at.desc(), Invoice.id.desc())
        .limit(limit)
        .all()
    )


def list_archived(db: Session, owner_id: int, limit: Optional[int] = None) -> List[Invoice]:
    invoices = invoice_crud.get_multi(db, owner_id=owner_id, is_archived=True)
    return invoices[:limit] if limit else invoices


def list_unfiled(db: Session, owner_id: int) -> List[Invoice]:
    return invoice_crud.get_multi(db, owner_id=owner_id, folder_id=None)


def list_by_client(db: Session, owner_id: int, client_name: str) -> List[Invoice]:
    needle = client_name.lower()
    return [invoice for invoice in invoice_crud.get_multi(db, owner_id=owner_id) if needle in _client_name(invoice)]


def _history_entry(status: str, note: Optional[str] = None) -> dict:
    return {"status": status, "timestamp": now_iso(), "note": note}


def _apply_status(invoice: Invoice, status: str, note: Optional[str] = None) -> Optional[str]:
    """Set a new status, append it to the history and stamp first-time dates. Returns the old status."""
    previous = invoice.status
    invoice.status = status
    invoice.status_history = list(invoice.status_history or []) + [_history_entry(status, note)]
    date_field = STATUS_DATE_FIELDS.get(status)
    if date_field and getattr(invoice, date_field) is None:
        setattr(invoice, date_field, now_iso())
    return previous


def _ensure_number_available(
    db: Session, owner_id: int, invoice_number: str, folder_id: Optional[int], exclude_id: Optional[int] = None
) -> None:
    if not is_invoice_number_available(db, owner_id, invoice_number, folder_id, exclude_invoice_id=exclude_id):
        logger.warning("Invoice number %s already used in scope %s", invoice_number, folder_scope_for(folder_id))
        raise InvoiceNumberConflictError(invoice_number)


def _flush(db: Session, invoice: Invoice) -> None:
    """Flush pending invoice changes; the unique index has the final say on numbers."""
    try:
        db.flush()
    except IntegrityError as exc:
        db.rollback()
        logger.warning("Unique index rejected invoice number %s", invoice.invoice_number)
        raise InvoiceNumberConflictError(invoice.invoice_number) from exc


def _check_movable(invoice: Invoice) -> None:
    if invoice.is_move_locked:
        raise LockedError("Invoice is locked and cannot be moved")
    folder = invoice.folder
    if folder is not None and folder.deleted_at is None and folder.is_move_locked:
        raise LockedError(f"Folder {folder.name} is locked; invoices cannot be moved out of it")


def suggest_invoice_number(db: Session, owner_id: int, folder_id: Optional[int]) -> str:
    profile = get_profile(db, owner_id)
    prefix = profile.invoice_prefix if profile is not None else None
    return get_next_invoice_number_for_folder(db, owner_id, folder_id, prefix)


def create_invoice(db: Session, owner_id: int, payload: InvoiceCreate) -> Invoice:
    folder = resolve_folder(db, owner_id, payload.folder_id)
    folder_id = folder.id if folder is not None else None
    tags = validate_tag_ids(db, owner_id, payload.tags, "invoice")

    invoice_number = payload.invoice_number or suggest_invoice_number(db, owner_id, folder_id)
    _ensure_number_available(db, owner_id, invoice_number, folder_id)

    status = payload.status.value
    if payload.remove_draft_on_save and status == InvoiceStatus.DRAFT.value:
        status = InvoiceStatus.TO_SEND.value

    values = payload.model_dump(
        mode="json",
        exclude={"invoice_number", "status", "folder_id", "tags", "remove_draft_on_save"},
    )
    values["issue_date"] = values.get("issue_date") or today_str()

    now = now_ms()
    invoice = Invoice(
        owner_id=owner_id,
        folder_id=folder_id,
        folder_scope=folder_scope_for(folder_id),
        invoice_number=invoice_number,
        status=status,
        status_history=[_history_entry(status, "Invoice created")],
        tags=tags,
        created_at=now,
        updated_at=now,
        **values,
    )
    apply_invoice_totals(invoice)
    db.add(invoice)
    _flush(db, invoice)
    record_status_change(db, invoice, None, status, "Invoice created")
    db.commit()
    db.refresh(invoice)
    logger.info("Created invoice %s (%s) for owner %s", invoice.id, invoice.invoice_number, owner_id)
    return invoice


def _merged(invoice: Invoice, updates: dict, field: str):
    """Value a field will have once the update is applied."""
    if field in updates and (updates[field] is not None or field in NULLABLE_FIELDS):
        return updates[field]
    return getattr(invoice, field)


def update_invoice(db: Session, owner_id: int, invoice_id: int, payload: InvoiceUpdate) -> Invoice:
    invoice = get_invoice(db, owner_id, invoice_id)
    updates = payload.model_dump(mode="json", exclude_unset=True)

    new_status = updates.pop("status", None)
    status_note = updates.pop("status_note", None)
    if updates.pop("remove_draft_on_save", False) and new_status is None and invoice.status == InvoiceStatus.DRAFT.value:
        new_status = InvoiceStatus.TO_SEND.value

    target_folder_id = invoice.folder_id
    if "folder_id" in updates:
        target_folder_id = updates.pop("folder_id")
        if target_folder_id != invoice.folder_id:
            resolve_folder(db, owner_id, target_folder_id)
            _check_movable(invoice)
    if "tags" in updates:
        updates["tags"] = validate_tag_ids(db, owner_id, updates["tags"] or [], "invoice")
    if updates.keys() & {"daily_work_hours", "period_start", "period_end"}:
        try:
            check_work_hours_calendar(
                _merged(invoice, updates, "daily_work_hours"),
                _merged(invoice, updates, "period_start"),
                _merged(invoice, updates, "period_end"),
            )
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc

    target_number = updates.pop("invoice_number", None) or invoice.invoice_number
    if target_number != invoice.invoice_number or target_folder_id != invoice.folder_id:
        _ensure_number_available(db, owner_id, target_number, target_folder_id, exclude_id=invoice.id)

    invoice.invoice_number = target_number
    invoice.folder_id = target_folder_id
    invoice.folder_scope = folder_scope_for(target_folder_id)
    for field, value in updates.items():
        if value is None and field not in NULLABLE_FIELDS:
            continue
        setattr(invoice, field, value)

    previous_status = None
    status_changed = new_status is not None and new_status != invoice.status
    if status_changed:
        previous_status = _apply_status(invoice, new_status, status_note)

    apply_invoice_totals(invoice)
    invoice.updated_at = now_ms()
    _flush(db, invoice)
    if status_changed:
        record_status_change(db, invoice, previous_status, new_status, status_note)
    db.commit()
    db.refresh(invoice)
    logger.info("Updated invoice %s", invoice.id)
    return invoice


def delete_invoice(db: Session, owner_id: int, invoice_id: int) -> Invoice:
    invoice = get_invoice(db, owner_id, invoice_id)
    invoice_crud.soft_delete(db, db_obj=invoice)
    logger.info("Soft deleted invoice %s", invoice_id)
    return invoice


def duplicate_invoice(
    db: Session,
    owner_id: int,
    invoice_id: int,
    invoice_number: Optional[str] = None,
    folder_id: Optional[int] = None,
    copy_work_hours: bool = True,
    copy_tags: bool = False,
    keep_folder: bool = True,
) -> Invoice:
    """
    Copy an invoice as a fresh draft dated today.

    Due date and period are cleared; work hours and tags are copied only when
    asked for. Without `folder_id` the copy stays in the source folder.
    """
    source = get_invoice(db, owner_id, invoice_id)
    target_folder_id = source.folder_id if keep_folder else folder_id
    resolve_folder(db, owner_id, target_folder_id)

    number = invoice_number or suggest_invoice_number(db, owner_id, target_folder_id)
    _ensure_number_available(db, owner_id, number, target_folder_id)

    values = {field: copy.deepcopy(getattr(source, field)) for field in DUPLICATED_FIELDS}
    now = now_ms()
    status = InvoiceStatus.DRAFT.value
    note = f"Duplicated from invoice {source.invoice_number}"
    invoice = Invoice(
        owner_id=owner_id,
        folder_id=target_folder_id,
        folder_scope=folder_scope_for(target_folder_id),
        invoice_number=number,
        status=status,
        status_history=[_history_entry(status, note)],
        issue_date=today_str(),
        due_date=None,
        period_start=None,
        period_end=None,
        daily_work_hours=copy.deepcopy(source.daily_work_hours) if copy_work_hours else [],
        tags=list(source.tags or []) if copy_tags else [],
        created_at=now,
        updated_at=now,
        **values,
    )
    apply_invoice_totals(invoice)
    db.add(invoice)
    _flush(db, invoice)
    record_status_change(db, invoice, None, status, note)
    db.commit()
    db.refresh(invoice)
    logger.info("Duplicated invoice %s into %s", source.id, invoice.id)
    return invoice


def move_invoice(db: Session, owner_id: int, invoice_id: int, folder_id: Optional[int]) -> Invoice:
    invoice = get_invoice(db, owner_id, invoice_id)
    resolve_folder(db, owner_id, folder_id)
    if folder_id == invoice.folder_id:
        return invoice
    try:
        _check_movable(invoice)
    except LockedError:
        logger.warning("Rejected move of invoice %s", invoice.id)
        raise
    _ensure_number_available(db, owner_id, invoice.invoice_number, folder_id, exclude_id=invoice.id)

    invoice.folder_id = folder_id
    invoice.folder_scope = folder_scope_for(folder_id)
    invoice.updated_at = now_ms()
    _flush(db, invoice)
    db.commit()
    db.refresh(invoice)
    logger.info("Moved invoice %s to scope %s", invoice.id, invoice.folder_scope)
    return invoice


def toggle_move_lock(db: Session, owner_id: int, invoice_id: int) -> Invoice:
    invoice = get_invoice(db, owner_id, invoice_id)
    return invoice_crud.update(db, db_obj=invoice, is_move_locked=not invoice.is_move_locked)


def update_status(db: Session, owner_id: int, invoice_id: int, status: InvoiceStatus, note: Optional[str] = None) -> Invoice:
    invoice = get_invoice(db, owner_id, invoice_id)
    new_status = InvoiceStatus(status).value
    previous = _apply_status(invoice, new_status, note)
    invoice.updated_at = now_ms()
    record_status_change(db, invoice, previous, new_status, note)
    db.commit()
    db.refresh(invoice)
    logger.info("Invoice %s status %s -> %s", invoice.id, previous, new_status)
    return invoice


def archive_invoice(db: Session, owner_id: int, invoice_id: int) -> Invoice:
    invoice = get_invoice(db, owner_id, invoice_id)
    return invoice_crud.update(db, db_obj=invoice, is_archived=True, archived_at=now_iso())


def unarchive_invoice(db: Session, owner_id: int, invoice_id: int) -> Invoice:
    invoice = get_invoice(db, owner_id, invoice_id)
    return invoice_crud.update(db, db_obj=invoice, is_archived=False, archived_at=None)


def _run_bulk(name: str, invoice_ids: Iterable[int], action: Callable[[int], object]) -> dict:
    """Apply an action to each invoice on its own and tally the outcomes."""
    result = {"processed": 0, "succeeded": 0, "locked": 0, "not_found": 0, "conflicts": 0}
    for invoice_id in invoice_ids:
        result["processed"] += 1
        try:
            action(invoice_id)
        except NotFoundError:
            result["not_found"] += 1
        except LockedError:
            result["locked"] += 1
        except InvoiceNumberConflictError:
            result["conflicts"] += 1
        else:
            result["succeeded"] += 1
    logger.info("Bulk %s: %s", name, result)
    return result


def bulk_archive(db: Session, owner_id: int, invoice_ids: List[int]) -> dict:
    return _run_bulk("archive", invoice_ids, lambda invoice_id: archive_invoice(db, owner_id, invoice_id))


def bulk_delete(db: Session, owner_id: int, invoice_ids: List[int]) -> dict:
    return _run_bulk("delete", invoice_ids, lambda invoice_id: delete_invoice(db, owner_id, invoice_id))


def bulk_update_status(
    db: Session, owner_id: int, invoice_ids: List[int], status: InvoiceStatus, note: Optional[str] = None
) -> dict:
    return _run_bulk(
        "status", invoice_ids, lambda invoice_id: update_status(db, owner_id, invoice_id, status, note)
    )


def bulk_move(db: Session, owner_id: int, invoice_ids: List[int], folder_id: Optional[int]) -> dict:
    # An unknown target folder fails the whole batch before any item is touched
    resolve_folder(db, owner_id, folder_id)
    return _run_bulk("move", invoice_ids, lambda invoice_id: move_invoice(db, owner_id, invoice_id, folder_id))


def get_next_billing_period(
    db: Session, owner_id: int, folder_id: Optional[int], today: Optional[date] = None
) -> BillingPeriod:
    latest = invoice_crud.latest_period_end(db, owner_id=owner_id, folder_id=folder_id)
    return next_billing_period(parse_date(latest) if latest else None, today)


def due_date_for(issue_date: str, payment_terms: str) -> Optional[str]:
    days = PAYMENT_TERMS_DAYS.get(payment_terms)
    if days is None:
        return None
    return (parse_date(issue_date) + timedelta(days=days)).isoformat()


def _client_party(db: Session, owner_id: int, folder: Optional[InvoiceFolder]) -> dict:
    if folder is None or folder.client_profile_id is None:
        return {"name": ""}
    client = client_profile_crud.get(db, id=folder.client_profile_id, owner_id=owner_id)
    if client is None:
        return {"name": ""}
    return {
        field: getattr(client, field)
        for field in ("name", "address", "city", "state", "postal_code", "country", "email", "phone", "tax_id", "logo")
    }


def quick_create_invoice(db: Session, owner_id: int, payload: QuickCreateRequest) -> Invoice:
    """
    Create a ready-to-edit invoice from folder defaults.

    The number and billing period continue from the folder's latest invoice,
    work hours are generated for the period, the sender comes from the
    business profile and the recipient from the folder's client profile.
    """
    settings = get_settings()
    folder = resolve_folder(db, owner_id, payload.folder_id)
    folder_id = folder.id if folder is not None else None

    if payload.period_start and payload.period_end:
        period_start, period_end = payload.period_start, payload.period_end
    else:
        period = get_next_billing_period(db, owner_id, folder_id)
        period_start, period_end = period.start, period.end

    hours_per_day = (folder.default_hours_per_day if folder else None) or settings.default_hours_per_day
    try:
        work_hours = generate_work_hours(period_start, period_end, hours_per_day)
    except ValueError as exc:
        raise ValidationError(str(exc)) from exc

    hourly_rate = payload.hourly_rate
    if hourly_rate is None:
        hourly_rate = (folder.default_hourly_rate if folder else None) or 0
    payment_terms = (folder.default_payment_terms if folder else None) or settings.default_payment_terms
    issue_date = payload.issue_date or today_str()
    profile = get_profile(db, owner_id)

    create = InvoiceCreate(
        folder_id=folder_id,
        invoice_number=suggest_invoice_number(db, owner_id, folder_id),
        issue_date=issue_date,
        due_date=due_date_for(issue_date, payment_terms),
        period_start=period_start,
        period_end=period_end,
        from_party=profile_party(profile),
        to_party=_client_party(db, owner_id, folder),
        hourly_rate=hourly_rate,
        default_hours_per_day=hours_per_day,
        daily_work_hours=work_hours,
        currency=(folder.default_currency if folder else None) or settings.default_currency,
        payment_terms=payment_terms,
        bank_details=profile.bank_details if profile is not None else None,
        job_title=folder.default_job_title if folder else None,
        page_size=settings.default_page_size,
    )
    return create_invoice(db, owner_id, create)
