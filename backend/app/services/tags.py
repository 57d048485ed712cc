"""Tag management and tag assignment for invoices and folders."""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from backend.app.core.errors import NotFoundError, ValidationError
from backend.app.core.time import now_ms
from backend.app.crud.crud_folder import folder_crud
from backend.app.crud.crud_invoice import invoice_crud
from backend.app.crud.crud_tag import tag_crud
from backend.app.models.enums import TagType
from backend.app.models.invoice import Invoice
from backend.app.models.invoice_folder import InvoiceFolder
from backend.app.models.tag import Tag

logger = logging.getLogger(__name__)

INVOICE_TAG_TYPES = [TagType.INVOICE.value, TagType.BOTH.value]
FOLDER_TAG_TYPES = [TagType.FOLDER.value, TagType.BOTH.value]


def get_tag(db: Session, owner_id: int, tag_id: int) -> Tag:
    tag = tag_crud.get(db, id=tag_id, owner_id=owner_id)
    if tag is None:
        raise NotFoundError("Tag")
    return tag


def list_tags(db: Session, owner_id: int, tag_type: Optional[TagType] = None) -> List[Tag]:
    types = [TagType(tag_type).value] if tag_type else None
    return tag_crud.list_by_types(db, owner_id=owner_id, types=types)


def list_invoice_tags(db: Session, owner_id: int) -> List[Tag]:
    return tag_crud.list_by_types(db, owner_id=owner_id, types=INVOICE_TAG_TYPES)


def list_folder_tags(db: Session, owner_id: int) -> List[Tag]:
    return tag_crud.list_by_types(db, owner_id=owner_id, types=FOLDER_TAG_TYPES)


def _ensure_unique_name(db: Session, owner_id: int, name: str, exclude_id: Optional[int] = None) -> None:
    existing = tag_crud.get_by_name(db, owner_id=owner_id, name=name)
    if existing is not None and existing.id != exclude_id:
        raise ValidationError("A tag with this name already exists")


def create_tag(db: Session, owner_id: int, name: str, color: Optional[str], tag_type: TagType) -> Tag:
    _ensure_unique_name(db, owner_id, name)
    tag = tag_crud.create(db, owner_id=owner_id, name=name, color=color, type=TagType(tag_type).value)
    logger.info("Created tag %s (%s) for owner %s", tag.id, tag.type, owner_id)
    return tag


def update_tag(db: Session, owner_id: int, tag_id: int, updates: dict) -> Tag:
    tag = get_tag(db, owner_id, tag_id)
    if updates.get("name") and updates["name"] != tag.name:
        _ensure_unique_name(db, owner_id, updates["name"], exclude_id=tag.id)
    if updates.get("type") is not None:
        updates["type"] = TagType(updates["type"]).value
    values = {field: value for field, value in updates.items() if value is not None or field == "color"}
    return tag_crud.update(db, db_obj=tag, **values)


def delete_tag(db: Session, owner_id: int, tag_id: int) -> Tag:
    """Soft delete a tag and strip it from every invoice and folder that carries it."""
    tag = get_tag(db, owner_id, tag_id)
    now = now_ms()
    stripped = 0
    for row in invoice_crud.query(db, owner_id=owner_id).all() + folder_crud.query(db, owner_id=owner_id).all():
        if tag.id in (row.tags or []):
            row.tags = [existing for existing in row.tags if existing != tag.id]
            row.updated_at = now
            stripped += 1
    tag_crud.soft_delete(db, db_obj=tag, commit=False)
    db.commit()
    logger.info("Deleted tag %s and stripped it from %s rows", tag.id, stripped)
    return tag


def validate_tag_ids(db: Session, owner_id: int, tag_ids: List[int], target: str) -> List[int]:
    """
    Resolve tag ids for an invoice or a folder.

    Every tag must be live and owned by the caller, and its type must allow
    the target. Duplicates are dropped, order is kept.
    """
    resolved: List[int] = []
    for tag_id in tag_ids or []:
        if tag_id in resolved:
            continue
        _check_tag_type(get_tag(db, owner_id, tag_id), target)
        resolved.append(tag_id)
    return resolved


def _check_tag_type(tag: Tag, target: str) -> None:
    if target == "invoice" and tag.type == TagType.FOLDER.value:
        raise ValidationError("Cannot use folder-only tag on invoice")
    if target == "folder" and tag.type == TagType.INVOICE.value:
        raise ValidationError("Cannot use invoice-only tag on folder")


def _get_invoice(db: Session, owner_id: int, invoice_id: int) -> Invoice:
    invoice = invoice_crud.get(db, id=invoice_id, owner_id=owner_id)
    if invoice is None:
        raise NotFoundError("Invoice")
    return invoice


def _get_folder(db: Session, owner_id: int, folder_id: int) -> InvoiceFolder:
    folder = folder_crud.get(db, id=folder_id, owner_id=owner_id)
    if folder is None:
        raise NotFoundError("Folder")
    return folder


def add_tag_to_invoice(db: Session, owner_id: int, invoice_id: int, tag_id: int) -> Invoice:
    invoice = _get_invoice(db, owner_id, invoice_id)
    _check_tag_type(get_tag(db, owner_id, tag_id), "invoice")
    if tag_id in (invoice.tags or []):
        return invoice
    return invoice_crud.update(db, db_obj=invoice, tags=list(invoice.tags or []) + [tag_id])


def remove_tag_from_invoice(db: Session, owner_id: int, invoice_id: int, tag_id: int) -> Invoice:
    invoice = _get_invoice(db, owner_id, invoice_id)
    return invoice_crud.update(db, db_obj=invoice, tags=[existing for existing in invoice.tags or [] if existing != tag_id])


def add_tag_to_folder(db: Session, owner_id: int, folder_id: int, tag_id: int) -> InvoiceFolder:
    folder = _get_folder(db, owner_id, folder_id)
    _check_tag_type(get_tag(db, owner_id, tag_id), "folder")
    if tag_id in (folder.tags or []):
        return folder
    return folder_crud.update(db, db_obj=folder, tags=list(folder.tags or []) + [tag_id])


def remove_tag_from_folder(db: Session, owner_id: int, folder_id: int, tag_id: int) -> InvoiceFolder:
    folder = _get_folder(db, owner_id, folder_id)
    return folder_crud.update(db, db_obj=folder, tags=[existing for existing in folder.tags or [] if existing != tag_id])


def invoices_by_tag(db: Session, owner_id: int, tag_id: int) -> List[Invoice]:
    invoices = invoice_crud.get_multi(db, owner_id=owner_id)
    return [invoice for invoice in invoices if tag_id in (invoice.tags or [])]


def folders_by_tag(db: Session, owner_id: int, tag_id: int) -> List[InvoiceFolder]:
    return [folder for folder in folder_crud.list_all(db, owner_id=owner_id) if tag_id in (folder.tags or [])]
