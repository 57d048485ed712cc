"""Folder hierarchy: creation, reparenting with cycle checks, and removal."""

import logging
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from backend.app.core.errors import InvoiceNumberConflictError, LockedError, NotFoundError, ValidationError
from backend.app.core.settings import get_settings
from backend.app.core.time import now_ms
from backend.app.crud.crud_client_profile import client_profile_crud
from backend.app.crud.crud_folder import folder_crud
from backend.app.crud.crud_invoice import invoice_crud
from backend.app.models.invoice import UNFILED_SCOPE, Invoice
from backend.app.models.invoice_folder import InvoiceFolder
from backend.app.services.tags import validate_tag_ids

logger = logging.getLogger(__name__)


def get_folder(db: Session, owner_id: int, folder_id: int, entity: str = "Folder") -> InvoiceFolder:
    folder = folder_crud.get(db, id=folder_id, owner_id=owner_id)
    if folder is None:
        raise NotFoundError(entity)
    return folder


def resolve_folder(db: Session, owner_id: int, folder_id: Optional[int]) -> Optional[InvoiceFolder]:
    """None stands for "unfiled"; any other id must be a live folder of the owner."""
    if folder_id is None:
        return None
    return get_folder(db, owner_id, folder_id)


def list_folders(db: Session, owner_id: int) -> List[InvoiceFolder]:
    return folder_crud.list_all(db, owner_id=owner_id)


def _invoice_counts(db: Session, owner_id: int) -> dict[int, int]:
    rows = (
        invoice_crud.query(db, owner_id=owner_id)
        .filter(Invoice.folder_id.isnot(None))
        .with_entities(Invoice.folder_id, func.count(Invoice.id))
        .group_by(Invoice.folder_id)
        .all()
    )
    return {folder_id: count for folder_id, count in rows}


def _with_count(folder: InvoiceFolder, counts: dict[int, int]) -> dict:
    data = {column.name: getattr(folder, column.name) for column in InvoiceFolder.__table__.columns}
    data["invoice_count"] = counts.get(folder.id, 0)
    return data


def list_with_counts(db: Session, owner_id: int) -> List[dict]:
    counts = _invoice_counts(db, owner_id)
    return [_with_count(folder, counts) for folder in list_folders(db, owner_id)]


def folder_tree(db: Session, owner_id: int) -> List[dict]:
    """Nested folders. Folders whose parent is gone are shown at the root."""
    counts = _invoice_counts(db, owner_id)
    nodes = {folder.id: {**_with_count(folder, counts), "children": []} for folder in list_folders(db, owner_id)}
    roots = []
    for node in nodes.values():
        parent = nodes.get(node["parent_id"])
        if parent is None:
            roots.append(node)
        else:
            parent["children"].append(node)
    return roots


def list_children(db: Session, owner_id: int, parent_id: Optional[int]) -> List[InvoiceFolder]:
    return folder_crud.children(db, owner_id=owner_id, parent_id=parent_id)


def _ancestors(db: Session, owner_id: int, folder: InvoiceFolder) -> List[InvoiceFolder]:
    """Walk up from a folder, nearest parent first, bounded by the depth guard."""
    max_depth = get_settings().max_folder_depth
    ancestors = []
    seen = {folder.id}
    current = folder
    while current.parent_id is not None:
        if len(ancestors) >= max_depth:
            raise ValidationError("Folder hierarchy is too deep")
        parent = folder_crud.get(db, id=current.parent_id, owner_id=owner_id)
        if parent is None or parent.id in seen:
            break
        ancestors.append(parent)
        seen.add(parent.id)
        current = parent
    return ancestors


def folder_path(db: Session, owner_id: int, folder_id: int) -> List[InvoiceFolder]:
    folder = get_folder(db, owner_id, folder_id)
    return list(reversed(_ancestors(db, owner_id, folder))) + [folder]


def _check_parent(db: Session, owner_id: int, folder_id: Optional[int], parent_id: Optional[int]) -> None:
    if parent_id is None:
        return
    if folder_id is not None and parent_id == folder_id:
        raise ValidationError("Folder cannot be its own parent")
    parent = get_folder(db, owner_id, parent_id, entity="Parent folder")
    if folder_id is None:
        return
    if any(ancestor.id == folder_id for ancestor in _ancestors(db, owner_id, parent)):
        raise ValidationError("Cannot create circular folder reference")


def _check_client_profile(db: Session, owner_id: int, client_profile_id: Optional[int]) -> None:
    if client_profile_id is None:
        return
    if client_profile_crud.get(db, id=client_profile_id, owner_id=owner_id) is None:
        raise NotFoundError("Client profile")


def _enum_values(values: dict) -> dict:
    return {field: getattr(value, "value", value) for field, value in values.items()}


def create_folder(db: Session, owner_id: int, values: dict) -> InvoiceFolder:
    values = _enum_values(values)
    _check_parent(db, owner_id, None, values.get("parent_id"))
    _check_client_profile(db, owner_id, values.get("client_profile_id"))
    values["tags"] = validate_tag_ids(db, owner_id, values.get("tags") or [], "folder")
    folder = folder_crud.create(db, owner_id=owner_id, **values)
    logger.info("Created folder %s for owner %s", folder.id, owner_id)
    return folder


def update_folder(db: Session, owner_id: int, folder_id: int, updates: dict) -> InvoiceFolder:
    folder = get_folder(db, owner_id, folder_id)
    updates = _enum_values(updates)
    if "parent_id" in updates and updates["parent_id"] != folder.parent_id:
        if folder.is_move_locked:
            raise LockedError("Folder is locked and cannot be moved")
        _check_parent(db, owner_id, folder.id, updates["parent_id"])
    if "client_profile_id" in updates:
        _check_client_profile(db, owner_id, updates["client_profile_id"])
    if "tags" in updates:
        updates["tags"] = validate_tag_ids(db, owner_id, updates["tags"] or [], "folder")
    if "name" in updates and updates["name"] is None:
        del updates["name"]
    return folder_crud.update(db, db_obj=folder, **updates)


def move_folder(db: Session, owner_id: int, folder_id: int, parent_id: Optional[int]) -> InvoiceFolder:
    folder = get_folder(db, owner_id, folder_id)
    if folder.is_move_locked:
        logger.warning("Rejected move of locked folder %s", folder.id)
        raise LockedError("Folder is locked and cannot be moved")
    _check_parent(db, owner_id, folder.id, parent_id)
    return folder_crud.update(db, db_obj=folder, parent_id=parent_id)


def toggle_folder_lock(db: Session, owner_id: int, folder_id: int) -> InvoiceFolder:
    folder = get_folder(db, owner_id, folder_id)
    return folder_crud.update(db, db_obj=folder, is_move_locked=not folder.is_move_locked)


def remove_folder(db: Session, owner_id: int, folder_id: int, delete_contents: bool = False) -> dict:
    """
    Soft delete a folder in one transaction.

    Child folders move up to the deleted folder's parent. Invoices inside are
    soft deleted with `delete_contents`, otherwise they become unfiled, which
    fails as a whole when one of their numbers is already used there.
    """
    folder = get_folder(db, owner_id, folder_id)
    now = now_ms()

    invoices = invoice_crud.in_scope(db, owner_id=owner_id, folder_id=folder.id).all()
    for invoice in invoices:
        if delete_contents:
            invoice.deleted_at = now
        else:
            invoice.folder_id = None
            invoice.folder_scope = UNFILED_SCOPE
        invoice.updated_at = now

    children = folder_crud.children(db, owner_id=owner_id, parent_id=folder.id)
    for child in children:
        child.parent_id = folder.parent_id
        child.updated_at = now

    folder.deleted_at = now
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        numbers = ", ".join(invoice.invoice_number for invoice in invoices)
        logger.warning("Folder %s removal collided with unfiled invoice numbers", folder_id)
        raise InvoiceNumberConflictError(numbers) from exc

    logger.info("Deleted folder %s (%s invoices, %s children)", folder_id, len(invoices), len(children))
    return {
        "folder_id": folder_id,
        "reparented_children": len(children),
        "unfiled_invoices": 0 if delete_contents else len(invoices),
        "deleted_invoices": len(invoices) if delete_contents else 0,
    }
