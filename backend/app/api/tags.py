"""Tag routes and tag assignment on invoices and folders."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from backend.app.db.session import get_db
from backend.app.dependencies.auth import get_current_user, get_optional_user
from backend.app.models.enums import TagType
from backend.app.models.user import User
from backend.app.schemas.folder import FolderRead
from backend.app.schemas.invoice import InvoiceRead
from backend.app.schemas.tag import TagCreate, TagRead, TagUpdate
from backend.app.services import tags as tag_service

router = APIRouter(prefix="/tags", tags=["tags"])


@router.get("/", response_model=List[TagRead])
async def list_tags(
    type: Optional[TagType] = None,
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user),
):
    if current_user is None:
        return []
    return tag_service.list_tags(db, current_user.id, type)


@router.get("/invoice", response_model=List[TagRead])
async def list_invoice_tags(db: Session = Depends(get_db), current_user: Optional[User] = Depends(get_optional_user)):
    if current_user is None:
        return []
    return tag_service.list_invoice_tags(db, current_user.id)


@router.get("/folder", response_model=List[TagRead])
async def list_folder_tags(db: Session = Depends(get_db), current_user: Optional[User] = Depends(get_optional_user)):
    if current_user is None:
        return []
    return tag_service.list_folder_tags(db, current_user.id)


@router.post("/", response_model=TagRead, status_code=status.HTTP_201_CREATED)
async def create_tag(payload: TagCreate, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return tag_service.create_tag(db, current_user.id, payload.name, payload.color, payload.type)


@router.get("/{tag_id}", response_model=Optional[TagRead])
async def get_tag(tag_id: int, db: Session = Depends(get_db), current_user: Optional[User] = Depends(get_optional_user)):
    if current_user is None:
        return None
    return tag_service.get_tag(db, current_user.id, tag_id)


@router.patch("/{tag_id}", response_model=TagRead)
async def update_tag(
    tag_id: int,
    payload: TagUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return tag_service.update_tag(db, current_user.id, tag_id, payload.model_dump(exclude_unset=True))


@router.delete("/{tag_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_tag(tag_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    tag_service.delete_tag(db, current_user.id, tag_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{tag_id}/invoices", response_model=List[InvoiceRead])
async def list_invoices_by_tag(
    tag_id: int, db: Session = Depends(get_db), current_user: Optional[User] = Depends(get_optional_user)
):
    if current_user is None:
        return []
    return tag_service.invoices_by_tag(db, current_user.id, tag_id)


@router.get("/{tag_id}/folders", response_model=List[FolderRead])
async def list_folders_by_tag(
    tag_id: int, db: Session = Depends(get_db), current_user: Optional[User] = Depends(get_optional_user)
):
    if current_user is None:
        return []
    return tag_service.folders_by_tag(db, current_user.id, tag_id)


@router.post("/{tag_id}/invoices/{invoice_id}", response_model=InvoiceRead)
async def add_tag_to_invoice(
    tag_id: int, invoice_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)
):
    return tag_service.add_tag_to_invoice(db, current_user.id, invoice_id, tag_id)


@router.delete("/{tag_id}/invoices/{invoice_id}", response_model=InvoiceRead)
async def remove_tag_from_invoice(
    tag_id: int, invoice_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)
):
    return tag_service.remove_tag_from_invoice(db, current_user.id, invoice_id, tag_id)


@router.post("/{tag_id}/folders/{folder_id}", response_model=FolderRead)
async def add_tag_to_folder(
    tag_id: int, folder_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)
):
    return tag_service.add_tag_to_folder(db, current_user.id, folder_id, tag_id)


@router.delete("/{tag_id}/folders/{folder_id}", response_model=FolderRead)
async def remove_tag_from_folder(
    tag_id: int, folder_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)
):
    return tag_service.remove_tag_from_folder(db, current_user.id, folder_id, tag_id)
