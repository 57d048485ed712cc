"""Folder routes: hierarchy, defaults, locking and removal."""

from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from backend.app.db.session import get_db
from backend.app.dependencies.auth import get_current_user, get_optional_user
from backend.app.models.user import User
from backend.app.schemas.folder import (
    FolderCreate,
    FolderDeleteResult,
    FolderMove,
    FolderRead,
    FolderTreeNode,
    FolderUpdate,
    FolderWithCount,
)
from backend.app.services import folders as folder_service

router = APIRouter(prefix="/folders", tags=["folders"])


@router.get("/", response_model=List[FolderWithCount])
async def list_folders(db: Session = Depends(get_db), current_user: Optional[User] = Depends(get_optional_user)):
    if current_user is None:
        return []
    return folder_service.list_with_counts(db, current_user.id)


@router.get("/tree", response_model=List[FolderTreeNode])
async def get_folder_tree(db: Session = Depends(get_db), current_user: Optional[User] = Depends(get_optional_user)):
    if current_user is None:
        return []
    return folder_service.folder_tree(db, current_user.id)


@router.get("/children", response_model=List[FolderRead])
async def list_root_folders(db: Session = Depends(get_db), current_user: Optional[User] = Depends(get_optional_user)):
    """Top-level folders."""
    if current_user is None:
        return []
    return folder_service.list_children(db, current_user.id, None)


@router.post("/", response_model=FolderRead, status_code=201)
async def create_folder(payload: FolderCreate, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return folder_service.create_folder(db, current_user.id, payload.model_dump())


@router.get("/{folder_id}", response_model=Optional[FolderRead])
async def get_folder(folder_id: int, db: Session = Depends(get_db), current_user: Optional[User] = Depends(get_optional_user)):
    if current_user is None:
        return None
    return folder_service.get_folder(db, current_user.id, folder_id)


@router.get("/{folder_id}/children", response_model=List[FolderRead])
async def list_child_folders(
    folder_id: int, db: Session = Depends(get_db), current_user: Optional[User] = Depends(get_optional_user)
):
    if current_user is None:
        return []
    folder_service.get_folder(db, current_user.id, folder_id)
    return folder_service.list_children(db, current_user.id, folder_id)


@router.get("/{folder_id}/path", response_model=List[FolderRead])
async def get_folder_path(
    folder_id: int, db: Session = Depends(get_db), current_user: Optional[User] = Depends(get_optional_user)
):
    if current_user is None:
        return []
    return folder_service.folder_path(db, current_user.id, folder_id)


@router.patch("/{folder_id}", response_model=FolderRead)
async def update_folder(
    folder_id: int,
    payload: FolderUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return folder_service.update_folder(db, current_user.id, folder_id, payload.model_dump(exclude_unset=True))


@router.post("/{folder_id}/move", response_model=FolderRead)
async def move_folder(
    folder_id: int,
    payload: FolderMove,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return folder_service.move_folder(db, current_user.id, folder_id, payload.parent_id)


@router.post("/{folder_id}/lock", response_model=FolderRead)
async def toggle_folder_lock(folder_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return folder_service.toggle_folder_lock(db, current_user.id, folder_id)


@router.delete("/{folder_id}", response_model=FolderDeleteResult)
async def delete_folder(
    folder_id: int,
    delete_contents: bool = False,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return folder_service.remove_folder(db, current_user.id, folder_id, delete_contents=delete_contents)
