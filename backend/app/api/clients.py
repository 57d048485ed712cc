"""Saved client profile routes."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from backend.app.db.session import get_db
from backend.app.dependencies.auth import get_current_user, get_optional_user
from backend.app.models.user import User
from backend.app.schemas.client_profile import ClientProfileCreate, ClientProfileRead, ClientProfileUpdate
from backend.app.services import client_profiles as client_service

router = APIRouter(prefix="/clients", tags=["clients"])


@router.get("/", response_model=List[ClientProfileRead])
async def list_clients(db: Session = Depends(get_db), current_user: Optional[User] = Depends(get_optional_user)):
    if current_user is None:
        return []
    return client_service.list_clients(db, current_user.id)


@router.get("/search", response_model=List[ClientProfileRead])
async def search_clients(
    q: str, db: Session = Depends(get_db), current_user: Optional[User] = Depends(get_optional_user)
):
    if current_user is None:
        return []
    return client_service.search_clients(db, current_user.id, q)


@router.post("/", response_model=ClientProfileRead, status_code=status.HTTP_201_CREATED)
async def create_client(
    payload: ClientProfileCreate, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)
):
    return client_service.create_client(db, current_user.id, payload.model_dump())


@router.post("/from-invoice", response_model=ClientProfileRead)
async def save_client_from_invoice(
    payload: ClientProfileCreate, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)
):
    """Save an invoice's "to" party, updating the client with the same name."""
    return client_service.upsert_from_invoice(db, current_user.id, payload.model_dump())


@router.get("/{client_id}", response_model=Optional[ClientProfileRead])
async def get_client(client_id: int, db: Session = Depends(get_db), current_user: Optional[User] = Depends(get_optional_user)):
    if current_user is None:
        return None
    return client_service.get_client(db, current_user.id, client_id)


@router.patch("/{client_id}", response_model=ClientProfileRead)
async def update_client(
    client_id: int,
    payload: ClientProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return client_service.update_client(db, current_user.id, client_id, payload.model_dump(exclude_unset=True))


@router.delete("/{client_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_client(client_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    client_service.delete_client(db, current_user.id, client_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
