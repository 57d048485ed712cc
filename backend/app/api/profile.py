"""Business profile endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from backend.app.db.session import get_db
from backend.app.dependencies.auth import get_current_user, get_optional_user
from backend.app.models.user import User
from backend.app.schemas.invoice import NextInvoiceNumber
from backend.app.schemas.user import NumberingUpdate, UserProfileRead, UserProfileUpdate
from backend.app.services import user_profiles as profile_service

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("/me", response_model=Optional[UserProfileRead])
async def get_my_profile(db: Session = Depends(get_db), current_user: Optional[User] = Depends(get_optional_user)):
    if current_user is None:
        return None
    return profile_service.get_profile(db, current_user.id)


@router.put("/me", response_model=UserProfileRead)
async def upsert_my_profile(
    payload: UserProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return profile_service.upsert_profile(db, current_user.id, payload.model_dump(mode="json", exclude_unset=True))


@router.put("/numbering", response_model=UserProfileRead)
async def update_numbering(
    payload: NumberingUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if "invoice_prefix" in payload.model_fields_set:
        prefix = payload.invoice_prefix
    else:
        prefix = profile_service.get_invoice_prefix(db, current_user.id)
    return profile_service.update_numbering(db, current_user.id, prefix, payload.next_invoice_number)


@router.get("/next-number", response_model=Optional[NextInvoiceNumber])
async def get_next_profile_number(
    db: Session = Depends(get_db), current_user: Optional[User] = Depends(get_optional_user)
):
    if current_user is None:
        return None
    return profile_service.next_profile_number(profile_service.get_profile(db, current_user.id))


@router.post("/increment")
async def increment_profile_number(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return {"next_invoice_number": profile_service.increment_invoice_number(db, current_user.id)}
