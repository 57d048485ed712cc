"""Business profile used as the default sender and for the global numbering counter."""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from backend.app.core.time import now_ms
from backend.app.models.user_profile import UserProfile
from backend.app.services.numbering import format_invoice_number

logger = logging.getLogger(__name__)

_PARTY_FIELDS = ("address", "city", "state", "postal_code", "country", "email", "phone", "tax_id", "logo")


def get_profile(db: Session, user_id: int) -> Optional[UserProfile]:
    return db.query(UserProfile).filter(UserProfile.user_id == user_id).first()


def get_invoice_prefix(db: Session, user_id: int) -> Optional[str]:
    profile = get_profile(db, user_id)
    return profile.invoice_prefix if profile is not None else None


def _get_or_build(db: Session, user_id: int) -> UserProfile:
    profile = get_profile(db, user_id)
    if profile is None:
        now = now_ms()
        profile = UserProfile(user_id=user_id, next_invoice_number=1, created_at=now, updated_at=now)
        db.add(profile)
    return profile


def upsert_profile(db: Session, user_id: int, values: dict) -> UserProfile:
    profile = _get_or_build(db, user_id)
    for field, value in values.items():
        setattr(profile, field, value)
    profile.updated_at = now_ms()
    db.commit()
    db.refresh(profile)
    logger.info("Saved business profile for user %s", user_id)
    return profile


def update_numbering(db: Session, user_id: int, invoice_prefix: Optional[str], next_invoice_number: Optional[int]) -> UserProfile:
    profile = _get_or_build(db, user_id)
    profile.invoice_prefix = invoice_prefix
    if next_invoice_number is not None:
        profile.next_invoice_number = next_invoice_number
    profile.updated_at = now_ms()
    db.commit()
    db.refresh(profile)
    return profile


def next_profile_number(profile: Optional[UserProfile]) -> dict:
    prefix = (profile.invoice_prefix if profile is not None else None) or ""
    number = (profile.next_invoice_number if profile is not None else None) or 1
    return {"prefix": prefix, "number": number, "formatted": format_invoice_number(number, prefix)}


def increment_invoice_number(db: Session, user_id: int) -> int:
    profile = _get_or_build(db, user_id)
    profile.next_invoice_number = (profile.next_invoice_number or 1) + 1
    profile.updated_at = now_ms()
    db.commit()
    return profile.next_invoice_number


def profile_party(profile: Optional[UserProfile]) -> dict:
    """The "from" party an invoice starts with."""
    if profile is None:
        return {"name": ""}
    party = {"name": profile.business_name or profile.display_name or ""}
    for field in _PARTY_FIELDS:
        party[field] = getattr(profile, field)
    return party
