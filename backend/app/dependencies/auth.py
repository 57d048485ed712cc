"""Authentication dependencies for retrieving the current user."""

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from backend.app.core.security import decode_access_token
from backend.app.db.session import get_db
from backend.app.models.user import User


def _resolve_user(db: Session, authorization: str | None) -> User | None:
    # Expect Authorization: Bearer <token>
    if not authorization or not authorization.startswith("Bearer "):
        return None
    token = authorization.split(" ", 1)[1]
    try:
        payload = decode_access_token(token)
    except ValueError:
        return None

    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        return None

    return db.query(User).filter(User.id == user_id, User.is_active.is_(True)).first()


def get_current_user(db: Session = Depends(get_db), authorization: str | None = Header(default=None)) -> User:
    user = _resolve_user(db, authorization)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def get_optional_user(db: Session = Depends(get_db), authorization: str | None = Header(default=None)) -> User | None:
    """
    Read endpoints answer with an empty result instead of 401 when the
    caller has no usable identity.
    """
    return _resolve_user(db, authorization)
