"""Invoice analytics endpoints."""

from typing import Dict, List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from backend.app.db.session import get_db
from backend.app.dependencies.auth import get_optional_user
from backend.app.models.user import User
from backend.app.schemas.analytics import ClientAnalytics, InvoiceAnalytics, MonthlyAnalyticsList, StatusAnalytics
from backend.app.services import analytics as analytics_service

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.get("/global", response_model=Optional[InvoiceAnalytics])
async def get_global_analytics(
    include_archived: bool = False,
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user),
):
    if current_user is None:
        return None
    return analytics_service.global_analytics(db, current_user.id, include_archived)


@router.get("/folders", response_model=List[InvoiceAnalytics])
async def get_all_folder_analytics(
    db: Session = Depends(get_db), current_user: Optional[User] = Depends(get_optional_user)
):
    if current_user is None:
        return []
    return analytics_service.all_folders_analytics(db, current_user.id)


@router.get("/folders/{folder_id}", response_model=Optional[InvoiceAnalytics])
async def get_folder_analytics(
    folder_id: int, db: Session = Depends(get_db), current_user: Optional[User] = Depends(get_optional_user)
):
    if current_user is None:
        return None
    return analytics_service.folder_analytics(db, current_user.id, folder_id)


@router.get("/unfiled", response_model=Optional[InvoiceAnalytics])
async def get_unfiled_analytics(db: Session = Depends(get_db), current_user: Optional[User] = Depends(get_optional_user)):
    if current_user is None:
        return None
    return analytics_service.unfiled_analytics(db, current_user.id)


@router.get("/by-status", response_model=Dict[str, StatusAnalytics])
async def get_status_analytics(db: Session = Depends(get_db), current_user: Optional[User] = Depends(get_optional_user)):
    if current_user is None:
        return {}
    return analytics_service.analytics_by_status(db, current_user.id)


@router.get("/by-client", response_model=List[ClientAnalytics])
async def get_client_analytics(db: Session = Depends(get_db), current_user: Optional[User] = Depends(get_optional_user)):
    if current_user is None:
        return []
    return analytics_service.analytics_by_client(db, current_user.id)


@router.get("/monthly", response_model=Optional[MonthlyAnalyticsList])
async def get_monthly_analytics(
    year: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user),
):
    if current_user is None:
        return None
    return analytics_service.monthly_analytics(db, current_user.id, year)
