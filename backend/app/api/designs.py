from typing import List

from fastapi import APIRouter

from backend.app.schemas.design import BackgroundDesignRead
from backend.app.services.designs import list_designs

router = APIRouter(prefix="/designs", tags=["designs"])


@router.get("/", response_model=List[BackgroundDesignRead])
async def get_designs():
    return [design.as_dict() for design in list_designs()]
