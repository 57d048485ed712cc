"""Client profile repository."""

from typing import List, Optional

from sqlalchemy.orm import Session

from backend.app.crud.base import CRUDOwned
from backend.app.models.client_profile import ClientProfile


class CRUDClientProfile(CRUDOwned[ClientProfile]):
    def list_sorted(self, db: Session, *, owner_id: int) -> List[ClientProfile]:
        return self.query(db, owner_id=owner_id).order_by(ClientProfile.name.asc()).all()

    def get_by_name(self, db: Session, *, owner_id: int, name: str) -> Optional[ClientProfile]:
        return self.query(db, owner_id=owner_id).filter(ClientProfile.name == name).first()


client_profile_crud = CRUDClientProfile(ClientProfile)
