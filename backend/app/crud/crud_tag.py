"""Tag repository."""

from typing import List, Optional

from sqlalchemy.orm import Session

from backend.app.crud.base import CRUDOwned
from backend.app.models.tag import Tag


class CRUDTag(CRUDOwned[Tag]):
    def get_by_name(self, db: Session, *, owner_id: int, name: str) -> Optional[Tag]:
        return self.query(db, owner_id=owner_id).filter(Tag.name == name).first()

    def list_by_types(self, db: Session, *, owner_id: int, types: Optional[List[str]] = None) -> List[Tag]:
        query = self.query(db, owner_id=owner_id)
        if types:
            query = query.filter(Tag.type.in_(types))
        return query.order_by(Tag.name.asc()).all()


tag_crud = CRUDTag(Tag)
