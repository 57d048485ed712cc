"""Owner-scoped CRUD base that hides soft-deleted rows from every read."""

from typing import Any, Generic, List, Optional, Type, TypeVar

from sqlalchemy.orm import Query, Session

from backend.app.core.time import now_ms
from backend.app.db.base_class import Base

ModelType = TypeVar("ModelType", bound=Base)


class CRUDOwned(Generic[ModelType]):
    def __init__(self, model: Type[ModelType]):
        self.model = model

    def query(self, db: Session, *, owner_id: int) -> Query:
        """Base query for live rows of one owner. Every read goes through here."""
        return db.query(self.model).filter(self.model.owner_id == owner_id, self.model.deleted_at.is_(None))

    def get(self, db: Session, *, id: int, owner_id: int) -> Optional[ModelType]:
        return self.query(db, owner_id=owner_id).filter(self.model.id == id).first()

    def get_multi(self, db: Session, *, owner_id: int, **filters: Any) -> List[ModelType]:
        query = self.query(db, owner_id=owner_id)
        for field, value in filters.items():
            query = query.filter(getattr(self.model, field) == value)
        return query.order_by(self.model.created_at.desc(), self.model.id.desc()).all()

    def count(self, db: Session, *, owner_id: int, **filters: Any) -> int:
        query = self.query(db, owner_id=owner_id)
        for field, value in filters.items():
            query = query.filter(getattr(self.model, field) == value)
        return query.count()

    def create(self, db: Session, *, owner_id: int, commit: bool = True, **values: Any) -> ModelType:
        now = now_ms()
        obj = self.model(owner_id=owner_id, created_at=now, updated_at=now, **values)
        db.add(obj)
        if commit:
            db.commit()
            db.refresh(obj)
        else:
            db.flush()
        return obj

    def update(self, db: Session, *, db_obj: ModelType, commit: bool = True, **values: Any) -> ModelType:
        for field, value in values.items():
            setattr(db_obj, field, value)
        db_obj.updated_at = now_ms()
        if commit:
            db.commit()
            db.refresh(db_obj)
        return db_obj

    def soft_delete(self, db: Session, *, db_obj: ModelType, commit: bool = True) -> ModelType:
        db_obj.deleted_at = now_ms()
        if commit:
            db.commit()
            db.refresh(db_obj)
        return db_obj
