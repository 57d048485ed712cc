"""Invoice repository."""

from typing import List, Optional

from sqlalchemy.orm import Query, Session

from backend.app.crud.base import CRUDOwned
from backend.app.models.invoice import Invoice, folder_scope_for


class CRUDInvoice(CRUDOwned[Invoice]):
    def in_scope(self, db: Session, *, owner_id: int, folder_id: Optional[int]) -> Query:
        """Live invoices sharing a folder scope; unfiled invoices form their own scope."""
        return self.query(db, owner_id=owner_id).filter(Invoice.folder_scope == folder_scope_for(folder_id))

    def numbers_in_scope(self, db: Session, *, owner_id: int, folder_id: Optional[int]) -> List[str]:
        rows = self.in_scope(db, owner_id=owner_id, folder_id=folder_id).with_entities(Invoice.invoice_number).all()
        return [row[0] for row in rows]

    def number_taken(
        self,
        db: Session,
        *,
        owner_id: int,
        folder_id: Optional[int],
        invoice_number: str,
        exclude_id: Optional[int] = None,
    ) -> bool:
        query = self.in_scope(db, owner_id=owner_id, folder_id=folder_id).filter(Invoice.invoice_number == invoice_number)
        if exclude_id is not None:
            query = query.filter(Invoice.id != exclude_id)
        return db.query(query.exists()).scalar()

    def latest_period_end(self, db: Session, *, owner_id: int, folder_id: Optional[int]) -> Optional[str]:
        row = (
            self.in_scope(db, owner_id=owner_id, folder_id=folder_id)
            .filter(Invoice.period_end.isnot(None))
            .order_by(Invoice.period_end.desc())
            .with_entities(Invoice.period_end)
            .first()
        )
        return row[0] if row else None


invoice_crud = CRUDInvoice(Invoice)
