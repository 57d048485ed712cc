"""Invoice folder repository."""

from typing import List, Optional

from sqlalchemy.orm import Session

from backend.app.crud.base import CRUDOwned
from backend.app.models.invoice_folder import InvoiceFolder


class CRUDInvoiceFolder(CRUDOwned[InvoiceFolder]):
    def children(self, db: Session, *, owner_id: int, parent_id: Optional[int]) -> List[InvoiceFolder]:
        query = self.query(db, owner_id=owner_id)
        if parent_id is None:
            query = query.filter(InvoiceFolder.parent_id.is_(None))
        else:
            query = query.filter(InvoiceFolder.parent_id == parent_id)
        return query.order_by(InvoiceFolder.name.asc()).all()

    def list_all(self, db: Session, *, owner_id: int) -> List[InvoiceFolder]:
        return self.query(db, owner_id=owner_id).order_by(InvoiceFolder.name.asc(), InvoiceFolder.id.asc()).all()


folder_crud = CRUDInvoiceFolder(InvoiceFolder)
