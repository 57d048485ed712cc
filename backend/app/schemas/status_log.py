"""Status log schemas."""

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict

from backend.app.models.enums import InvoiceStatus


class StatusLogRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    invoice_id: int
    invoice_number: str
    folder_id: Optional[int] = None
    folder_name: Optional[str] = None
    previous_status: Optional[InvoiceStatus] = None
    new_status: InvoiceStatus
    notes: Optional[str] = None
    changed_at: int
    changed_at_str: str


class StatusLogPage(BaseModel):
    items: List[StatusLogRead]
    next_cursor: Optional[int] = None


class StatusLogStats(BaseModel):
    total_changes: int
    by_status: Dict[str, int]
    recent_activity: List[StatusLogRead]
