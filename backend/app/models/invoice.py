"""Invoice model for timesheet billing."""

from sqlalchemy import JSON, BigInteger, Boolean, Column, Float, ForeignKey, Index, Integer, String, Text, text
from sqlalchemy.orm import relationship

from backend.app.core.time import now_ms
from backend.app.db.base_class import Base

UNFILED_SCOPE = "unfiled"


def folder_scope_for(folder_id: int | None) -> str:
    return UNFILED_SCOPE if folder_id is None else str(folder_id)


class Invoice(Base):
    __tablename__ = "invoices"
    __table_args__ = (
        # Invoice numbers are unique per owner and folder scope among live rows
        Index(
            "uq_invoices_owner_scope_number",
            "owner_id",
            "folder_scope",
            "invoice_number",
            unique=True,
            sqlite_where=text("deleted_at IS NULL"),
            postgresql_where=text("deleted_at IS NULL"),
        ),
        Index("ix_invoices_owner_created", "owner_id", "created_at"),
    )

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    folder_id = Column(Integer, ForeignKey("invoice_folders.id"), nullable=True, index=True)
    folder_scope = Column(String(32), nullable=False, default=UNFILED_SCOPE)

    invoice_number = Column(String(100), nullable=False)
    status = Column(String(32), nullable=False, default="DRAFT", index=True)
    status_history = Column(JSON, nullable=False, default=list)

    issue_date = Column(String(10), nullable=False)
    due_date = Column(String(10), nullable=True)
    period_start = Column(String(10), nullable=True)
    period_end = Column(String(10), nullable=True)

    sent_at = Column(String(40), nullable=True)
    paid_at = Column(String(40), nullable=True)
    viewed_at = Column(String(40), nullable=True)

    from_party = Column(JSON, nullable=False, default=dict)
    to_party = Column(JSON, nullable=False, default=dict)

    hourly_rate = Column(Float, nullable=False, default=0.0)
    default_hours_per_day = Column(Float, nullable=False, default=8.0)
    daily_work_hours = Column(JSON, nullable=False, default=list)

    total_days = Column(Integer, nullable=False, default=0)
    total_hours = Column(Float, nullable=False, default=0.0)
    subtotal = Column(Float, nullable=False, default=0.0)

    line_items = Column(JSON, nullable=False, default=list)

    discount_percent = Column(Float, nullable=False, default=0.0)
    discount_amount = Column(Float, nullable=False, default=0.0)
    tax_percent = Column(Float, nullable=False, default=0.0)
    tax_amount = Column(Float, nullable=False, default=0.0)
    total_amount = Column(Float, nullable=False, default=0.0)

    currency = Column(String(3), nullable=False, default="USD")
    payment_terms = Column(String(20), nullable=False, default="NET_30")
    custom_payment_terms = Column(String, nullable=True)
    bank_details = Column(JSON, nullable=True)

    notes = Column(Text, nullable=True)
    terms = Column(Text, nullable=True)
    job_title = Column(String, nullable=True)

    tags = Column(JSON, nullable=False, default=list)

    is_archived = Column(Boolean, nullable=False, default=False)
    archived_at = Column(String(40), nullable=True)
    is_move_locked = Column(Boolean, nullable=False, default=False)

    show_detailed_hours = Column(Boolean, nullable=False, default=False)
    pdf_theme = Column(String(10), nullable=False, default="light")
    background_design_id = Column(String(64), nullable=True)
    page_size = Column(String(10), nullable=False, default="A4")

    created_at = Column(BigInteger, nullable=False, default=now_ms)
    updated_at = Column(BigInteger, nullable=False, default=now_ms)
    deleted_at = Column(BigInteger, nullable=True)

    owner = relationship("User", back_populates="invoices")
    folder = relationship("InvoiceFolder", back_populates="invoices")
    status_logs = relationship("StatusLog", back_populates="invoice", cascade="all, delete-orphan")
