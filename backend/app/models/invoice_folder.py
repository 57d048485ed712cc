"""Hierarchical folders that organise invoices and carry billing defaults."""

from sqlalchemy import JSON, BigInteger, Boolean, Column, Float, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from backend.app.core.time import now_ms
from backend.app.db.base_class import Base


class InvoiceFolder(Base):
    __tablename__ = "invoice_folders"

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    parent_id = Column(Integer, ForeignKey("invoice_folders.id"), nullable=True, index=True)

    name = Column(String(255), nullable=False)
    description = Column(String, nullable=True)
    color = Column(String(20), nullable=True)
    tags = Column(JSON, nullable=False, default=list)
    is_move_locked = Column(Boolean, nullable=False, default=False)

    # Billing defaults inherited by quick-created invoices
    default_hourly_rate = Column(Float, nullable=True)
    default_currency = Column(String(3), nullable=True)
    default_payment_terms = Column(String(20), nullable=True)
    default_job_title = Column(String, nullable=True)
    default_hours_per_day = Column(Float, nullable=True)
    client_profile_id = Column(Integer, ForeignKey("client_profiles.id"), nullable=True)

    created_at = Column(BigInteger, nullable=False, default=now_ms)
    updated_at = Column(BigInteger, nullable=False, default=now_ms)
    deleted_at = Column(BigInteger, nullable=True)

    owner = relationship("User", back_populates="folders")
    invoices = relationship("Invoice", back_populates="folder")
    client_profile = relationship("ClientProfile")
