"""Append-only status change audit used for cross-invoice reporting."""

from sqlalchemy import BigInteger, Column, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship

from backend.app.core.time import now_iso, now_ms
from backend.app.db.base_class import Base


class StatusLog(Base):
    __tablename__ = "status_logs"
    __table_args__ = (Index("ix_status_logs_owner_changed", "owner_id", "changed_at"),)

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    invoice_id = Column(Integer, ForeignKey("invoices.id"), nullable=False, index=True)
    invoice_number = Column(String(100), nullable=False)
    folder_id = Column(Integer, ForeignKey("invoice_folders.id"), nullable=True, index=True)
    folder_name = Column(String(255), nullable=True)
    previous_status = Column(String(32), nullable=True)
    new_status = Column(String(32), nullable=False)
    notes = Column(Text, nullable=True)
    changed_at = Column(BigInteger, nullable=False, default=now_ms)
    changed_at_str = Column(String(40), nullable=False, default=now_iso)

    owner = relationship("User", back_populates="status_logs")
    invoice = relationship("Invoice", back_populates="status_logs")
