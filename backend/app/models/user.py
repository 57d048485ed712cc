from sqlalchemy import BigInteger, Boolean, Column, Integer, String
from sqlalchemy.orm import relationship

from backend.app.core.time import now_ms
from backend.app.db.base_class import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=True)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(BigInteger, nullable=False, default=now_ms)
    updated_at = Column(BigInteger, nullable=False, default=now_ms, onupdate=now_ms)

    profile = relationship("UserProfile", back_populates="user", cascade="all, delete-orphan", uselist=False)
    invoices = relationship("Invoice", back_populates="owner", cascade="all, delete-orphan", foreign_keys="Invoice.owner_id")
    folders = relationship("InvoiceFolder", back_populates="owner", cascade="all, delete-orphan", foreign_keys="InvoiceFolder.owner_id")
    tags = relationship("Tag", back_populates="owner", cascade="all, delete-orphan", foreign_keys="Tag.owner_id")
    client_profiles = relationship("ClientProfile", back_populates="owner", cascade="all, delete-orphan", foreign_keys="ClientProfile.owner_id")
    status_logs = relationship("StatusLog", back_populates="owner", cascade="all, delete-orphan", foreign_keys="StatusLog.owner_id")
