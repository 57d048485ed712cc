"""Saved client details for quick selection of the invoice "to" party."""

from sqlalchemy import BigInteger, Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from backend.app.core.time import now_ms
from backend.app.db.base_class import Base


class ClientProfile(Base):
    __tablename__ = "client_profiles"

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False, index=True)
    address = Column(String, nullable=True)
    city = Column(String, nullable=True)
    state = Column(String, nullable=True)
    postal_code = Column(String, nullable=True)
    country = Column(String, nullable=True)
    email = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    tax_id = Column(String, nullable=True)
    logo = Column(String, nullable=True)
    created_at = Column(BigInteger, nullable=False, default=now_ms)
    updated_at = Column(BigInteger, nullable=False, default=now_ms)
    deleted_at = Column(BigInteger, nullable=True)

    owner = relationship("User", back_populates="client_profiles")
