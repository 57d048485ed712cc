"""Business profile used as the default "from" party and for global numbering."""

from sqlalchemy import JSON, BigInteger, Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from backend.app.core.time import now_ms
from backend.app.db.base_class import Base


class UserProfile(Base):
    __tablename__ = "user_profiles"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, unique=True)

    display_name = Column(String, nullable=True)
    business_name = Column(String, nullable=True)
    address = Column(String, nullable=True)
    city = Column(String, nullable=True)
    state = Column(String, nullable=True)
    postal_code = Column(String, nullable=True)
    country = Column(String, nullable=True)
    email = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    tax_id = Column(String, nullable=True)
    logo = Column(String, nullable=True)
    bank_details = Column(JSON, nullable=True)

    invoice_prefix = Column(String(20), nullable=True)
    next_invoice_number = Column(Integer, nullable=False, default=1)

    created_at = Column(BigInteger, nullable=False, default=now_ms)
    updated_at = Column(BigInteger, nullable=False, default=now_ms)

    user = relationship("User", back_populates="profile")
