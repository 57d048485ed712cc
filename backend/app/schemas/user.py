"""User and business profile schemas."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from backend.app.schemas.invoice import BankDetails


class UserCreate(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class UserRead(BaseModel):
    id: int
    email: EmailStr
    first_name: Optional[str] = None
    last_name: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class LoginRequest(BaseModel):
    """Payload for login attempts."""

    email: EmailStr
    password: str


class TokenRead(BaseModel):
    access_token: str
    token_type: str = "bearer"


class UserProfileBase(BaseModel):
    display_name: Optional[str] = None
    business_name: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    tax_id: Optional[str] = None
    logo: Optional[str] = None
    bank_details: Optional[BankDetails] = None


class UserProfileUpdate(UserProfileBase):
    invoice_prefix: Optional[str] = None


class UserProfileRead(UserProfileBase):
    id: int
    user_id: int
    invoice_prefix: Optional[str] = None
    next_invoice_number: int
    created_at: int
    updated_at: int

    model_config = ConfigDict(from_attributes=True)


class NumberingUpdate(BaseModel):
    invoice_prefix: Optional[str] = None
    next_invoice_number: Optional[int] = Field(default=None, ge=1)
