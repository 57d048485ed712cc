"""Client profile schemas."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ClientProfileBase(BaseModel):
    name: str = Field(min_length=1)
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    tax_id: Optional[str] = None
    logo: Optional[str] = None


class ClientProfileCreate(ClientProfileBase):
    pass


class ClientProfileUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    tax_id: Optional[str] = None
    logo: Optional[str] = None


class ClientProfileRead(ClientProfileBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    owner_id: int
    created_at: int
    updated_at: int
