"""Invoice folder schemas."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from backend.app.models.enums import Currency, PaymentTerms


def _check_half_hours(value):
    if value is not None and (value * 2) != int(value * 2):
        raise ValueError("default_hours_per_day must be a multiple of 0.5")
    return value


class FolderBase(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    color: Optional[str] = None
    parent_id: Optional[int] = None
    default_hourly_rate: Optional[float] = Field(default=None, ge=0)
    default_currency: Optional[Currency] = None
    default_payment_terms: Optional[PaymentTerms] = None
    default_job_title: Optional[str] = None
    default_hours_per_day: Optional[float] = Field(default=None, ge=0, le=24)
    client_profile_id: Optional[int] = None

    @field_validator("default_hours_per_day")
    @classmethod
    def check_half_hours(cls, v):
        return _check_half_hours(v)


class FolderCreate(FolderBase):
    tags: List[int] = Field(default_factory=list)


class FolderUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    color: Optional[str] = None
    parent_id: Optional[int] = None
    tags: Optional[List[int]] = None
    default_hourly_rate: Optional[float] = Field(default=None, ge=0)
    default_currency: Optional[Currency] = None
    default_payment_terms: Optional[PaymentTerms] = None
    default_job_title: Optional[str] = None
    default_hours_per_day: Optional[float] = Field(default=None, ge=0, le=24)
    client_profile_id: Optional[int] = None

    @field_validator("default_hours_per_day")
    @classmethod
    def check_half_hours(cls, v):
        return _check_half_hours(v)


class FolderMove(BaseModel):
    parent_id: Optional[int] = None


class FolderRead(FolderBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    owner_id: int
    tags: List[int]
    is_move_locked: bool
    created_at: int
    updated_at: int


class FolderWithCount(FolderRead):
    invoice_count: int = 0


class FolderTreeNode(FolderWithCount):
    children: List["FolderTreeNode"] = Field(default_factory=list)


class FolderDeleteResult(BaseModel):
    folder_id: int
    reparented_children: int
    unfiled_invoices: int
    deleted_invoices: int
