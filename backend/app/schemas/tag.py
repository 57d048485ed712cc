"""Tag schemas."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from backend.app.models.enums import TagType


class TagCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    color: Optional[str] = None
    type: TagType = TagType.BOTH


class TagUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    color: Optional[str] = None
    type: Optional[TagType] = None


class TagRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    owner_id: int
    name: str
    color: Optional[str] = None
    type: TagType
    created_at: int
    updated_at: int
