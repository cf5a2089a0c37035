from uuid import UUID
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field
from thoughtboard.config import settings


class BoardCreate(BaseModel):
    """Every field is optional; an empty title falls back to the default title"""
    model_config = ConfigDict(extra="forbid")

    title: str | None = Field(None, max_length=200)
    description: str | None = Field(None, max_length=5000)
    cover_image: str | None = Field(None, max_length=settings.MAX_CONTENT_LENGTH)
    background_image: str | None = Field(None, max_length=settings.MAX_CONTENT_LENGTH)


class BoardUpdate(BaseModel):
    """Partial update: absent or null fields keep their stored value"""
    model_config = ConfigDict(extra="forbid")

    title: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = Field(None, max_length=5000)
    cover_image: str | None = Field(None, max_length=settings.MAX_CONTENT_LENGTH)
    background_image: str | None = Field(None, max_length=settings.MAX_CONTENT_LENGTH)


class BoardResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    title: str
    description: str | None
    cover_image: str | None
    background_image: str | None
    created_at: datetime
    updated_at: datetime
