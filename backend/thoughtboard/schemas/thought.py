from typing import Any
from uuid import UUID
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field
from thoughtboard.codecs import ThoughtMetadata, ThoughtType, decode_metadata
from thoughtboard.config import settings
from thoughtboard.models.thought import Thought


class ThoughtCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    board_id: UUID
    type: ThoughtType
    content: str | None = Field(None, max_length=settings.MAX_CONTENT_LENGTH)
    x: float = Field(..., allow_inf_nan=False)
    y: float = Field(..., allow_inf_nan=False)
    color: str | None = Field(None, max_length=32)
    width: float | None = Field(None, gt=0, allow_inf_nan=False)
    height: float | None = Field(None, gt=0, allow_inf_nan=False)
    metadata: ThoughtMetadata | None = None


class ThoughtUpdate(BaseModel):
    """Partial update: absent or null fields keep their stored value"""
    model_config = ConfigDict(extra="forbid")

    content: str | None = Field(None, max_length=settings.MAX_CONTENT_LENGTH)
    x: float | None = Field(None, allow_inf_nan=False)
    y: float | None = Field(None, allow_inf_nan=False)
    color: str | None = Field(None, max_length=32)
    width: float | None = Field(None, gt=0, allow_inf_nan=False)
    height: float | None = Field(None, gt=0, allow_inf_nan=False)
    metadata: ThoughtMetadata | None = None


class ThoughtResponse(BaseModel):
    id: UUID
    board_id: UUID
    type: ThoughtType
    content: str
    x: float
    y: float
    color: str | None = None
    width: float | None = None
    height: float | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime

    @classmethod
    def from_model(cls, thought: Thought) -> "ThoughtResponse":
        return cls(
            id=thought.id,
            board_id=thought.board_id,
            type=thought.type,
            content=thought.content or "",
            x=thought.x,
            y=thought.y,
            color=thought.color,
            width=thought.width,
            height=thought.height,
            metadata=decode_metadata(thought.metadata_json),
            created_at=thought.created_at,
        )
