"""
Client-side entities.

Attributes are snake_case like the wire format. ``to_app()`` gives the
camelCase view the UI layer works with and ``from_app()`` reads it back;
``to_wire()`` gives the snake_case request/response shape. Metadata is
always held parsed.
"""
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from thoughtboard.codecs import ThoughtType, decode_metadata

DEFAULT_TEXT_COLOR = "#fde047"


class ClientModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @classmethod
    def from_wire(cls, data: dict[str, Any]):
        return cls.model_validate(data)

    @classmethod
    def from_app(cls, data: dict[str, Any]):
        return cls.model_validate(data)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json")

    def to_app(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class User(ClientModel):
    id: str
    username: str


class Board(ClientModel):
    id: str
    title: str
    description: str | None = ""
    cover_image: str | None = None
    background_image: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class Thought(ClientModel):
    id: str
    board_id: str
    type: ThoughtType
    content: str = ""
    x: float
    y: float
    color: str | None = None
    width: float | None = None
    height: float | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime | None = None

    @field_validator("metadata", mode="before")
    @classmethod
    def parse_metadata(cls, value):
        # Older servers send the raw JSON text
        return decode_metadata(value)


class Connection(ClientModel):
    id: str
    board_id: str | None = None
    from_id: str
    to_id: str

    def touches(self, thought_id: str) -> bool:
        return thought_id in (self.from_id, self.to_id)

    def joins(self, a: str, b: str) -> bool:
        """Same unordered pair; direction is ignored."""
        return {self.from_id, self.to_id} == {a, b}
