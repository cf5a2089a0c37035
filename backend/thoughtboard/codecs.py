"""
Codecs for the JSON substructures stored inside flat thought rows.

Storage keeps ``thoughts.metadata`` as JSON text and a checklist thought's
items as a JSON array inside ``content``. These helpers are the single
place where those strings are produced and parsed, shared by the API
services and the client.
"""
import enum
import json
import uuid
from typing import Any, Iterable

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError


class ThoughtType(str, enum.Enum):
    TEXT = "text"
    LINK = "link"
    IMAGE = "image"
    CHECKLIST = "checklist"
    SKETCH = "sketch"


class ThoughtMetadata(BaseModel):
    """Optional card annotations; only ``title`` is used today (checklist title)."""
    model_config = ConfigDict(extra="forbid")

    title: str | None = Field(None, max_length=500)
    description: str | None = Field(None, max_length=5000)
    thumbnail: str | None = None


class ChecklistItem(BaseModel):
    id: str = Field(..., min_length=1, max_length=64)
    text: str = ""
    completed: bool = False


_checklist_adapter = TypeAdapter(list[ChecklistItem])


def encode_metadata(metadata: ThoughtMetadata | dict[str, Any] | None) -> str:
    if metadata is None:
        return "{}"
    if isinstance(metadata, ThoughtMetadata):
        metadata = metadata.model_dump(exclude_none=True)
    return json.dumps(metadata, separators=(",", ":"))


def decode_metadata(raw: str | dict | None) -> dict[str, Any]:
    """Parse stored metadata. Missing, empty or corrupt values read back as ``{}``."""
    if isinstance(raw, dict):
        return raw
    if not raw:
        return {}
    try:
        value = json.loads(raw)
    except (TypeError, ValueError):
        return {}
    return value if isinstance(value, dict) else {}


class ChecklistFormatError(ValueError):
    pass


def parse_checklist(content: str | None) -> list[ChecklistItem]:
    """Strict parse, used to validate incoming checklist content."""
    if not content:
        return []
    try:
        return _checklist_adapter.validate_json(content)
    except ValidationError as e:
        raise ChecklistFormatError(str(e)) from e


def decode_checklist(content: str | None) -> list[ChecklistItem]:
    """Lenient parse for rendering: unreadable content is an empty list."""
    try:
        return parse_checklist(content)
    except ChecklistFormatError:
        return []


def encode_checklist(items: Iterable[ChecklistItem]) -> str:
    return json.dumps(
        [item.model_dump() for item in items], separators=(",", ":")
    )


def new_item_id(existing: Iterable[str] = ()) -> str:
    """Draw an item id that is unique within one checklist."""
    taken = set(existing)
    while True:
        candidate = uuid.uuid4().hex[:12]
        if candidate not in taken:
            return candidate
