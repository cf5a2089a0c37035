from uuid import UUID
from pydantic import BaseModel, ConfigDict


class ConnectionCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    board_id: UUID
    from_id: UUID
    to_id: UUID


class ConnectionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    board_id: UUID
    from_id: UUID
    to_id: UUID
