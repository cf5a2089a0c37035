from pydantic import BaseModel

from thoughtboard.schemas.auth import SignupRequest, LoginRequest, UserPublic, UserResponse, AuthResponse
from thoughtboard.schemas.board import BoardCreate, BoardUpdate, BoardResponse
from thoughtboard.schemas.thought import ThoughtCreate, ThoughtUpdate, ThoughtResponse
from thoughtboard.schemas.connection import ConnectionCreate, ConnectionResponse


class MessageResponse(BaseModel):
    message: str


__all__ = [
    "SignupRequest", "LoginRequest", "UserPublic", "UserResponse", "AuthResponse",
    "BoardCreate", "BoardUpdate", "BoardResponse",
    "ThoughtCreate", "ThoughtUpdate", "ThoughtResponse",
    "ConnectionCreate", "ConnectionResponse",
    "MessageResponse",
]
