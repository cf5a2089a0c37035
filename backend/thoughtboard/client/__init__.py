from thoughtboard.client.api import ApiClient, ApiError
from thoughtboard.client.models import User, Board, Thought, Connection, DEFAULT_TEXT_COLOR
from thoughtboard.client.session import SessionContext, FileSessionStore, MemorySessionStore
from thoughtboard.client.cache import ThoughtCache, BoardListCache, CacheNotReadyError

__all__ = [
    "ApiClient", "ApiError",
    "User", "Board", "Thought", "Connection", "DEFAULT_TEXT_COLOR",
    "SessionContext", "FileSessionStore", "MemorySessionStore",
    "ThoughtCache", "BoardListCache", "CacheNotReadyError",
]
