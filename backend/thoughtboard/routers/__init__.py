from thoughtboard.routers.auth import router as auth_router
from thoughtboard.routers.boards import router as boards_router
from thoughtboard.routers.thoughts import router as thoughts_router
from thoughtboard.routers.connections import router as connections_router

__all__ = ["auth_router", "boards_router", "thoughts_router", "connections_router"]
