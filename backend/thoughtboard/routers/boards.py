"""
Boards Router for Thoughtboard

Owner-scoped board CRUD.
"""
from uuid import UUID
from typing import Annotated
from fastapi import APIRouter, Depends, status, Request
from sqlalchemy.ext.asyncio import AsyncSession
from thoughtboard.database import get_db
from thoughtboard.routers.auth import CurrentUser
from thoughtboard.services.board_service import BoardService
from thoughtboard.schemas import BoardCreate, BoardUpdate, BoardResponse, MessageResponse
from thoughtboard.utils.rate_limit import rate_limit

router = APIRouter(prefix="/api/boards", tags=["Boards"])


@router.get("", response_model=list[BoardResponse])
@rate_limit("read")
async def list_boards(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: CurrentUser
):
    """Current user's boards, newest first - 60 requests / minute"""
    service = BoardService(db)
    return await service.get_user_boards(current_user.id)


@router.post("", response_model=BoardResponse, status_code=status.HTTP_201_CREATED)
@rate_limit("boards")
async def create_board(
    request: Request,
    data: BoardCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: CurrentUser
):
    service = BoardService(db)
    return await service.create_board(data, current_user.id)


@router.patch("/{board_id}", response_model=BoardResponse)
@rate_limit("boards")
async def update_board(
    request: Request,
    board_id: UUID,
    data: BoardUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: CurrentUser
):
    """
    Partial update; returns the updated board.

    Raises:
        BoardNotFoundException: Unknown board
        NotBoardOwnerException: Board belongs to someone else
    """
    service = BoardService(db)
    return await service.update_board(board_id, data, current_user.id)


@router.delete("/{board_id}", response_model=MessageResponse)
@rate_limit("boards")
async def delete_board(
    request: Request,
    board_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: CurrentUser
):
    """Delete a board with its thoughts and connections"""
    service = BoardService(db)
    await service.delete_board(board_id, current_user.id)
    return {"message": "Board deleted"}
