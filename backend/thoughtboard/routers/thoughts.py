"""
Thoughts Router for Thoughtboard
"""
from uuid import UUID
from typing import Annotated
from fastapi import APIRouter, Depends, status, Request
from sqlalchemy.ext.asyncio import AsyncSession
from thoughtboard.database import get_db
from thoughtboard.routers.auth import CurrentUser
from thoughtboard.services.thought_service import ThoughtService
from thoughtboard.schemas import ThoughtCreate, ThoughtUpdate, ThoughtResponse, MessageResponse
from thoughtboard.utils.rate_limit import rate_limit

router = APIRouter(prefix="/api/thoughts", tags=["Thoughts"])


@router.get("/{board_id}", response_model=list[ThoughtResponse])
@rate_limit("read")
async def list_thoughts(
    request: Request,
    board_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: CurrentUser
):
    """Every thought on a board, metadata parsed"""
    service = ThoughtService(db)
    thoughts = await service.get_board_thoughts(board_id, current_user.id)
    return [ThoughtResponse.from_model(thought) for thought in thoughts]


@router.post("", response_model=ThoughtResponse, status_code=status.HTTP_201_CREATED)
@rate_limit("canvas")
async def create_thought(
    request: Request,
    data: ThoughtCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: CurrentUser
):
    """
    Raises:
        BoardNotFoundException: Unknown board
        NotBoardOwnerException: Board belongs to someone else
        InvalidChecklistException: Checklist content is not a list of items
    """
    service = ThoughtService(db)
    thought = await service.create_thought(data, current_user.id)
    return ThoughtResponse.from_model(thought)


@router.patch("/{thought_id}", response_model=ThoughtResponse)
@rate_limit("canvas")
async def update_thought(
    request: Request,
    thought_id: UUID,
    data: ThoughtUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: CurrentUser
):
    """Partial update; drag and resize land here, hence the higher limit"""
    service = ThoughtService(db)
    thought = await service.update_thought(thought_id, data, current_user.id)
    return ThoughtResponse.from_model(thought)


@router.delete("/{thought_id}", response_model=MessageResponse)
@rate_limit("canvas")
async def delete_thought(
    request: Request,
    thought_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: CurrentUser
):
    service = ThoughtService(db)
    await service.delete_thought(thought_id, current_user.id)
    return {"message": "Thought deleted"}
