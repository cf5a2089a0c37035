"""
Connections Router for Thoughtboard
"""
from uuid import UUID
from typing import Annotated
from fastapi import APIRouter, Depends, status, Request
from sqlalchemy.ext.asyncio import AsyncSession
from thoughtboard.database import get_db
from thoughtboard.routers.auth import CurrentUser
from thoughtboard.services.connection_service import ConnectionService
from thoughtboard.schemas import ConnectionCreate, ConnectionResponse, MessageResponse
from thoughtboard.utils.rate_limit import rate_limit

router = APIRouter(prefix="/api/connections", tags=["Connections"])


@router.get("/{board_id}", response_model=list[ConnectionResponse])
@rate_limit("read")
async def list_connections(
    request: Request,
    board_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: CurrentUser
):
    service = ConnectionService(db)
    return await service.get_board_connections(board_id, current_user.id)


@router.post("", response_model=ConnectionResponse, status_code=status.HTTP_201_CREATED)
@rate_limit("canvas")
async def create_connection(
    request: Request,
    data: ConnectionCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: CurrentUser
):
    """
    Raises:
        InvalidConnectionException: Endpoints missing, identical or on another board
    """
    service = ConnectionService(db)
    return await service.create_connection(data, current_user.id)


@router.delete("/{connection_id}", response_model=MessageResponse)
@rate_limit("canvas")
async def delete_connection(
    request: Request,
    connection_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: CurrentUser
):
    service = ConnectionService(db)
    await service.delete_connection(connection_id, current_user.id)
    return {"message": "Connection deleted"}
