from uuid import UUID
from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession
from thoughtboard.models.board import Board
from thoughtboard.models.thought import Thought
from thoughtboard.models.connection import Connection
from thoughtboard.schemas.board import BoardCreate, BoardUpdate
from thoughtboard.services.ownership import OwnershipGuard
from thoughtboard.config import settings
from thoughtboard.database import utcnow
from thoughtboard.utils.logging_config import board_logger


class BoardService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.guard = OwnershipGuard(db)

    async def get_user_boards(self, user_id: UUID) -> list[Board]:
        """Newest first"""
        result = await self.db.execute(
            select(Board)
            .where(Board.user_id == user_id)
            .order_by(Board.created_at.desc())
        )
        return list(result.scalars().all())

    async def create_board(self, board_data: BoardCreate, user_id: UUID) -> Board:
        now = utcnow()
        board = Board(
            user_id=user_id,
            title=board_data.title or settings.DEFAULT_BOARD_TITLE,
            description=board_data.description or "",
            cover_image=board_data.cover_image,
            background_image=board_data.background_image,
            created_at=now,
            updated_at=now,
        )
        self.db.add(board)
        await self.db.flush()
        await self.db.refresh(board)

        board_logger.info(f"Board created: {board.id} by user {user_id}")
        return board

    async def update_board(self, board_id: UUID, board_data: BoardUpdate, user_id: UUID) -> Board:
        board = await self.guard.require_board(board_id, user_id)

        # null and absent both mean "keep"
        for field, value in board_data.model_dump(exclude_none=True).items():
            setattr(board, field, value)
        board.updated_at = max(utcnow(), board.created_at)

        await self.db.flush()
        await self.db.refresh(board)
        return board

    async def delete_board(self, board_id: UUID, user_id: UUID) -> None:
        await self.guard.require_board(board_id, user_id)

        # Dependents go first so the cascade holds without foreign key enforcement
        await self.db.execute(delete(Connection).where(Connection.board_id == board_id))
        await self.db.execute(delete(Thought).where(Thought.board_id == board_id))
        await self.db.execute(delete(Board).where(Board.id == board_id))
        await self.db.flush()

        board_logger.info(f"Board deleted: {board_id} by user {user_id}")
