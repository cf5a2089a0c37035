from uuid import UUID
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from thoughtboard.models.board import Board
from thoughtboard.models.thought import Thought
from thoughtboard.models.connection import Connection
from thoughtboard.exceptions import (
    BoardNotFoundException,
    ThoughtNotFoundException,
    ConnectionNotFoundException,
    NotBoardOwnerException,
)
from thoughtboard.utils.logging_config import board_logger


class OwnershipGuard:
    """
    Board-rooted authorization.

    Thoughts and connections are authorized through the board they sit on.
    Existence is always checked before ownership, so an unknown id is 404
    and a foreign one is 403. Nothing here writes to the session.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _get_board(self, board_id: UUID) -> Board | None:
        result = await self.db.execute(select(Board).where(Board.id == board_id))
        return result.scalar_one_or_none()

    async def owns_board(self, board_id: UUID, user_id: UUID) -> bool:
        board = await self._get_board(board_id)
        return board is not None and board.user_id == user_id

    async def require_board(self, board_id: UUID, user_id: UUID) -> Board:
        board = await self._get_board(board_id)
        if board is None:
            raise BoardNotFoundException(board_id)
        if board.user_id != user_id:
            board_logger.warning(
                f"User {user_id} denied access to board {board_id}"
            )
            raise NotBoardOwnerException()
        return board

    async def require_thought(self, thought_id: UUID, user_id: UUID) -> Thought:
        result = await self.db.execute(select(Thought).where(Thought.id == thought_id))
        thought = result.scalar_one_or_none()
        if thought is None:
            raise ThoughtNotFoundException(thought_id)
        await self.require_board(thought.board_id, user_id)
        return thought

    async def require_connection(self, connection_id: UUID, user_id: UUID) -> Connection:
        result = await self.db.execute(select(Connection).where(Connection.id == connection_id))
        connection = result.scalar_one_or_none()
        if connection is None:
            raise ConnectionNotFoundException(connection_id)
        await self.require_board(connection.board_id, user_id)
        return connection
