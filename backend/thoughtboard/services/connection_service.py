from uuid import UUID
from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession
from thoughtboard.exceptions import InvalidConnectionException
from thoughtboard.models.thought import Thought
from thoughtboard.models.connection import Connection
from thoughtboard.schemas.connection import ConnectionCreate
from thoughtboard.services.ownership import OwnershipGuard
from thoughtboard.utils.logging_config import connection_logger


class ConnectionService:
    """
    Connections are not deduplicated here; the client suppresses
    duplicates. Endpoints must exist on the connection's board and differ.
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self.guard = OwnershipGuard(db)

    async def get_board_connections(self, board_id: UUID, user_id: UUID) -> list[Connection]:
        await self.guard.require_board(board_id, user_id)
        result = await self.db.execute(
            select(Connection).where(Connection.board_id == board_id)
        )
        return list(result.scalars().all())

    async def _check_endpoints(self, data: ConnectionCreate) -> None:
        if data.from_id == data.to_id:
            raise InvalidConnectionException("a thought cannot connect to itself")

        result = await self.db.execute(
            select(Thought.id, Thought.board_id).where(Thought.id.in_([data.from_id, data.to_id]))
        )
        boards = {row.id: row.board_id for row in result}
        for endpoint in (data.from_id, data.to_id):
            if endpoint not in boards:
                raise InvalidConnectionException(f"thought {endpoint} does not exist")
            if boards[endpoint] != data.board_id:
                raise InvalidConnectionException(f"thought {endpoint} is on another board")

    async def create_connection(self, connection_data: ConnectionCreate, user_id: UUID) -> Connection:
        await self.guard.require_board(connection_data.board_id, user_id)
        await self._check_endpoints(connection_data)

        connection = Connection(
            board_id=connection_data.board_id,
            from_id=connection_data.from_id,
            to_id=connection_data.to_id,
        )
        self.db.add(connection)
        await self.db.flush()
        await self.db.refresh(connection)

        connection_logger.info(
            f"Connection created: {connection.from_id} -> {connection.to_id} on board {connection.board_id}"
        )
        return connection

    async def delete_connection(self, connection_id: UUID, user_id: UUID) -> None:
        await self.guard.require_connection(connection_id, user_id)
        await self.db.execute(delete(Connection).where(Connection.id == connection_id))
        await self.db.flush()
        connection_logger.info(f"Connection deleted: {connection_id}")
