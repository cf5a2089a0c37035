from uuid import UUID
from sqlalchemy import select, delete, or_
from sqlalchemy.ext.asyncio import AsyncSession
from thoughtboard.codecs import ChecklistFormatError, encode_metadata, parse_checklist
from thoughtboard.exceptions import InvalidChecklistException
from thoughtboard.models.thought import Thought, ThoughtType
from thoughtboard.models.connection import Connection
from thoughtboard.schemas.thought import ThoughtCreate, ThoughtUpdate
from thoughtboard.services.ownership import OwnershipGuard
from thoughtboard.database import utcnow
from thoughtboard.utils.logging_config import thought_logger


def validate_checklist_content(thought_type: str, content: str | None) -> None:
    if thought_type != ThoughtType.CHECKLIST.value or content is None:
        return
    try:
        parse_checklist(content)
    except ChecklistFormatError as e:
        raise InvalidChecklistException(str(e))


class ThoughtService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.guard = OwnershipGuard(db)

    async def get_board_thoughts(self, board_id: UUID, user_id: UUID) -> list[Thought]:
        await self.guard.require_board(board_id, user_id)
        result = await self.db.execute(
            select(Thought)
            .where(Thought.board_id == board_id)
            .order_by(Thought.created_at.asc())
        )
        return list(result.scalars().all())

    async def create_thought(self, thought_data: ThoughtCreate, user_id: UUID) -> Thought:
        await self.guard.require_board(thought_data.board_id, user_id)
        validate_checklist_content(thought_data.type.value, thought_data.content)

        thought = Thought(
            board_id=thought_data.board_id,
            type=thought_data.type.value,
            content=thought_data.content or "",
            x=thought_data.x,
            y=thought_data.y,
            color=thought_data.color,
            width=thought_data.width,
            height=thought_data.height,
            metadata_json=encode_metadata(thought_data.metadata),
            created_at=utcnow(),
        )
        self.db.add(thought)
        await self.db.flush()
        await self.db.refresh(thought)

        thought_logger.info(
            f"Thought created: {thought.id} ({thought.type}) on board {thought.board_id}"
        )
        return thought

    async def update_thought(self, thought_id: UUID, thought_data: ThoughtUpdate, user_id: UUID) -> Thought:
        thought = await self.guard.require_thought(thought_id, user_id)
        validate_checklist_content(thought.type, thought_data.content)

        # null and absent both mean "keep"
        changes = thought_data.model_dump(exclude_none=True, exclude={"metadata"})
        for field, value in changes.items():
            setattr(thought, field, value)
        if thought_data.metadata is not None:
            thought.metadata_json = encode_metadata(thought_data.metadata)

        await self.db.flush()
        await self.db.refresh(thought)
        thought_logger.debug(f"Thought updated: {thought_id} fields={sorted(changes)}")
        return thought

    async def delete_thought(self, thought_id: UUID, user_id: UUID) -> None:
        await self.guard.require_thought(thought_id, user_id)

        await self.db.execute(
            delete(Connection).where(
                or_(Connection.from_id == thought_id, Connection.to_id == thought_id)
            )
        )
        await self.db.execute(delete(Thought).where(Thought.id == thought_id))
        await self.db.flush()

        thought_logger.info(f"Thought deleted: {thought_id}")
