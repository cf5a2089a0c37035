"""
Local copies of a board's thoughts and connections (and of the board list)
with optimistic mutations.

Creates wait for the server and then apply its canonical entity. Updates
and deletes are applied locally first and sent in a background task; when
that task fails the cache refetches everything from the server. There is
no ordering between background tasks, so concurrent edits to the same
entity resolve as last write wins on the server.
"""
import asyncio
import random
from typing import Any, Coroutine, Iterable

from loguru import logger as loguru_logger

from thoughtboard.canvas.geometry import Segment, connection_segments, grow_position
from thoughtboard.client.api import ApiClient, ApiError
from thoughtboard.client.models import DEFAULT_TEXT_COLOR, Board, Connection, Thought
from thoughtboard.codecs import ChecklistItem, ThoughtType, decode_checklist, encode_checklist

logger = loguru_logger.bind(name="client")


class CacheNotReadyError(RuntimeError):
    """Mutation attempted while the cache is (re)loading."""


class _BackgroundTasks:
    def __init__(self):
        self._tasks: set[asyncio.Task] = set()
        self.loading = True

    def _ensure_ready(self) -> None:
        if self.loading:
            raise CacheNotReadyError("Cache is still loading")

    def _spawn(self, coro: Coroutine) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def drain(self) -> None:
        """Wait for every background call, including refetches they start."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))


class ThoughtCache(_BackgroundTasks):
    def __init__(self, api: ApiClient, board_id: str, refresh_on_update_failure: bool = True):
        super().__init__()
        self.api = api
        self.board_id = board_id
        self.refresh_on_update_failure = refresh_on_update_failure
        self.thoughts: list[Thought] = []
        self.connections: list[Connection] = []

    def get(self, thought_id: str) -> Thought | None:
        return next((t for t in self.thoughts if t.id == thought_id), None)

    async def load(self) -> None:
        self.loading = True
        try:
            thoughts, connections = await asyncio.gather(
                self.api.list_thoughts(self.board_id),
                self.api.list_connections(self.board_id),
            )
        except ApiError as e:
            logger.error(f"Failed to fetch board {self.board_id}: {e}")
        else:
            self.thoughts = thoughts
            self.connections = connections
        finally:
            self.loading = False

    refresh = load

    async def _push(self, call: Coroutine, what: str, refetch: bool = True) -> None:
        try:
            await call
        except ApiError as e:
            logger.error(f"Failed to {what}: {e}")
            if refetch:
                await self.load()

    async def add_thought(
        self,
        type: ThoughtType | str,
        x: float,
        y: float,
        content: str = "",
        parent_id: str | None = None,
        **fields: Any,
    ) -> Thought | None:
        self._ensure_ready()
        type = ThoughtType(type)
        if type is ThoughtType.TEXT:
            fields.setdefault("color", DEFAULT_TEXT_COLOR)
        fields.setdefault("metadata", {})

        try:
            thought = await self.api.create_thought(
                self.board_id, type.value, x, y, content=content, **fields
            )
        except ApiError as e:
            logger.error(f"Failed to add thought: {e}")
            return None

        self.thoughts = [*self.thoughts, thought]
        if parent_id:
            await self.add_connection(parent_id, thought.id)
        return thought

    def update_thought(self, thought_id: str, **changes: Any) -> asyncio.Task:
        self._ensure_ready()
        self.thoughts = [
            t.model_copy(update=changes) if t.id == thought_id else t for t in self.thoughts
        ]
        return self._spawn(self._push(
            self.api.update_thought(thought_id, **changes),
            f"update thought {thought_id}",
            refetch=self.refresh_on_update_failure,
        ))

    def delete_thought(self, thought_id: str) -> asyncio.Task:
        self._ensure_ready()
        self.thoughts = [t for t in self.thoughts if t.id != thought_id]
        self.connections = [c for c in self.connections if not c.touches(thought_id)]
        return self._spawn(self._push(
            self.api.delete_thought(thought_id), f"delete thought {thought_id}"
        ))

    async def add_connection(self, from_id: str, to_id: str) -> Connection | None:
        """Self-loops and pairs already joined in either direction are ignored."""
        self._ensure_ready()
        if from_id == to_id or any(c.joins(from_id, to_id) for c in self.connections):
            return None

        try:
            connection = await self.api.create_connection(self.board_id, from_id, to_id)
        except ApiError as e:
            logger.error(f"Failed to add connection: {e}")
            return None

        self.connections = [*self.connections, connection]
        return connection

    def delete_connection(self, connection_id: str) -> asyncio.Task:
        self._ensure_ready()
        self.connections = [c for c in self.connections if c.id != connection_id]
        return self._spawn(self._push(
            self.api.delete_connection(connection_id), f"delete connection {connection_id}"
        ))

    async def grow_thought(
        self, parent_id: str, type: ThoughtType | str, rng: random.Random | None = None
    ) -> Thought | None:
        """
        Create a child to the right of the parent and connect them.

        Not atomic: the child survives if the connection fails.
        """
        parent = self.get(parent_id)
        if parent is None:
            return None
        x, y = grow_position(parent.x, parent.y, rng)
        return await self.add_thought(type, x, y, parent_id=parent_id)

    def checklist_items(self, thought_id: str) -> list[ChecklistItem]:
        thought = self.get(thought_id)
        return decode_checklist(thought.content) if thought else []

    def set_checklist(self, thought_id: str, items: Iterable[ChecklistItem]) -> asyncio.Task:
        return self.update_thought(thought_id, content=encode_checklist(items))

    def segments(self) -> list[Segment]:
        return connection_segments(self.thoughts, self.connections)


class BoardListCache(_BackgroundTasks):
    """The dashboard's list of boards, newest first."""

    def __init__(self, api: ApiClient):
        super().__init__()
        self.api = api
        self.boards: list[Board] = []

    async def load(self) -> None:
        self.loading = True
        try:
            self.boards = await self.api.list_boards()
        except ApiError as e:
            logger.error(f"Failed to fetch boards: {e}")
        finally:
            self.loading = False

    async def _push(self, call: Coroutine, what: str) -> None:
        try:
            await call
        except ApiError as e:
            logger.error(f"Failed to {what}: {e}")
            await self.load()

    async def create_board(self, **fields: Any) -> Board | None:
        self._ensure_ready()
        try:
            board = await self.api.create_board(**fields)
        except ApiError as e:
            logger.error(f"Failed to create board: {e}")
            return None
        self.boards = [board, *self.boards]
        return board

    def update_board(self, board_id: str, **changes: Any) -> asyncio.Task:
        self._ensure_ready()
        self.boards = [
            b.model_copy(update=changes) if b.id == board_id else b for b in self.boards
        ]
        return self._spawn(self._push(
            self.api.update_board(board_id, **changes), f"update board {board_id}"
        ))

    def delete_board(self, board_id: str) -> asyncio.Task:
        self._ensure_ready()
        self.boards = [b for b in self.boards if b.id != board_id]
        return self._spawn(self._push(
            self.api.delete_board(board_id), f"delete board {board_id}"
        ))
