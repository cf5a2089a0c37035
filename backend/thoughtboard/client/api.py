"""
Typed async client for the Thoughtboard REST API.
"""
from typing import Any

import httpx
from loguru import logger as loguru_logger

from thoughtboard.client.models import Board, Connection, Thought, User

logger = loguru_logger.bind(name="client")

DEFAULT_BASE_URL = "http://localhost:3001/api"


class ApiError(Exception):
    """
    A request that did not succeed.

    ``status_code`` is 0 when the server was never reached.
    """

    def __init__(self, status_code: int, code: str, message: str):
        self.status_code = status_code
        self.code = code
        self.message = message
        super().__init__(f"{status_code} {code}: {message}")


class ApiClient:
    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        token: str | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.token = token
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            transport=transport,
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.close()

    def _headers(self) -> dict[str, str]:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}

    async def _request(self, method: str, path: str, json: Any = None) -> Any:
        try:
            response = await self._client.request(
                method, path, json=json, headers=self._headers()
            )
        except httpx.HTTPError as e:
            logger.warning(f"{method} {path} failed before a response: {e}")
            raise ApiError(0, "NETWORK_ERROR", str(e)) from e

        if response.is_error:
            try:
                body = response.json()
            except ValueError:
                body = {}
            if not isinstance(body, dict):
                body = {}
            raise ApiError(
                response.status_code,
                body.get("error", f"HTTP_{response.status_code}"),
                body.get("message", "Something went wrong"),
            )
        return response.json()

    # Auth

    async def signup(self, username: str, password: str) -> tuple[str, User]:
        data = await self._request("POST", "/auth/signup", {"username": username, "password": password})
        return data["token"], User.from_wire(data["user"])

    async def login(self, username: str, password: str) -> tuple[str, User]:
        data = await self._request("POST", "/auth/login", {"username": username, "password": password})
        return data["token"], User.from_wire(data["user"])

    async def me(self) -> User:
        return User.from_wire(await self._request("GET", "/auth/me"))

    # Boards

    async def list_boards(self) -> list[Board]:
        return [Board.from_wire(item) for item in await self._request("GET", "/boards")]

    async def create_board(self, **fields: Any) -> Board:
        return Board.from_wire(await self._request("POST", "/boards", fields))

    async def update_board(self, board_id: str, **fields: Any) -> Board:
        return Board.from_wire(await self._request("PATCH", f"/boards/{board_id}", fields))

    async def delete_board(self, board_id: str) -> None:
        await self._request("DELETE", f"/boards/{board_id}")

    # Thoughts

    async def list_thoughts(self, board_id: str) -> list[Thought]:
        return [Thought.from_wire(item) for item in await self._request("GET", f"/thoughts/{board_id}")]

    async def create_thought(self, board_id: str, type: str, x: float, y: float, **fields: Any) -> Thought:
        payload = {"board_id": board_id, "type": type, "x": x, "y": y, **fields}
        return Thought.from_wire(await self._request("POST", "/thoughts", payload))

    async def update_thought(self, thought_id: str, **fields: Any) -> Thought:
        return Thought.from_wire(await self._request("PATCH", f"/thoughts/{thought_id}", fields))

    async def delete_thought(self, thought_id: str) -> None:
        await self._request("DELETE", f"/thoughts/{thought_id}")

    # Connections

    async def list_connections(self, board_id: str) -> list[Connection]:
        return [Connection.from_wire(item) for item in await self._request("GET", f"/connections/{board_id}")]

    async def create_connection(self, board_id: str, from_id: str, to_id: str) -> Connection:
        payload = {"board_id": board_id, "from_id": from_id, "to_id": to_id}
        return Connection.from_wire(await self._request("POST", "/connections", payload))

    async def delete_connection(self, connection_id: str) -> None:
        await self._request("DELETE", f"/connections/{connection_id}")
