"""Board CRUD, ownership isolation and cascading deletes."""
import uuid

import pytest


async def create_board(client, headers, **fields):
    response = await client.post("/api/boards", json=fields, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


async def create_thought(client, headers, board_id, **fields):
    payload = {"board_id": board_id, "type": "text", "x": 0, "y": 0, **fields}
    response = await client.post("/api/thoughts", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


class TestBoardCrud:
    @pytest.mark.asyncio
    async def test_create_defaults(self, client, alice):
        board = await create_board(client, alice["headers"])

        assert board["title"] == "Untitled Board"
        assert board["description"] == ""
        assert board["cover_image"] is None
        assert board["background_image"] is None
        assert board["created_at"] == board["updated_at"]
        assert board["user_id"] == alice["user"]["id"]

    @pytest.mark.asyncio
    async def test_list_is_owner_scoped_and_newest_first(self, client, alice, bob):
        first = await create_board(client, alice["headers"], title="First")
        second = await create_board(client, alice["headers"], title="Second")
        await create_board(client, bob["headers"], title="Bob's")

        response = await client.get("/api/boards", headers=alice["headers"])

        ids = [b["id"] for b in response.json()]
        assert set(ids) == {first["id"], second["id"]}
        if first["created_at"] != second["created_at"]:
            assert ids == [second["id"], first["id"]]

    @pytest.mark.asyncio
    async def test_patch_merges_and_refreshes_updated_at(self, client, alice):
        board = await create_board(client, alice["headers"], title="Trip", description="Plans")

        response = await client.patch(
            f"/api/boards/{board['id']}",
            json={"cover_image": "data:image/png;base64,AAAA"},
            headers=alice["headers"],
        )

        assert response.status_code == 200
        updated = response.json()
        assert updated["title"] == "Trip"
        assert updated["description"] == "Plans"
        assert updated["cover_image"] == "data:image/png;base64,AAAA"
        assert updated["updated_at"] >= updated["created_at"]

    @pytest.mark.asyncio
    async def test_patch_null_keeps_value(self, client, alice):
        board = await create_board(client, alice["headers"], title="Trip")

        response = await client.patch(
            f"/api/boards/{board['id']}", json={"title": None}, headers=alice["headers"]
        )

        assert response.json()["title"] == "Trip"


class TestOwnership:
    @pytest.mark.asyncio
    async def test_foreign_board_is_403(self, client, alice, bob):
        board = await create_board(client, alice["headers"], title="Trip")

        patch = await client.patch(
            f"/api/boards/{board['id']}", json={"title": "Mine"}, headers=bob["headers"]
        )
        listing = await client.get(f"/api/thoughts/{board['id']}", headers=bob["headers"])
        delete = await client.delete(f"/api/boards/{board['id']}", headers=bob["headers"])

        assert patch.status_code == 403
        assert patch.json()["error"] == "BOARD_002"
        assert listing.status_code == 403
        assert delete.status_code == 403

        # Nothing changed
        boards = (await client.get("/api/boards", headers=alice["headers"])).json()
        assert boards[0]["title"] == "Trip"

    @pytest.mark.asyncio
    async def test_unknown_board_is_404(self, client, alice):
        response = await client.patch(
            f"/api/boards/{uuid.uuid4()}", json={"title": "x"}, headers=alice["headers"]
        )

        assert response.status_code == 404
        assert response.json()["error"] == "BOARD_001"

    @pytest.mark.asyncio
    async def test_foreign_thought_is_403(self, client, alice, bob):
        board = await create_board(client, alice["headers"])
        thought = await create_thought(client, alice["headers"], board["id"], content="hi")

        patch = await client.patch(
            f"/api/thoughts/{thought['id']}", json={"x": 5}, headers=bob["headers"]
        )
        delete = await client.delete(f"/api/thoughts/{thought['id']}", headers=bob["headers"])
        create = await client.post(
            "/api/thoughts",
            json={"board_id": board["id"], "type": "text", "x": 0, "y": 0},
            headers=bob["headers"],
        )

        assert patch.status_code == 403
        assert delete.status_code == 403
        assert create.status_code == 403

    @pytest.mark.asyncio
    async def test_foreign_board_connections_are_403(self, client, alice, bob):
        board = await create_board(client, alice["headers"])
        a = await create_thought(client, alice["headers"], board["id"], content="a")
        b = await create_thought(client, alice["headers"], board["id"], content="b", x=400)

        listing = await client.get(f"/api/connections/{board['id']}", headers=bob["headers"])
        create = await client.post(
            "/api/connections",
            json={"board_id": board["id"], "from_id": a["id"], "to_id": b["id"]},
            headers=bob["headers"],
        )

        assert listing.status_code == 403
        assert listing.json()["error"] == "BOARD_002"
        assert create.status_code == 403
        assert create.json()["error"] == "BOARD_002"
        own = await client.get(f"/api/connections/{board['id']}", headers=alice["headers"])
        assert own.json() == []

    @pytest.mark.asyncio
    async def test_unknown_thought_is_404(self, client, alice):
        response = await client.delete(f"/api/thoughts/{uuid.uuid4()}", headers=alice["headers"])

        assert response.status_code == 404
        assert response.json()["error"] == "THOUGHT_001"


class TestCascade:
    @pytest.mark.asyncio
    async def test_board_delete_removes_thoughts_and_connections(self, client, alice):
        headers = alice["headers"]
        board = await create_board(client, headers, title="Trip")
        a = await create_thought(client, headers, board["id"], content="a")
        b = await create_thought(client, headers, board["id"], content="b", x=400)
        await client.post(
            "/api/connections",
            json={"board_id": board["id"], "from_id": a["id"], "to_id": b["id"]},
            headers=headers,
        )

        response = await client.delete(f"/api/boards/{board['id']}", headers=headers)

        assert response.status_code == 200
        assert (await client.get(f"/api/thoughts/{board['id']}", headers=headers)).status_code == 404
        assert (await client.patch(f"/api/thoughts/{a['id']}", json={"x": 1}, headers=headers)).status_code == 404
        assert (await client.get("/api/boards", headers=headers)).json() == []
