"""Unit tests for the /voters/{id}/polls endpoints."""

from unittest.mock import AsyncMock, patch

import pytest
from fakeredis import FakeAsyncRedis
from httpx import AsyncClient

from voter_api.schemas.voter import VoterItem
from voter_api.services.voter_service import VoterConflictError, add_voter


@pytest.fixture
async def stored_jane(redis_client: FakeAsyncRedis, jane: VoterItem) -> VoterItem:
    return await add_voter(redis_client, jane)


class TestListVoterPolls:
    """Tests for GET /voters/{id}/polls."""

    @pytest.mark.asyncio
    async def test_lists_history(self, client: AsyncClient, stored_jane: VoterItem) -> None:
        resp = await client.get("/voters/1/polls")

        assert resp.status_code == 200
        assert [h["pollId"] for h in resp.json()] == [1, 2]

    @pytest.mark.asyncio
    async def test_empty_history_is_empty_array(self, client: AsyncClient) -> None:
        await client.post("/voters", json={"id": 3, "name": "New", "email": "new@example.com"})

        resp = await client.get("/voters/3/polls")

        assert resp.status_code == 200
        assert resp.json() == []

    @pytest.mark.asyncio
    async def test_missing_voter(self, client: AsyncClient) -> None:
        resp = await client.get("/voters/3/polls")
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_malformed_voter_id(self, client: AsyncClient) -> None:
        resp = await client.get("/voters/x/polls")
        assert resp.status_code == 400


class TestGetVoterPoll:
    """Tests for GET /voters/{id}/polls/{pollid}."""

    @pytest.mark.asyncio
    async def test_found(self, client: AsyncClient, stored_jane: VoterItem) -> None:
        resp = await client.get("/voters/1/polls/2")

        assert resp.status_code == 200
        data = resp.json()
        assert data["pollId"] == 2
        assert data["voteId"] == 20
        assert data["voteDate"].startswith("2024-11-05T14:30:00")

    @pytest.mark.asyncio
    async def test_missing_poll(self, client: AsyncClient, stored_jane: VoterItem) -> None:
        resp = await client.get("/voters/1/polls/9")
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_malformed_poll_id(self, client: AsyncClient, stored_jane: VoterItem) -> None:
        resp = await client.get("/voters/1/polls/first")
        assert resp.status_code == 400


class TestAddVoterPoll:
    """Tests for POST /voters/{id}/polls/{pollid}."""

    @pytest.mark.asyncio
    async def test_appends_entry(self, client: AsyncClient, stored_jane: VoterItem) -> None:
        resp = await client.post("/voters/1/polls/3", json={"pollId": 3, "voteId": 30})

        assert resp.status_code == 200
        assert resp.json()["pollId"] == 3
        listed = (await client.get("/voters/1/polls")).json()
        assert [h["pollId"] for h in listed] == [1, 2, 3]
        assert (await client.get("/voters/1/polls/3")).json()["voteId"] == 30

    @pytest.mark.asyncio
    async def test_duplicate_poll_is_conflict(self, client: AsyncClient, stored_jane: VoterItem) -> None:
        resp = await client.post("/voters/1/polls/1", json={"pollId": 1, "voteId": 99})

        assert resp.status_code == 409
        assert (await client.get("/voters/1/polls/1")).json()["voteId"] == 10

    @pytest.mark.asyncio
    async def test_missing_voter(self, client: AsyncClient) -> None:
        resp = await client.post("/voters/5/polls/1", json={"pollId": 1, "voteId": 1})
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_poll_id_mismatch_is_bad_request(self, client: AsyncClient, stored_jane: VoterItem) -> None:
        resp = await client.post("/voters/1/polls/3", json={"pollId": 4, "voteId": 1})

        assert resp.status_code == 400
        assert len((await client.get("/voters/1/polls")).json()) == 2

    @pytest.mark.asyncio
    async def test_malformed_body(self, client: AsyncClient, stored_jane: VoterItem) -> None:
        resp = await client.post("/voters/1/polls/3", json={"pollId": 3, "voteId": "many"})
        assert resp.status_code == 400

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [{"pollId": 3, "voteId": "7"}, {"pollId": "3", "voteId": 7}, {"pollId": 3, "voteId": True}],
    )
    async def test_quoted_or_boolean_ids_are_bad_request(
        self, client: AsyncClient, stored_jane: VoterItem, body: dict
    ) -> None:
        resp = await client.post("/voters/1/polls/3", json=body)

        assert resp.status_code == 400
        assert len((await client.get("/voters/1/polls")).json()) == 2

    @pytest.mark.asyncio
    async def test_conflict_exhaustion_is_internal_error(self, client: AsyncClient, stored_jane: VoterItem) -> None:
        with patch(
            "voter_api.api.v1.voter_history.voter_history_service.add_voter_poll",
            new_callable=AsyncMock,
            side_effect=VoterConflictError("voter 1 kept changing"),
        ):
            resp = await client.post("/voters/1/polls/3", json={"pollId": 3, "voteId": 30})

        assert resp.status_code == 500


class TestReplaceVoterPoll:
    """Tests for PUT /voters/{id}/polls/{pollid}."""

    @pytest.mark.asyncio
    async def test_replaces_only_that_entry(self, client: AsyncClient, stored_jane: VoterItem) -> None:
        resp = await client.put("/voters/1/polls/2", json={"pollId": 2, "voteId": 22})

        assert resp.status_code == 200
        listed = (await client.get("/voters/1/polls")).json()
        assert [(h["pollId"], h["voteId"]) for h in listed] == [(1, 10), (2, 22)]

    @pytest.mark.asyncio
    async def test_missing_poll(self, client: AsyncClient, stored_jane: VoterItem) -> None:
        resp = await client.put("/voters/1/polls/7", json={"pollId": 7, "voteId": 1})
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_poll_id_mismatch_is_bad_request(self, client: AsyncClient, stored_jane: VoterItem) -> None:
        resp = await client.put("/voters/1/polls/2", json={"pollId": 1, "voteId": 1})
        assert resp.status_code == 400


class TestDeleteVoterPoll:
    """Tests for DELETE /voters/{id}/polls/{pollid}."""

    @pytest.mark.asyncio
    async def test_deletes_only_that_entry(self, client: AsyncClient, stored_jane: VoterItem) -> None:
        resp = await client.delete("/voters/1/polls/1")

        assert resp.status_code == 200
        assert resp.text == "Voter history deleted successfully"
        listed = (await client.get("/voters/1/polls")).json()
        assert [h["pollId"] for h in listed] == [2]

    @pytest.mark.asyncio
    async def test_missing_poll(self, client: AsyncClient, stored_jane: VoterItem) -> None:
        resp = await client.delete("/voters/1/polls/8")
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_missing_voter(self, client: AsyncClient) -> None:
        resp = await client.delete("/voters/1/polls/1")
        assert resp.status_code == 404
