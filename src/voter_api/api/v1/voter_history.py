"""Voter poll history API endpoints.

GET /voters/{id}/polls, GET|POST|PUT|DELETE /voters/{id}/polls/{pollid}.
"""

from fastapi import APIRouter, status
from fastapi.responses import PlainTextResponse

from voter_api.api.errors import http_error, store_error_to_http
from voter_api.core.dependencies import AppSettings, RedisClient
from voter_api.schemas.voter import VoterHistory
from voter_api.services import voter_history_service
from voter_api.services.voter_service import VoterStoreError

voter_history_router = APIRouter(prefix="/voters/{voter_id}/polls", tags=["voter-history"])


def _check_poll_id(poll_id: int, history: VoterHistory) -> None:
    """Reject bodies whose pollId disagrees with the path."""
    if history.poll_id != poll_id:
        raise http_error(status.HTTP_400_BAD_REQUEST)


@voter_history_router.get("", response_model=list[VoterHistory])
async def list_voter_polls(voter_id: int, client: RedisClient) -> list[VoterHistory]:
    """List a voter's poll history; ``[]`` when the voter has none."""
    try:
        return await voter_history_service.get_voter_polls(client, voter_id)
    except VoterStoreError as exc:
        raise store_error_to_http(exc, f"getting polls of voter {voter_id}") from exc


@voter_history_router.get("/{poll_id}", response_model=VoterHistory)
async def get_voter_poll(voter_id: int, poll_id: int, client: RedisClient) -> VoterHistory:
    try:
        return await voter_history_service.get_voter_poll(client, voter_id, poll_id)
    except VoterStoreError as exc:
        raise store_error_to_http(exc, f"getting poll {poll_id} of voter {voter_id}") from exc


@voter_history_router.post("/{poll_id}", response_model=VoterHistory)
async def add_voter_poll(
    voter_id: int,
    poll_id: int,
    history: VoterHistory,
    client: RedisClient,
    settings: AppSettings,
) -> VoterHistory:
    """Record a vote for a poll; 409 if the voter already has that poll."""
    _check_poll_id(poll_id, history)
    try:
        return await voter_history_service.add_voter_poll(
            client,
            voter_id,
            history,
            max_retries=settings.history_update_max_retries,
        )
    except VoterStoreError as exc:
        raise store_error_to_http(exc, f"adding poll {poll_id} to voter {voter_id}") from exc


@voter_history_router.put("/{poll_id}", response_model=VoterHistory)
async def replace_voter_poll(
    voter_id: int,
    poll_id: int,
    history: VoterHistory,
    client: RedisClient,
    settings: AppSettings,
) -> VoterHistory:
    """Replace the history entry for one poll, leaving the others untouched."""
    _check_poll_id(poll_id, history)
    try:
        return await voter_history_service.update_voter_poll(
            client,
            voter_id,
            poll_id,
            history,
            max_retries=settings.history_update_max_retries,
        )
    except VoterStoreError as exc:
        raise store_error_to_http(exc, f"updating poll {poll_id} of voter {voter_id}") from exc


@voter_history_router.delete("/{poll_id}", response_class=PlainTextResponse)
async def delete_voter_poll(
    voter_id: int,
    poll_id: int,
    client: RedisClient,
    settings: AppSettings,
) -> str:
    try:
        await voter_history_service.delete_voter_poll(
            client,
            voter_id,
            poll_id,
            max_retries=settings.history_update_max_retries,
        )
    except VoterStoreError as exc:
        raise store_error_to_http(exc, f"deleting poll {poll_id} of voter {voter_id}") from exc
    return "Voter history deleted successfully"
