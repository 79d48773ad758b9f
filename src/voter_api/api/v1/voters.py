"""Voter API endpoints: list, detail, create, replace, delete and health.

GET /voters, GET /voters/health, GET /voters/{id}, POST /voters,
PUT /voters, DELETE /voters/{id}, DELETE /voters.
"""

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse
from loguru import logger

from voter_api.api.errors import store_error_to_http
from voter_api.api.middleware import get_request_stats
from voter_api.core.dependencies import AppSettings, RedisClient
from voter_api.core.store import ping_store
from voter_api.schemas.common import HealthResponse
from voter_api.schemas.voter import VoterItem
from voter_api.services import voter_service
from voter_api.services.voter_service import VoterStoreError

voters_router = APIRouter(prefix="/voters", tags=["voters"])


@voters_router.get("", response_model=list[VoterItem])
async def list_voters(client: RedisClient) -> list[VoterItem]:
    """List all voters; an empty store yields ``[]``."""
    try:
        return await voter_service.list_voters(client)
    except VoterStoreError as exc:
        raise store_error_to_http(exc, "getting all voters") from exc


# Declared before /{voter_id} so "health" is not parsed as an id.
@voters_router.get("/health", response_model=HealthResponse)
async def health_check(request: Request, client: RedisClient, settings: AppSettings) -> HealthResponse:
    """Report service version, uptime, request counters and store reachability."""
    stats = get_request_stats(request.app)
    store_ok = await ping_store(client)
    return HealthResponse(
        status="ok" if store_ok else "degraded",
        version=settings.api_version,
        uptime=stats.uptime_seconds,
        users_processed=stats.requests_processed,
        errors_encountered=stats.errors_encountered,
        store="ok" if store_ok else "unavailable",
    )


@voters_router.get("/{voter_id}", response_model=VoterItem)
async def get_voter(voter_id: int, client: RedisClient) -> VoterItem:
    """Get a single voter by id."""
    try:
        return await voter_service.get_voter(client, voter_id)
    except VoterStoreError as exc:
        raise store_error_to_http(exc, f"getting voter {voter_id}") from exc


@voters_router.post("", response_model=VoterItem)
async def create_voter(voter: VoterItem, client: RedisClient) -> VoterItem:
    """Create a voter; fails with 409 if the id is taken."""
    try:
        return await voter_service.add_voter(client, voter)
    except VoterStoreError as exc:
        raise store_error_to_http(exc, f"adding voter {voter.id}") from exc


@voters_router.put("", response_model=VoterItem)
async def replace_voter(voter: VoterItem, client: RedisClient) -> VoterItem:
    """Overwrite an existing voter wholesale, history included."""
    try:
        return await voter_service.update_voter(client, voter)
    except VoterStoreError as exc:
        raise store_error_to_http(exc, f"updating voter {voter.id}") from exc


@voters_router.delete("/{voter_id}", response_class=PlainTextResponse)
async def delete_voter(voter_id: int, client: RedisClient) -> str:
    try:
        await voter_service.delete_voter(client, voter_id)
    except VoterStoreError as exc:
        raise store_error_to_http(exc, f"deleting voter {voter_id}") from exc
    return "Delete OK"


@voters_router.delete("", response_class=PlainTextResponse)
async def delete_all_voters(client: RedisClient) -> str:
    deleted = await voter_service.delete_all_voters(client)
    logger.info(f"Delete all removed {deleted} voters")
    return "Delete All OK"
