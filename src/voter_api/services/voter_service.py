"""Voter service: store voter documents as RedisJSON values keyed by id."""

from typing import Any

from loguru import logger
from pydantic import ValidationError
from redis.asyncio import Redis
from redis.asyncio.client import Pipeline

from voter_api.schemas.voter import VoterItem

VOTER_KEY_PREFIX = "voters:"


class VoterStoreError(Exception):
    """Base class for data-access failures."""


class VoterNotFoundError(VoterStoreError):
    """No voter document exists under the requested id."""

    def __init__(self, voter_id: int) -> None:
        super().__init__(f"voter {voter_id} does not exist")
        self.voter_id = voter_id


class VoterAlreadyExistsError(VoterStoreError):
    """A voter document already exists under the id being inserted."""

    def __init__(self, voter_id: int) -> None:
        super().__init__(f"voter {voter_id} already exists")
        self.voter_id = voter_id


class VoterDocumentError(VoterStoreError):
    """A stored document could not be deserialized into a VoterItem."""


class VoterConflictError(VoterStoreError):
    """A voter document kept changing underneath an optimistic update."""


def voter_key(voter_id: int) -> str:
    """Build the store key for a voter id, e.g. ``voters:42``."""
    return f"{VOTER_KEY_PREFIX}{voter_id}"


def parse_voter_document(key: str, document: str | dict[str, Any]) -> VoterItem:
    """Validate a stored document (raw JSON text or decoded dict).

    Raises:
        VoterDocumentError: If the document does not match the VoterItem shape.
    """
    try:
        if isinstance(document, str):
            return VoterItem.model_validate_json(document)
        return VoterItem.model_validate(document)
    except ValidationError as exc:
        msg = f"stored document {key} is not a valid voter"
        raise VoterDocumentError(msg) from exc


def dump_voter_document(voter: VoterItem) -> str:
    """Serialize a voter into the JSON text that is stored."""
    return voter.model_dump_json(by_alias=True)


def set_voter_document(target: Redis | Pipeline, voter: VoterItem, *flags: str) -> Any:
    """Issue ``JSON.SET voters:<id> $ <document> [NX|XX]`` on a client or pipeline.

    Every write of a voter document goes through here.  On a client (or a
    pipeline in WATCH mode) the result must be awaited; inside MULTI the
    command is queued and the pipeline is returned.
    """
    return target.execute_command("JSON.SET", voter_key(voter.id), "$", dump_voter_document(voter), *flags)


async def _fetch_voter(client: Redis, key: str) -> VoterItem | None:
    document = await client.json().get(key)
    if document is None:
        return None
    return parse_voter_document(key, document)


async def add_voter(client: Redis, voter: VoterItem) -> VoterItem:
    """Insert a new voter.

    The existence check and the write are a single ``JSON.SET ... NX``.

    Raises:
        VoterAlreadyExistsError: If a voter with the same id is stored.
    """
    created = await set_voter_document(client, voter, "NX")
    if not created:
        raise VoterAlreadyExistsError(voter.id)
    logger.info(f"Added voter {voter.id}")
    return voter


async def update_voter(client: Redis, voter: VoterItem) -> VoterItem:
    """Overwrite an existing voter document; no fields are merged.

    Raises:
        VoterNotFoundError: If no voter with that id is stored.
    """
    replaced = await set_voter_document(client, voter, "XX")
    if not replaced:
        raise VoterNotFoundError(voter.id)
    logger.info(f"Updated voter {voter.id}")
    return voter


async def get_voter(client: Redis, voter_id: int) -> VoterItem:
    """Fetch a voter by id.

    Raises:
        VoterNotFoundError: If no voter with that id is stored.
        VoterDocumentError: If the stored document is malformed.
    """
    voter = await _fetch_voter(client, voter_key(voter_id))
    if voter is None:
        raise VoterNotFoundError(voter_id)
    return voter


async def delete_voter(client: Redis, voter_id: int) -> None:
    """Delete a voter by id.

    Raises:
        VoterNotFoundError: If nothing was deleted.
    """
    deleted = await client.delete(voter_key(voter_id))
    if deleted == 0:
        raise VoterNotFoundError(voter_id)
    logger.info(f"Deleted voter {voter_id}")


async def _voter_keys(client: Redis) -> list[str]:
    # SCAN may report a key more than once
    keys = [key async for key in client.scan_iter(match=f"{VOTER_KEY_PREFIX}*")]
    return list(dict.fromkeys(keys))


async def delete_all_voters(client: Redis) -> int:
    """Delete every key under the voter prefix.

    Returns:
        Number of keys deleted.
    """
    keys = await _voter_keys(client)
    if not keys:
        return 0
    deleted = await client.delete(*keys)
    if deleted != len(keys):
        logger.warning(f"Expected to delete {len(keys)} voters, store deleted {deleted}")
    logger.info(f"Deleted {deleted} voters")
    return deleted


async def list_voters(client: Redis) -> list[VoterItem]:
    """Return all stored voters ordered by id (empty list when none)."""
    voters: list[VoterItem] = []
    for key in await _voter_keys(client):
        voter = await _fetch_voter(client, key)
        # deleted between SCAN and GET
        if voter is None:
            continue
        voters.append(voter)
    voters.sort(key=lambda v: v.id)
    return voters
