"""Voter history service: read and mutate the poll history embedded in a voter.

History entries have no key of their own.  Every mutation reads the parent
voter document, edits its ``vote_history`` list in memory and writes the whole
document back inside a WATCH/MULTI/EXEC transaction, retrying when another
writer touched the document in between.
"""

from collections.abc import Callable
from typing import TypeVar

from loguru import logger
from redis.asyncio import Redis
from redis.exceptions import WatchError

from voter_api.schemas.voter import VoterHistory, VoterItem
from voter_api.services.voter_service import (
    VoterConflictError,
    VoterNotFoundError,
    VoterStoreError,
    get_voter,
    parse_voter_document,
    set_voter_document,
    voter_key,
)

DEFAULT_MAX_RETRIES = 5

T = TypeVar("T")


def find_poll(voter: VoterItem, poll_id: int) -> int | None:
    """Return the index of the voter's history entry for ``poll_id``, or None."""
    for index, entry in enumerate(voter.vote_history):
        if entry.poll_id == poll_id:
            return index
    return None


class PollNotFoundError(VoterStoreError):
    """The voter has no history entry for the requested poll."""

    def __init__(self, voter_id: int, poll_id: int) -> None:
        super().__init__(f"voter {voter_id} has no history for poll {poll_id}")
        self.voter_id = voter_id
        self.poll_id = poll_id


class PollAlreadyExistsError(VoterStoreError):
    """The voter already has a history entry for the poll being added."""

    def __init__(self, voter_id: int, poll_id: int) -> None:
        super().__init__(f"voter {voter_id} already has history for poll {poll_id}")
        self.voter_id = voter_id
        self.poll_id = poll_id


async def _modify_voter(
    client: Redis,
    voter_id: int,
    mutate: Callable[[VoterItem], T],
    max_retries: int,
) -> T:
    """Apply ``mutate`` to a voter and write it back with optimistic locking.

    ``mutate`` edits the VoterItem in place and may raise to abort without
    writing.

    Raises:
        VoterNotFoundError: If the voter does not exist.
        VoterConflictError: If every attempt lost a race with another writer.
    """
    key = voter_key(voter_id)
    async with client.pipeline(transaction=True) as pipe:
        for attempt in range(1, max_retries + 1):
            try:
                await pipe.watch(key)
                document = await pipe.execute_command("JSON.GET", key)
                if document is None:
                    raise VoterNotFoundError(voter_id)
                voter = parse_voter_document(key, document)
                result = mutate(voter)
                pipe.multi()
                set_voter_document(pipe, voter)
                await pipe.execute()
                return result
            except WatchError:
                logger.warning(f"Voter {voter_id} changed during update (attempt {attempt}/{max_retries})")
    msg = f"voter {voter_id} kept changing; gave up after {max_retries} attempts"
    raise VoterConflictError(msg)


async def get_voter_polls(client: Redis, voter_id: int) -> list[VoterHistory]:
    """Return a voter's full history (empty list when none).

    Raises:
        VoterNotFoundError: If the voter does not exist.
    """
    voter = await get_voter(client, voter_id)
    return voter.vote_history


async def get_voter_poll(client: Redis, voter_id: int, poll_id: int) -> VoterHistory:
    """Return the history entry of a voter for one poll.

    Raises:
        VoterNotFoundError: If the voter does not exist.
        PollNotFoundError: If the voter has no entry for the poll.
    """
    voter = await get_voter(client, voter_id)
    index = find_poll(voter, poll_id)
    if index is None:
        raise PollNotFoundError(voter_id, poll_id)
    return voter.vote_history[index]


async def add_voter_poll(
    client: Redis,
    voter_id: int,
    history: VoterHistory,
    *,
    max_retries: int = DEFAULT_MAX_RETRIES,
) -> VoterHistory:
    """Append a history entry to a voter.

    Raises:
        VoterNotFoundError: If the voter does not exist.
        PollAlreadyExistsError: If the voter already has an entry for the poll.
    """

    def append(voter: VoterItem) -> VoterHistory:
        if find_poll(voter, history.poll_id) is not None:
            raise PollAlreadyExistsError(voter_id, history.poll_id)
        voter.vote_history.append(history)
        return history

    added = await _modify_voter(client, voter_id, append, max_retries)
    logger.info(f"Added poll {history.poll_id} to voter {voter_id}")
    return added


async def update_voter_poll(
    client: Redis,
    voter_id: int,
    poll_id: int,
    history: VoterHistory,
    *,
    max_retries: int = DEFAULT_MAX_RETRIES,
) -> VoterHistory:
    """Replace the history entry for ``poll_id``; other entries are untouched.

    Raises:
        VoterNotFoundError: If the voter does not exist.
        PollNotFoundError: If the voter has no entry for the poll.
        ValueError: If ``history`` is for a different poll than ``poll_id``.
    """
    if history.poll_id != poll_id:
        msg = f"history is for poll {history.poll_id}, not poll {poll_id}"
        raise ValueError(msg)

    def replace(voter: VoterItem) -> VoterHistory:
        index = find_poll(voter, poll_id)
        if index is None:
            raise PollNotFoundError(voter_id, poll_id)
        voter.vote_history[index] = history
        return history

    updated = await _modify_voter(client, voter_id, replace, max_retries)
    logger.info(f"Updated poll {poll_id} of voter {voter_id}")
    return updated


async def delete_voter_poll(
    client: Redis,
    voter_id: int,
    poll_id: int,
    *,
    max_retries: int = DEFAULT_MAX_RETRIES,
) -> None:
    """Remove the history entry for ``poll_id`` from a voter.

    Raises:
        VoterNotFoundError: If the voter does not exist.
        PollNotFoundError: If the voter has no entry for the poll.
    """

    def remove(voter: VoterItem) -> None:
        index = find_poll(voter, poll_id)
        if index is None:
            raise PollNotFoundError(voter_id, poll_id)
        del voter.vote_history[index]

    await _modify_voter(client, voter_id, remove, max_retries)
    logger.info(f"Deleted poll {poll_id} of voter {voter_id}")
