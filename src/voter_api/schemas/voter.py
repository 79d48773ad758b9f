"""Voter Pydantic v2 schemas.

These models are both the REST payloads and the documents stored under
``voters:<id>``.  JSON field names are camelCase; snake_case attribute names
are accepted on input as well.  Identifiers are strict integers, so ``"5"``
or ``true`` are rejected rather than coerced.
"""

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field, StrictInt
from pydantic.alias_generators import to_camel


def _utcnow() -> datetime:
    return datetime.now(UTC)


class VoterHistory(BaseModel):
    """A single recorded vote by a voter in a poll."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    poll_id: StrictInt = Field(description="Poll identifier, unique within one voter's history")
    vote_id: StrictInt = Field(description="Identifier of the vote cast")
    vote_date: datetime = Field(default_factory=_utcnow, description="When the vote was cast")


class VoterItem(BaseModel):
    """A voter record with its embedded vote history."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: StrictInt = Field(description="Voter identifier")
    name: str
    email: str
    vote_history: list[VoterHistory] = Field(default_factory=list)
