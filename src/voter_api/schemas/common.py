"""Common Pydantic v2 schemas shared across the API."""

from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Service health report returned by ``GET /voters/health``."""

    status: Literal["ok", "degraded"] = Field(description="'degraded' when the store does not answer")
    version: str = Field(description="API version")
    uptime: int = Field(description="Seconds since the application started")
    users_processed: int = Field(description="HTTP requests handled since start")
    errors_encountered: int = Field(description="Responses with a 5xx status since start")
    store: Literal["ok", "unavailable"] = Field(description="Result of a PING against the store")
