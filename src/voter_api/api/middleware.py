"""CORS and request statistics middleware."""

import time
from dataclasses import dataclass, field

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from voter_api.core.config import Settings


@dataclass
class RequestStats:
    """Process-wide request counters reported by the health endpoint."""

    started_at: float = field(default_factory=time.monotonic)
    requests_processed: int = 0
    errors_encountered: int = 0

    @property
    def uptime_seconds(self) -> int:
        return int(time.monotonic() - self.started_at)


def get_request_stats(app: FastAPI) -> RequestStats:
    """Return the app's RequestStats, creating it on first use."""
    stats: RequestStats | None = getattr(app.state, "request_stats", None)
    if stats is None:
        stats = RequestStats()
        app.state.request_stats = stats
    return stats


def setup_cors(app: FastAPI, settings: Settings) -> None:
    """Configure CORS middleware when origins are configured.

    Args:
        app: The FastAPI application.
        settings: Application settings.
    """
    if not settings.cors_origin_list:
        return
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_methods=["*"],
        allow_headers=["*"],
    )


class RequestStatsMiddleware(BaseHTTPMiddleware):
    """Count handled requests and 5xx responses."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        stats = get_request_stats(request.app)
        stats.requests_processed += 1
        try:
            response = await call_next(request)
        except Exception:
            stats.errors_encountered += 1
            raise
        if response.status_code >= 500:
            stats.errors_encountered += 1
        return response
