"""Root API router and middleware registration."""

from fastapi import APIRouter, FastAPI

from voter_api.api.middleware import RequestStatsMiddleware, setup_cors
from voter_api.core.config import Settings


def create_router(settings: Settings) -> APIRouter:
    """Create the root API router with all sub-routers included.

    Args:
        settings: Application settings.

    Returns:
        Configured API router.
    """
    from voter_api.api.v1.voter_history import voter_history_router
    from voter_api.api.v1.voters import voters_router

    root_router = APIRouter(prefix=settings.api_prefix)
    root_router.include_router(voters_router)
    root_router.include_router(voter_history_router)
    return root_router


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Register all middleware on the FastAPI app.

    Args:
        app: The FastAPI application.
        settings: Application settings.
    """
    setup_cors(app, settings)
    app.add_middleware(RequestStatsMiddleware)
