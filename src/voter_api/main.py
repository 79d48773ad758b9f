"""FastAPI application factory.

Creates the FastAPI app with lifespan management, exception handlers,
and OpenAPI metadata.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from redis.exceptions import RedisError

from voter_api.api.middleware import RequestStats
from voter_api.core.config import get_settings
from voter_api.core.logging import setup_logging
from voter_api.core.store import close_redis_client, create_redis_client, ping_store
from voter_api.services.voter_service import VoterStoreError


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application lifecycle: open the store client on startup, close it on shutdown."""
    settings = get_settings()
    setup_logging(settings.log_level, log_dir=settings.log_dir, json_logs=settings.log_json)
    logger.debug(f"Using Redis URL {settings.redis_url}")

    client = create_redis_client(settings.redis_url)
    # An unreachable store is logged but does not stop the service from starting.
    await ping_store(client)
    app.state.redis = client

    yield

    app.state.redis = None
    await close_redis_client(client)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title="Voter API",
        description="Voter records and poll history stored as RedisJSON documents",
        version=settings.api_version,
        lifespan=lifespan,
    )
    app.state.request_stats = RequestStats()

    # Register exception handlers
    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.warning(f"Bad request {request.method} {request.url.path}: {exc.errors()}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": "Bad Request"},
        )

    @app.exception_handler(VoterStoreError)
    async def store_error_handler(request: Request, exc: VoterStoreError) -> JSONResponse:
        logger.error(f"Store error on {request.method} {request.url.path}: {exc}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal Server Error"},
        )

    @app.exception_handler(RedisError)
    async def redis_error_handler(request: Request, exc: RedisError) -> JSONResponse:
        logger.error(f"Redis error on {request.method} {request.url.path}: {exc}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal Server Error"},
        )

    # Register middleware and routers
    from voter_api.api.router import create_router, setup_middleware

    setup_middleware(app, settings)
    app.include_router(create_router(settings))

    return app
