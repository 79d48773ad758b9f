"""FastAPI dependency injection for the store client and settings."""

from typing import Annotated

from fastapi import Depends, Request
from redis.asyncio import Redis

from voter_api.core.config import Settings, get_settings


def get_redis(request: Request) -> Redis:
    """Return the store client created by the application lifespan.

    Raises:
        RuntimeError: If the application was started without a store client.
    """
    client: Redis | None = getattr(request.app.state, "redis", None)
    if client is None:
        msg = "Store client not initialized. Run the app through its lifespan."
        raise RuntimeError(msg)
    return client


RedisClient = Annotated[Redis, Depends(get_redis)]
AppSettings = Annotated[Settings, Depends(get_settings)]
