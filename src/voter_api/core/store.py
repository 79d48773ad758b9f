"""Redis client construction and lifecycle helpers.

The client is built once per application by the lifespan handler and handed
to request handlers through ``voter_api.core.dependencies.get_redis``.
Nothing here keeps module-level connection state.
"""

from loguru import logger
from redis.asyncio import Redis
from redis.exceptions import RedisError


def create_redis_client(redis_url: str, **kwargs: object) -> Redis:
    """Create an async Redis client for the given URL.

    Responses are decoded to ``str`` so stored JSON documents can be
    validated directly by Pydantic.

    Args:
        redis_url: Redis connection URL, e.g. ``redis://localhost:6379/0``.
        **kwargs: Additional arguments passed to ``Redis.from_url``.

    Returns:
        A client backed by a lazily-connecting pool.
    """
    kwargs.setdefault("decode_responses", True)
    return Redis.from_url(redis_url, **kwargs)


async def ping_store(client: Redis) -> bool:
    """Return True if the store answers PING."""
    try:
        return bool(await client.ping())
    except (RedisError, OSError) as exc:
        logger.error(f"Error connecting to Redis: {exc}")
        return False


async def close_redis_client(client: Redis) -> None:
    """Close the client and release its pooled connections."""
    await client.aclose()
