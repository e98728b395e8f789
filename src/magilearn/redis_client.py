"""Redis connection used by the rate limiter. Optional: empty URL means no Redis."""

import redis.asyncio as redis

_client: redis.Redis | None = None


async def init_redis(url: str) -> None:
    """Connect to Redis. An empty URL leaves Redis disabled."""
    global _client  # noqa: PLW0603
    if not url:
        return
    _client = redis.from_url(  # type: ignore[no-untyped-call]
        url,
        encoding="utf-8",
        decode_responses=True,
        max_connections=20,
    )


async def close_redis() -> None:
    global _client  # noqa: PLW0603
    if _client:
        await _client.aclose()
        _client = None


def is_redis_initialized() -> bool:
    return _client is not None


def get_redis() -> redis.Redis:
    """Get the Redis client.

    Raises:
        RuntimeError: Redis was never initialized (no URL configured).
    """
    if _client is None:
        msg = "Redis not initialized. Set MAGILEARN_REDIS_URL."
        raise RuntimeError(msg)
    return _client
