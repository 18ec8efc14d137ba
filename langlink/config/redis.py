import redis.asyncio as redis

from langlink.config.settings import Settings


def create_redis(settings: Settings) -> redis.Redis:
    """Create the Redis client backing the persisted records."""
    url = f"redis://{settings.REDIS_HOST}:{settings.REDIS_PORT}/{settings.REDIS_DB}"
    if settings.REDIS_PASSWORD:
        url = f"redis://:{settings.REDIS_PASSWORD}@{settings.REDIS_HOST}:{settings.REDIS_PORT}/{settings.REDIS_DB}"
    return redis.Redis.from_url(url, decode_responses=True)


async def close_redis(client: redis.Redis):
    await client.aclose()
