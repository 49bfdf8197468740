"""
Key-value store client management.
Provides a shared redis.asyncio client backed by a connection pool.
"""
import redis.asyncio as redis
from config import Config


class KVClientManager:
    """Manages the shared Redis client used for chat persistence."""

    _client: redis.Redis | None = None

    @classmethod
    def get_client(cls) -> redis.Redis:
        """
        Get or create the shared Redis client.

        Returns:
            redis.asyncio.Redis decoding responses to str
        """
        if cls._client is None:
            cls._client = redis.from_url(
                Config.REDIS_URL,
                decode_responses=True,
                max_connections=Config.MAX_CONNECTIONS,
            )

        return cls._client

    @classmethod
    async def close_all(cls) -> None:
        """Close the shared client and its pool."""
        if cls._client is not None:
            await cls._client.aclose()
            cls._client = None
