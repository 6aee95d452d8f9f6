"""Queue introspection.

The worker reports how many batch exports are still waiting after each
successful job. Queue backends expose that through a QueueInspector.
"""

from collections.abc import Sequence
from typing import Protocol

from redis.asyncio import Redis


class QueueInspector(Protocol):
    """Reports the number of jobs waiting in a queue."""

    async def current_depth(self) -> int: ...


class RedisQueueInspector:
    """Counts waiting jobs stored in Redis.

    A Redis-backed queue keeps pending jobs in a handful of keys: lists
    for waiting jobs, sorted sets for delayed or prioritized ones. The
    queue length is the sum of their sizes. Missing keys count as empty.
    """

    def __init__(self, redis: Redis, keys: Sequence[str]) -> None:
        """Initialize inspector.

        Args:
            redis: Async Redis client
            keys: Keys whose sizes make up the queue length
        """
        self._redis = redis
        self._keys = list(keys)

    async def current_depth(self) -> int:
        """Sum the sizes of the configured keys."""
        if not self._keys:
            return 0

        async with self._redis.pipeline(transaction=False) as pipe:
            for key in self._keys:
                pipe.type(key)
            key_types = await pipe.execute()

        async with self._redis.pipeline(transaction=False) as pipe:
            for key, key_type in zip(self._keys, key_types):
                if isinstance(key_type, bytes):
                    key_type = key_type.decode()
                if key_type == "list":
                    pipe.llen(key)
                elif key_type == "zset":
                    pipe.zcard(key)
                elif key_type == "set":
                    pipe.scard(key)
            sizes = await pipe.execute()

        return sum(int(size) for size in sizes)

    async def close(self) -> None:
        """Close the underlying Redis connection."""
        await self._redis.aclose()
