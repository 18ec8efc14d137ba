"""
Durable record storage on Redis.

The persisted state is four independent records (translation cache, history,
metrics, preferences), each under its own key. Every Redis or decoding
failure surfaces as StorageError so the owning store can log it and carry on
as if the record were empty or unchanged.

Usage:
    from langlink.services.core.storage import RecordStore

    store = RecordStore(redis_client, prefix="langlink")
    await store.list_push_capped("history", payload, cap=50)
"""
import json
import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Mapping, Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from langlink.services.exceptions import StorageError

logger = logging.getLogger(__name__)


def dumps(payload: Any) -> str:
    """Serialize a record value. Output is deterministic for equal payloads."""
    return json.dumps(payload, ensure_ascii=False, sort_keys=True, separators=(",", ":"))


def loads(raw: str) -> Any:
    """Deserialize a record value; undecodable data raises StorageError."""
    try:
        return json.loads(raw)
    except (TypeError, ValueError) as e:
        raise StorageError(f"Corrupt record payload: {e}") from e


class RecordStore:
    """Thin wrapper around a Redis client scoped to one key prefix."""

    def __init__(self, client: redis.Redis, prefix: str = "langlink"):
        self._client = client
        self._prefix = prefix

    def key(self, record: str) -> str:
        return f"{self._prefix}:{record}"

    @asynccontextmanager
    async def _guard(self, operation: str, record: str):
        try:
            yield
        except (RedisError, OSError) as e:
            raise StorageError(f"{operation} on {self.key(record)} failed: {e}") from e

    # ------------------------------------------------------------------
    # Hash records
    # ------------------------------------------------------------------

    async def hash_get(self, record: str, field: str) -> Optional[str]:
        async with self._guard("HGET", record):
            return await self._client.hget(self.key(record), field)

    async def hash_get_all(self, record: str) -> Dict[str, str]:
        async with self._guard("HGETALL", record):
            return await self._client.hgetall(self.key(record))

    async def hash_set(self, record: str, mapping: Mapping[str, Any]):
        async with self._guard("HSET", record):
            await self._client.hset(self.key(record), mapping=dict(mapping))

    async def hash_delete(self, record: str, *fields: str):
        if not fields:
            return
        async with self._guard("HDEL", record):
            await self._client.hdel(self.key(record), *fields)

    async def hash_len(self, record: str) -> int:
        async with self._guard("HLEN", record):
            return int(await self._client.hlen(self.key(record)))

    async def hash_exists(self, record: str, field: str) -> bool:
        async with self._guard("HEXISTS", record):
            return bool(await self._client.hexists(self.key(record), field))

    async def next_sequence(self, record: str) -> int:
        async with self._guard("INCR", record):
            return int(await self._client.incr(self.key(record)))

    # ------------------------------------------------------------------
    # List records
    # ------------------------------------------------------------------

    async def list_push_capped(self, record: str, value: str, cap: int, head: bool = True):
        """
        Push a value and trim the list to `cap` entries in one transaction.

        head=True keeps the newest entries at the head (LPUSH + LTRIM 0..cap-1);
        head=False keeps them at the tail (RPUSH + LTRIM -cap..-1).
        """
        key = self.key(record)
        async with self._guard("PUSH", record):
            async with self._client.pipeline(transaction=True) as pipe:
                if head:
                    pipe.lpush(key, value)
                    pipe.ltrim(key, 0, cap - 1)
                else:
                    pipe.rpush(key, value)
                    pipe.ltrim(key, -cap, -1)
                await pipe.execute()

    async def list_range(self, record: str) -> List[str]:
        async with self._guard("LRANGE", record):
            return await self._client.lrange(self.key(record), 0, -1)

    async def list_remove(self, record: str, value: str) -> int:
        async with self._guard("LREM", record):
            return int(await self._client.lrem(self.key(record), 0, value))

    # ------------------------------------------------------------------
    # Whole records
    # ------------------------------------------------------------------

    async def delete(self, *records: str):
        async with self._guard("DEL", ",".join(records)):
            await self._client.delete(*(self.key(r) for r in records))
