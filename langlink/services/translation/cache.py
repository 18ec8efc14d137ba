"""
Translation Cache

Durable mapping from request fingerprint to translated text, so a repeated
request within the TTL never reaches the translation provider.

Example benefit:
- User types "Hello" (English -> Hindi), provider returns "नमस्ते"
- Cache stores: fingerprint("Hello", "en-US", "hi-IN") -> "नमस्ते"
- User clears the box and types "Hello" again: cache hit, no provider call

Entries expire after `ttl_seconds` (default 7 days). When the cache is full,
the least-recently-written entry is evicted, ordered by the write sequence
number (a Redis counter) rather than by timestamps or storage iteration order.

The cache is an optimization: every storage failure is logged and the
operation behaves as if the cache were empty.
"""
import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Callable, List, Optional

from langlink.config.constants import (
    CACHE_MAX_ENTRIES,
    CACHE_RECORD,
    CACHE_SEQUENCE_RECORD,
    CACHE_TTL_SEC,
)
from langlink.services.core.storage import RecordStore, dumps, loads
from langlink.services.exceptions import StorageError
from langlink.services.metrics import cache_lookups

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    """
    One cached translation.

    Attributes:
        fingerprint: Request fingerprint (the record field name)
        result_text: Cached translation
        created_at: Unix time of the last write for this fingerprint
        seq: Write sequence number, orders entries for eviction
    """
    fingerprint: str
    result_text: str
    created_at: float
    seq: int = 0

    def to_payload(self) -> dict:
        return {"result_text": self.result_text, "created_at": self.created_at, "seq": self.seq}

    @classmethod
    def from_payload(cls, fingerprint: str, payload) -> "CacheEntry":
        try:
            return cls(
                fingerprint=fingerprint,
                result_text=str(payload["result_text"]),
                created_at=float(payload["created_at"]),
                seq=int(payload.get("seq", 0)),
            )
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise StorageError(f"Malformed cache entry for {fingerprint[:12]}: {e}") from e


class TranslationCache:
    """TTL + capacity bounded translation cache backed by a Redis hash."""

    def __init__(
        self,
        store: RecordStore,
        ttl_seconds: float = CACHE_TTL_SEC,
        max_entries: int = CACHE_MAX_ENTRIES,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize translation cache.

        Args:
            store: Record store owning the Redis connection
            ttl_seconds: Age after which an entry is treated as absent
            max_entries: Maximum number of live entries (default: 500)
            clock: Time source in seconds (injectable for tests)
        """
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self._store = store
        self._ttl = ttl_seconds
        self._maxsize = max_entries
        self._clock = clock
        # Serialises read-modify-write (expiry delete, eviction) within the process
        self._lock = asyncio.Lock()
        self._hits = 0
        self._misses = 0

    def _is_expired(self, entry: CacheEntry) -> bool:
        return self._clock() - entry.created_at > self._ttl

    def _record_miss(self, fingerprint: str, reason: str) -> None:
        self._misses += 1
        cache_lookups.labels(result="miss").inc()
        logger.debug(f"[TranslationCache] MISS for {fingerprint[:12]} ({reason})")

    async def get(self, fingerprint: str) -> Optional[CacheEntry]:
        """
        Retrieve a live cache entry.

        An expired entry is deleted as a side effect and reported as a miss.

        Args:
            fingerprint: Request fingerprint

        Returns:
            The live CacheEntry, or None on miss
        """
        try:
            raw = await self._store.hash_get(CACHE_RECORD, fingerprint)
            if raw is None:
                self._record_miss(fingerprint, "absent")
                return None

            entry = CacheEntry.from_payload(fingerprint, loads(raw))
            if self._is_expired(entry):
                await self._delete_if_expired(fingerprint)
                self._record_miss(fingerprint, "expired")
                return None
        except StorageError as e:
            logger.warning(f"[TranslationCache] Read failed, treating as miss: {e}")
            self._record_miss(fingerprint, "storage error")
            return None

        self._hits += 1
        cache_lookups.labels(result="hit").inc()
        logger.debug(f"[TranslationCache] HIT for {fingerprint[:12]}")
        return entry

    async def _delete_if_expired(self, fingerprint: str):
        async with self._lock:
            # A writer may have refreshed the entry while we waited for the lock
            raw = await self._store.hash_get(CACHE_RECORD, fingerprint)
            if raw is None:
                return
            try:
                entry = CacheEntry.from_payload(fingerprint, loads(raw))
            except StorageError:
                await self._store.hash_delete(CACHE_RECORD, fingerprint)
                return
            if self._is_expired(entry):
                await self._store.hash_delete(CACHE_RECORD, fingerprint)
                logger.debug(f"[TranslationCache] Expired entry removed: {fingerprint[:12]}")

    async def put(self, fingerprint: str, result_text: str):
        """
        Store a translation, refreshing its timestamp.

        If inserting a new fingerprint would exceed capacity, the oldest
        entries are evicted first.

        Args:
            fingerprint: Request fingerprint
            result_text: Translated text
        """
        async with self._lock:
            try:
                if not await self._store.hash_exists(CACHE_RECORD, fingerprint):
                    await self._evict_for_insert()

                seq = await self._store.next_sequence(CACHE_SEQUENCE_RECORD)
                entry = CacheEntry(
                    fingerprint=fingerprint,
                    result_text=result_text,
                    created_at=self._clock(),
                    seq=seq,
                )
                await self._store.hash_set(CACHE_RECORD, {fingerprint: dumps(entry.to_payload())})
            except StorageError as e:
                logger.warning(f"[TranslationCache] Write failed, entry not cached: {e}")
                return

        logger.debug(f"[TranslationCache] PUT for {fingerprint[:12]} ({len(result_text)} chars)")

    async def _evict_for_insert(self):
        """Evict oldest entries until one more entry fits. Caller holds the lock."""
        if await self._store.hash_len(CACHE_RECORD) < self._maxsize:
            return

        raw_entries = await self._store.hash_get_all(CACHE_RECORD)
        overflow = len(raw_entries) - self._maxsize + 1
        if overflow <= 0:
            return

        def order(item) -> float:
            fingerprint, raw = item
            try:
                entry = CacheEntry.from_payload(fingerprint, loads(raw))
            except StorageError:
                # Unreadable entries go first
                return float("-inf")
            return entry.seq

        oldest: List[str] = [fp for fp, _ in sorted(raw_entries.items(), key=order)[:overflow]]
        await self._store.hash_delete(CACHE_RECORD, *oldest)
        logger.debug(f"[TranslationCache] Evicted {len(oldest)} oldest entr{'y' if len(oldest) == 1 else 'ies'}")

    async def size(self) -> int:
        """Number of stored entries (expired ones included until read or evicted)."""
        try:
            return await self._store.hash_len(CACHE_RECORD)
        except StorageError as e:
            logger.warning(f"[TranslationCache] Size lookup failed: {e}")
            return 0

    async def get_stats(self) -> dict:
        """
        Get cache statistics.

        Returns:
            Dict with hits, misses, hit_rate_percent, cache_size, max_size
        """
        total = self._hits + self._misses
        hit_rate = (self._hits / total * 100) if total > 0 else 0

        return {
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate_percent": round(hit_rate, 2),
            "cache_size": await self.size(),
            "max_size": self._maxsize,
        }

    async def clear(self):
        """Clear all cached entries."""
        async with self._lock:
            try:
                await self._store.delete(CACHE_RECORD, CACHE_SEQUENCE_RECORD)
            except StorageError as e:
                logger.warning(f"[TranslationCache] Clear failed: {e}")
                return
        logger.info("[TranslationCache] Cache cleared")
