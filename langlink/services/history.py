"""
Translation History

Bounded, newest-first log of completed translations (default 50 items),
persisted to the `history` record. History is convenience state: the
in-memory list answers every read and a failed write is logged and
otherwise ignored.

Usage:
    history = HistoryStore(store, max_items=50)
    await history.load()
    await history.append(HistoryItem.create(src, tgt, "Hello", "नमस्ते"))
    await history.remove(item_id)
"""
import asyncio
import logging
import time
import uuid
from dataclasses import dataclass
from typing import List, Optional

from langlink.config.constants import HISTORY_MAX_ITEMS, HISTORY_RECORD
from langlink.services.core.models import Language
from langlink.services.core.storage import RecordStore, dumps, loads
from langlink.services.exceptions import StorageError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HistoryItem:
    """One completed translation. Never mutated after creation."""
    id: str
    source_language: Language
    target_language: Language
    source_text: str
    translated_text: str
    timestamp: float

    @classmethod
    def create(
        cls,
        source_language: Language,
        target_language: Language,
        source_text: str,
        translated_text: str,
        timestamp: Optional[float] = None,
    ) -> "HistoryItem":
        ts = time.time() if timestamp is None else timestamp
        return cls(
            id=f"{int(ts * 1000)}-{uuid.uuid4().hex[:8]}",
            source_language=source_language,
            target_language=target_language,
            source_text=source_text,
            translated_text=translated_text,
            timestamp=ts,
        )

    def to_payload(self) -> dict:
        return {
            "id": self.id,
            "source_language": {"code": self.source_language.code, "name": self.source_language.name},
            "target_language": {"code": self.target_language.code, "name": self.target_language.name},
            "source_text": self.source_text,
            "translated_text": self.translated_text,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_payload(cls, payload) -> "HistoryItem":
        try:
            return cls(
                id=str(payload["id"]),
                source_language=Language(**payload["source_language"]),
                target_language=Language(**payload["target_language"]),
                source_text=str(payload["source_text"]),
                translated_text=str(payload["translated_text"]),
                timestamp=float(payload["timestamp"]),
            )
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise StorageError(f"Malformed history item: {e}") from e


class HistoryStore:
    """Capped history of completed translations, newest first."""

    def __init__(self, store: Optional[RecordStore] = None, max_items: int = HISTORY_MAX_ITEMS):
        self._store = store
        self._max_items = max_items
        self._items: List[HistoryItem] = []
        self._write_lock = asyncio.Lock()

    @property
    def max_items(self) -> int:
        return self._max_items

    async def load(self):
        """Load persisted history. A storage failure leaves the history empty."""
        if self._store is None:
            return
        try:
            raw_items = await self._store.list_range(HISTORY_RECORD)
        except StorageError as e:
            logger.error(f"[HistoryStore] Failed to load history, starting empty: {e}")
            return

        items: List[HistoryItem] = []
        for raw in raw_items:
            try:
                items.append(HistoryItem.from_payload(loads(raw)))
            except StorageError as e:
                logger.warning(f"[HistoryStore] Skipping unreadable item: {e}")
        self._items = items[:self._max_items]
        logger.info(f"[HistoryStore] Loaded {len(self._items)} history items")

    def items(self) -> List[HistoryItem]:
        """Snapshot of the history, newest first."""
        return list(self._items)

    def get(self, item_id: str) -> Optional[HistoryItem]:
        for item in self._items:
            if item.id == item_id:
                return item
        return None

    def __len__(self) -> int:
        return len(self._items)

    async def append(self, item: HistoryItem):
        """Insert at the head; the oldest item is dropped beyond the cap."""
        self._items.insert(0, item)
        del self._items[self._max_items:]

        if self._store is None:
            return
        async with self._write_lock:
            try:
                await self._store.list_push_capped(
                    HISTORY_RECORD, dumps(item.to_payload()), self._max_items, head=True
                )
            except StorageError as e:
                logger.error(f"[HistoryStore] Failed to save history: {e}")

    async def remove(self, item_id: str) -> bool:
        """
        Remove one item by id.

        Returns:
            True if an item was removed, False if no item had that id
        """
        item = self.get(item_id)
        if item is None:
            return False
        self._items.remove(item)

        if self._store is not None:
            async with self._write_lock:
                try:
                    await self._store.list_remove(HISTORY_RECORD, dumps(item.to_payload()))
                except StorageError as e:
                    logger.error(f"[HistoryStore] Failed to save history: {e}")
        return True

    async def clear(self):
        """Remove every item."""
        self._items.clear()
        if self._store is None:
            return
        async with self._write_lock:
            try:
                await self._store.delete(HISTORY_RECORD)
            except StorageError as e:
                logger.error(f"[HistoryStore] Failed to clear history: {e}")
