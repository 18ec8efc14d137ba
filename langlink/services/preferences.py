"""
User Preferences

Volume and speaking rate applied to every playback, persisted to the
`preferences` record. Out-of-range values are clamped.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from langlink.config.constants import (
    DEFAULT_RATE,
    DEFAULT_VOLUME,
    PREFERENCES_RECORD,
    RATE_MAX,
    RATE_MIN,
    VOLUME_MAX,
    VOLUME_MIN,
)
from langlink.services.core.storage import RecordStore
from langlink.services.exceptions import StorageError

logger = logging.getLogger(__name__)


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, float(value)))


@dataclass(frozen=True)
class UserPreferences:
    volume: float = DEFAULT_VOLUME
    rate: float = DEFAULT_RATE

    def clamped(self) -> "UserPreferences":
        return UserPreferences(
            volume=_clamp(self.volume, VOLUME_MIN, VOLUME_MAX),
            rate=_clamp(self.rate, RATE_MIN, RATE_MAX),
        )


class PreferencesStore:
    """Holds the current preferences and persists changes."""

    def __init__(self, store: Optional[RecordStore] = None):
        self._store = store
        self._current = UserPreferences()

    @property
    def current(self) -> UserPreferences:
        return self._current

    async def load(self):
        """Load persisted preferences; defaults are kept for missing or bad values."""
        if self._store is None:
            return
        try:
            raw = await self._store.hash_get_all(PREFERENCES_RECORD)
        except StorageError as e:
            logger.warning(f"[PreferencesStore] Failed to load preferences, using defaults: {e}")
            return

        volume, rate = self._current.volume, self._current.rate
        try:
            if "volume" in raw:
                volume = float(raw["volume"])
            if "rate" in raw:
                rate = float(raw["rate"])
        except ValueError as e:
            logger.warning(f"[PreferencesStore] Ignoring unreadable preference: {e}")
        self._current = UserPreferences(volume=volume, rate=rate).clamped()

    async def update(self, volume: Optional[float] = None, rate: Optional[float] = None) -> UserPreferences:
        """Change volume and/or rate and persist the result."""
        updated = UserPreferences(
            volume=self._current.volume if volume is None else volume,
            rate=self._current.rate if rate is None else rate,
        ).clamped()
        self._current = updated

        if self._store is not None:
            try:
                await self._store.hash_set(
                    PREFERENCES_RECORD, {"volume": updated.volume, "rate": updated.rate}
                )
            except StorageError as e:
                logger.warning(f"[PreferencesStore] Failed to save preferences: {e}")
        return updated
