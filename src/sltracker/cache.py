"""Single-slot departure cache shared by the app and the widget."""

import logging
import time
from typing import Callable, Optional

from .models import CacheEntry
from .storage import KeyValueStore

logger = logging.getLogger(__name__)

CACHE_KEY = "widgetCache"
CACHE_TTL_SECONDS = 30


class FreshnessCache:
    """
    Holds the result of the most recent fetch for the active pinned station.

    There is one slot, not one per station. Each write replaces the whole
    stored value in a single store operation.
    """

    def __init__(self, store: KeyValueStore, clock: Callable[[], float] = time.time):
        self.store = store
        self.clock = clock

    def read(self) -> Optional[CacheEntry]:
        """Return the cached entry, or None if nothing usable is stored."""
        raw = self.store.get(CACHE_KEY)
        if raw is None:
            return None

        try:
            entry = CacheEntry.from_dict(raw["entry"])
            entry.produced_at = float(raw["producedAtEpochSeconds"])
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Discarding malformed cache entry: {e}")
            return None
        return entry

    def write(self, entry: CacheEntry) -> None:
        """Overwrite the slot with ``entry``."""
        self.store.set(
            CACHE_KEY,
            {"entry": entry.to_dict(), "producedAtEpochSeconds": entry.produced_at},
        )
        logger.debug(
            f"Cached {len(entry.departures)} departures for {entry.station_name} "
            f"(error={entry.error!r})"
        )

    def read_fresh(self, max_age_seconds: float = CACHE_TTL_SECONDS, now: float = None) -> Optional[CacheEntry]:
        """Return the cached entry only if it is younger than ``max_age_seconds``."""
        entry = self.read()
        if entry is None:
            return None
        if now is None:
            now = self.clock()
        # A timestamp ahead of the local clock is stale, not fresh indefinitely
        if 0 <= now - entry.produced_at < max_age_seconds:
            return entry
        return None

    def is_fresh(self, max_age_seconds: float = CACHE_TTL_SECONDS, now: float = None) -> bool:
        """True if an entry exists and is younger than ``max_age_seconds``."""
        return self.read_fresh(max_age_seconds, now) is not None

    def clear(self) -> None:
        self.store.set(CACHE_KEY, None)
