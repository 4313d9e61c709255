"""Favorite ("pinned") stations, persisted in the shared store."""

import logging
import time
from typing import Callable, List, Optional

from .models import PinnedStation
from .storage import KeyValueStore

logger = logging.getLogger(__name__)

PINS_KEY = "pinnedStations"
MAX_PINNED_STATIONS = 8


class PinStore:
    """
    Ordered list of pinned stations, most recently pinned first.

    The list is read from the store on every call so changes made by another
    process are picked up, and every mutation writes the full list back before
    returning.
    """

    def __init__(
        self,
        store: KeyValueStore,
        max_size: int = MAX_PINNED_STATIONS,
        clock: Callable[[], float] = time.time,
    ):
        self.store = store
        self.max_size = max_size
        self.clock = clock

    def list(self) -> List[PinnedStation]:
        raw = self.store.get(PINS_KEY)
        if raw is None:
            return []

        try:
            stations = [PinnedStation.from_dict(item) for item in raw]
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Discarding malformed pinned stations: {e}")
            return []

        # Stable, so equal timestamps keep stored order
        stations.sort(key=lambda s: s.pinned_at, reverse=True)
        return stations

    def first(self) -> Optional[PinnedStation]:
        """The station the widget tracks, or None if nothing is pinned."""
        stations = self.list()
        return stations[0] if stations else None

    def is_pinned(self, station_id: str) -> bool:
        return any(s.id == station_id for s in self.list())

    def pin(self, station_id: str, name: str) -> None:
        """Pin a station at the front. No-op if it is already pinned."""
        stations = self.list()
        if any(s.id == station_id for s in stations):
            logger.debug(f"Station '{name}' ({station_id}) is already pinned")
            return

        # Never older than the current front, even if the clock went backwards
        pinned_at = self.clock()
        if stations:
            pinned_at = max(pinned_at, stations[0].pinned_at)

        stations.insert(0, PinnedStation(id=station_id, name=name, pinned_at=pinned_at))
        evicted = stations[self.max_size:]
        stations = stations[:self.max_size]
        for station in evicted:
            logger.info(f"Unpinned oldest station '{station.name}' ({station.id})")

        self._save(stations)
        logger.info(f"Pinned '{name}' ({station_id}), {len(stations)} pinned")

    def unpin(self, station_id: str) -> None:
        """Remove a station. No-op if it is not pinned."""
        stations = self.list()
        remaining = [s for s in stations if s.id != station_id]
        if len(remaining) == len(stations):
            logger.debug(f"Station {station_id} was not pinned")
            return

        self._save(remaining)
        logger.info(f"Unpinned station {station_id}, {len(remaining)} pinned")

    def toggle(self, station_id: str, name: str) -> bool:
        """Pin or unpin a station. Returns True if it is pinned afterwards."""
        if self.is_pinned(station_id):
            self.unpin(station_id)
            return False
        self.pin(station_id, name)
        return True

    def _save(self, stations: List[PinnedStation]) -> None:
        self.store.set(PINS_KEY, [s.to_dict() for s in stations])
