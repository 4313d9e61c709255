"""Widget refresh cycle: decide what to show and when to run again."""

import logging
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from .cache import CACHE_TTL_SECONDS, FreshnessCache
from .models import CacheEntry
from .pin_store import PinStore
from .projector import HOME_TIMEZONE, project
from .sl_client import SLClient, SLClientError

logger = logging.getLogger(__name__)

REFRESH_INTERVAL_SECONDS = 30
NO_PINNED_STATIONS = "No pinned stations found"
PLACEHOLDER_STATION = "Loading..."


@dataclass
class WidgetTimeline:
    """Entry to display plus the earliest time the host should call again."""
    entry: CacheEntry
    next_refresh_at: float  # Unix timestamp


class RefreshScheduler:
    """
    Runs one widget refresh per call.

    Nothing is kept between calls except what is in the shared cache, so a
    host that delays or coalesces invocations cannot leave it inconsistent.
    """

    def __init__(
        self,
        client: SLClient,
        cache: FreshnessCache,
        pins: PinStore,
        clock: Callable[[], float] = time.time,
        ttl: float = CACHE_TTL_SECONDS,
        interval: float = REFRESH_INTERVAL_SECONDS,
    ):
        self.client = client
        self.cache = cache
        self.pins = pins
        self.clock = clock
        self.ttl = ttl
        self.interval = interval

    def refresh(self, now: float = None) -> WidgetTimeline:
        """
        Produce the entry for the first pinned station.

        Serves the cached entry when it is fresh and belongs to that station;
        otherwise fetches, projects and writes the result (or the error) back to
        the cache. Fetch failures never escape this method.
        """
        if now is None:
            now = self.clock()

        station = self.pins.first()
        if station is None:
            logger.info("No pinned stations, nothing to fetch")
            entry = CacheEntry(produced_at=now, station_name=None, error=NO_PINNED_STATIONS)
            return self._timeline(entry, now)

        cached = self.cache.read_fresh(self.ttl, now)
        if cached is not None and cached.station_name == station.name:
            logger.debug(f"Serving cached departures for {station.name}")
            return self._timeline(cached, now)

        entry = self.fetch_entry(station.name, now)
        try:
            self.cache.write(entry)
        except OSError as e:
            logger.warning(f"Could not cache departures for {station.name}: {e}")
        return self._timeline(entry, now)

    def fetch_entry(self, station_name: str, now: float) -> CacheEntry:
        """Fetch and project departures, turning client errors into an error entry."""
        try:
            departures = self.client.fetch_metro_departures(station_name)
        except SLClientError as e:
            logger.error(f"Error fetching departures for {station_name}: {e}")
            return CacheEntry(produced_at=now, station_name=station_name, error=e.user_message)

        upcoming = project(departures, datetime.fromtimestamp(now, HOME_TIMEZONE))
        logger.info(f"Fetched {len(upcoming)} upcoming departures for {station_name}")
        return CacheEntry(produced_at=now, station_name=station_name, departures=upcoming)

    def placeholder(self, now: float = None) -> CacheEntry:
        """Entry shown before the first refresh completes."""
        if now is None:
            now = self.clock()
        return CacheEntry(produced_at=now, station_name=PLACEHOLDER_STATION)

    def _timeline(self, entry: CacheEntry, now: float) -> WidgetTimeline:
        return WidgetTimeline(entry=entry, next_refresh_at=now + self.interval)
