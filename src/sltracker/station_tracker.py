"""Main SL Station Tracker class for the interactive app."""

import logging
import threading
import time
from datetime import datetime
from typing import Callable, List, Optional
from urllib.parse import quote, unquote, urlsplit

from .cache import FreshnessCache
from .models import CacheEntry, PinnedStation
from .pin_store import PinStore
from .projector import HOME_TIMEZONE, project
from .sl_client import SLClient, SLClientError
from .stations import StationResolver
from .storage import JSONFileStore, KeyValueStore

logger = logging.getLogger(__name__)

LINK_SCHEME = "sltracker"
LINK_HOST = "station"


def station_link(station_name: str) -> str:
    """Deep link that opens a station in the app (used by the widget)."""
    return f"{LINK_SCHEME}://{LINK_HOST}/{quote(station_name, safe='')}"


def parse_station_link(url: str) -> Optional[str]:
    """
    Extract the station name from a ``sltracker://station/<name>`` link.

    Returns:
        The decoded station name, or None if the URL is not a station link.
    """
    parts = urlsplit(url)
    if parts.scheme != LINK_SCHEME or parts.netloc != LINK_HOST:
        return None
    segments = parts.path.strip("/").split("/")
    if len(segments) != 1:
        return None
    name = unquote(segments[0])
    return name or None


class SLStationTracker:
    """
    Fetches live metro departures for the interactive app.

    This class provides methods to:
    - Find stations by name
    - Get upcoming departures for a station, always from the network
    - Pin and unpin favorite stations
    - Open stations from widget deep links

    Fetching the first pinned station also refreshes the shared cache so the
    widget can skip its next network call.
    """

    def __init__(
        self,
        store: KeyValueStore = None,
        client: SLClient = None,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize the tracker.

        Args:
            store: Shared store used by both the app and the widget. Defaults to
                a JSONFileStore in the configured directory.
            client: SL API client. Created with the default resolver if omitted.
            clock: Time source returning Unix timestamps.
        """
        self.store = store if store is not None else JSONFileStore()
        self.client = client or SLClient()
        self.resolver: StationResolver = self.client.resolver
        self.cache = FreshnessCache(self.store, clock=clock)
        self.pins = PinStore(self.store, clock=clock)
        self.clock = clock

        self._refresh_lock = threading.Lock()
        self._last_result: Optional[CacheEntry] = None

    def find_stations_by_name(self, name: str) -> List[str]:
        """
        Find all stations matching a name (partial match).

        Args:
            name: Station name or partial name.

        Returns:
            List of matching station names.
        """
        return self.resolver.find_stations_by_name(name)

    def get_station_data(self, station_name: str) -> CacheEntry:
        """
        Get upcoming departures for a station.

        Always makes a network call. A request made while another refresh is
        still running returns the previous result for the same station, or an
        entry with ``pending`` set if there is none.

        Args:
            station_name: Station display name.

        Returns:
            CacheEntry with departures sorted by expected time, or with ``error``
            set if the fetch failed.
        """
        if not self._refresh_lock.acquire(blocking=False):
            logger.debug(f"Refresh already in progress, ignoring request for {station_name}")
            last = self._last_result
            if last is not None and last.station_name == station_name:
                return last
            return CacheEntry(produced_at=self.clock(), station_name=station_name, pending=True)

        try:
            self._last_result = self._fetch(station_name)
            return self._last_result
        finally:
            self._refresh_lock.release()

    def _fetch(self, station_name: str) -> CacheEntry:
        now = self.clock()
        try:
            departures = self.client.fetch_metro_departures(station_name)
        except SLClientError as e:
            logger.error(f"Failed to fetch departures for {station_name}: {e}")
            return CacheEntry(produced_at=now, station_name=station_name, error=e.user_message)

        entry = CacheEntry(
            produced_at=now,
            station_name=station_name,
            departures=project(departures, datetime.fromtimestamp(now, HOME_TIMEZONE)),
        )

        first = self.pins.first()
        if first is not None and first.name == station_name:
            try:
                self.cache.write(entry)
            except OSError as e:
                logger.warning(f"Could not cache departures for {station_name}: {e}")

        return entry

    def open_link(self, url: str) -> Optional[CacheEntry]:
        """Fetch the station named by a widget deep link, or None if the link is not one."""
        station_name = parse_station_link(url)
        if station_name is None:
            logger.warning(f"Ignoring unrecognised link {url}")
            return None
        logger.info(f"Opening {station_name} from link")
        return self.get_station_data(station_name)

    def pinned_stations(self) -> List[PinnedStation]:
        return self.pins.list()

    def is_pinned(self, station_name: str) -> bool:
        return self.pins.is_pinned(self.resolver.resolve(station_name))

    def toggle_pin(self, station_name: str) -> bool:
        """Pin or unpin a station by name. Returns True if it is now pinned."""
        return self.pins.toggle(self.resolver.resolve(station_name), station_name)

    def cleanup(self) -> None:
        """Release network resources."""
        self.client.close()
        logger.info("Cleaned up tracker resources")
