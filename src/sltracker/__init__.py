"""SLTracker - Stockholm metro departures for an app and its home-screen widget."""

__version__ = "0.1.0"

from .models import Departure, DeparturesResponse, PinnedStation, CacheEntry
from .stations import StationResolver, line_color
from .sl_client import SLClient, SLClientError, InvalidRequest, TransportFailure, DecodeFailure
from .projector import project
from .storage import JSONFileStore, InMemoryStore
from .cache import FreshnessCache
from .pin_store import PinStore
from .scheduler import RefreshScheduler, WidgetTimeline
from .station_tracker import SLStationTracker, station_link, parse_station_link

__all__ = [
    "SLStationTracker",
    "RefreshScheduler",
    "WidgetTimeline",
    "SLClient",
    "SLClientError",
    "InvalidRequest",
    "TransportFailure",
    "DecodeFailure",
    "StationResolver",
    "FreshnessCache",
    "PinStore",
    "JSONFileStore",
    "InMemoryStore",
    "project",
    "line_color",
    "station_link",
    "parse_station_link",
    "Departure",
    "DeparturesResponse",
    "PinnedStation",
    "CacheEntry",
]
