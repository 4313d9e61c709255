"""Tests for the widget RefreshScheduler."""

import unittest
from unittest.mock import MagicMock
import sys
from pathlib import Path

# Add src to path so we can import sltracker
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from sltracker.cache import FreshnessCache
from sltracker.models import CacheEntry, Departure
from sltracker.pin_store import PinStore
from sltracker.scheduler import NO_PINNED_STATIONS, REFRESH_INTERVAL_SECONDS, RefreshScheduler
from sltracker.sl_client import DecodeFailure, SLClient, TransportFailure
from sltracker.storage import InMemoryStore

from helpers import FullDiskStore, make_departure_dict, stockholm_time

NOW = stockholm_time(10, 0).timestamp()


def departures(*times):
    return [
        Departure.from_dict(make_departure_dict(expected=f"2025-01-27T{t}", destination=t))
        for t in times
    ]


class TestRefreshScheduler(unittest.TestCase):

    def setUp(self):
        self.store = InMemoryStore()
        self.cache = FreshnessCache(self.store)
        self.pins = PinStore(self.store, clock=lambda: NOW - 3600)
        self.client = MagicMock(spec=SLClient)
        self.client.fetch_metro_departures.return_value = departures("10:05:00", "09:55:00", "10:02:00")
        self.scheduler = RefreshScheduler(self.client, self.cache, self.pins, clock=lambda: NOW)

    def test_no_pinned_station(self):
        timeline = self.scheduler.refresh()

        self.assertEqual(timeline.entry.error, NO_PINNED_STATIONS)
        self.assertIsNone(timeline.entry.station_name)
        self.client.fetch_metro_departures.assert_not_called()
        self.assertIsNone(self.cache.read())

    def test_cache_miss_fetches_projects_and_writes(self):
        self.pins.pin("9001", "T-Centralen")

        timeline = self.scheduler.refresh()

        self.client.fetch_metro_departures.assert_called_once_with("T-Centralen")
        self.assertEqual(
            [d.destination for d in timeline.entry.departures], ["10:02:00", "10:05:00"]
        )
        cached = self.cache.read()
        self.assertEqual(cached.produced_at, NOW)
        self.assertEqual([d.destination for d in cached.departures], ["10:02:00", "10:05:00"])

    def test_fresh_cache_skips_network(self):
        self.pins.pin("9001", "T-Centralen")
        self.cache.write(CacheEntry(
            produced_at=NOW - 10,
            station_name="T-Centralen",
            departures=departures("10:07:00"),
        ))

        timeline = self.scheduler.refresh()

        self.client.fetch_metro_departures.assert_not_called()
        self.assertEqual(timeline.entry.departures[0].destination, "10:07:00")
        self.assertEqual(timeline.entry.produced_at, NOW - 10)

    def test_stale_cache_refetches(self):
        self.pins.pin("9001", "T-Centralen")
        self.cache.write(CacheEntry(produced_at=NOW - 30, station_name="T-Centralen"))

        self.scheduler.refresh()

        self.client.fetch_metro_departures.assert_called_once()
        self.assertEqual(self.cache.read().produced_at, NOW)

    def test_cache_for_other_station_is_a_miss(self):
        self.pins.pin("9192", "Slussen")
        self.cache.write(CacheEntry(produced_at=NOW - 5, station_name="T-Centralen"))

        timeline = self.scheduler.refresh()

        self.client.fetch_metro_departures.assert_called_once_with("Slussen")
        self.assertEqual(timeline.entry.station_name, "Slussen")

    def test_fetch_failure_is_cached_as_error(self):
        self.pins.pin("9001", "T-Centralen")
        self.client.fetch_metro_departures.side_effect = TransportFailure("HTTP 500", status_code=500)

        timeline = self.scheduler.refresh()

        self.assertEqual(timeline.entry.error, "Network connection failed")
        self.assertEqual(timeline.entry.departures, [])
        self.assertEqual(self.cache.read().error, "Network connection failed")

    def test_error_entry_is_served_while_fresh(self):
        self.pins.pin("9001", "T-Centralen")
        self.client.fetch_metro_departures.side_effect = DecodeFailure("bad payload")
        self.scheduler.refresh(now=NOW)

        timeline = self.scheduler.refresh(now=NOW + 15)

        self.assertEqual(self.client.fetch_metro_departures.call_count, 1)
        self.assertEqual(timeline.entry.error, "Failed to process server response")

    def test_cache_write_failure_still_returns_timeline(self):
        store = FullDiskStore()
        pins = PinStore(store, clock=lambda: NOW - 3600)
        pins.pin("9001", "T-Centralen")
        scheduler = RefreshScheduler(self.client, FreshnessCache(store), pins, clock=lambda: NOW)

        with self.assertLogs("sltracker.scheduler", level="WARNING"):
            timeline = scheduler.refresh()

        self.assertEqual([d.destination for d in timeline.entry.departures], ["10:02:00", "10:05:00"])
        self.assertEqual(timeline.next_refresh_at, NOW + REFRESH_INTERVAL_SECONDS)

    def test_empty_result_is_not_an_error(self):
        self.pins.pin("9001", "T-Centralen")
        self.client.fetch_metro_departures.return_value = []

        timeline = self.scheduler.refresh()

        self.assertEqual(timeline.entry.departures, [])
        self.assertIsNone(timeline.entry.error)

    def test_every_branch_requests_fixed_interval(self):
        self.assertEqual(self.scheduler.refresh().next_refresh_at, NOW + REFRESH_INTERVAL_SECONDS)

        self.pins.pin("9001", "T-Centralen")
        self.assertEqual(self.scheduler.refresh().next_refresh_at, NOW + REFRESH_INTERVAL_SECONDS)
        # Served from cache
        self.assertEqual(self.scheduler.refresh().next_refresh_at, NOW + REFRESH_INTERVAL_SECONDS)

    def test_rerun_with_same_inputs_is_idempotent(self):
        self.pins.pin("9001", "T-Centralen")

        self.scheduler.refresh(now=NOW + 60)
        first = self.store.get("widgetCache")

        # Fresh hit leaves the slot untouched
        self.scheduler.refresh(now=NOW + 70)
        self.assertEqual(self.store.get("widgetCache"), first)

        # Re-running the fetch branch with the same inputs writes the same value
        self.cache.clear()
        self.scheduler.refresh(now=NOW + 60)
        self.assertEqual(self.store.get("widgetCache"), first)

    def test_placeholder(self):
        entry = self.scheduler.placeholder()
        self.assertEqual(entry.station_name, "Loading...")
        self.assertIsNone(entry.error)


if __name__ == "__main__":
    unittest.main()
