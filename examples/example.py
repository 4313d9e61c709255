"""Example usage of SLStationTracker and the widget RefreshScheduler."""

import logging
import sys
from datetime import datetime
from pathlib import Path

# Add src to path so we can import sltracker
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from sltracker import (
    RefreshScheduler,
    SLStationTracker,
    line_color,
    station_link,
)
from sltracker.models import CacheEntry

# Set up logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)


def print_entry(entry: CacheEntry, limit: int = None):
    """Display one fetch result."""
    print(f"\n{'='*70}")
    print(f"Station: {entry.station_name}")
    print(f"Updated: {datetime.fromtimestamp(entry.produced_at).strftime('%H:%M:%S')}")
    print(f"{'='*70}")

    if entry.pending:
        print("  Refreshing...")
        return

    if entry.error:
        print(f"Error: {entry.error}")
        return

    departures = entry.upcoming(limit) if limit else entry.departures
    if not departures:
        print("  No departures")
        return

    for departure in departures:
        line = departure.line.designation
        print(f"  [{line_color(line):5}] {line:>3} → {departure.destination:25} {departure.display}")
        for deviation in departure.deviations or []:
            print(f"        ! {deviation.message}")


def widget_mode(tracker: SLStationTracker):
    """Run one widget refresh against the shared store, as the widget host would."""
    scheduler = RefreshScheduler(tracker.client, tracker.cache, tracker.pins)
    timeline = scheduler.refresh()
    print_entry(timeline.entry, limit=3)
    if timeline.entry.station_name:
        print(f"\nTap: {station_link(timeline.entry.station_name)}")
    print(f"Next refresh: {datetime.fromtimestamp(timeline.next_refresh_at).strftime('%H:%M:%S')}")


def interactive_mode(tracker: SLStationTracker):
    """
    Run in interactive mode, allowing user to query multiple stations.
    """
    print("SL Station Tracker - Interactive Mode")
    print("Enter a station name to see departures")
    print("Commands: 'pin <station>', 'pins', 'open <link>', 'quit'\n")

    while True:
        try:
            user_input = input("Enter station (or 'quit'): ").strip()

            if user_input.lower() in ["quit", "q", "exit"]:
                print("Goodbye!")
                break

            if not user_input:
                continue

            if user_input == "pins":
                for station in tracker.pinned_stations():
                    print(f"  - {station.name} ({station.id})")
                continue

            if user_input.startswith("pin "):
                name = user_input[4:].strip()
                pinned = tracker.toggle_pin(name)
                print(f"{'Pinned' if pinned else 'Unpinned'} {name}")
                continue

            if user_input.startswith("open "):
                entry = tracker.open_link(user_input[5:].strip())
                if entry is None:
                    print("Not a station link")
                else:
                    print_entry(entry)
                continue

            matching = tracker.find_stations_by_name(user_input)
            if user_input not in matching and matching:
                print("\nDid you mean:")
                for name in matching[:5]:
                    print(f"  - {name}")
                continue

            print_entry(tracker.get_station_data(user_input))

        except KeyboardInterrupt:
            print("\n\nGoodbye!")
            break
        except Exception as e:
            logger.error(f"Error: {e}", exc_info=True)
            print(f"Error: {e}")


if __name__ == "__main__":
    tracker = SLStationTracker()
    try:
        if len(sys.argv) > 1 and sys.argv[1] == "--widget":
            widget_mode(tracker)
        elif len(sys.argv) > 1:
            # Command line mode: pass station name as argument
            print_entry(tracker.get_station_data(" ".join(sys.argv[1:])))
        else:
            interactive_mode(tracker)
    finally:
        tracker.cleanup()
