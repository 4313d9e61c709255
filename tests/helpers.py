"""Shared test data builders."""

from datetime import datetime
from unittest.mock import MagicMock
from zoneinfo import ZoneInfo

from sltracker.storage import InMemoryStore

STOCKHOLM = ZoneInfo("Europe/Stockholm")


def stockholm_time(hour: int, minute: int, second: int = 0) -> datetime:
    return datetime(2025, 1, 27, hour, minute, second, tzinfo=STOCKHOLM)


def make_departure_dict(
    expected="2025-01-27T10:05:00",
    mode="METRO",
    line="13",
    destination="Ropsten",
    display="5 min",
    journey_id=1,
):
    """Build a departure object matching the SL Transport API shape."""
    return {
        "direction": "Ropsten",
        "direction_code": 1,
        "destination": destination,
        "state": "EXPECTED",
        "scheduled": expected,
        "expected": expected,
        "display": display,
        "journey": {"id": journey_id, "state": "EXPECTED", "prediction_state": "NORMAL"},
        "stop_area": {"id": 1051, "name": "T-Centralen", "type": "METROSTN"},
        "stop_point": {"id": 3051, "name": "T-Centralen", "designation": "3"},
        "line": {
            "id": int(line) if line.isdigit() else 0,
            "designation": line,
            "transport_authority_id": 1,
            "transport_mode": mode,
            "group_of_lines": "Tunnelbanans röda linje" if mode == "METRO" else None,
        },
        "deviations": [],
    }


def mock_session(payload=None, status_code=200):
    """requests.Session stand-in whose get() returns one canned response."""
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = payload
    session = MagicMock()
    session.get.return_value = response
    return session


class FullDiskStore(InMemoryStore):
    """InMemoryStore whose writes to the widget cache fail like a full disk."""

    def set(self, key, value):
        if key == "widgetCache":
            raise OSError(28, "No space left on device")
        super().set(key, value)
