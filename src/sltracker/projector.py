"""Prune and order fetched departures for display."""

import logging
from datetime import datetime
from typing import List, Optional
from zoneinfo import ZoneInfo

from .models import Departure

logger = logging.getLogger(__name__)

HOME_TIMEZONE = ZoneInfo("Europe/Stockholm")
TIME_FORMAT = "%Y-%m-%dT%H:%M:%S"


def parse_expected(value: str, now: datetime) -> datetime:
    """
    Parse an upstream timestamp ("2025-01-27T10:00:00") as Stockholm wall-clock time.

    Unparseable values return ``now`` so a bad entry never breaks sorting.
    """
    try:
        return datetime.strptime(value, TIME_FORMAT).replace(tzinfo=HOME_TIMEZONE)
    except (TypeError, ValueError):
        logger.warning(f"Unparseable departure time {value!r}, treating as now")
        return now


def project(departures: List[Departure], now: Optional[datetime] = None) -> List[Departure]:
    """
    Drop departures that have already left and sort the rest by expected time.

    Ties keep their upstream order. The list is not truncated.

    Args:
        departures: Departures as returned by the client.
        now: Reference time. Naive values are taken as Stockholm time.
            Defaults to the current time.

    Returns:
        New list of departures with ``expected >= now``, earliest first.
    """
    if now is None:
        now = datetime.now(HOME_TIMEZONE)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=HOME_TIMEZONE)

    keyed = [(parse_expected(d.expected, now), d) for d in departures]
    upcoming = [(when, d) for when, d in keyed if when >= now]

    # sort() is stable
    upcoming.sort(key=lambda item: item[0])
    return [d for _, d in upcoming]
