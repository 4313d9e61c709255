"""SL Transport API client for metro departures."""

import logging
import os
from typing import List, Optional

import requests

from .models import Departure, DeparturesResponse
from .stations import StationResolver

logger = logging.getLogger(__name__)

SL_API_BASE_URL = os.environ.get("SL_API_BASE_URL", "https://transport.integration.sl.se/v1")

# The feed interleaves every transport mode, so a short window can contain
# no metro departures at all even when a train is minutes away.
FORECAST_MINUTES = 480
METRO_MODE = "METRO"
REQUEST_TIMEOUT = 10  # seconds


class SLClientError(Exception):
    """Base class for departure fetch failures."""

    user_message = "An unexpected error occurred"


class InvalidRequest(SLClientError):
    """The request URL could not be built."""

    user_message = "Invalid URL"


class TransportFailure(SLClientError):
    """Connection failure or non-200 response."""

    user_message = "Network connection failed"

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class DecodeFailure(SLClientError):
    """Response body does not match the expected schema."""

    user_message = "Failed to process server response"


def build_departures_url(base_url: str, site_id: str) -> str:
    """
    Build the departures endpoint URL for a site.

    Raises:
        InvalidRequest: If the base URL or site ID cannot form a valid URL.
    """
    if not base_url or not base_url.startswith(("http://", "https://")):
        raise InvalidRequest(f"Invalid base URL '{base_url}'")
    if not site_id or not site_id.isdigit():
        raise InvalidRequest(f"Invalid site ID '{site_id}'")
    return f"{base_url.rstrip('/')}/sites/{site_id}/departures"


class SLClient:
    """Fetches, decodes and mode-filters departures from the SL Transport API."""

    def __init__(
        self,
        resolver: StationResolver = None,
        session: requests.Session = None,
        base_url: str = None,
        timeout: float = REQUEST_TIMEOUT,
    ):
        """
        Initialize the client.

        Args:
            resolver: Station name lookup. Defaults to the built-in table.
            session: HTTP session to reuse across requests.
            base_url: API root, defaults to ``SL_API_BASE_URL``.
            timeout: Per-request timeout in seconds.
        """
        self.resolver = resolver or StationResolver()
        self.session = session or requests.Session()
        self.base_url = base_url or SL_API_BASE_URL
        self.timeout = timeout

    def fetch_metro_departures(self, station_name: str) -> List[Departure]:
        """
        Get metro departures for a station, in upstream order.

        Makes exactly one HTTP request. Nothing is cached here.

        Args:
            station_name: Station display name (e.g., "T-Centralen").

        Returns:
            List of metro Departure objects (possibly empty).

        Raises:
            InvalidRequest, TransportFailure, DecodeFailure
        """
        site_id = self.resolver.resolve(station_name)
        response = self.get_departures_response(site_id)

        metro = [d for d in response.departures if d.line.transport_mode == METRO_MODE]
        logger.debug(
            f"{station_name} ({site_id}): {len(metro)} metro of {len(response.departures)} departures"
        )
        return metro

    def get_departures_response(self, site_id: str) -> DeparturesResponse:
        """
        Fetch and decode all departures (every mode) and stop deviations for a site.

        Raises:
            InvalidRequest, TransportFailure, DecodeFailure
        """
        url = build_departures_url(self.base_url, site_id)

        logger.debug(f"Fetching {url}")
        try:
            response = self.session.get(
                url,
                params={"forecast": FORECAST_MINUTES},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"Failed to fetch {url}: {e}")
            raise TransportFailure(f"Request to {url} failed: {e}") from e

        if response.status_code != 200:
            logger.error(f"Failed to fetch {url}: HTTP {response.status_code}")
            raise TransportFailure(
                f"HTTP {response.status_code} from {url}", status_code=response.status_code
            )

        try:
            return DeparturesResponse.from_dict(response.json())
        except (ValueError, KeyError, TypeError) as e:
            logger.error(f"Failed to decode departures from {url}: {e}")
            raise DecodeFailure(f"Malformed departures payload: {e}") from e

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self.session.close()
