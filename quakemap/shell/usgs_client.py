"""USGS API Client - Imperative Shell.

This module handles HTTP communication with the USGS earthquake feeds.
All I/O is contained here; parsing and filtering live in the core module.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any

import requests

from quakemap.core.config import is_feed_url, is_valid_feed
from quakemap.core.geo import BoundingBox


logger = logging.getLogger(__name__)


# Real-time summary feeds, updated every minute
USGS_FEED_BASE = "https://earthquake.usgs.gov/earthquakes/feed/v1.0/summary"

# USGS FDSN Event Web Service base URL
USGS_API_BASE = "https://earthquake.usgs.gov/fdsnws/event/1/query"

# Default timeout for API requests (seconds)
DEFAULT_TIMEOUT = 30


@dataclass
class USGSQueryParams:
    """Parameters for an FDSN event query.

    Attributes:
        bounds: Geographic bounding box (optional)
        min_magnitude: Minimum magnitude to fetch
        start_time: Fetch earthquakes after this time
        end_time: Fetch earthquakes before this time
        limit: Maximum number of results
    """
    bounds: BoundingBox | None = None
    min_magnitude: float | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None
    limit: int | None = 1000


class USGSClient:
    """Client for fetching earthquake GeoJSON from USGS.

    This is part of the imperative shell - it handles HTTP I/O.
    """

    def __init__(
        self,
        feed_base: str = USGS_FEED_BASE,
        api_base: str = USGS_API_BASE,
        timeout: int = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize USGS client.

        Args:
            feed_base: Base URL of the summary feeds
            api_base: FDSN event query URL
            timeout: Request timeout in seconds
        """
        self.feed_base = feed_base.rstrip("/")
        self.api_base = api_base
        self.timeout = timeout

    def feed_url(self, feed: str) -> str:
        """Resolve a feed name such as "all_month" to its GeoJSON URL.

        Full URLs are returned unchanged.

        Raises:
            ValueError: If the feed name is not a known summary feed
        """
        if is_feed_url(feed):
            return feed

        if not is_valid_feed(feed):
            raise ValueError(f"Unknown USGS feed: {feed}")

        return f"{self.feed_base}/{feed}.geojson"

    def _get_json(self, url: str, params: dict[str, str] | None = None) -> dict[str, Any]:
        response = requests.get(url, params=params, timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    def fetch_feed(self, feed: str) -> dict[str, Any]:
        """Fetch a summary feed.

        This method performs HTTP I/O.

        Args:
            feed: Feed name (e.g. "all_week") or full GeoJSON URL

        Returns:
            Raw GeoJSON FeatureCollection

        Raises:
            ValueError: If the feed name is unknown
            requests.RequestException: If the request fails
        """
        url = self.feed_url(feed)

        logger.info("Fetching USGS feed %s", url)

        data = self._get_json(url)
        count = len(data.get("features") or [])

        logger.info("Fetched %d features from %s", count, url)

        return data

    def _build_params(self, query: USGSQueryParams) -> dict[str, str]:
        """Build query parameters for an FDSN request.

        Args:
            query: Query parameters

        Returns:
            Dict of URL query parameters
        """
        params: dict[str, str] = {
            "format": "geojson",
            "orderby": "time",
        }

        if query.bounds is not None:
            params["minlatitude"] = str(query.bounds.min_latitude)
            params["maxlatitude"] = str(query.bounds.max_latitude)
            params["minlongitude"] = str(query.bounds.min_longitude)
            params["maxlongitude"] = str(query.bounds.max_longitude)

        if query.min_magnitude is not None:
            params["minmagnitude"] = str(query.min_magnitude)

        if query.start_time is not None:
            params["starttime"] = query.start_time.strftime("%Y-%m-%dT%H:%M:%S")

        if query.end_time is not None:
            params["endtime"] = query.end_time.strftime("%Y-%m-%dT%H:%M:%S")

        if query.limit is not None:
            params["limit"] = str(query.limit)

        return params

    def fetch_earthquakes(self, query: USGSQueryParams) -> dict[str, Any]:
        """Run an FDSN event query.

        This method performs HTTP I/O.

        Args:
            query: Query parameters

        Returns:
            Raw GeoJSON response from USGS

        Raises:
            requests.RequestException: If the request fails
        """
        params = self._build_params(query)

        logger.info(
            "Querying USGS event service",
            extra={"params": params},
        )

        data = self._get_json(self.api_base, params=params)
        count = data.get("metadata", {}).get("count", 0)

        logger.info("Fetched %d earthquakes from USGS", count)

        return data
