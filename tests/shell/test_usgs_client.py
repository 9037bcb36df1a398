"""Tests for the USGS client.

Uses the `responses` library to mock HTTP requests.
"""

from datetime import datetime, timezone

import pytest
import requests
import responses

from quakemap.core.geo import INDONESIA_BOUNDS
from quakemap.shell.usgs_client import (
    USGS_API_BASE,
    USGS_FEED_BASE,
    USGSClient,
    USGSQueryParams,
)


FEED_URL = f"{USGS_FEED_BASE}/all_month.geojson"

FEED_BODY = {
    "type": "FeatureCollection",
    "metadata": {"count": 2},
    "features": [
        {
            "type": "Feature",
            "id": "us1",
            "properties": {"mag": 4.8, "place": "Banda Sea, Indonesia", "time": 1704067200000},
            "geometry": {"type": "Point", "coordinates": [128.0, -6.0, 100.0]},
        },
        {
            "type": "Feature",
            "id": "us2",
            "properties": {"mag": 3.0, "place": "Alaska", "time": 1704067200000},
            "geometry": {"type": "Point", "coordinates": [-150.0, 61.0, 10.0]},
        },
    ],
}


class TestFeedUrl:
    """Tests for USGSClient.feed_url()."""

    def test_resolves_feed_name(self):
        assert USGSClient().feed_url("all_month") == FEED_URL

    def test_full_url_passes_through(self):
        url = "https://example.com/custom.geojson"
        assert USGSClient().feed_url(url) == url

    def test_custom_base(self):
        client = USGSClient(feed_base="https://mirror.example.com/feeds/")
        assert client.feed_url("4.5_week") == "https://mirror.example.com/feeds/4.5_week.geojson"

    def test_unknown_feed_raises(self):
        with pytest.raises(ValueError, match="Unknown USGS feed"):
            USGSClient().feed_url("everything_forever")


class TestFetchFeed:
    """Tests for USGSClient.fetch_feed()."""

    @responses.activate
    def test_returns_geojson(self):
        responses.add(responses.GET, FEED_URL, json=FEED_BODY, status=200)

        data = USGSClient().fetch_feed("all_month")

        assert data["type"] == "FeatureCollection"
        assert len(data["features"]) == 2
        assert len(responses.calls) == 1

    @responses.activate
    def test_http_error_raises(self):
        responses.add(responses.GET, FEED_URL, status=503)

        with pytest.raises(requests.HTTPError):
            USGSClient().fetch_feed("all_month")

    @responses.activate
    def test_connection_error_propagates(self):
        responses.add(
            responses.GET,
            FEED_URL,
            body=requests.ConnectionError("DNS failure"),
        )

        with pytest.raises(requests.ConnectionError):
            USGSClient().fetch_feed("all_month")


class TestFetchEarthquakes:
    """Tests for the FDSN query path."""

    def test_build_params_with_bounds_and_window(self):
        query = USGSQueryParams(
            bounds=INDONESIA_BOUNDS,
            min_magnitude=2.5,
            start_time=datetime(2024, 1, 1, tzinfo=timezone.utc),
            end_time=datetime(2024, 1, 8, tzinfo=timezone.utc),
            limit=50,
        )

        params = USGSClient()._build_params(query)

        assert params["format"] == "geojson"
        assert params["minlatitude"] == "-11.0"
        assert params["maxlongitude"] == "141.0"
        assert params["minmagnitude"] == "2.5"
        assert params["starttime"] == "2024-01-01T00:00:00"
        assert params["endtime"] == "2024-01-08T00:00:00"
        assert params["limit"] == "50"

    def test_build_params_minimal(self):
        params = USGSClient()._build_params(USGSQueryParams(limit=None))
        assert params == {"format": "geojson", "orderby": "time"}

    @responses.activate
    def test_sends_query_parameters(self):
        responses.add(responses.GET, USGS_API_BASE, json=FEED_BODY, status=200)

        data = USGSClient().fetch_earthquakes(USGSQueryParams(min_magnitude=4.0))

        assert data["metadata"]["count"] == 2
        request_url = responses.calls[0].request.url
        assert "minmagnitude=4.0" in request_url
        assert "format=geojson" in request_url
