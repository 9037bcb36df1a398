"""Unit tests for popup and label formatting."""

from dataclasses import replace
from datetime import datetime, timezone

import pytest

from quakemap.core.earthquake import Earthquake
from quakemap.core.formatter import (
    format_event_time,
    format_label,
    format_magnitude,
    format_map_title,
    format_popup_html,
)


@pytest.fixture
def sample_earthquake():
    """Create a sample earthquake for testing."""
    return Earthquake(
        id="us7000abcd",
        magnitude=5.14,
        place="95 km SW of Abepura, Indonesia",
        time=datetime(2024, 1, 1, 1, 2, 3, tzinfo=timezone.utc),
        latitude=-3.2,
        longitude=140.1,
        depth_km=35.0,
        url="https://earthquake.usgs.gov/earthquakes/eventpage/us7000abcd",
        mag_type="mb",
    )


class TestFormatEventTime:
    """Tests for format_event_time()."""

    def test_utc_by_default(self, sample_earthquake):
        assert format_event_time(sample_earthquake.time) == "2024-01-01 01:02:03 UTC"

    def test_applies_offset_and_label(self, sample_earthquake):
        result = format_event_time(sample_earthquake.time, utc_offset_hours=7, tz_label="WIB")
        assert result == "2024-01-01 08:02:03 WIB"

    def test_negative_offset_crosses_midnight(self, sample_earthquake):
        result = format_event_time(sample_earthquake.time, utc_offset_hours=-8, tz_label="PST")
        assert result == "2023-12-31 17:02:03 PST"


class TestFormatPopupHtml:
    """Tests for format_popup_html()."""

    def test_contains_place_magnitude_time_and_depth(self, sample_earthquake):
        popup = format_popup_html(sample_earthquake)

        assert "<b>95 km SW of Abepura, Indonesia</b>" in popup
        assert "Magnitude: 5.1 mb" in popup
        assert "Time: 2024-01-01 01:02:03 UTC" in popup
        assert "Depth: 35.0 km" in popup

    def test_links_to_event_page(self, sample_earthquake):
        popup = format_popup_html(sample_earthquake)
        assert 'href="https://earthquake.usgs.gov/earthquakes/eventpage/us7000abcd"' in popup

    def test_no_link_without_url(self, sample_earthquake):
        quake = replace(sample_earthquake, url="")
        assert "href" not in format_popup_html(quake)

    def test_escapes_place(self, sample_earthquake):
        quake = replace(sample_earthquake, place="<script>x</script>, Indonesia")
        popup = format_popup_html(quake)

        assert "<script>" not in popup
        assert "&lt;script&gt;" in popup

    def test_mentions_tsunami_flag(self, sample_earthquake):
        quake = replace(sample_earthquake, tsunami=True)
        assert "Tsunami" in format_popup_html(quake)

    def test_display_timezone(self, sample_earthquake):
        popup = format_popup_html(sample_earthquake, utc_offset_hours=7, tz_label="WIB")
        assert "Time: 2024-01-01 08:02:03 WIB" in popup


class TestFormatLabel:
    """Tests for format_label() and format_magnitude()."""

    def test_label(self, sample_earthquake):
        assert format_label(sample_earthquake) == "M5.1 - 95 km SW of Abepura, Indonesia"

    def test_label_escapes_place(self, sample_earthquake):
        quake = replace(sample_earthquake, place="<img src=x onerror=alert(1)> & co, Indonesia")
        label = format_label(quake)

        assert "<img" not in label
        assert label == "M5.1 - &lt;img src=x onerror=alert(1)&gt; &amp; co, Indonesia"

    def test_magnitude_without_type(self, sample_earthquake):
        quake = replace(sample_earthquake, mag_type="")
        assert format_magnitude(quake) == "5.1"


class TestFormatMapTitle:
    """Tests for format_map_title()."""

    def test_plural(self):
        assert format_map_title(12, "Indonesia", "all_month") == "12 earthquakes in Indonesia (all_month)"

    def test_singular(self):
        assert format_map_title(1, "Indonesia", "all_day") == "1 earthquake in Indonesia (all_day)"

    def test_without_place_filter(self):
        assert format_map_title(0, "", "all_hour") == "0 earthquakes (all_hour)"
