"""Earthquake data models and parsing - Pure functions.

This module turns USGS GeoJSON features into typed Earthquake objects
and narrows them down by place, magnitude and time.
All functions are pure with no side effects.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any


@dataclass(frozen=True)
class Earthquake:
    """Immutable earthquake event record.

    Attributes:
        id: Unique USGS event ID
        magnitude: Earthquake magnitude
        place: Free-text location description (e.g. "95 km SW of Abepura, Indonesia")
        time: Event timestamp (UTC), converted from epoch milliseconds
        latitude: Epicenter latitude
        longitude: Epicenter longitude
        depth_km: Depth in kilometers
        url: USGS event detail URL
        mag_type: Magnitude type (e.g., 'mb', 'mww')
        tsunami: Whether the tsunami flag was set
        felt: Number of "felt" reports (optional)
        alert: PAGER alert level (optional)
    """
    id: str
    magnitude: float
    place: str
    time: datetime
    latitude: float
    longitude: float
    depth_km: float = 0.0
    url: str = ""
    mag_type: str = ""
    tsunami: bool = False
    felt: int | None = None
    alert: str | None = None

    @property
    def coordinates(self) -> tuple[float, float]:
        """Return (latitude, longitude) tuple."""
        return (self.latitude, self.longitude)


def parse_earthquake(feature: dict[str, Any]) -> Earthquake | None:
    """Parse a single GeoJSON feature into an Earthquake.

    Pure function: takes raw dict, returns typed Earthquake or None if invalid.

    Args:
        feature: GeoJSON feature dict from a USGS feed

    Returns:
        Earthquake object or None if parsing fails
    """
    try:
        props = feature.get("properties") or {}
        geometry = feature.get("geometry") or {}
        coords = geometry.get("coordinates") or []

        if len(coords) < 2:
            return None

        # USGS uses milliseconds since epoch
        time_ms = props.get("time")
        if time_ms is None:
            return None

        magnitude = props.get("mag")
        if magnitude is None:
            return None

        depth = coords[2] if len(coords) > 2 and coords[2] is not None else 0.0

        return Earthquake(
            id=feature.get("id", ""),
            magnitude=float(magnitude),
            place=props.get("place") or "Unknown location",
            time=datetime.fromtimestamp(time_ms / 1000, tz=timezone.utc),
            longitude=float(coords[0]),
            latitude=float(coords[1]),
            depth_km=float(depth),
            url=props.get("url") or "",
            mag_type=props.get("magType") or "",
            tsunami=bool(props.get("tsunami", 0)),
            felt=props.get("felt"),
            alert=props.get("alert"),
        )
    except (AttributeError, KeyError, TypeError, ValueError, OverflowError, OSError):
        return None


def parse_earthquakes(geojson: dict[str, Any]) -> list[Earthquake]:
    """Parse a GeoJSON FeatureCollection into a list of Earthquakes.

    Invalid features are skipped.

    Args:
        geojson: Full GeoJSON FeatureCollection

    Returns:
        List of valid Earthquake objects, sorted by time (newest first)
    """
    earthquakes = []

    for feature in geojson.get("features") or []:
        earthquake = parse_earthquake(feature)
        if earthquake is not None:
            earthquakes.append(earthquake)

    return sorted(earthquakes, key=lambda e: e.time, reverse=True)


def filter_by_place(
    earthquakes: list[Earthquake],
    text: str = "Indonesia",
    ignore_case: bool = False,
) -> list[Earthquake]:
    """Keep earthquakes whose place description contains ``text``.

    Pure function. An empty ``text`` keeps everything.

    Args:
        earthquakes: List of earthquakes to filter
        text: Substring to look for in the place field
        ignore_case: Match without regard to case

    Returns:
        Filtered list of earthquakes (may be empty)
    """
    if not text:
        return list(earthquakes)

    if ignore_case:
        needle = text.casefold()
        return [e for e in earthquakes if needle in e.place.casefold()]

    return [e for e in earthquakes if text in e.place]


def filter_by_magnitude(
    earthquakes: list[Earthquake],
    min_magnitude: float | None = None,
    max_magnitude: float | None = None,
) -> list[Earthquake]:
    """Filter earthquakes by magnitude range.

    Pure function.

    Args:
        earthquakes: List of earthquakes to filter
        min_magnitude: Minimum magnitude (inclusive), None for no minimum
        max_magnitude: Maximum magnitude (inclusive), None for no maximum

    Returns:
        Filtered list of earthquakes
    """
    result = earthquakes

    if min_magnitude is not None:
        result = [e for e in result if e.magnitude >= min_magnitude]

    if max_magnitude is not None:
        result = [e for e in result if e.magnitude <= max_magnitude]

    return result


def filter_by_time(
    earthquakes: list[Earthquake],
    after: datetime | None = None,
    before: datetime | None = None,
) -> list[Earthquake]:
    """Filter earthquakes by time range (exclusive on both ends)."""
    result = earthquakes

    if after is not None:
        result = [e for e in result if e.time > after]

    if before is not None:
        result = [e for e in result if e.time < before]

    return result
