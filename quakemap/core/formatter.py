"""Popup and label formatting - Pure functions.

This module builds the text shown on the map: popup HTML, hover labels
and the page title. All functions are pure with no side effects.
"""

import html
from datetime import datetime, timedelta, timezone

from quakemap.core.earthquake import Earthquake


def format_event_time(
    time: datetime,
    utc_offset_hours: float = 0.0,
    tz_label: str = "UTC",
) -> str:
    """Format an event timestamp in the display timezone.

    Pure function.

    Args:
        time: Timezone-aware event time
        utc_offset_hours: Display offset from UTC (e.g. 7 for WIB)
        tz_label: Label appended to the formatted time

    Returns:
        Formatted time string, e.g. "2024-01-05 21:03:11 WIB"
    """
    display_tz = timezone(timedelta(hours=utc_offset_hours))
    local_time = time.astimezone(display_tz)
    return f"{local_time.strftime('%Y-%m-%d %H:%M:%S')} {tz_label}"


def format_magnitude(earthquake: Earthquake) -> str:
    """Format magnitude with its type, e.g. "5.1 mb"."""
    if earthquake.mag_type:
        return f"{earthquake.magnitude:.1f} {earthquake.mag_type}"
    return f"{earthquake.magnitude:.1f}"


def format_popup_html(
    earthquake: Earthquake,
    utc_offset_hours: float = 0.0,
    tz_label: str = "UTC",
) -> str:
    """Format the popup body for an earthquake marker.

    Pure function. The place text is HTML-escaped.

    Args:
        earthquake: Earthquake to describe
        utc_offset_hours: Display offset from UTC
        tz_label: Timezone label for the time line

    Returns:
        HTML fragment
    """
    lines = [
        f"<b>{html.escape(earthquake.place)}</b>",
        f"Magnitude: {format_magnitude(earthquake)}",
        f"Time: {format_event_time(earthquake.time, utc_offset_hours, tz_label)}",
        f"Depth: {earthquake.depth_km:.1f} km",
    ]

    if earthquake.tsunami:
        lines.append("Tsunami flag set")

    if earthquake.url:
        url = html.escape(earthquake.url, quote=True)
        lines.append(f'<a href="{url}" target="_blank">USGS event page</a>')

    return "<br>".join(lines)


def format_label(earthquake: Earthquake) -> str:
    """Format the hover label, e.g. "M5.1 - 95 km SW of Abepura, Indonesia".

    The place text is HTML-escaped.
    """
    return f"M{earthquake.magnitude:.1f} - {html.escape(earthquake.place)}"


def format_map_title(count: int, place_filter: str, feed_name: str) -> str:
    """Format the heading shown above the map."""
    noun = "earthquake" if count == 1 else "earthquakes"
    if place_filter:
        return f"{count} {noun} in {place_filter} ({feed_name})"
    return f"{count} {noun} ({feed_name})"
