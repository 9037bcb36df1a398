"""Functional Core - Pure functions with no side effects.

This module contains all business logic as pure functions:
- Earthquake data parsing and filtering
- Magnitude categorization and icon selection
- Popup and label formatting
- Bounds and map centering

All functions here are deterministic and have no I/O.
"""

from quakemap.core.earthquake import Earthquake, parse_earthquakes, filter_by_place
from quakemap.core.categories import IconSet, IconSpec, categorize, select_icon
from quakemap.core.formatter import format_label, format_popup_html
from quakemap.core.geo import BoundingBox, compute_bounds, filter_by_bounds, map_center

__all__ = [
    # Earthquake
    "Earthquake",
    "parse_earthquakes",
    "filter_by_place",
    # Categories
    "IconSet",
    "IconSpec",
    "categorize",
    "select_icon",
    # Formatter
    "format_label",
    "format_popup_html",
    # Geo
    "BoundingBox",
    "compute_bounds",
    "filter_by_bounds",
    "map_center",
]
