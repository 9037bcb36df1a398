"""Configuration models - Pure data structures.

These are domain models for configuration. The actual loading
(I/O) is handled by the shell layer.
"""

from dataclasses import dataclass, field

from quakemap.core.categories import (
    DEFAULT_MAGNITUDE_THRESHOLD,
    GRAY_ICON_URL,
    RED_ICON_URL,
)
from quakemap.core.geo import INDONESIA_CENTER, BoundingBox


MARKER_STYLES = ("markers", "custom_icon", "magnitude", "labels")

# "feed": summary feed; "fdsn": event query over a bounding box
SOURCES = ("feed", "fdsn")

# Time window of an FDSN query when lookback_hours is not set (30 days)
DEFAULT_FDSN_LOOKBACK_HOURS = 720.0

# USGS summary feeds are named "<level>_<period>"
FEED_LEVELS = ("significant", "4.5", "2.5", "1.0", "all")
FEED_PERIODS = ("hour", "day", "week", "month")

DEFAULT_FEED = "all_month"
DEFAULT_CUSTOM_ICON_URL = (
    "https://raw.githubusercontent.com/pointhi/leaflet-color-markers/"
    "master/img/marker-icon-orange.png"
)


def is_feed_url(feed: str) -> bool:
    """Return True if ``feed`` is a full URL rather than a feed name."""
    return feed.startswith(("http://", "https://"))


def is_valid_feed(feed: str) -> bool:
    """Check a feed name ("all_month") or full URL.

    Pure function.
    """
    if is_feed_url(feed):
        return True

    level, sep, period = feed.rpartition("_")
    return bool(sep) and level in FEED_LEVELS and period in FEED_PERIODS


@dataclass
class Config:
    """Application configuration.

    This is a pure data structure - no I/O or side effects.

    Attributes:
        source: Where events come from, "feed" or "fdsn"
        feed: USGS summary feed name or full GeoJSON URL
        place_filter: Substring the place field must contain
        ignore_case: Match the place filter case-insensitively
        bounds: Keep only events inside this box (also the FDSN query area)
        min_magnitude: Keep only events at or above this magnitude
        max_magnitude: Keep only events at or below this magnitude
        lookback_hours: Keep only events from the last N hours
        fdsn_limit: Maximum number of events returned by an FDSN query
        magnitude_threshold: Magnitude at or above which events are significant
        significant_icon_url: Icon for significant events ("magnitude" style)
        other_icon_url: Icon for other events ("magnitude" style)
        custom_icon_url: Icon used by the "custom_icon" style
        icon_width: Icon width in pixels
        icon_height: Icon height in pixels
        center: Map center used when no events match
        zoom: Initial zoom level (1-18)
        tiles: folium tile layer name or URL template
        tile_attribution: Attribution, required for custom tile URLs
        marker_style: Default marker style
        cluster: Group nearby markers with MarkerCluster
        permanent_labels: Show labels without hovering ("labels" style)
        utc_offset_hours: Offset used when displaying event times
        tz_label: Label printed after event times
        output_path: Path of the HTML document
        snapshot_path: Path of the PNG preview (None to skip)
        request_timeout: HTTP timeout in seconds
    """
    source: str = "feed"
    feed: str = DEFAULT_FEED
    place_filter: str = "Indonesia"
    ignore_case: bool = False
    bounds: BoundingBox | None = None
    min_magnitude: float | None = None
    max_magnitude: float | None = None
    lookback_hours: float | None = None
    fdsn_limit: int = 1000
    magnitude_threshold: float = DEFAULT_MAGNITUDE_THRESHOLD
    significant_icon_url: str = RED_ICON_URL
    other_icon_url: str = GRAY_ICON_URL
    custom_icon_url: str = DEFAULT_CUSTOM_ICON_URL
    icon_width: int = 25
    icon_height: int = 41
    center: tuple[float, float] = INDONESIA_CENTER
    zoom: int = 5
    tiles: str = "OpenStreetMap"
    tile_attribution: str | None = None
    marker_style: str = "magnitude"
    cluster: bool = False
    permanent_labels: bool = False
    utc_offset_hours: float = 0.0
    tz_label: str = "UTC"
    output_path: str = "quakes.html"
    snapshot_path: str | None = None
    request_timeout: int = 30


@dataclass
class ValidationError:
    """A configuration validation error.

    Attributes:
        field: The field that has an error
        message: Human-readable error description
        severity: 'error' or 'warning'
    """
    field: str
    message: str
    severity: str = "error"


@dataclass
class ValidationResult:
    """Result of validating configuration.

    Attributes:
        valid: True if no errors (warnings are OK)
        errors: List of validation errors/warnings
    """
    valid: bool
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def warnings(self) -> list[ValidationError]:
        """Get only warnings."""
        return [e for e in self.errors if e.severity == "warning"]

    @property
    def critical_errors(self) -> list[ValidationError]:
        """Get only critical errors."""
        return [e for e in self.errors if e.severity == "error"]


def validate_coordinates(lat: float, lon: float, field_name: str) -> list[ValidationError]:
    """Validate latitude/longitude coordinates.

    Pure function.

    Args:
        lat: Latitude value
        lon: Longitude value
        field_name: Name of the field for error messages

    Returns:
        List of validation errors (empty if valid)
    """
    errors = []

    if not -90 <= lat <= 90:
        errors.append(ValidationError(
            field=field_name,
            message=f"Latitude {lat} out of range [-90, 90]",
        ))

    if not -180 <= lon <= 180:
        errors.append(ValidationError(
            field=field_name,
            message=f"Longitude {lon} out of range [-180, 180]",
        ))

    return errors


def validate_bounds(bounds: BoundingBox, field_name: str) -> list[ValidationError]:
    """Validate a bounding box.

    Pure function.

    Args:
        bounds: Bounding box to validate
        field_name: Name of the field for error messages

    Returns:
        List of validation errors (empty if valid)
    """
    errors = []

    errors.extend(validate_coordinates(
        bounds.min_latitude, bounds.min_longitude,
        f"{field_name}.min",
    ))
    errors.extend(validate_coordinates(
        bounds.max_latitude, bounds.max_longitude,
        f"{field_name}.max",
    ))

    if bounds.min_latitude > bounds.max_latitude:
        errors.append(ValidationError(
            field=field_name,
            message=f"min_latitude ({bounds.min_latitude}) > max_latitude ({bounds.max_latitude})",
        ))

    if bounds.min_longitude > bounds.max_longitude:
        errors.append(ValidationError(
            field=field_name,
            message=f"min_longitude ({bounds.min_longitude}) > max_longitude ({bounds.max_longitude})",
        ))

    return errors


def validate_config(config: Config) -> ValidationResult:
    """Validate configuration for errors and warnings.

    Pure function.

    Args:
        config: Configuration to validate

    Returns:
        ValidationResult with any errors/warnings found
    """
    errors: list[ValidationError] = []

    if config.source not in SOURCES:
        errors.append(ValidationError(
            field="source",
            message=f"Unknown source '{config.source}'. Choose from {', '.join(SOURCES)}",
        ))

    if config.source == "feed" and not is_valid_feed(config.feed):
        errors.append(ValidationError(
            field="feed",
            message=(
                f"Unknown feed '{config.feed}'. Use <level>_<period> with level in "
                f"{', '.join(FEED_LEVELS)} and period in {', '.join(FEED_PERIODS)}, "
                "or a full URL"
            ),
        ))

    if config.bounds is not None:
        errors.extend(validate_bounds(config.bounds, "bounds"))

    if (
        config.min_magnitude is not None
        and config.max_magnitude is not None
        and config.min_magnitude > config.max_magnitude
    ):
        errors.append(ValidationError(
            field="magnitude",
            message=f"min_magnitude ({config.min_magnitude}) > max_magnitude ({config.max_magnitude})",
        ))

    if config.lookback_hours is not None and config.lookback_hours <= 0:
        errors.append(ValidationError(
            field="lookback_hours",
            message=f"Lookback must be positive, got {config.lookback_hours}",
        ))

    if config.fdsn_limit <= 0:
        errors.append(ValidationError(
            field="fdsn_limit",
            message=f"FDSN limit must be positive, got {config.fdsn_limit}",
        ))

    if config.marker_style not in MARKER_STYLES:
        errors.append(ValidationError(
            field="marker_style",
            message=f"Unknown marker style '{config.marker_style}'. Choose from {', '.join(MARKER_STYLES)}",
        ))

    if not 1 <= config.zoom <= 18:
        errors.append(ValidationError(
            field="zoom",
            message=f"Zoom {config.zoom} out of range [1, 18]",
        ))

    errors.extend(validate_coordinates(config.center[0], config.center[1], "center"))

    if config.icon_width <= 0 or config.icon_height <= 0:
        errors.append(ValidationError(
            field="icon_size",
            message=f"Icon size must be positive, got {config.icon_width}x{config.icon_height}",
        ))

    if config.request_timeout <= 0:
        errors.append(ValidationError(
            field="request_timeout",
            message=f"Request timeout must be positive, got {config.request_timeout}",
        ))

    if not config.output_path:
        errors.append(ValidationError(
            field="output_path",
            message="Output path is empty",
        ))

    if not config.place_filter:
        errors.append(ValidationError(
            field="place_filter",
            message="Place filter is empty, every event in the feed will be mapped",
            severity="warning",
        ))

    # folium refuses custom tile URLs without an attribution
    if config.tiles.startswith(("http://", "https://")) and not config.tile_attribution:
        errors.append(ValidationError(
            field="tile_attribution",
            message="Custom tile URLs need an attribution",
        ))

    has_critical = any(e.severity == "error" for e in errors)

    return ValidationResult(
        valid=not has_critical,
        errors=errors,
    )
