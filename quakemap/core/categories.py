"""Magnitude categories and icon selection - Pure functions.

Every event falls into one of two categories based on a fixed magnitude
threshold. The category drives both the marker icon on the interactive map
and the circle color on the static preview.
"""

from dataclasses import dataclass, field

from quakemap.core.earthquake import Earthquake


SIGNIFICANT = "red"
OTHER = "gray"

DEFAULT_MAGNITUDE_THRESHOLD = 4.5

# Colored marker images from the leaflet-color-markers project
RED_ICON_URL = (
    "https://raw.githubusercontent.com/pointhi/leaflet-color-markers/"
    "master/img/marker-icon-red.png"
)
GRAY_ICON_URL = (
    "https://raw.githubusercontent.com/pointhi/leaflet-color-markers/"
    "master/img/marker-icon-grey.png"
)

# Hex colors for the static preview
CATEGORY_COLORS = {
    SIGNIFICANT: "#dc2626",
    OTHER: "#6b7280",
}


@dataclass(frozen=True)
class IconSpec:
    """Image marker definition.

    Attributes:
        icon_url: URL (or local path) of the marker image
        icon_size: (width, height) in pixels
        icon_anchor: Pixel of the image placed on the coordinate
        popup_anchor: Popup offset relative to the anchor
    """
    icon_url: str
    icon_size: tuple[int, int] = (25, 41)
    icon_anchor: tuple[int, int] = (12, 41)
    popup_anchor: tuple[int, int] = (1, -34)


@dataclass(frozen=True)
class IconSet:
    """Icons keyed by magnitude category."""
    significant: IconSpec = field(default_factory=lambda: IconSpec(RED_ICON_URL))
    other: IconSpec = field(default_factory=lambda: IconSpec(GRAY_ICON_URL))

    def for_category(self, category: str) -> IconSpec:
        if category == SIGNIFICANT:
            return self.significant
        return self.other


def categorize(
    magnitude: float,
    threshold: float = DEFAULT_MAGNITUDE_THRESHOLD,
) -> str:
    """Map a magnitude to its category.

    Pure function.

    Args:
        magnitude: Earthquake magnitude
        threshold: Magnitudes at or above this are significant

    Returns:
        "red" for significant events, "gray" otherwise
    """
    if magnitude >= threshold:
        return SIGNIFICANT
    return OTHER


def select_icon(
    magnitude: float,
    icons: IconSet,
    threshold: float = DEFAULT_MAGNITUDE_THRESHOLD,
) -> IconSpec:
    """Pick the icon for a magnitude."""
    return icons.for_category(categorize(magnitude, threshold))


def count_by_category(
    earthquakes: list[Earthquake],
    threshold: float = DEFAULT_MAGNITUDE_THRESHOLD,
) -> dict[str, int]:
    """Count events per category.

    Both categories are always present in the result.
    """
    counts = {SIGNIFICANT: 0, OTHER: 0}
    for earthquake in earthquakes:
        counts[categorize(earthquake.magnitude, threshold)] += 1
    return counts
