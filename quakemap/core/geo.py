"""Geographic helpers - Pure functions.

Bounding boxes and map centering for a set of earthquake locations.
"""

from dataclasses import dataclass

from quakemap.core.earthquake import Earthquake


@dataclass(frozen=True)
class BoundingBox:
    """Geographic bounding box.

    Attributes:
        min_latitude: Southern boundary
        max_latitude: Northern boundary
        min_longitude: Western boundary
        max_longitude: Eastern boundary
    """
    min_latitude: float
    max_latitude: float
    min_longitude: float
    max_longitude: float

    def contains(self, latitude: float, longitude: float) -> bool:
        """Check if a point is within this bounding box."""
        return (
            self.min_latitude <= latitude <= self.max_latitude
            and self.min_longitude <= longitude <= self.max_longitude
        )

    @property
    def center(self) -> tuple[float, float]:
        """Return the (latitude, longitude) midpoint."""
        return (
            (self.min_latitude + self.max_latitude) / 2,
            (self.min_longitude + self.max_longitude) / 2,
        )


# Rough extent of the Indonesian archipelago
INDONESIA_BOUNDS = BoundingBox(
    min_latitude=-11.0,
    max_latitude=6.0,
    min_longitude=95.0,
    max_longitude=141.0,
)

INDONESIA_CENTER = INDONESIA_BOUNDS.center


def compute_bounds(earthquakes: list[Earthquake]) -> BoundingBox | None:
    """Compute the smallest box containing every earthquake.

    Pure function.

    Args:
        earthquakes: Earthquakes to enclose

    Returns:
        BoundingBox, or None if the list is empty
    """
    if not earthquakes:
        return None

    latitudes = [e.latitude for e in earthquakes]
    longitudes = [e.longitude for e in earthquakes]

    return BoundingBox(
        min_latitude=min(latitudes),
        max_latitude=max(latitudes),
        min_longitude=min(longitudes),
        max_longitude=max(longitudes),
    )


def map_center(
    earthquakes: list[Earthquake],
    default: tuple[float, float] = INDONESIA_CENTER,
) -> tuple[float, float]:
    """Center of the earthquakes' bounds, or ``default`` when there are none."""
    bounds = compute_bounds(earthquakes)
    if bounds is None:
        return default
    return bounds.center


def filter_by_bounds(
    earthquakes: list[Earthquake],
    bounds: BoundingBox | None,
) -> list[Earthquake]:
    """Keep earthquakes inside ``bounds``; None keeps everything."""
    if bounds is None:
        return list(earthquakes)
    return [e for e in earthquakes if bounds.contains(e.latitude, e.longitude)]
