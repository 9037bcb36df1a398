"""Static Map Client - Imperative Shell.

This module renders a PNG preview of the mapped earthquakes using
OpenStreetMap tiles. Colors come from the core categorization.
"""

import io
import logging
from dataclasses import dataclass

from staticmap import StaticMap, CircleMarker

from quakemap.core.categories import (
    CATEGORY_COLORS,
    DEFAULT_MAGNITUDE_THRESHOLD,
    categorize,
)
from quakemap.core.earthquake import Earthquake


logger = logging.getLogger(__name__)


@dataclass
class MapImageResult:
    """Result of map image generation.

    Attributes:
        success: Whether the image was generated successfully
        image_bytes: PNG image data if successful
        error: Error message if failed
    """
    success: bool
    image_bytes: bytes | None = None
    error: str | None = None


def get_marker_radius(magnitude: float) -> int:
    """Marker radius in pixels, growing with magnitude (4-16)."""
    return max(4, min(int(magnitude * 2), 16))


class StaticMapClient:
    """Client for generating static map images.

    This is part of the imperative shell - it handles I/O (fetching map tiles
    and rendering images).
    """

    def __init__(
        self,
        tile_url: str | None = None,
        width: int = 800,
        height: int = 500,
    ) -> None:
        """Initialize static map client.

        Args:
            tile_url: Custom tile URL template. Defaults to OpenStreetMap.
            width: Image width in pixels
            height: Image height in pixels
        """
        self.tile_url = tile_url or "https://tile.openstreetmap.org/{z}/{x}/{y}.png"
        self.width = width
        self.height = height

    def generate_snapshot(
        self,
        earthquakes: list[Earthquake],
        threshold: float = DEFAULT_MAGNITUDE_THRESHOLD,
    ) -> MapImageResult:
        """Render every earthquake as a colored circle on one image.

        This method performs I/O (fetches map tiles from tile server).
        The zoom level is picked by staticmap to fit all markers.

        Args:
            earthquakes: Earthquakes to draw
            threshold: Magnitude threshold for the red/gray categories

        Returns:
            MapImageResult with image bytes or error
        """
        if not earthquakes:
            return MapImageResult(success=False, error="No earthquakes to draw")

        logger.info("Generating static map with %d markers", len(earthquakes))

        try:
            static_map = StaticMap(
                self.width,
                self.height,
                url_template=self.tile_url,
            )

            # Smaller events first so significant ones are drawn on top
            for earthquake in sorted(earthquakes, key=lambda e: e.magnitude):
                color = CATEGORY_COLORS[categorize(earthquake.magnitude, threshold)]
                radius = get_marker_radius(earthquake.magnitude)
                # staticmap expects (lon, lat)
                position = (earthquake.longitude, earthquake.latitude)
                static_map.add_marker(CircleMarker(position, "white", radius + 2))
                static_map.add_marker(CircleMarker(position, color, radius))

            image = static_map.render()

            buffer = io.BytesIO()
            image.save(buffer, format="PNG")
            image_bytes = buffer.getvalue()

            logger.info("Generated map image: %d bytes", len(image_bytes))

            return MapImageResult(success=True, image_bytes=image_bytes)

        except Exception as e:
            logger.error("Failed to generate map: %s", str(e))
            return MapImageResult(success=False, error=str(e))
