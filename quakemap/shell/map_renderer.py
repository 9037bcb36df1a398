"""Interactive Map Renderer - Imperative Shell.

This module builds Leaflet web maps with folium and writes them as
standalone HTML documents. Marker content (popups, labels, icon choice)
comes from the core module.
"""

import html
import logging
from pathlib import Path

import folium
from folium.plugins import MarkerCluster

from quakemap.core.categories import IconSet, IconSpec, select_icon
from quakemap.core.config import MARKER_STYLES, Config
from quakemap.core.earthquake import Earthquake
from quakemap.core.formatter import format_label, format_map_title, format_popup_html
from quakemap.core.geo import map_center


logger = logging.getLogger(__name__)


POPUP_MAX_WIDTH = 300


def _custom_icon(spec: IconSpec) -> folium.CustomIcon:
    return folium.CustomIcon(
        icon_image=spec.icon_url,
        icon_size=spec.icon_size,
        icon_anchor=spec.icon_anchor,
        popup_anchor=spec.popup_anchor,
    )


class MapRenderer:
    """Renders earthquakes onto a folium map.

    Each marker style re-uses the same marker API with different arguments:

    - markers: default Leaflet markers with popups
    - custom_icon: one image icon for every marker
    - magnitude: red or gray icon depending on magnitude
    - labels: default markers with hover labels
    """

    def __init__(self, config: Config | None = None) -> None:
        """Initialize map renderer.

        Args:
            config: Application configuration (defaults if not provided)
        """
        self.config = config or Config()
        size = (self.config.icon_width, self.config.icon_height)
        anchor = (self.config.icon_width // 2, self.config.icon_height)
        self.icons = IconSet(
            significant=IconSpec(self.config.significant_icon_url, size, anchor),
            other=IconSpec(self.config.other_icon_url, size, anchor),
        )
        self.custom_icon = IconSpec(self.config.custom_icon_url, size, anchor)

    def _icon_for(self, earthquake: Earthquake, style: str) -> folium.CustomIcon | None:
        if style == "custom_icon":
            return _custom_icon(self.custom_icon)
        if style == "magnitude":
            spec = select_icon(earthquake.magnitude, self.icons, self.config.magnitude_threshold)
            return _custom_icon(spec)
        return None

    def _tooltip_for(self, earthquake: Earthquake, style: str) -> folium.Tooltip | None:
        if style != "labels":
            return None
        return folium.Tooltip(
            format_label(earthquake),
            permanent=self.config.permanent_labels,
        )

    def build_marker(self, earthquake: Earthquake, style: str) -> folium.Marker:
        """Build a single marker in the given style."""
        popup = folium.Popup(
            format_popup_html(
                earthquake,
                utc_offset_hours=self.config.utc_offset_hours,
                tz_label=self.config.tz_label,
            ),
            max_width=POPUP_MAX_WIDTH,
        )

        return folium.Marker(
            location=[earthquake.latitude, earthquake.longitude],
            popup=popup,
            tooltip=self._tooltip_for(earthquake, style),
            icon=self._icon_for(earthquake, style),
        )

    def build_map(
        self,
        earthquakes: list[Earthquake],
        style: str | None = None,
        title: str | None = None,
    ) -> folium.Map:
        """Build a map with one marker per earthquake.

        Args:
            earthquakes: Earthquakes to plot (may be empty)
            style: Marker style, defaults to config.marker_style
            title: Heading shown above the map (optional)

        Returns:
            folium.Map ready to save

        Raises:
            ValueError: If the style is unknown
        """
        style = style or self.config.marker_style
        if style not in MARKER_STYLES:
            raise ValueError(f"Unknown marker style: {style}")

        if earthquakes:
            center = map_center(earthquakes)
        else:
            logger.warning("No earthquakes to plot, rendering an empty map")
            center = self.config.center

        tile_kwargs = {}
        if self.config.tile_attribution:
            tile_kwargs["attr"] = self.config.tile_attribution

        fmap = folium.Map(
            location=list(center),
            zoom_start=self.config.zoom,
            tiles=self.config.tiles,
            **tile_kwargs,
        )

        if title:
            fmap.get_root().html.add_child(
                folium.Element(f'<h3 style="text-align:center;margin:4px">{html.escape(title)}</h3>')
            )

        parent = fmap
        if self.config.cluster:
            parent = MarkerCluster(name="Earthquakes").add_to(fmap)

        for earthquake in earthquakes:
            self.build_marker(earthquake, style).add_to(parent)

        logger.info("Built %s map with %d markers", style, len(earthquakes))

        return fmap

    def default_title(self, earthquakes: list[Earthquake]) -> str:
        source = "USGS event query" if self.config.source == "fdsn" else self.config.feed
        return format_map_title(len(earthquakes), self.config.place_filter, source)

    def save(self, fmap: folium.Map, path: str | Path) -> Path:
        """Write the map as a standalone HTML document.

        This method performs file I/O.

        Returns:
            Path of the written file
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        fmap.save(str(path))
        logger.info("Wrote map to %s", path)

        return path
