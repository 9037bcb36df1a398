"""Tests for the interactive map renderer.

Maps are built in memory and inspected through their folium children
or their rendered HTML; nothing is fetched from the network.
"""

from datetime import datetime, timezone

import folium
import pytest
from folium.plugins import MarkerCluster

from quakemap.core.categories import GRAY_ICON_URL, RED_ICON_URL
from quakemap.core.config import Config, DEFAULT_CUSTOM_ICON_URL
from quakemap.core.earthquake import Earthquake
from quakemap.shell.map_renderer import MapRenderer


def children_of_type(element, cls):
    return [c for c in element._children.values() if isinstance(c, cls)]


def render(fmap: folium.Map) -> str:
    return fmap.get_root().render()


@pytest.fixture
def earthquakes():
    """Two significant and one minor Indonesian earthquake."""
    def quake(id, magnitude, place, lat, lon):
        return Earthquake(
            id=id,
            magnitude=magnitude,
            place=place,
            time=datetime(2024, 1, 1, 1, 2, 3, tzinfo=timezone.utc),
            latitude=lat,
            longitude=lon,
            depth_km=10.0,
            url=f"https://earthquake.usgs.gov/earthquakes/eventpage/{id}",
            mag_type="mb",
        )

    return [
        quake("us1", 5.6, "Banda Sea, Indonesia", -6.0, 128.0),
        quake("us2", 4.5, "Sumbawa region, Indonesia", -8.5, 118.0),
        quake("us3", 3.2, "Kepulauan Talaud, Indonesia", 4.0, 126.5),
    ]


class TestBuildMap:
    """Tests for MapRenderer.build_map()."""

    @pytest.mark.parametrize("style", ["markers", "custom_icon", "magnitude", "labels"])
    def test_one_marker_per_earthquake(self, earthquakes, style):
        fmap = MapRenderer().build_map(earthquakes, style=style)

        markers = children_of_type(fmap, folium.Marker)
        assert len(markers) == 3
        assert [list(m.location) for m in markers] == [
            [-6.0, 128.0],
            [-8.5, 118.0],
            [4.0, 126.5],
        ]

    @pytest.mark.parametrize("style", ["markers", "custom_icon", "magnitude", "labels"])
    def test_every_marker_has_a_popup(self, earthquakes, style):
        fmap = MapRenderer().build_map(earthquakes, style=style)

        for marker in children_of_type(fmap, folium.Marker):
            assert len(children_of_type(marker, folium.Popup)) == 1

    def test_popup_content_is_rendered(self, earthquakes):
        html = render(MapRenderer().build_map(earthquakes, style="markers"))

        assert "<b>Banda Sea, Indonesia</b>" in html
        assert "Magnitude: 5.6 mb" in html

    def test_markers_style_uses_default_icons(self, earthquakes):
        fmap = MapRenderer().build_map(earthquakes, style="markers")

        for marker in children_of_type(fmap, folium.Marker):
            assert children_of_type(marker, folium.CustomIcon) == []
            assert children_of_type(marker, folium.Tooltip) == []

    def test_custom_icon_style_uses_one_image(self, earthquakes):
        fmap = MapRenderer().build_map(earthquakes, style="custom_icon")

        for marker in children_of_type(fmap, folium.Marker):
            assert len(children_of_type(marker, folium.CustomIcon)) == 1
        assert render(fmap).count(DEFAULT_CUSTOM_ICON_URL) == 3

    def test_magnitude_style_picks_red_and_gray(self, earthquakes):
        html = render(MapRenderer().build_map(earthquakes, style="magnitude"))

        assert html.count(RED_ICON_URL) == 2
        assert html.count(GRAY_ICON_URL) == 1

    def test_magnitude_style_honors_threshold(self, earthquakes):
        renderer = MapRenderer(Config(magnitude_threshold=6.0))
        html = render(renderer.build_map(earthquakes, style="magnitude"))

        assert RED_ICON_URL not in html
        assert html.count(GRAY_ICON_URL) == 3

    def test_labels_style_adds_hover_labels(self, earthquakes):
        fmap = MapRenderer().build_map(earthquakes, style="labels")

        texts = []
        for marker in children_of_type(fmap, folium.Marker):
            tooltips = children_of_type(marker, folium.Tooltip)
            assert len(tooltips) == 1
            texts.append(tooltips[0].text)

        assert texts[0] == "M5.6 - Banda Sea, Indonesia"

    def test_permanent_labels(self, earthquakes):
        renderer = MapRenderer(Config(permanent_labels=True))
        fmap = renderer.build_map(earthquakes, style="labels")

        marker = children_of_type(fmap, folium.Marker)[0]
        tooltip = children_of_type(marker, folium.Tooltip)[0]
        assert tooltip.options.get("permanent") is True

    def test_default_style_comes_from_config(self, earthquakes):
        renderer = MapRenderer(Config(marker_style="labels"))
        fmap = renderer.build_map(earthquakes)

        marker = children_of_type(fmap, folium.Marker)[0]
        assert len(children_of_type(marker, folium.Tooltip)) == 1

    def test_unknown_style_raises(self, earthquakes):
        with pytest.raises(ValueError, match="Unknown marker style"):
            MapRenderer().build_map(earthquakes, style="pins")

    def test_cluster_groups_markers(self, earthquakes):
        fmap = MapRenderer(Config(cluster=True)).build_map(earthquakes, style="magnitude")

        clusters = children_of_type(fmap, MarkerCluster)
        assert len(clusters) == 1
        assert children_of_type(fmap, folium.Marker) == []
        assert len(children_of_type(clusters[0], folium.Marker)) == 3

    def test_centers_on_earthquakes(self, earthquakes):
        fmap = MapRenderer().build_map(earthquakes)
        assert list(fmap.location) == [-2.25, 123.0]

    def test_empty_list_renders_empty_map_at_default_center(self):
        renderer = MapRenderer(Config(center=(-2.5, 118.0)))
        fmap = renderer.build_map([])

        assert children_of_type(fmap, folium.Marker) == []
        assert list(fmap.location) == [-2.5, 118.0]

    def test_title_is_rendered_escaped(self, earthquakes):
        fmap = MapRenderer().build_map(earthquakes, title="3 earthquakes in <Indonesia>")
        html = render(fmap)

        assert "3 earthquakes in &lt;Indonesia&gt;" in html

    def test_default_title(self, earthquakes):
        renderer = MapRenderer(Config(feed="all_week"))
        assert renderer.default_title(earthquakes) == "3 earthquakes in Indonesia (all_week)"

    def test_default_title_for_event_query(self, earthquakes):
        renderer = MapRenderer(Config(source="fdsn"))
        assert renderer.default_title(earthquakes) == "3 earthquakes in Indonesia (USGS event query)"


class TestSave:
    """Tests for MapRenderer.save()."""

    def test_writes_html_document(self, earthquakes, tmp_path):
        renderer = MapRenderer()
        path = renderer.save(renderer.build_map(earthquakes), tmp_path / "out" / "map.html")

        assert path.exists()
        content = path.read_text()
        assert "<html>" in content.lower() or "<!doctype html>" in content.lower()
        assert "Banda Sea, Indonesia" in content
