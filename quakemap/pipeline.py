"""Pipeline - Wires Functional Core and Imperative Shell.

This module runs the fetch -> parse -> filter -> render flow. It's the
"glue" between the pure core functions and the I/O-performing shell.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable

from quakemap.core.categories import count_by_category
from quakemap.core.config import DEFAULT_FDSN_LOOKBACK_HOURS, Config
from quakemap.core.earthquake import (
    Earthquake,
    filter_by_magnitude,
    filter_by_place,
    filter_by_time,
    parse_earthquakes,
)
from quakemap.core.geo import INDONESIA_BOUNDS, filter_by_bounds
from quakemap.shell.map_renderer import MapRenderer
from quakemap.shell.static_map_client import StaticMapClient
from quakemap.shell.usgs_client import USGSClient, USGSQueryParams


logger = logging.getLogger(__name__)


def output_path_for(base: str | Path, style: str, multiple: bool) -> Path:
    """Output path for a style.

    With several styles, the style name is appended to the file stem
    ("quakes.html" -> "quakes_labels.html").
    """
    path = Path(base)
    if not multiple:
        return path
    suffix = path.suffix or ".html"
    return path.with_name(f"{path.stem}_{style}{suffix}")


@dataclass
class PipelineResult:
    """Result of one pipeline run.

    Attributes:
        earthquakes_fetched: Valid earthquakes parsed from the feed
        earthquakes_matched: Earthquakes left after the place filter
        category_counts: Matched earthquakes per magnitude category
        outputs: Files written (HTML maps and snapshot)
        errors: Any errors that occurred
    """
    earthquakes_fetched: int = 0
    earthquakes_matched: int = 0
    category_counts: dict[str, int] = field(default_factory=dict)
    outputs: list[Path] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        """Returns True if no errors occurred."""
        return len(self.errors) == 0

    @property
    def summary(self) -> str:
        """Human-readable summary of the run."""
        counts = ", ".join(f"{n} {c}" for c, n in self.category_counts.items())
        text = (
            f"Fetched {self.earthquakes_fetched} earthquakes, "
            f"{self.earthquakes_matched} matched"
        )
        if counts:
            text += f" ({counts})"
        return f"{text}, {len(self.outputs)} files written"


class Pipeline:
    """Fetches a feed, filters it and renders maps.

    This class wires together:
    - USGS client (fetches GeoJSON)
    - Core functions (parsing, filtering, categorization)
    - Map renderer (interactive HTML)
    - Static map client (PNG preview)
    """

    def __init__(
        self,
        config: Config,
        usgs_client: USGSClient | None = None,
        renderer: MapRenderer | None = None,
        static_map_client: StaticMapClient | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize pipeline with configuration.

        Args:
            config: Application configuration
            usgs_client: USGS client (created if not provided)
            renderer: Map renderer (created if not provided)
            static_map_client: Static map client (created if not provided)
            clock: Returns the current UTC time (for the lookback window)
        """
        self.config = config
        self.usgs_client = usgs_client or USGSClient(timeout=config.request_timeout)
        self.renderer = renderer or MapRenderer(config)
        self.static_map_client = static_map_client or StaticMapClient()
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    def query_params(self) -> USGSQueryParams:
        """Event-query parameters for the "fdsn" source."""
        now = self.clock()
        hours = self.config.lookback_hours or DEFAULT_FDSN_LOOKBACK_HOURS
        return USGSQueryParams(
            bounds=self.config.bounds or INDONESIA_BOUNDS,
            min_magnitude=self.config.min_magnitude,
            start_time=now - timedelta(hours=hours),
            end_time=now,
            limit=self.config.fdsn_limit,
        )

    def fetch(self) -> list[Earthquake]:
        """Fetch and parse the configured source.

        The "feed" source downloads a summary feed; the "fdsn" source runs
        an event query restricted to the configured (or Indonesian) bounds.

        Raises:
            requests.RequestException: If the request fails
            ValueError: If the feed name is unknown or the body is not JSON
        """
        if self.config.source == "fdsn":
            geojson = self.usgs_client.fetch_earthquakes(self.query_params())
        else:
            geojson = self.usgs_client.fetch_feed(self.config.feed)
        return parse_earthquakes(geojson)

    def select(self, earthquakes: list[Earthquake]) -> list[Earthquake]:
        """Apply the place, bounds, magnitude and lookback filters."""
        matched = filter_by_place(
            earthquakes,
            self.config.place_filter,
            ignore_case=self.config.ignore_case,
        )
        matched = filter_by_bounds(matched, self.config.bounds)
        matched = filter_by_magnitude(
            matched,
            min_magnitude=self.config.min_magnitude,
            max_magnitude=self.config.max_magnitude,
        )
        if self.config.lookback_hours is not None:
            after = self.clock() - timedelta(hours=self.config.lookback_hours)
            matched = filter_by_time(matched, after=after)

        logger.info(
            "%d of %d earthquakes match place filter %r",
            len(matched),
            len(earthquakes),
            self.config.place_filter,
        )
        return matched

    def load(self) -> list[Earthquake]:
        """Fetch, parse and filter in one step."""
        return self.select(self.fetch())

    def run(self, styles: list[str] | None = None) -> PipelineResult:
        """Run the whole pipeline.

        This is the main entry point that:
        1. Fetches the feed from USGS
        2. Filters by place
        3. Renders one HTML map per requested style
        4. Optionally renders a PNG snapshot

        Args:
            styles: Marker styles to render, defaults to config.marker_style

        Returns:
            PipelineResult with details of what happened
        """
        styles = styles or [self.config.marker_style]
        result = PipelineResult()

        # Step 1: Fetch
        try:
            earthquakes = self.fetch()
        except Exception as e:
            error_msg = f"Failed to fetch earthquakes: {e}"
            logger.error(error_msg)
            result.errors.append(error_msg)
            return result

        result.earthquakes_fetched = len(earthquakes)

        # Step 2: Filter and categorize (pure core functions)
        matched = self.select(earthquakes)
        result.earthquakes_matched = len(matched)
        result.category_counts = count_by_category(matched, self.config.magnitude_threshold)

        if not matched:
            logger.warning("No earthquakes matched %r", self.config.place_filter)

        # Step 3: Render HTML maps
        title = self.renderer.default_title(matched)
        multiple = len(styles) > 1

        for style in styles:
            path = output_path_for(self.config.output_path, style, multiple)
            try:
                fmap = self.renderer.build_map(matched, style=style, title=title)
                result.outputs.append(self.renderer.save(fmap, path))
            except (ValueError, OSError) as e:
                error_msg = f"Failed to render {style} map: {e}"
                logger.error(error_msg)
                result.errors.append(error_msg)

        # Step 4: Static snapshot
        if self.config.snapshot_path and not matched:
            logger.warning("No earthquakes matched, skipping snapshot")
        elif self.config.snapshot_path:
            snapshot = self.static_map_client.generate_snapshot(
                matched,
                threshold=self.config.magnitude_threshold,
            )
            if snapshot.success and snapshot.image_bytes:
                path = Path(self.config.snapshot_path)
                try:
                    path.parent.mkdir(parents=True, exist_ok=True)
                    path.write_bytes(snapshot.image_bytes)
                    result.outputs.append(path)
                    logger.info("Wrote snapshot to %s", path)
                except OSError as e:
                    result.errors.append(f"Failed to write snapshot: {e}")
            else:
                result.errors.append(f"Failed to generate snapshot: {snapshot.error}")

        logger.info("Completed: %s", result.summary)

        return result
