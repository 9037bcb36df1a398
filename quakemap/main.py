"""Command-line entry point.

Fetches a USGS feed, keeps the events in a region and writes an
interactive map.

Usage:
    # Indonesia, red/gray icons by magnitude
    quakemap --output quakes.html

    # Every marker style, one file each, with clustering
    quakemap --style markers custom_icon magnitude labels --cluster

    # Preview matches without writing anything
    quakemap --feed 4.5_week --place Japan --dry-run

    # Event query over a box, last week, M3+
    quakemap --source fdsn --bbox -11 6 95 141 --min-magnitude 3 --since-hours 168

Environment:
    QUAKEMAP_CONFIG: Path to config file (default: config/config.yaml)
    LOG_LEVEL: Logging level (default: INFO)
"""

import argparse
import dataclasses
import logging
import os
import sys

import yaml

from quakemap.core.categories import categorize, count_by_category
from quakemap.core.config import MARKER_STYLES, SOURCES, Config, validate_config
from quakemap.core.formatter import format_event_time
from quakemap.core.geo import BoundingBox
from quakemap.pipeline import Pipeline
from quakemap.shell.config_loader import apply_env_overrides, load_config


logger = logging.getLogger(__name__)


def _setup_logging() -> None:
    log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="quakemap",
        description="Map recent USGS earthquakes for a region as an interactive web page",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to YAML config file",
    )
    parser.add_argument(
        "--source",
        choices=SOURCES,
        default=None,
        help="feed: USGS summary feed; fdsn: event query over --bbox (default: feed)",
    )
    parser.add_argument(
        "--feed",
        type=str,
        default=None,
        help="USGS summary feed (e.g. all_month, 4.5_week) or full GeoJSON URL",
    )
    parser.add_argument(
        "--bbox",
        nargs=4,
        type=float,
        default=None,
        metavar=("MIN_LAT", "MAX_LAT", "MIN_LON", "MAX_LON"),
        help="Keep events inside this box (also the fdsn query area)",
    )
    parser.add_argument(
        "--min-magnitude",
        type=float,
        default=None,
        help="Keep events at or above this magnitude",
    )
    parser.add_argument(
        "--max-magnitude",
        type=float,
        default=None,
        help="Keep events at or below this magnitude",
    )
    parser.add_argument(
        "--since-hours",
        type=float,
        default=None,
        help="Keep events from the last N hours",
    )
    parser.add_argument(
        "--place",
        type=str,
        default=None,
        help="Keep events whose place contains this text (default: Indonesia)",
    )
    parser.add_argument(
        "--ignore-case",
        action="store_true",
        help="Match --place case-insensitively",
    )
    parser.add_argument(
        "--threshold",
        type=float,
        default=None,
        help="Magnitude at or above which events get the red icon (default: 4.5)",
    )
    parser.add_argument(
        "--style",
        nargs="+",
        choices=MARKER_STYLES,
        default=None,
        help="Marker style(s); several styles write one file each",
    )
    parser.add_argument(
        "--cluster",
        action="store_true",
        help="Cluster nearby markers",
    )
    parser.add_argument(
        "--permanent-labels",
        action="store_true",
        help="Always show labels in the labels style",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Output HTML path (default: quakes.html)",
    )
    parser.add_argument(
        "--snapshot",
        type=str,
        default=None,
        help="Also write a static PNG preview to this path",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="List matching events without rendering",
    )
    return parser


def config_from_args(args: argparse.Namespace) -> Config:
    """Load the config file, then apply environment and CLI overrides."""
    config = apply_env_overrides(load_config(args.config))

    overrides = {}
    if args.source is not None:
        overrides["source"] = args.source
    if args.bbox is not None:
        overrides["bounds"] = BoundingBox(*args.bbox)
    if args.min_magnitude is not None:
        overrides["min_magnitude"] = args.min_magnitude
    if args.max_magnitude is not None:
        overrides["max_magnitude"] = args.max_magnitude
    if args.since_hours is not None:
        overrides["lookback_hours"] = args.since_hours
    if args.feed is not None:
        overrides["feed"] = args.feed
    if args.place is not None:
        overrides["place_filter"] = args.place
    if args.ignore_case:
        overrides["ignore_case"] = True
    if args.threshold is not None:
        overrides["magnitude_threshold"] = args.threshold
    if args.cluster:
        overrides["cluster"] = True
    if args.permanent_labels:
        overrides["permanent_labels"] = True
    if args.output is not None:
        overrides["output_path"] = args.output
    if args.snapshot is not None:
        overrides["snapshot_path"] = args.snapshot

    return dataclasses.replace(config, **overrides)


def print_events(pipeline: Pipeline) -> int:
    """Dry run: print matching events and category counts."""
    config = pipeline.config
    try:
        earthquakes = pipeline.load()
    except Exception as e:
        logger.error("Failed to fetch earthquakes: %s", e)
        return 1

    for earthquake in earthquakes:
        category = categorize(earthquake.magnitude, config.magnitude_threshold)
        when = format_event_time(earthquake.time, config.utc_offset_hours, config.tz_label)
        print(f"[{category:>4}] {when}  M{earthquake.magnitude:.1f} - {earthquake.place}")

    counts = count_by_category(earthquakes, config.magnitude_threshold)
    print(f"\n{len(earthquakes)} events: " + ", ".join(f"{n} {c}" for c, n in counts.items()))
    return 0


def main(argv: list[str] | None = None) -> int:
    _setup_logging()
    args = build_parser().parse_args(argv)

    try:
        config = config_from_args(args)
    except (yaml.YAMLError, AttributeError, KeyError, TypeError, ValueError) as e:
        logger.error("Invalid configuration: %s", e)
        return 2

    validation = validate_config(config)
    for warning in validation.warnings:
        logger.warning("%s: %s", warning.field, warning.message)
    if not validation.valid:
        for error in validation.critical_errors:
            logger.error("%s: %s", error.field, error.message)
        return 2

    pipeline = Pipeline(config)

    if args.dry_run:
        return print_events(pipeline)

    result = pipeline.run(styles=args.style)

    for path in result.outputs:
        print(path)

    for error in result.errors:
        logger.error("Error: %s", error)

    return 0 if result.success else 1


if __name__ == "__main__":
    sys.exit(main())
