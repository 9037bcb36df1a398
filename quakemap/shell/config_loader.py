"""Configuration Loader - Imperative Shell.

This module handles loading configuration from YAML files and
environment variables. All I/O is contained here.

The Config model is defined in quakemap/core/config.py.
"""

import dataclasses
import logging
import os
from pathlib import Path
from typing import Any

import yaml

from quakemap.core.config import Config
from quakemap.core.geo import BoundingBox


logger = logging.getLogger(__name__)


DEFAULT_CONFIG_PATH = "config/config.yaml"


def _parse_center(data: Any) -> tuple[float, float]:
    """Parse a map center from a [lat, lon] list or a mapping."""
    if isinstance(data, dict):
        return (float(data["latitude"]), float(data["longitude"]))
    latitude, longitude = data
    return (float(latitude), float(longitude))


def _parse_bounds(data: dict[str, Any]) -> BoundingBox:
    """Parse a bounding box from config data."""
    return BoundingBox(
        min_latitude=float(data["min_latitude"]),
        max_latitude=float(data["max_latitude"]),
        min_longitude=float(data["min_longitude"]),
        max_longitude=float(data["max_longitude"]),
    )


def _parse_icons(data: dict[str, Any]) -> dict[str, Any]:
    """Parse the ``icons`` section into Config keyword arguments."""
    kwargs: dict[str, Any] = {}

    if "significant" in data:
        kwargs["significant_icon_url"] = data["significant"]
    if "other" in data:
        kwargs["other_icon_url"] = data["other"]
    if "custom" in data:
        kwargs["custom_icon_url"] = data["custom"]
    if "size" in data:
        width, height = data["size"]
        kwargs["icon_width"] = int(width)
        kwargs["icon_height"] = int(height)

    return kwargs


def load_config_from_dict(data: dict[str, Any]) -> Config:
    """Load configuration from a dictionary.

    Unknown keys are logged and ignored.

    Args:
        data: Configuration dictionary

    Returns:
        Parsed Config object
    """
    defaults = Config()
    known = {f.name for f in dataclasses.fields(Config)}
    kwargs: dict[str, Any] = {}

    for key, value in data.items():
        if key == "icons":
            kwargs.update(_parse_icons(value or {}))
        elif key == "center":
            kwargs["center"] = _parse_center(value)
        elif key == "bounds":
            kwargs["bounds"] = _parse_bounds(value) if value is not None else None
        elif key in known:
            kwargs[key] = value
        else:
            logger.warning("Ignoring unknown config key: %s", key)

    if "magnitude_threshold" in kwargs:
        kwargs["magnitude_threshold"] = float(kwargs["magnitude_threshold"])
    if "zoom" in kwargs:
        kwargs["zoom"] = int(kwargs["zoom"])
    if "utc_offset_hours" in kwargs:
        kwargs["utc_offset_hours"] = float(kwargs["utc_offset_hours"])
    if "request_timeout" in kwargs:
        kwargs["request_timeout"] = int(kwargs["request_timeout"])
    if "fdsn_limit" in kwargs:
        kwargs["fdsn_limit"] = int(kwargs["fdsn_limit"])
    for key in ("min_magnitude", "max_magnitude", "lookback_hours"):
        if kwargs.get(key) is not None:
            kwargs[key] = float(kwargs[key])
    if "place_filter" in kwargs and kwargs["place_filter"] is None:
        kwargs["place_filter"] = ""

    return dataclasses.replace(defaults, **kwargs)


def apply_env_overrides(config: Config) -> Config:
    """Apply environment variable overrides.

    Environment variables:
        QUAKEMAP_FEED: Feed name or URL
        QUAKEMAP_PLACE: Place filter substring
        QUAKEMAP_THRESHOLD: Magnitude threshold
        QUAKEMAP_OUTPUT: Output HTML path

    Returns:
        A new Config with overrides applied
    """
    overrides: dict[str, Any] = {}

    if "QUAKEMAP_FEED" in os.environ:
        overrides["feed"] = os.environ["QUAKEMAP_FEED"]

    if "QUAKEMAP_PLACE" in os.environ:
        overrides["place_filter"] = os.environ["QUAKEMAP_PLACE"]

    threshold = os.environ.get("QUAKEMAP_THRESHOLD")
    if threshold:
        try:
            overrides["magnitude_threshold"] = float(threshold)
        except ValueError:
            logger.warning("Invalid QUAKEMAP_THRESHOLD %r, keeping %s", threshold, config.magnitude_threshold)

    if os.environ.get("QUAKEMAP_OUTPUT"):
        overrides["output_path"] = os.environ["QUAKEMAP_OUTPUT"]

    if overrides:
        logger.info("Applying environment overrides: %s", ", ".join(sorted(overrides)))

    return dataclasses.replace(config, **overrides)


def load_config(config_path: str | Path | None = None) -> Config:
    """Load configuration from a YAML file.

    This method performs file I/O.

    Args:
        config_path: Path to YAML config file.
                    If None, uses QUAKEMAP_CONFIG env var or default.

    Returns:
        Parsed Config object

    Raises:
        yaml.YAMLError: If config file is invalid YAML
        ValueError: If the file does not hold a mapping or a value is malformed
    """
    if config_path is None:
        config_path = os.environ.get("QUAKEMAP_CONFIG", DEFAULT_CONFIG_PATH)

    path = Path(config_path)

    logger.info("Loading configuration from %s", path)

    if not path.exists():
        logger.warning("Config file not found: %s, using defaults", path)
        return Config()

    with open(path, "r") as f:
        data = yaml.safe_load(f)

    if data is None:
        logger.warning("Config file is empty, using defaults")
        return Config()

    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping, got {type(data).__name__}")

    config = load_config_from_dict(data)

    logger.info(
        "Loaded config: feed=%s, place=%r, threshold=%.1f",
        config.feed,
        config.place_filter,
        config.magnitude_threshold,
    )

    return config
