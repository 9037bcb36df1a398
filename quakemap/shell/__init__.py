"""Imperative Shell - I/O and side effects.

This module contains all code that interacts with external systems:
- USGS feed client (HTTP)
- Interactive map renderer (HTML files)
- Static map client (map tiles, PNG)
- Configuration loading (environment/files)

Keep this layer thin and simple. All business logic should be in core.
"""

from quakemap.shell.usgs_client import USGSClient
from quakemap.shell.map_renderer import MapRenderer
from quakemap.shell.static_map_client import StaticMapClient
from quakemap.shell.config_loader import load_config

__all__ = [
    "USGSClient",
    "MapRenderer",
    "StaticMapClient",
    "load_config",
]
