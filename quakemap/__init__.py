"""Interactive maps of recent USGS earthquakes for a region."""

__version__ = "0.1.0"
