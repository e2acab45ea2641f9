"""storm-report: health and economic impact report over the NOAA storm database."""

__version__ = "0.1.0"
