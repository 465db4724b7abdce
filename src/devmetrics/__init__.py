"""devmetrics: merge coding stats from several hosts into one SVG card."""

__version__ = "0.1.0"
