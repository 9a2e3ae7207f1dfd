"""TierFinder — multi-backend file browser controller with tier migration."""

__version__ = "0.1.0"
