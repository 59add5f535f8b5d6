"""Multi-waypoint road route planning with rate-limited provider access."""

__version__ = "0.1.0"
