"""Music library: media catalog and playlist persistence."""

__version__ = "0.1.0"
