"""
Shared types and enums for the music library.

This module contains common types and enums that are used across
the domain, storage, and CLI layers.
"""

from __future__ import annotations

from enum import Enum


class MediaType(str, Enum):
    """Discriminator values for the media family."""

    SONG = "SONG"
    PODCAST = "PODCAST"

    @classmethod
    def parse(cls, value: str) -> MediaType:
        """Resolve a case-insensitive name such as ``"song"``."""
        try:
            return cls(value.strip().upper())
        except ValueError:
            allowed = ", ".join(member.value for member in cls)
            raise ValueError(f"Unknown media type '{value}' (expected one of: {allowed})") from None
