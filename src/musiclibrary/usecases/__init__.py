"""
Application usecases.

CLI commands call these services; they never reach the stores directly.
"""

from .media_catalog import MAX_MEDIA_DURATION_SECONDS, MediaCatalogService
from .playlist_service import PlaylistService

__all__ = ["MAX_MEDIA_DURATION_SECONDS", "MediaCatalogService", "PlaylistService"]
