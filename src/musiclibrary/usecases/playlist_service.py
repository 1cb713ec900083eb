"""
Playlist usecases.

Enforces playlist business rules on top of PlaylistStore and MediaStore:
case-insensitive name uniqueness, member existence, and the optional
"at least one item at creation" policy.
"""

from __future__ import annotations

import structlog

from ..domain.media import MediaRecord
from ..domain.playlist import Playlist
from ..infra.exceptions import DuplicateResourceError, InvalidInputError, NotFoundError
from ..infra.media_repository import MediaStore
from ..infra.playlist_repository import PlaylistStore
from ..infra.settings import settings

_log = structlog.get_logger(__name__)


class PlaylistService:
    """Playlist operations exposed to the presentation layer."""

    def __init__(
        self,
        playlist_store: PlaylistStore,
        media_store: MediaStore,
        *,
        require_items: bool | None = None,
    ):
        self.playlist_store = playlist_store
        self.media_store = media_store
        self.require_items = (
            settings.playlist_require_items if require_items is None else require_items
        )

    def create_playlist(self, playlist: Playlist) -> Playlist:
        """Validate, reject duplicate names and unknown items, then insert.

        Raises:
            InvalidInputError: If the name is blank, or no items are given while
                items are required
            DuplicateResourceError: If another playlist has the same name (any case)
            NotFoundError: If an initial item id does not exist
        """
        playlist.validate(require_items=self.require_items)

        if self.playlist_store.exists_by_name(playlist.name):
            _log.warning("playlist_duplicate_rejected", name=playlist.name)
            raise DuplicateResourceError("Playlist", playlist.name)

        for item in playlist.items:
            if item.id is not None and not self.media_store.exists(item.id):
                raise NotFoundError("Media", item.id)

        created = self.playlist_store.create(playlist)
        _log.info("playlist_created", playlist_id=created.id, items=created.item_count)
        return created

    def get_all_playlists(self) -> list[Playlist]:
        return self.playlist_store.get_all()

    def get_playlist_by_id(self, playlist_id: int) -> Playlist:
        if playlist_id is None or playlist_id <= 0:
            raise NotFoundError("Playlist", playlist_id)
        return self.playlist_store.get_by_id(playlist_id)

    def update_playlist(self, playlist_id: int, playlist: Playlist) -> Playlist:
        """Rename and/or re-describe an existing playlist.

        Raises:
            InvalidInputError: If the new name is blank
            NotFoundError: If no playlist has ``playlist_id``
            DuplicateResourceError: If another playlist already uses the new name
        """
        if not self.playlist_store.exists(playlist_id):
            raise NotFoundError("Playlist", playlist_id)

        playlist.validate()

        # Keeping the current name (in any case) never collides with itself
        if self.playlist_store.exists_by_name(playlist.name, exclude_id=playlist_id):
            _log.warning("playlist_duplicate_rejected", name=playlist.name)
            raise DuplicateResourceError("Playlist", playlist.name)

        updated = self.playlist_store.update(playlist_id, playlist)
        _log.info("playlist_updated", playlist_id=playlist_id)
        return updated

    def delete_playlist(self, playlist_id: int) -> None:
        if not self.playlist_store.exists(playlist_id):
            raise NotFoundError("Playlist", playlist_id)
        self.playlist_store.delete(playlist_id)
        _log.info("playlist_deleted", playlist_id=playlist_id)

    def add_media_to_playlist(self, playlist_id: int, media_id: int) -> bool:
        """Append media to a playlist; re-adding an existing member is a no-op.

        Raises:
            NotFoundError: Naming the playlist or the media, whichever is missing
        """
        if not self.playlist_store.exists(playlist_id):
            raise NotFoundError("Playlist", playlist_id)
        if not self.media_store.exists(media_id):
            raise NotFoundError("Media", media_id)

        added = self.playlist_store.add_membership(playlist_id, media_id)
        if added:
            _log.info("playlist_member_added", playlist_id=playlist_id, media_id=media_id)
        return added

    def remove_media_from_playlist(self, playlist_id: int, media_id: int) -> bool:
        """Remove media from a playlist; removing a non-member is not an error."""
        removed = self.playlist_store.remove_membership(playlist_id, media_id)
        if removed:
            _log.info("playlist_member_removed", playlist_id=playlist_id, media_id=media_id)
        return removed

    def get_playlist_media(self, playlist_id: int) -> list[MediaRecord]:
        return self.playlist_store.get_members(playlist_id)

    def get_playlist_by_name(self, name: str | None) -> Playlist:
        if name is None or not name.strip():
            raise InvalidInputError("Playlist name cannot be empty")
        playlist = self.playlist_store.find_by_name(name)
        if playlist is None:
            raise NotFoundError("Playlist", name)
        return playlist
