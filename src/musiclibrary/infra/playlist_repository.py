"""
Playlist repository for database operations.

Manages ``playlists`` rows and the ``playlist_items`` join table. Member lists
are always resolved through the media store, so a membership pointing at a
missing media row is reported instead of silently dropped.
"""

from __future__ import annotations

from sqlalchemy import delete, func, insert, select
from sqlalchemy.orm import Session

from ..domain.entities import MediaRow, PlaylistItemRow, PlaylistRow
from ..domain.media import MediaRecord
from ..domain.playlist import Playlist
from .db import storage_errors
from .exceptions import NotFoundError, StorageFailureError
from .media_repository import MediaStore


class PlaylistStore:
    """Repository for playlists and their ordered memberships."""

    def __init__(self, db: Session, media_store: MediaStore | None = None):
        """
        Initialize the store with a database session.

        Args:
            db: SQLAlchemy session instance
            media_store: Store used to map member rows; defaults to one on ``db``
        """
        self.db = db
        self.media_store = media_store or MediaStore(db)

    def _to_playlist(self, row: PlaylistRow) -> Playlist:
        return Playlist(
            id=row.id,
            name=row.name,
            description=row.description,
            items=self.get_members(row.id),
        )

    # CRUD

    def create(self, playlist: Playlist) -> Playlist:
        """
        Insert a playlist and a membership for every item that has an id.

        Items are stored at positions 0..n-1 in list order; items without an
        id and repeated ids are skipped. All statements run in the caller's
        transaction, so a failed membership insert leaves nothing behind once
        the unit of work rolls back.
        """
        row = PlaylistRow(name=playlist.name, description=playlist.description)
        with storage_errors(self.db, "Failed to create playlist"):
            self.db.add(row)
            self.db.flush()

            position = 0
            seen: set[int] = set()
            for item in playlist.items:
                if item.id is None or item.id in seen:
                    continue
                seen.add(item.id)
                self.db.execute(
                    insert(PlaylistItemRow).values(
                        playlist_id=row.id, media_id=item.id, position=position
                    )
                )
                position += 1
            self.db.flush()
        return self._to_playlist(row)

    def get_all(self) -> list[Playlist]:
        """Return every playlist, members resolved, ordered by id."""
        with storage_errors(self.db, "Failed to retrieve all playlists"):
            rows = self.db.scalars(select(PlaylistRow).order_by(PlaylistRow.id)).all()
        return [self._to_playlist(row) for row in rows]

    def get_by_id(self, playlist_id: int) -> Playlist:
        """
        Find a playlist by id.

        Raises:
            NotFoundError: If no playlist has this id
        """
        with storage_errors(self.db, "Failed to retrieve playlist by ID"):
            row = self.db.scalar(select(PlaylistRow).where(PlaylistRow.id == playlist_id))
        if row is None:
            raise NotFoundError("Playlist", playlist_id)
        return self._to_playlist(row)

    def update(self, playlist_id: int, playlist: Playlist) -> Playlist:
        """
        Replace name and description; memberships are left untouched.

        Raises:
            NotFoundError: If no playlist has this id
        """
        with storage_errors(self.db, "Failed to update playlist"):
            row = self.db.get(PlaylistRow, playlist_id)
            if row is None:
                raise NotFoundError("Playlist", playlist_id)
            row.name = playlist.name
            row.description = playlist.description
            self.db.flush()
        return self._to_playlist(row)

    def delete(self, playlist_id: int) -> bool:
        """
        Delete a playlist; its memberships go with it (ON DELETE CASCADE).

        Raises:
            NotFoundError: If no playlist has this id
        """
        if not self.exists(playlist_id):
            raise NotFoundError("Playlist", playlist_id)
        with storage_errors(self.db, "Failed to delete playlist"):
            result = self.db.execute(delete(PlaylistRow).where(PlaylistRow.id == playlist_id))
            self.db.flush()
        return result.rowcount > 0

    def exists(self, playlist_id: int) -> bool:
        stmt = select(1).where(PlaylistRow.id == playlist_id).limit(1)
        with storage_errors(self.db, "Failed to check playlist existence"):
            return self.db.scalar(stmt) is not None

    # Name lookups (case-insensitive)

    def exists_by_name(self, name: str, exclude_id: int | None = None) -> bool:
        stmt = select(1).where(func.lower(PlaylistRow.name) == func.lower(name))
        if exclude_id is not None:
            stmt = stmt.where(PlaylistRow.id != exclude_id)
        with storage_errors(self.db, "Failed to check playlist existence by name"):
            return self.db.scalar(stmt.limit(1)) is not None

    def find_by_name(self, name: str) -> Playlist | None:
        """Return the playlist whose name matches ignoring case, or None."""
        stmt = select(PlaylistRow).where(func.lower(PlaylistRow.name) == func.lower(name))
        with storage_errors(self.db, "Failed to find playlist by name"):
            row = self.db.scalar(stmt)
        return self._to_playlist(row) if row is not None else None

    # Memberships

    def add_membership(self, playlist_id: int, media_id: int) -> bool:
        """
        Append a media record to the end of a playlist.

        Insert-or-ignore: adding an existing member changes nothing.

        Returns:
            True if a membership row was inserted, False if it already existed
        """
        with storage_errors(self.db, "Failed to add media to playlist"):
            already = self.db.scalar(
                select(1)
                .where(
                    PlaylistItemRow.playlist_id == playlist_id,
                    PlaylistItemRow.media_id == media_id,
                )
                .limit(1)
            )
            if already is not None:
                return False
            last_position = self.db.scalar(
                select(func.max(PlaylistItemRow.position)).where(
                    PlaylistItemRow.playlist_id == playlist_id
                )
            )
            self.db.execute(
                insert(PlaylistItemRow).values(
                    playlist_id=playlist_id,
                    media_id=media_id,
                    position=0 if last_position is None else last_position + 1,
                )
            )
            self.db.flush()
        return True

    def remove_membership(self, playlist_id: int, media_id: int) -> bool:
        """
        Remove a media record from a playlist.

        Removing a non-member is not an error.

        Returns:
            True if a membership row was deleted
        """
        with storage_errors(self.db, "Failed to remove media from playlist"):
            result = self.db.execute(
                delete(PlaylistItemRow).where(
                    PlaylistItemRow.playlist_id == playlist_id,
                    PlaylistItemRow.media_id == media_id,
                )
            )
            self.db.flush()
        return result.rowcount > 0

    def get_members(self, playlist_id: int) -> list[MediaRecord]:
        """
        Resolve the members of a playlist ordered by position, then media id.

        Raises:
            NotFoundError: If the playlist does not exist
            StorageFailureError: If a membership references a missing media row
        """
        if not self.exists(playlist_id):
            raise NotFoundError("Playlist", playlist_id)
        stmt = (
            select(PlaylistItemRow.media_id, MediaRow)
            .outerjoin(MediaRow, MediaRow.id == PlaylistItemRow.media_id)
            .where(PlaylistItemRow.playlist_id == playlist_id)
            .order_by(PlaylistItemRow.position, PlaylistItemRow.media_id)
        )
        with storage_errors(self.db, "Failed to get playlist media"):
            results = self.db.execute(stmt).all()

        members: list[MediaRecord] = []
        for media_id, media_row in results:
            if media_row is None:
                raise StorageFailureError(
                    f"Media {media_id} referenced by playlist {playlist_id} not found"
                )
            members.append(self.media_store.to_record(media_row))
        return members

    def count_memberships(
        self, *, playlist_id: int | None = None, media_id: int | None = None
    ) -> int:
        """Count membership rows, optionally filtered by playlist and/or media."""
        stmt = select(func.count()).select_from(PlaylistItemRow)
        if playlist_id is not None:
            stmt = stmt.where(PlaylistItemRow.playlist_id == playlist_id)
        if media_id is not None:
            stmt = stmt.where(PlaylistItemRow.media_id == media_id)
        with storage_errors(self.db, "Failed to count playlist memberships"):
            return self.db.scalar(stmt) or 0
