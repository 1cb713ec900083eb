"""
Media repository for database operations.

Maps between rows of the single ``media`` table and the variant instances of
the media model. The store applies no business rules; it only translates
between the two shapes and surfaces backend failures as StorageFailureError.
"""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from ..domain.entities import MediaRow
from ..domain.media import MediaRecord, Podcast, Song
from ..shared.types import MediaType
from .db import storage_errors
from .exceptions import CorruptDataError, NotFoundError


class MediaStore:
    """
    Repository for media records.

    All operations run on the injected session and flush, leaving commit or
    rollback to the surrounding unit of work.
    """

    def __init__(self, db: Session):
        """
        Initialize the store with a database session.

        Args:
            db: SQLAlchemy session instance
        """
        self.db = db

    # Row <-> variant mapping

    def to_record(self, row: MediaRow) -> MediaRecord:
        """
        Build the variant instance selected by the row's discriminator.

        Raises:
            CorruptDataError: If the discriminator is not a known variant
        """
        if row.type == MediaType.SONG.value:
            return Song(
                id=row.id,
                name=row.name,
                duration_seconds=row.duration,
                creator=row.creator,
                album=row.album,
                genre=row.genre,
                price=row.price,
            )
        if row.type == MediaType.PODCAST.value:
            return Podcast(
                id=row.id,
                name=row.name,
                duration_seconds=row.duration,
                creator=row.creator,
                host=row.host,
                episode_number=row.episode_number if row.episode_number is not None else 0,
                category=row.category,
            )
        raise CorruptDataError(f"Unknown media type '{row.type}' for media id {row.id}")

    @staticmethod
    def _write_columns(row: MediaRow, record: MediaRecord) -> None:
        # Columns of the other variant are nulled/zeroed so one row shape serves both
        row.name = record.name
        row.duration = record.duration_seconds
        row.creator = record.creator
        if isinstance(record, Song):
            row.album = record.album
            row.genre = record.genre
            row.price = record.price
            row.host = None
            row.episode_number = 0
            row.category = None
        elif isinstance(record, Podcast):
            row.album = None
            row.genre = None
            row.price = Decimal("0")
            row.host = record.host
            row.episode_number = record.episode_number
            row.category = record.category
        else:
            raise CorruptDataError(f"Unsupported media variant: {type(record).__name__}")

    # CRUD

    def create(self, record: MediaRecord) -> MediaRecord:
        """
        Insert a record and return a copy carrying the assigned id.

        Args:
            record: Song or Podcast instance (its id is ignored)

        Returns:
            The same record with ``id`` set
        """
        row = MediaRow(type=record.variant_tag.value)
        self._write_columns(row, record)
        with storage_errors(self.db, "Failed to create media"):
            self.db.add(row)
            self.db.flush()
        return record.with_id(row.id)

    def get_all(self) -> list[MediaRecord]:
        """Return every record ordered by id."""
        with storage_errors(self.db, "Failed to retrieve all media"):
            rows = self.db.scalars(select(MediaRow).order_by(MediaRow.id)).all()
        return [self.to_record(row) for row in rows]

    def get_by_id(self, media_id: int) -> MediaRecord:
        """
        Find a record by id.

        Raises:
            NotFoundError: If no row has this id
        """
        with storage_errors(self.db, "Failed to retrieve media by ID"):
            row = self.db.scalar(select(MediaRow).where(MediaRow.id == media_id))
        if row is None:
            raise NotFoundError("Media", media_id)
        return self.to_record(row)

    def update(self, media_id: int, record: MediaRecord) -> MediaRecord:
        """
        Replace every mutable column of an existing row.

        The discriminator and id of the row are never rewritten.

        Raises:
            NotFoundError: If no row has this id
        """
        with storage_errors(self.db, "Failed to update media"):
            row = self.db.get(MediaRow, media_id)
            if row is None:
                raise NotFoundError("Media", media_id)
            self._write_columns(row, record)
            self.db.flush()
        return record.with_id(media_id)

    def delete(self, media_id: int) -> bool:
        """
        Delete a row; its playlist memberships go with it (ON DELETE CASCADE).

        Raises:
            NotFoundError: If no row has this id
        """
        if not self.exists(media_id):
            raise NotFoundError("Media", media_id)
        with storage_errors(self.db, "Failed to delete media"):
            result = self.db.execute(delete(MediaRow).where(MediaRow.id == media_id))
            self.db.flush()
        return result.rowcount > 0

    def exists(self, media_id: int) -> bool:
        stmt = select(1).where(MediaRow.id == media_id).limit(1)
        with storage_errors(self.db, "Failed to check media existence"):
            return self.db.scalar(stmt) is not None

    # Queries

    def find_by_variant(self, media_type: MediaType) -> list[MediaRecord]:
        stmt = (
            select(MediaRow)
            .where(MediaRow.type == MediaType(media_type).value)
            .order_by(MediaRow.name, MediaRow.id)
        )
        with storage_errors(self.db, "Failed to find media by type"):
            rows = self.db.scalars(stmt).all()
        return [self.to_record(row) for row in rows]

    def find_by_creator(self, creator: str) -> list[MediaRecord]:
        """Case-insensitive exact match on creator."""
        stmt = (
            select(MediaRow)
            .where(func.lower(MediaRow.creator) == func.lower(creator))
            .order_by(MediaRow.name, MediaRow.id)
        )
        with storage_errors(self.db, "Failed to find media by creator"):
            rows = self.db.scalars(stmt).all()
        return [self.to_record(row) for row in rows]

    def search_by_name(self, keyword: str) -> list[MediaRecord]:
        """Case-insensitive substring match on name."""
        stmt = (
            select(MediaRow)
            .where(MediaRow.name.icontains(keyword, autoescape=True))
            .order_by(MediaRow.name, MediaRow.id)
        )
        with storage_errors(self.db, "Failed to search media by name"):
            rows = self.db.scalars(stmt).all()
        return [self.to_record(row) for row in rows]

    def exists_by_name_variant_creator(
        self,
        name: str,
        media_type: MediaType,
        creator: str,
        exclude_id: int | None = None,
    ) -> bool:
        """
        Check the (name, type, creator) uniqueness triple.

        Matching is exact, the same as the storage constraint.

        Args:
            name: Media name
            media_type: Variant discriminator
            creator: Creator name
            exclude_id: Ignore the row with this id (used when updating it)

        Returns:
            True if another row already holds the triple
        """
        stmt = select(1).where(
            MediaRow.name == name,
            MediaRow.type == MediaType(media_type).value,
            MediaRow.creator == creator,
        )
        if exclude_id is not None:
            stmt = stmt.where(MediaRow.id != exclude_id)
        with storage_errors(self.db, "Failed to check media existence"):
            return self.db.scalar(stmt.limit(1)) is not None
