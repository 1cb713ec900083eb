"""
Media catalog usecases.

Business rules layered on top of MediaStore: field validation, the duration
ceiling, and duplicate detection on the (name, type, creator) triple. Store
errors (NotFoundError, StorageFailureError, CorruptDataError) pass through
unchanged.
"""

from __future__ import annotations

import structlog

from ..domain.media import MediaRecord
from ..infra.exceptions import DuplicateResourceError, InvalidInputError, NotFoundError
from ..infra.media_repository import MediaStore
from ..shared.types import MediaType

_log = structlog.get_logger(__name__)

MAX_MEDIA_DURATION_SECONDS = 86400  # 24 hours


def _require_text(value: str | None, message: str) -> str:
    if value is None or not value.strip():
        raise InvalidInputError(message)
    return value


def _check_duration_ceiling(record: MediaRecord) -> None:
    if record.duration_seconds > MAX_MEDIA_DURATION_SECONDS:
        raise InvalidInputError("Media duration cannot exceed 24 hours")


def _triple_label(record: MediaRecord) -> str:
    return f"{record.variant_tag.value} '{record.name}' by {record.creator}"


class MediaCatalogService:
    """Media operations exposed to the presentation layer."""

    def __init__(self, media_store: MediaStore):
        self.media_store = media_store

    def create_media(self, record: MediaRecord) -> MediaRecord:
        """Validate, reject duplicates and over-long media, then insert.

        Raises:
            InvalidInputError: If a field is invalid or duration exceeds 24h
            DuplicateResourceError: If the (name, type, creator) triple is taken
        """
        record.validate()
        _check_duration_ceiling(record)

        if self.media_store.exists_by_name_variant_creator(
            record.name, record.variant_tag, record.creator
        ):
            _log.warning("media_duplicate_rejected", media=_triple_label(record))
            raise DuplicateResourceError("Media", _triple_label(record))

        created = self.media_store.create(record)
        _log.info("media_created", media_id=created.id, type=created.variant_tag.value)
        return created

    def get_all_media(self) -> list[MediaRecord]:
        return self.media_store.get_all()

    def get_media_by_id(self, media_id: int) -> MediaRecord:
        if media_id is None or media_id <= 0:
            raise NotFoundError("Media", media_id)
        return self.media_store.get_by_id(media_id)

    def update_media(self, media_id: int, record: MediaRecord) -> MediaRecord:
        """Replace the mutable fields of an existing record.

        The variant cannot change. Renaming into another record's
        (name, type, creator) triple is rejected.

        Raises:
            InvalidInputError: If a field is invalid, the duration exceeds 24h,
                or the variant differs from the stored one
            NotFoundError: If no record has ``media_id``
            DuplicateResourceError: If another record holds the new triple
        """
        record.validate()

        if not self.media_store.exists(media_id):
            raise NotFoundError("Media", media_id)

        _check_duration_ceiling(record)

        current = self.media_store.get_by_id(media_id)
        if current.variant_tag is not record.variant_tag:
            raise InvalidInputError(
                f"Cannot change media {media_id} from {current.variant_tag.value} "
                f"to {record.variant_tag.value}"
            )

        if self.media_store.exists_by_name_variant_creator(
            record.name, record.variant_tag, record.creator, exclude_id=media_id
        ):
            _log.warning("media_duplicate_rejected", media=_triple_label(record), media_id=media_id)
            raise DuplicateResourceError("Media", _triple_label(record))

        updated = self.media_store.update(media_id, record)
        _log.info("media_updated", media_id=media_id)
        return updated

    def delete_media(self, media_id: int) -> None:
        if not self.media_store.exists(media_id):
            raise NotFoundError("Media", media_id)
        self.media_store.delete(media_id)
        _log.info("media_deleted", media_id=media_id)

    def get_media_by_variant(self, media_type: MediaType | str | None) -> list[MediaRecord]:
        if media_type is None:
            raise InvalidInputError("Media type cannot be empty")
        if not isinstance(media_type, MediaType):
            _require_text(media_type, "Media type cannot be empty")
            try:
                media_type = MediaType.parse(media_type)
            except ValueError as exc:
                raise InvalidInputError(str(exc)) from exc
        return self.media_store.find_by_variant(media_type)

    def get_media_by_creator(self, creator: str | None) -> list[MediaRecord]:
        creator = _require_text(creator, "Creator name cannot be empty")
        return self.media_store.find_by_creator(creator)

    def search_media_by_name(self, keyword: str | None) -> list[MediaRecord]:
        keyword = _require_text(keyword, "Search keyword cannot be empty")
        return self.media_store.search_by_name(keyword)
