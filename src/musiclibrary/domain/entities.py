"""
Persistence entities for the music library.

One physical ``media`` table serves every variant: the ``type`` column is the
discriminator and the variant-specific columns of the other variants stay
null (or zero) on each row. Mapping rows to variant instances is the job of
``infra.media_repository.MediaStore``; these classes only describe the tables.
"""

from __future__ import annotations

from decimal import Decimal

import sqlalchemy as sa
from sqlalchemy import (
    CheckConstraint,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from ..infra.db import Base


class MediaRow(Base):
    """Sparse-column union row for songs and podcasts."""

    __tablename__ = "media"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    duration: Mapped[int] = mapped_column(Integer, nullable=False, comment="Duration in seconds")
    type: Mapped[str] = mapped_column(String(16), nullable=False, comment="Variant discriminator")
    creator: Mapped[str] = mapped_column(String(255), nullable=False)

    # SONG columns
    album: Mapped[str | None] = mapped_column(String(255), nullable=True)
    genre: Mapped[str | None] = mapped_column(String(100), nullable=True)
    price: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), nullable=False, default=Decimal("0.99"), server_default=sa.text("0.99")
    )

    # PODCAST columns
    host: Mapped[str | None] = mapped_column(String(255), nullable=True)
    episode_number: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default=sa.text("0")
    )
    category: Mapped[str | None] = mapped_column(String(100), nullable=True)

    __table_args__ = (
        CheckConstraint("duration > 0", name="duration_positive"),
        CheckConstraint("type IN ('SONG', 'PODCAST')", name="type_known"),
        CheckConstraint("price >= 0", name="price_non_negative"),
        CheckConstraint("episode_number >= 0", name="episode_number_non_negative"),
        UniqueConstraint("name", "type", "creator", name="uq_media_name_type_creator"),
        {"sqlite_autoincrement": True},
    )

    def __repr__(self) -> str:
        return f"<MediaRow(id={self.id}, type={self.type}, name={self.name}, creator={self.creator})>"


class PlaylistRow(Base):
    """Playlist header row; members live in ``playlist_items``."""

    __tablename__ = "playlists"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = ({"sqlite_autoincrement": True},)

    def __repr__(self) -> str:
        return f"<PlaylistRow(id={self.id}, name={self.name})>"


# Playlist names are unique regardless of case
Index("uq_playlists_name_lower", func.lower(PlaylistRow.name), unique=True)


class PlaylistItemRow(Base):
    """Membership of one media record in one playlist at an ordinal position."""

    __tablename__ = "playlist_items"

    playlist_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("playlists.id", ondelete="CASCADE"), primary_key=True
    )
    media_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("media.id", ondelete="CASCADE"), primary_key=True
    )
    position: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default=sa.text("0")
    )

    __table_args__ = (
        CheckConstraint("position >= 0", name="position_non_negative"),
        Index("ix_playlist_items_media_id", "media_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<PlaylistItemRow(playlist_id={self.playlist_id}, media_id={self.media_id}, "
            f"position={self.position})>"
        )
