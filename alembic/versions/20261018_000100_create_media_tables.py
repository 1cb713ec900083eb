"""
Create media, playlists and playlist_items tables.

Revision ID: 20261018_000100_media
Revises:
Create Date: 2026-10-18 00:01:00.000000
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "20261018_000100_media"
down_revision: str | None = None
branch_labels: str | None = None
depends_on: str | None = None


def upgrade() -> None:
    op.create_table(
        "media",
        sa.Column("id", sa.Integer(), nullable=False, autoincrement=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("duration", sa.Integer(), nullable=False, comment="Duration in seconds"),
        sa.Column("type", sa.String(length=16), nullable=False, comment="Variant discriminator"),
        sa.Column("creator", sa.String(length=255), nullable=False),
        sa.Column("album", sa.String(length=255), nullable=True),
        sa.Column("genre", sa.String(length=100), nullable=True),
        sa.Column("price", sa.Numeric(10, 2), nullable=False, server_default=sa.text("0.99")),
        sa.Column("host", sa.String(length=255), nullable=True),
        sa.Column("episode_number", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("category", sa.String(length=100), nullable=True),
        sa.CheckConstraint("duration > 0", name="ck_media_duration_positive"),
        sa.CheckConstraint("type IN ('SONG', 'PODCAST')", name="ck_media_type_known"),
        sa.CheckConstraint("price >= 0", name="ck_media_price_non_negative"),
        sa.CheckConstraint("episode_number >= 0", name="ck_media_episode_number_non_negative"),
        sa.UniqueConstraint("name", "type", "creator", name="uq_media_name_type_creator"),
        sa.PrimaryKeyConstraint("id", name="pk_media"),
        sqlite_autoincrement=True,
    )

    op.create_table(
        "playlists",
        sa.Column("id", sa.Integer(), nullable=False, autoincrement=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.UniqueConstraint("name", name="uq_playlists_name"),
        sa.PrimaryKeyConstraint("id", name="pk_playlists"),
        sqlite_autoincrement=True,
    )
    # Case-insensitive uniqueness of playlist names
    op.create_index(
        "uq_playlists_name_lower", "playlists", [sa.text("lower(name)")], unique=True
    )

    op.create_table(
        "playlist_items",
        sa.Column("playlist_id", sa.Integer(), nullable=False),
        sa.Column("media_id", sa.Integer(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.CheckConstraint("position >= 0", name="ck_playlist_items_position_non_negative"),
        sa.ForeignKeyConstraint(
            ["playlist_id"],
            ["playlists.id"],
            name="fk_playlist_items_playlist_id_playlists",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["media_id"],
            ["media.id"],
            name="fk_playlist_items_media_id_media",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("playlist_id", "media_id", name="pk_playlist_items"),
    )
    op.create_index("ix_playlist_items_media_id", "playlist_items", ["media_id"])


def downgrade() -> None:
    op.drop_index("ix_playlist_items_media_id", table_name="playlist_items")
    op.drop_table("playlist_items")
    op.drop_index("uq_playlists_name_lower", table_name="playlists")
    op.drop_table("playlists")
    op.drop_table("media")
