"""
Alembic migrations build the same schema as the ORM metadata.
"""

from pathlib import Path

import pytest
from alembic import command
from alembic.config import Config
from sqlalchemy import inspect, text
from sqlalchemy.exc import IntegrityError

from musiclibrary.infra.db import get_engine

PROJECT_ROOT = Path(__file__).resolve().parents[2]


@pytest.fixture
def alembic_config(test_database_url: str) -> Config:
    cfg = Config()
    cfg.set_main_option("script_location", str(PROJECT_ROOT / "alembic"))
    cfg.set_main_option("sqlalchemy.url", test_database_url)
    return cfg


def test_upgrade_creates_tables(alembic_config: Config, test_database_url: str):
    command.upgrade(alembic_config, "head")

    engine = get_engine(test_database_url)
    try:
        inspector = inspect(engine)
        assert {"media", "playlists", "playlist_items"} <= set(inspector.get_table_names())

        media_columns = {column["name"] for column in inspector.get_columns("media")}
        assert media_columns == {
            "id",
            "name",
            "duration",
            "type",
            "creator",
            "album",
            "genre",
            "price",
            "host",
            "episode_number",
            "category",
        }

        unique_sets = [tuple(c["column_names"]) for c in inspector.get_unique_constraints("media")]
        assert ("name", "type", "creator") in unique_sets

        foreign_keys = inspector.get_foreign_keys("playlist_items")
        assert {fk["referred_table"] for fk in foreign_keys} == {"playlists", "media"}
        assert all(fk["options"].get("ondelete") == "CASCADE" for fk in foreign_keys)

        with engine.connect() as conn:
            conn.execute(text("INSERT INTO playlists (name) VALUES ('Favorites')"))
            with pytest.raises(IntegrityError):
                conn.execute(text("INSERT INTO playlists (name) VALUES ('FAVORITES')"))
    finally:
        engine.dispose()


def test_downgrade_removes_tables(alembic_config: Config, test_database_url: str):
    command.upgrade(alembic_config, "head")
    command.downgrade(alembic_config, "base")

    engine = get_engine(test_database_url)
    try:
        assert "media" not in inspect(engine).get_table_names()
    finally:
        engine.dispose()
