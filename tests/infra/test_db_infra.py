"""
Tests for engine/session plumbing, the unit of work, settings and logging helpers.
"""

import logging

import pytest
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from musiclibrary.domain.entities import MediaRow
from musiclibrary.domain.media import Song
from musiclibrary.infra.db import get_engine, get_sessionmaker, storage_errors
from musiclibrary.infra.exceptions import StorageFailureError
from musiclibrary.infra.logging import add_service_context, configure_logging, redact_secrets
from musiclibrary.infra.media_repository import MediaStore
from musiclibrary.infra.settings import Settings, settings
from musiclibrary.infra.uow import session


def test_sqlite_connections_enforce_foreign_keys(test_engine: Engine):
    with test_engine.connect() as conn:
        assert conn.exec_driver_sql("PRAGMA foreign_keys").scalar() == 1


def test_get_engine_prefers_test_url_when_asked(monkeypatch, tmp_path):
    test_url = f"sqlite:///{tmp_path / 'other.db'}"
    monkeypatch.setattr(settings, "test_database_url", test_url)

    engine = get_engine("sqlite:///ignored.db", for_test=True)
    try:
        assert engine.url.database == str(tmp_path / "other.db")
    finally:
        engine.dispose()


class TestStorageErrors:
    def test_backend_error_becomes_storage_failure(self, db_session: Session):
        original = OperationalError("SELECT 1", {}, Exception("disk I/O error"))
        with pytest.raises(StorageFailureError, match="Failed to read: OperationalError") as excinfo:
            with storage_errors(db_session, "Failed to read"):
                raise original
        assert excinfo.value.__cause__ is original

    def test_other_errors_pass_through(self, db_session: Session):
        with pytest.raises(ValueError):
            with storage_errors(db_session, "Failed to read"):
                raise ValueError("not a storage problem")

    def test_failure_undoes_only_the_block(self, db_session: Session):
        store = MediaStore(db_session)
        kept = store.create(Song(name="Imagine", duration_seconds=180, creator="John Lennon"))

        with pytest.raises(StorageFailureError):
            with storage_errors(db_session, "Failed to save"):
                db_session.add(MediaRow(name="Lost", duration=1, type="SONG", creator="x"))
                db_session.flush()
                raise OperationalError("INSERT", {}, Exception("disk I/O error"))

        assert store.exists(kept.id)
        assert [m.name for m in store.get_all()] == ["Imagine"]


class TestUnitOfWork:
    def test_commits_on_success(self, test_engine: Engine):
        factory = get_sessionmaker(test_engine)
        with session(factory) as db:
            MediaStore(db).create(Song(name="Imagine", duration_seconds=180, creator="John Lennon"))

        with session(factory) as db:
            assert [m.name for m in MediaStore(db).get_all()] == ["Imagine"]

    def test_rolls_back_on_error(self, test_engine: Engine):
        factory = get_sessionmaker(test_engine)
        with pytest.raises(RuntimeError):
            with session(factory) as db:
                MediaStore(db).create(
                    Song(name="Imagine", duration_seconds=180, creator="John Lennon")
                )
                raise RuntimeError("abort")

        with session(factory) as db:
            assert MediaStore(db).get_all() == []


class TestSettings:
    def test_defaults(self, monkeypatch):
        for name in ("DATABASE_URL", "PLAYLIST_REQUIRE_ITEMS", "LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)
        config = Settings(_env_file=None)
        assert config.database_url == "sqlite:///musiclibrary.db"
        assert config.playlist_require_items is False
        assert config.log_level == "INFO"

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "sqlite:///elsewhere.db")
        monkeypatch.setenv("PLAYLIST_REQUIRE_ITEMS", "true")
        config = Settings(_env_file=None)
        assert config.database_url == "sqlite:///elsewhere.db"
        assert config.playlist_require_items is True


class TestLogging:
    def test_redact_secrets_masks_url_credentials(self):
        event = redact_secrets(
            None,
            None,
            {
                "event": "connecting to postgresql+psycopg://user:hunter2@db/music",
                "url": "sqlite:///musiclibrary.db",
                "media_id": 3,
            },
        )
        assert event["event"] == "connecting to postgresql+psycopg://***@db/music"
        assert event["url"] == "sqlite:///musiclibrary.db"
        assert event["media_id"] == 3

    def test_service_context_does_not_override(self):
        event = add_service_context(None, None, {"event": "x", "service": "other"})
        assert event["service"] == "other"
        assert event["env"] == settings.env

    def test_configure_logging_sets_package_level(self):
        configure_logging("DEBUG")
        try:
            assert logging.getLogger("musiclibrary").level == logging.DEBUG
        finally:
            configure_logging("INFO")
