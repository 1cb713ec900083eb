"""
Test configuration and fixtures for the music library.

Every test gets its own file-backed SQLite database under ``tmp_path`` with the
schema created from the ORM metadata, so tests never share state.
"""

from __future__ import annotations

import sys
from collections.abc import Generator
from decimal import Decimal
from pathlib import Path

import pytest
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

# Ensure the project src directory is importable without relying on an editable install.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from musiclibrary.infra.db import create_schema, get_engine, get_sessionmaker  # noqa: E402
from musiclibrary.infra.media_repository import MediaStore  # noqa: E402
from musiclibrary.infra.playlist_repository import PlaylistStore  # noqa: E402
from musiclibrary.infra.settings import settings  # noqa: E402
from musiclibrary.usecases import MediaCatalogService, PlaylistService  # noqa: E402


@pytest.fixture
def test_database_url(tmp_path: Path) -> str:
    """URL of a fresh SQLite database file for this test."""
    return f"sqlite:///{tmp_path / 'musiclibrary-test.db'}"


@pytest.fixture
def test_engine(test_database_url: str) -> Generator[Engine, None, None]:
    """Create a test engine with the full schema."""
    engine = get_engine(test_database_url)
    create_schema(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(test_engine: Engine) -> Generator[Session, None, None]:
    """
    Provide a database session for tests.

    Uncommitted work is rolled back when the test ends.
    """
    session = get_sessionmaker(test_engine)()
    try:
        yield session
        session.rollback()
    finally:
        session.close()


@pytest.fixture
def media_store(db_session: Session) -> MediaStore:
    return MediaStore(db_session)


@pytest.fixture
def playlist_store(db_session: Session, media_store: MediaStore) -> PlaylistStore:
    return PlaylistStore(db_session, media_store)


@pytest.fixture
def media_service(media_store: MediaStore) -> MediaCatalogService:
    return MediaCatalogService(media_store)


@pytest.fixture
def playlist_service(playlist_store: PlaylistStore, media_store: MediaStore) -> PlaylistService:
    return PlaylistService(playlist_store, media_store, require_items=False)


@pytest.fixture
def cli_database(monkeypatch: pytest.MonkeyPatch, test_database_url: str) -> str:
    """Point the CLI at this test's database."""
    monkeypatch.setattr(settings, "database_url", test_database_url)
    return test_database_url


@pytest.fixture
def sample_song_data() -> dict:
    """Provide sample song data for testing."""
    return {
        "name": "Imagine",
        "duration_seconds": 180,
        "creator": "John Lennon",
        "album": "Imagine",
        "genre": "Rock",
        "price": Decimal("1.29"),
    }


@pytest.fixture
def sample_podcast_data() -> dict:
    """Provide sample podcast data for testing."""
    return {
        "name": "Tech Talk",
        "duration_seconds": 1200,
        "creator": "Alice",
        "host": "Bob",
        "episode_number": 42,
        "category": "Technology",
    }
