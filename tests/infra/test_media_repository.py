"""
Tests for MediaStore: row <-> variant mapping, CRUD and query helpers.
"""

from decimal import Decimal

import pytest
from sqlalchemy import select, text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from musiclibrary.domain.entities import MediaRow
from musiclibrary.domain.media import Podcast, Song
from musiclibrary.infra.exceptions import CorruptDataError, NotFoundError, StorageFailureError
from musiclibrary.infra.media_repository import MediaStore
from musiclibrary.shared.types import MediaType


class TestRoundTrip:
    def test_song_round_trip(self, db_session: Session, media_store: MediaStore, sample_song_data):
        created = media_store.create(Song(**sample_song_data))
        assert isinstance(created.id, int)
        assert created.id > 0

        db_session.expire_all()
        fetched = media_store.get_by_id(created.id)
        assert isinstance(fetched, Song)
        assert fetched == created
        assert fetched.price == Decimal("1.29")

    def test_podcast_round_trip(
        self, db_session: Session, media_store: MediaStore, sample_podcast_data
    ):
        created = media_store.create(Podcast(**sample_podcast_data))

        db_session.expire_all()
        fetched = media_store.get_by_id(created.id)
        assert isinstance(fetched, Podcast)
        assert fetched == created

    def test_create_does_not_mutate_input(self, media_store: MediaStore, sample_song_data):
        song = Song(**sample_song_data)
        media_store.create(song)
        assert song.id is None

    def test_other_variant_columns_are_null_or_zero(
        self, db_session: Session, media_store: MediaStore, sample_song_data, sample_podcast_data
    ):
        song = media_store.create(Song(**sample_song_data))
        podcast = media_store.create(Podcast(**sample_podcast_data))
        db_session.expire_all()

        song_row = db_session.get(MediaRow, song.id)
        assert song_row.type == "SONG"
        assert song_row.host is None
        assert song_row.episode_number == 0
        assert song_row.category is None

        podcast_row = db_session.get(MediaRow, podcast.id)
        assert podcast_row.type == "PODCAST"
        assert podcast_row.album is None
        assert podcast_row.genre is None
        assert podcast_row.price == Decimal("0")


class TestMapping:
    def test_unknown_discriminator_is_corrupt_data(self, media_store: MediaStore):
        row = MediaRow(id=9, name="Clip", duration=10, type="VIDEO", creator="Someone")
        with pytest.raises(CorruptDataError, match="VIDEO"):
            media_store.to_record(row)

    def test_corrupt_row_in_table_fails_listing(self, db_session: Session, media_store: MediaStore):
        db_session.execute(text("PRAGMA ignore_check_constraints = ON"))
        db_session.execute(
            text(
                "INSERT INTO media (name, duration, type, creator, price, episode_number) "
                "VALUES ('Clip', 10, 'VIDEO', 'Someone', 0, 0)"
            )
        )
        with pytest.raises(CorruptDataError):
            media_store.get_all()

    def test_podcast_row_without_host_falls_back_to_creator(self, media_store: MediaStore):
        row = MediaRow(
            id=4, name="Show", duration=60, type="PODCAST", creator="Alice", host=None, episode_number=0
        )
        record = media_store.to_record(row)
        assert isinstance(record, Podcast)
        assert record.host == "Alice"


class TestCrud:
    def test_get_all_is_ordered_by_id(self, media_store: MediaStore):
        ids = [
            media_store.create(Song(name=name, duration_seconds=100, creator="X")).id
            for name in ("c", "a", "b")
        ]
        assert [m.id for m in media_store.get_all()] == sorted(ids)

    def test_get_by_id_missing_raises_not_found(self, media_store: MediaStore):
        with pytest.raises(NotFoundError) as excinfo:
            media_store.get_by_id(404)
        assert excinfo.value.resource == "Media"
        assert excinfo.value.identifier == 404

    def test_update_replaces_mutable_fields(
        self, db_session: Session, media_store: MediaStore, sample_song_data
    ):
        created = media_store.create(Song(**sample_song_data))
        replacement = Song(
            name="Imagine (Remastered)",
            duration_seconds=183,
            creator="John Lennon",
            album=None,
            genre="Pop",
            price=Decimal("0.49"),
        )

        updated = media_store.update(created.id, replacement)
        assert updated.id == created.id

        db_session.expire_all()
        assert media_store.get_by_id(created.id) == updated

    def test_update_missing_raises_not_found(self, media_store: MediaStore, sample_song_data):
        with pytest.raises(NotFoundError):
            media_store.update(12, Song(**sample_song_data))
        assert media_store.get_all() == []

    def test_delete(self, media_store: MediaStore, sample_song_data):
        created = media_store.create(Song(**sample_song_data))
        assert media_store.exists(created.id)

        assert media_store.delete(created.id) is True
        assert media_store.exists(created.id) is False
        with pytest.raises(NotFoundError):
            media_store.delete(created.id)

    def test_ids_are_not_reused_after_delete(self, media_store: MediaStore):
        first = media_store.create(Song(name="a", duration_seconds=1, creator="x"))
        media_store.delete(first.id)
        second = media_store.create(Song(name="b", duration_seconds=1, creator="x"))
        assert second.id > first.id

    def test_unique_constraint_surfaces_as_storage_failure(
        self, media_store: MediaStore, sample_song_data
    ):
        media_store.create(Song(**sample_song_data))
        with pytest.raises(StorageFailureError) as excinfo:
            media_store.create(Song(**sample_song_data))
        assert isinstance(excinfo.value.__cause__, IntegrityError)

        # Only the failed insert is undone; the session stays usable
        assert [m.name for m in media_store.get_all()] == ["Imagine"]

    def test_failed_write_keeps_earlier_rows_of_the_unit_of_work(self, media_store: MediaStore):
        imagine = media_store.create(Song(name="Imagine", duration_seconds=180, creator="John Lennon"))
        other = Song(name="Other", duration_seconds=100, creator="John Lennon")
        media_store.create(other)

        with pytest.raises(StorageFailureError):
            media_store.create(other)

        assert media_store.exists(imagine.id)
        assert [m.name for m in media_store.get_all()] == ["Imagine", "Other"]


class TestQueries:
    @pytest.fixture
    def seeded(self, media_store: MediaStore):
        return [
            media_store.create(Song(name="Imagine", duration_seconds=180, creator="John Lennon")),
            media_store.create(Song(name="Yesterday", duration_seconds=150, creator="The Beatles")),
            media_store.create(Podcast(name="Tech Talk", duration_seconds=1200, creator="Alice")),
            media_store.create(Song(name="100% Pure", duration_seconds=200, creator="john lennon")),
        ]

    def test_find_by_variant(self, media_store: MediaStore, seeded):
        songs = media_store.find_by_variant(MediaType.SONG)
        assert [m.name for m in songs] == ["100% Pure", "Imagine", "Yesterday"]
        assert all(isinstance(m, Song) for m in songs)
        assert [m.name for m in media_store.find_by_variant(MediaType.PODCAST)] == ["Tech Talk"]

    def test_find_by_creator_is_case_insensitive(self, media_store: MediaStore, seeded):
        names = [m.name for m in media_store.find_by_creator("JOHN LENNON")]
        assert names == ["100% Pure", "Imagine"]

    def test_find_by_creator_matches_non_ascii_name_exactly(self, media_store: MediaStore):
        media_store.create(Song(name="Jóga", duration_seconds=305, creator="Björk"))
        assert [m.name for m in media_store.find_by_creator("Björk")] == ["Jóga"]

    def test_search_by_name_is_case_insensitive_contains(self, media_store: MediaStore, seeded):
        assert [m.name for m in media_store.search_by_name("TALK")] == ["Tech Talk"]
        assert [m.name for m in media_store.search_by_name("es")] == ["Yesterday"]

    def test_search_treats_wildcards_literally(self, media_store: MediaStore, seeded):
        assert [m.name for m in media_store.search_by_name("%")] == ["100% Pure"]
        assert media_store.search_by_name("_") == []

    def test_exists_by_name_variant_creator(self, media_store: MediaStore, seeded):
        imagine = seeded[0]
        assert media_store.exists_by_name_variant_creator("Imagine", MediaType.SONG, "John Lennon")
        assert not media_store.exists_by_name_variant_creator(
            "Imagine", MediaType.PODCAST, "John Lennon"
        )
        assert not media_store.exists_by_name_variant_creator("Imagine", MediaType.SONG, "Yoko Ono")
        assert not media_store.exists_by_name_variant_creator(
            "Imagine", MediaType.SONG, "John Lennon", exclude_id=imagine.id
        )

        media_store.delete(imagine.id)
        assert not media_store.exists_by_name_variant_creator("Imagine", MediaType.SONG, "John Lennon")

    def test_rows_are_plain_media_rows(self, db_session: Session, seeded):
        types = db_session.scalars(select(MediaRow.type).order_by(MediaRow.id)).all()
        assert types == ["SONG", "SONG", "PODCAST", "SONG"]
