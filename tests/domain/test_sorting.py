"""Tests for the in-memory sort and filter helpers."""

import pytest

from musiclibrary.domain import sorting
from musiclibrary.domain.media import Podcast, Song
from musiclibrary.domain.playlist import Playlist
from musiclibrary.shared.types import MediaType


@pytest.fixture
def catalog():
    return [
        Song(id=1, name="imagine", duration_seconds=180, creator="John Lennon"),
        Podcast(id=2, name="Tech Talk", duration_seconds=1200, creator="alice"),
        Song(id=3, name="Yesterday", duration_seconds=150, creator="The Beatles"),
    ]


def test_sort_by_name_ignores_case(catalog):
    assert [m.id for m in sorting.sort_media(catalog, "name")] == [1, 2, 3]


def test_sort_by_duration(catalog):
    assert [m.id for m in sorting.sort_media(catalog, "duration")] == [3, 1, 2]


def test_sort_by_creator_ignores_case(catalog):
    assert [m.creator for m in sorting.sort_media(catalog, "creator")] == [
        "alice",
        "John Lennon",
        "The Beatles",
    ]


def test_sort_by_type_then_name(catalog):
    assert [m.id for m in sorting.sort_media(catalog, "type")] == [1, 3, 2]


def test_sort_does_not_mutate_input(catalog):
    original = list(catalog)
    sorting.sort_media(catalog, "duration")
    assert catalog == original


def test_unknown_sort_key(catalog):
    with pytest.raises(ValueError, match="Unknown sort key"):
        sorting.sort_media(catalog, "price")


def test_filters(catalog):
    assert [m.id for m in sorting.filter_by_type(catalog, MediaType.PODCAST)] == [2]
    assert [m.id for m in sorting.filter_by_min_duration(catalog, 180)] == [1, 2]
    assert [m.id for m in sorting.filter_media(catalog, lambda m: "a" in m.name)] == [1, 2, 3]


def test_aggregates(catalog):
    assert sorting.total_duration(catalog) == 1530
    assert sorting.count_by_type(catalog) == {MediaType.SONG: 2, MediaType.PODCAST: 1}


def test_sort_playlists_by_size(catalog):
    small = Playlist(name="small", items=catalog[:1])
    large = Playlist(name="large", items=catalog)
    assert [p.name for p in sorting.sort_playlists_by_size([small, large])] == ["large", "small"]
