"""Sort and filter helpers over already-fetched media and playlists.

These never touch storage; they return new lists and leave the input alone.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

from ..shared.types import MediaType
from .media import MediaRecord
from .playlist import Playlist

_VARIANT_ORDER = {media_type: index for index, media_type in enumerate(MediaType)}

SORT_KEYS: dict[str, Callable[[MediaRecord], object]] = {
    "name": lambda m: m.name.lower(),
    "duration": lambda m: m.duration_seconds,
    "creator": lambda m: m.creator.lower(),
    "type": lambda m: (_VARIANT_ORDER[m.variant_tag], m.name.lower()),
}


def sort_media(media: Iterable[MediaRecord], key: str = "name") -> list[MediaRecord]:
    if key not in SORT_KEYS:
        raise ValueError(f"Unknown sort key '{key}' (expected one of: {', '.join(SORT_KEYS)})")
    return sorted(media, key=SORT_KEYS[key])


def sort_playlists_by_size(playlists: Iterable[Playlist]) -> list[Playlist]:
    """Largest playlist first."""
    return sorted(playlists, key=lambda p: p.item_count, reverse=True)


def filter_media(
    media: Iterable[MediaRecord], predicate: Callable[[MediaRecord], bool]
) -> list[MediaRecord]:
    return [m for m in media if predicate(m)]


def filter_by_type(media: Iterable[MediaRecord], media_type: MediaType) -> list[MediaRecord]:
    return filter_media(media, lambda m: m.variant_tag is media_type)


def filter_by_min_duration(media: Iterable[MediaRecord], min_seconds: int) -> list[MediaRecord]:
    return filter_media(media, lambda m: m.duration_seconds >= min_seconds)


def total_duration(media: Iterable[MediaRecord]) -> int:
    return sum(m.duration_seconds for m in media)


def count_by_type(media: Iterable[MediaRecord]) -> dict[MediaType, int]:
    counts = {media_type: 0 for media_type in MediaType}
    for m in media:
        counts[m.variant_tag] += 1
    return counts
