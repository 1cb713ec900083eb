"""
Media variant model.

A media record is one of a closed family of variants (songs and podcasts) that
share the base attributes and add their own. The variant tag is a class-level
constant, so a record can never change variant after construction.
"""

from __future__ import annotations

import dataclasses
from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, ClassVar, NamedTuple

from ..infra.exceptions import InvalidInputError
from ..shared.types import MediaType

DEFAULT_SONG_PRICE = Decimal("0.99")
_CENTS = Decimal("0.01")


class FieldDescription(NamedTuple):
    """Static description of one attribute of a variant."""

    name: str
    type_name: str
    required: bool


_BASE_FIELDS: tuple[FieldDescription, ...] = (
    FieldDescription("id", "int", False),
    FieldDescription("name", "str", True),
    FieldDescription("duration_seconds", "int", True),
    FieldDescription("creator", "str", True),
)


def _is_blank(value: str | None) -> bool:
    return value is None or not str(value).strip()


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass
class MediaRecord(ABC):
    """Base attributes shared by every media variant."""

    VARIANT: ClassVar[MediaType]
    FIELDS: ClassVar[tuple[FieldDescription, ...]] = _BASE_FIELDS

    name: str
    duration_seconds: int
    creator: str
    id: int | None = None

    @property
    def variant_tag(self) -> MediaType:
        return self.VARIANT

    @property
    @abstractmethod
    def description(self) -> str:
        """One-line human readable summary."""

    @property
    def formatted_duration(self) -> str:
        minutes, seconds = divmod(self.duration_seconds, 60)
        return f"{minutes}:{seconds:02d}"

    @classmethod
    def describe_fields(cls) -> tuple[FieldDescription, ...]:
        return cls.FIELDS

    def validate(self) -> None:
        """Raise InvalidInputError on the first field that breaks an invariant."""
        if _is_blank(self.name):
            raise InvalidInputError("Media name cannot be empty")
        if not _is_int(self.duration_seconds) or self.duration_seconds <= 0:
            raise InvalidInputError("Duration must be greater than 0")
        if _is_blank(self.creator):
            raise InvalidInputError("Creator name cannot be empty")

    def is_valid(self) -> bool:
        try:
            self.validate()
        except InvalidInputError:
            return False
        return True

    def with_id(self, media_id: int) -> MediaRecord:
        return dataclasses.replace(self, id=media_id)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"type": self.variant_tag.value}
        for field in self.describe_fields():
            value = getattr(self, field.name)
            payload[field.name] = str(value) if isinstance(value, Decimal) else value
        return payload

    def __str__(self) -> str:
        return f"{self.variant_tag.value}: {self.name} by {self.creator} [{self.formatted_duration}]"


@dataclass
class Song(MediaRecord):
    """A music track."""

    VARIANT: ClassVar[MediaType] = MediaType.SONG
    FIELDS: ClassVar[tuple[FieldDescription, ...]] = _BASE_FIELDS + (
        FieldDescription("album", "str", False),
        FieldDescription("genre", "str", False),
        FieldDescription("price", "Decimal", False),
    )

    album: str | None = None
    genre: str | None = None
    price: Decimal = DEFAULT_SONG_PRICE

    def __post_init__(self) -> None:
        if self.price is None:
            self.price = DEFAULT_SONG_PRICE
        try:
            price = Decimal(str(self.price))
            if not price.is_finite():
                raise InvalidOperation
            self.price = price.quantize(_CENTS, rounding=ROUND_HALF_UP)
        except InvalidOperation:
            raise InvalidInputError(f"Song price is not a number: {self.price!r}") from None

    @property
    def description(self) -> str:
        return (
            f"Song: '{self.name}' by {self.creator} from album '{self.album or 'Unknown'}' "
            f"(Genre: {self.genre or 'Unknown'})"
        )

    def total_price(self, quantity: int) -> Decimal:
        return self.price * quantity

    def validate(self) -> None:
        super().validate()
        if self.price < 0:
            raise InvalidInputError("Song price cannot be negative")


@dataclass
class Podcast(MediaRecord):
    """A podcast episode. The host defaults to the creator."""

    VARIANT: ClassVar[MediaType] = MediaType.PODCAST
    FIELDS: ClassVar[tuple[FieldDescription, ...]] = _BASE_FIELDS + (
        FieldDescription("host", "str", True),
        FieldDescription("episode_number", "int", False),
        FieldDescription("category", "str", False),
    )

    host: str | None = None
    episode_number: int = 0
    category: str | None = None

    def __post_init__(self) -> None:
        if self.host is None:
            self.host = self.creator

    @property
    def description(self) -> str:
        return (
            f"Podcast: '{self.name}' hosted by {self.host} "
            f"(Episode #{self.episode_number}, Category: {self.category or 'General'})"
        )

    def validate(self) -> None:
        super().validate()
        if _is_blank(self.host):
            raise InvalidInputError("Podcast host cannot be empty")
        if not _is_int(self.episode_number) or self.episode_number < 0:
            raise InvalidInputError("Episode number cannot be negative")


VARIANTS: dict[MediaType, type[MediaRecord]] = {
    MediaType.SONG: Song,
    MediaType.PODCAST: Podcast,
}
