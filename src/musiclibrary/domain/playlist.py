from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..infra.exceptions import InvalidInputError
from .media import MediaRecord


@dataclass
class Playlist:
    """An ordered collection of media records."""

    name: str
    description: str | None = None
    items: list[MediaRecord] = field(default_factory=list)
    id: int | None = None

    def validate(self, require_items: bool = False) -> None:
        if self.name is None or not self.name.strip():
            raise InvalidInputError("Playlist name cannot be empty")
        if require_items and not self.items:
            raise InvalidInputError("Playlist must contain at least one media item")

    def is_valid(self, require_items: bool = False) -> bool:
        try:
            self.validate(require_items=require_items)
        except InvalidInputError:
            return False
        return True

    @property
    def item_count(self) -> int:
        return len(self.items)

    @property
    def total_duration(self) -> int:
        return sum(item.duration_seconds for item in self.items)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "total_duration_seconds": self.total_duration,
            "items": [item.to_dict() for item in self.items],
        }

    def __str__(self) -> str:
        return f"{self.name} ({self.item_count} items)"
