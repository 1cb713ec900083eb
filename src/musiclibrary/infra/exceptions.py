"""
Custom exceptions for music library operations.

Stores raise StorageFailureError, NotFoundError and CorruptDataError only.
Services add InvalidInputError and DuplicateResourceError and re-raise the
store errors unchanged.
"""

from __future__ import annotations


class MusicLibraryError(Exception):
    """Base exception for all music library errors."""

    pass


class InvalidInputError(MusicLibraryError):
    """Raised when field validation or a business rule on input fails."""

    pass


class DuplicateResourceError(MusicLibraryError):
    """Raised when a uniqueness rule would be violated."""

    def __init__(self, resource: str, identifier: object):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} already exists: {identifier}")


class NotFoundError(MusicLibraryError):
    """Raised when a referenced entity does not exist."""

    def __init__(self, resource: str, identifier: object):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class StorageFailureError(MusicLibraryError):
    """Raised when the backend fails; the original error is chained as __cause__."""

    pass


class CorruptDataError(MusicLibraryError):
    """Raised when a stored row cannot be mapped (e.g. unknown discriminator)."""

    pass
