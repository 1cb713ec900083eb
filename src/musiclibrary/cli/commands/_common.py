"""
Shared plumbing for CLI commands: service wiring and error reporting.

The CLI is the composition point: it owns the engine for the length of one
command, opens one unit of work, and is the only layer that catches library
errors to report them.
"""

from __future__ import annotations

import contextlib
import json
from collections.abc import Generator
from dataclasses import dataclass
from typing import Any

import typer
from sqlalchemy.exc import SQLAlchemyError

from ...infra.db import create_schema, get_engine, get_sessionmaker
from ...infra.exceptions import (
    CorruptDataError,
    DuplicateResourceError,
    InvalidInputError,
    MusicLibraryError,
    NotFoundError,
    StorageFailureError,
)
from ...infra.media_repository import MediaStore
from ...infra.playlist_repository import PlaylistStore
from ...infra.uow import session
from ...usecases import MediaCatalogService, PlaylistService

ERROR_CODES: dict[type[MusicLibraryError], str] = {
    InvalidInputError: "VALIDATION_ERROR",
    DuplicateResourceError: "DUPLICATE",
    NotFoundError: "NOT_FOUND",
    StorageFailureError: "STORAGE_ERROR",
    CorruptDataError: "CORRUPT_DATA",
}


@dataclass
class Services:
    media: MediaCatalogService
    playlists: PlaylistService


@contextlib.contextmanager
def open_services() -> Generator[Services, None, None]:
    """Wire stores and services on one unit of work; dispose the engine afterwards."""
    engine = get_engine()
    try:
        create_schema(engine)
        with session(get_sessionmaker(engine)) as db:
            media_store = MediaStore(db)
            playlist_store = PlaylistStore(db, media_store)
            yield Services(
                media=MediaCatalogService(media_store),
                playlists=PlaylistService(playlist_store, media_store),
            )
    finally:
        engine.dispose()


def error_code(exc: Exception) -> str:
    for exc_type, code in ERROR_CODES.items():
        if isinstance(exc, exc_type):
            return code
    if isinstance(exc, SQLAlchemyError):
        return "STORAGE_ERROR"
    return "UNKNOWN_ERROR"


@contextlib.contextmanager
def reported_errors(json_output: bool, action: str) -> Generator[None, None, None]:
    """Report any error raised in the block and exit with status 1."""
    try:
        yield
    except typer.Exit:
        raise
    except Exception as e:
        code = error_code(e)
        if json_output:
            typer.echo(json.dumps({"status": "error", "code": code, "message": str(e)}, indent=2))
        elif code == "UNKNOWN_ERROR":
            typer.echo(f"Error {action}: {e}", err=True)
        else:
            typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


def echo_json(payload: dict[str, Any]) -> None:
    typer.echo(json.dumps({"status": "ok", **payload}, indent=2))
