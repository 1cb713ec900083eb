"""
Main CLI application using Typer.

This module provides the command-line interface for the music library,
calling the media and playlist services and outputting JSON when requested.
"""

from __future__ import annotations

import json

import typer

from ..infra.db import create_schema, get_engine
from ..infra.logging import configure_logging
from .commands import media, playlist
from .commands._common import reported_errors

app = typer.Typer(help="Music library operator CLI")
db_app = typer.Typer(name="db", help="Database maintenance operations")

app.add_typer(media.app, name="media", help="Song and podcast catalog operations")
app.add_typer(playlist.app, name="playlist", help="Playlist and membership operations")
app.add_typer(db_app, name="db", help="Database maintenance operations")


@db_app.command("init")
def init_db(
    json_output: bool = typer.Option(False, "--json", help="Output in JSON format"),
):
    """Create any missing tables in the configured database."""
    with reported_errors(json_output, "initializing database"):
        engine = get_engine()
        try:
            create_schema(engine)
        finally:
            engine.dispose()

        if json_output:
            typer.echo(json.dumps({"status": "ok", "initialized": True}, indent=2))
        else:
            typer.echo("Database initialized")


@app.callback()
def main(
    log_level: str | None = typer.Option(None, "--log-level", help="Override LOG_LEVEL"),
):
    """Music library - songs, podcasts and playlists."""
    configure_logging(log_level)


def cli():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    cli()
