from __future__ import annotations

import typer

from ...domain import sorting
from ...domain.playlist import Playlist
from ...infra.exceptions import InvalidInputError
from ._common import echo_json, open_services, reported_errors

app = typer.Typer(name="playlist", help="Playlist and membership operations")


def _echo_playlist(playlist: Playlist, header: str) -> None:
    typer.echo(header)
    typer.echo(f"  ID: {playlist.id}")
    typer.echo(f"  Name: {playlist.name}")
    if playlist.description:
        typer.echo(f"  Description: {playlist.description}")
    typer.echo(f"  Items: {playlist.item_count}")
    for position, item in enumerate(playlist.items, start=1):
        typer.echo(f"    {position}. [{item.id}] {item}")


@app.command("create")
def create_playlist(
    name: str = typer.Argument(..., help="Playlist name (unique, case-insensitive)"),
    description: str | None = typer.Option(None, "--description", help="Free-text description"),
    items: list[int] | None = typer.Option(None, "--item", help="Media ID to include (repeatable)"),
    json_output: bool = typer.Option(False, "--json", help="Output in JSON format"),
):
    """Create a playlist, optionally with initial items.

    Examples:
        musiclibrary playlist create Favorites --item 1 --item 3
    """
    with reported_errors(json_output, "creating playlist"):
        with open_services() as services:
            records = [services.media.get_media_by_id(media_id) for media_id in items or []]
            created = services.playlists.create_playlist(
                Playlist(name=name, description=description, items=records)
            )

        if json_output:
            echo_json({"playlist": created.to_dict()})
        else:
            _echo_playlist(created, "Playlist created:")


@app.command("list")
def list_playlists(
    by_size: bool = typer.Option(False, "--by-size", help="Largest playlists first"),
    json_output: bool = typer.Option(False, "--json", help="Output in JSON format"),
):
    """List all playlists."""
    with reported_errors(json_output, "listing playlists"):
        with open_services() as services:
            playlists = services.playlists.get_all_playlists()

        if by_size:
            playlists = sorting.sort_playlists_by_size(playlists)

        if json_output:
            echo_json({"total": len(playlists), "playlists": [p.to_dict() for p in playlists]})
            return

        if not playlists:
            typer.echo("No playlists found")
            return
        for playlist in playlists:
            typer.echo(f"  [{playlist.id}] {playlist}")


@app.command("show")
def show_playlist(
    playlist_id: int | None = typer.Argument(None, help="Playlist ID"),
    name: str | None = typer.Option(None, "--name", help="Look up by name (case-insensitive)"),
    json_output: bool = typer.Option(False, "--json", help="Output in JSON format"),
):
    """Show a playlist and its items, by ID or by name."""
    with reported_errors(json_output, "showing playlist"):
        if (playlist_id is None) == (name is None):
            raise InvalidInputError("Provide exactly one of PLAYLIST_ID or --name")

        with open_services() as services:
            if playlist_id is not None:
                playlist = services.playlists.get_playlist_by_id(playlist_id)
            else:
                playlist = services.playlists.get_playlist_by_name(name)

        if json_output:
            echo_json({"playlist": playlist.to_dict()})
        else:
            _echo_playlist(playlist, "Playlist:")


@app.command("update")
def update_playlist(
    playlist_id: int = typer.Argument(..., help="Playlist ID"),
    name: str | None = typer.Option(None, "--name", help="New name"),
    description: str | None = typer.Option(None, "--description", help="New description"),
    json_output: bool = typer.Option(False, "--json", help="Output in JSON format"),
):
    """Rename a playlist or change its description."""
    with reported_errors(json_output, "updating playlist"):
        if name is None and description is None:
            raise InvalidInputError("At least one field must be provided for update")

        with open_services() as services:
            current = services.playlists.get_playlist_by_id(playlist_id)
            updated = services.playlists.update_playlist(
                playlist_id,
                Playlist(
                    name=name if name is not None else current.name,
                    description=description if description is not None else current.description,
                ),
            )

        if json_output:
            echo_json({"playlist": updated.to_dict()})
        else:
            _echo_playlist(updated, "Playlist updated:")


@app.command("delete")
def delete_playlist(
    playlist_id: int = typer.Argument(..., help="Playlist ID"),
    json_output: bool = typer.Option(False, "--json", help="Output in JSON format"),
):
    """Delete a playlist and all of its memberships."""
    with reported_errors(json_output, "deleting playlist"):
        with open_services() as services:
            services.playlists.delete_playlist(playlist_id)

        if json_output:
            echo_json({"id": playlist_id, "deleted": True})
        else:
            typer.echo(f"Playlist {playlist_id} deleted")


@app.command("add")
def add_member(
    playlist_id: int = typer.Argument(..., help="Playlist ID"),
    media_id: int = typer.Argument(..., help="Media ID"),
    json_output: bool = typer.Option(False, "--json", help="Output in JSON format"),
):
    """Append a media record to a playlist (no-op if already a member)."""
    with reported_errors(json_output, "adding media to playlist"):
        with open_services() as services:
            added = services.playlists.add_media_to_playlist(playlist_id, media_id)

        if json_output:
            echo_json({"playlist_id": playlist_id, "media_id": media_id, "added": added})
        elif added:
            typer.echo(f"Media {media_id} added to playlist {playlist_id}")
        else:
            typer.echo(f"Media {media_id} is already in playlist {playlist_id}")


@app.command("remove")
def remove_member(
    playlist_id: int = typer.Argument(..., help="Playlist ID"),
    media_id: int = typer.Argument(..., help="Media ID"),
    json_output: bool = typer.Option(False, "--json", help="Output in JSON format"),
):
    """Remove a media record from a playlist (no-op if not a member)."""
    with reported_errors(json_output, "removing media from playlist"):
        with open_services() as services:
            removed = services.playlists.remove_media_from_playlist(playlist_id, media_id)

        if json_output:
            echo_json({"playlist_id": playlist_id, "media_id": media_id, "removed": removed})
        elif removed:
            typer.echo(f"Media {media_id} removed from playlist {playlist_id}")
        else:
            typer.echo(f"Media {media_id} is not in playlist {playlist_id}")
