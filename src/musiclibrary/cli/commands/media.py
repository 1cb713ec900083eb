from __future__ import annotations

import dataclasses
from decimal import Decimal
from typing import Any

import typer

from ...domain import sorting
from ...domain.media import VARIANTS, MediaRecord, Podcast, Song
from ...infra.exceptions import InvalidInputError
from ...shared.types import MediaType
from ._common import echo_json, open_services, reported_errors

app = typer.Typer(name="media", help="Song and podcast catalog operations")


def _echo_record(record: MediaRecord, header: str) -> None:
    typer.echo(header)
    typer.echo(f"  ID: {record.id}")
    typer.echo(f"  Type: {record.variant_tag.value}")
    typer.echo(f"  Name: {record.name}")
    typer.echo(f"  Creator: {record.creator}")
    typer.echo(f"  Duration: {record.formatted_duration}")
    if isinstance(record, Song):
        typer.echo(f"  Album: {record.album or 'N/A'}")
        typer.echo(f"  Genre: {record.genre or 'N/A'}")
        typer.echo(f"  Price: ${record.price}")
    elif isinstance(record, Podcast):
        typer.echo(f"  Host: {record.host}")
        typer.echo(f"  Episode: #{record.episode_number}")
        typer.echo(f"  Category: {record.category or 'N/A'}")


def _parse_price(price: str | None) -> Decimal | None:
    if price is None:
        return None
    try:
        return Decimal(price)
    except ArithmeticError:
        raise InvalidInputError(f"Price must be a decimal number, got '{price}'") from None


@app.command("add-song")
def add_song(
    name: str = typer.Option(..., "--name", help="Song title"),
    duration: int = typer.Option(..., "--duration", help="Duration in seconds"),
    creator: str = typer.Option(..., "--creator", help="Artist"),
    album: str | None = typer.Option(None, "--album", help="Album title"),
    genre: str | None = typer.Option(None, "--genre", help="Genre"),
    price: str = typer.Option("0.99", "--price", help="Price (non-negative decimal)"),
    json_output: bool = typer.Option(False, "--json", help="Output in JSON format"),
):
    """Add a song to the catalog.

    Examples:
        musiclibrary media add-song --name Imagine --duration 180 --creator "John Lennon"
    """
    with reported_errors(json_output, "creating song"):
        song = Song(
            name=name,
            duration_seconds=duration,
            creator=creator,
            album=album,
            genre=genre,
            price=_parse_price(price),
        )
        with open_services() as services:
            created = services.media.create_media(song)

        if json_output:
            echo_json({"media": created.to_dict()})
        else:
            _echo_record(created, "Song created:")


@app.command("add-podcast")
def add_podcast(
    name: str = typer.Option(..., "--name", help="Episode title"),
    duration: int = typer.Option(..., "--duration", help="Duration in seconds"),
    creator: str = typer.Option(..., "--creator", help="Publisher / creator"),
    host: str | None = typer.Option(None, "--host", help="Host (defaults to creator)"),
    episode: int = typer.Option(0, "--episode", help="Episode number"),
    category: str | None = typer.Option(None, "--category", help="Category"),
    json_output: bool = typer.Option(False, "--json", help="Output in JSON format"),
):
    """Add a podcast episode to the catalog."""
    with reported_errors(json_output, "creating podcast"):
        podcast = Podcast(
            name=name,
            duration_seconds=duration,
            creator=creator,
            host=host,
            episode_number=episode,
            category=category,
        )
        with open_services() as services:
            created = services.media.create_media(podcast)

        if json_output:
            echo_json({"media": created.to_dict()})
        else:
            _echo_record(created, "Podcast created:")


@app.command("list")
def list_media(
    media_type: str | None = typer.Option(None, "--type", help="Filter by type: song or podcast"),
    creator: str | None = typer.Option(None, "--creator", help="Filter by creator (case-insensitive)"),
    search: str | None = typer.Option(None, "--search", help="Name contains (case-insensitive)"),
    min_duration: int | None = typer.Option(None, "--min-duration", help="Minimum duration in seconds"),
    sort: str | None = typer.Option(None, "--sort", help="Sort by: name, duration, creator, type"),
    json_output: bool = typer.Option(False, "--json", help="Output in JSON format"),
):
    """List catalog media, optionally filtered and sorted.

    Examples:
        musiclibrary media list
        musiclibrary media list --type podcast --sort duration
    """
    with reported_errors(json_output, "listing media"):
        with open_services() as services:
            if media_type is not None:
                records = services.media.get_media_by_variant(media_type)
            elif creator is not None:
                records = services.media.get_media_by_creator(creator)
            elif search is not None:
                records = services.media.search_media_by_name(search)
            else:
                records = services.media.get_all_media()

        if min_duration is not None:
            records = sorting.filter_by_min_duration(records, min_duration)
        if sort is not None:
            try:
                records = sorting.sort_media(records, sort)
            except ValueError as e:
                raise InvalidInputError(str(e)) from e

        if json_output:
            echo_json(
                {
                    "total": len(records),
                    "total_duration_seconds": sorting.total_duration(records),
                    "media": [record.to_dict() for record in records],
                }
            )
            return

        if not records:
            typer.echo("No media found")
            return
        for record in records:
            typer.echo(f"  [{record.id}] {record}")
        counts = sorting.count_by_type(records)
        typer.echo(
            f"Total: {len(records)} ({counts[MediaType.SONG]} songs, "
            f"{counts[MediaType.PODCAST]} podcasts)"
        )


@app.command("show")
def show_media(
    media_id: int = typer.Argument(..., help="Media ID"),
    json_output: bool = typer.Option(False, "--json", help="Output in JSON format"),
):
    """Show one media record."""
    with reported_errors(json_output, "showing media"):
        with open_services() as services:
            record = services.media.get_media_by_id(media_id)

        if json_output:
            echo_json({"media": record.to_dict()})
        else:
            _echo_record(record, record.description)


@app.command("update")
def update_media(
    media_id: int = typer.Argument(..., help="Media ID"),
    name: str | None = typer.Option(None, "--name", help="New name"),
    duration: int | None = typer.Option(None, "--duration", help="New duration in seconds"),
    creator: str | None = typer.Option(None, "--creator", help="New creator"),
    album: str | None = typer.Option(None, "--album", help="Song only: new album"),
    genre: str | None = typer.Option(None, "--genre", help="Song only: new genre"),
    price: str | None = typer.Option(None, "--price", help="Song only: new price"),
    host: str | None = typer.Option(None, "--host", help="Podcast only: new host"),
    episode: int | None = typer.Option(None, "--episode", help="Podcast only: new episode number"),
    category: str | None = typer.Option(None, "--category", help="Podcast only: new category"),
    json_output: bool = typer.Option(False, "--json", help="Output in JSON format"),
):
    """Update fields of a media record. The type never changes."""
    with reported_errors(json_output, "updating media"):
        changes: dict[str, Any] = {
            "name": name,
            "duration_seconds": duration,
            "creator": creator,
            "album": album,
            "genre": genre,
            "price": _parse_price(price),
            "host": host,
            "episode_number": episode,
            "category": category,
        }
        changes = {key: value for key, value in changes.items() if value is not None}
        if not changes:
            raise InvalidInputError("At least one field must be provided for update")

        with open_services() as services:
            current = services.media.get_media_by_id(media_id)
            allowed = {field.name for field in current.describe_fields()}
            foreign = sorted(set(changes) - allowed)
            if foreign:
                raise InvalidInputError(
                    f"{current.variant_tag.value} has no field(s): {', '.join(foreign)}"
                )
            updated = services.media.update_media(media_id, dataclasses.replace(current, **changes))

        if json_output:
            echo_json({"media": updated.to_dict()})
        else:
            _echo_record(updated, "Media updated:")


@app.command("delete")
def delete_media(
    media_id: int = typer.Argument(..., help="Media ID"),
    json_output: bool = typer.Option(False, "--json", help="Output in JSON format"),
):
    """Delete a media record; it is removed from every playlist."""
    with reported_errors(json_output, "deleting media"):
        with open_services() as services:
            services.media.delete_media(media_id)

        if json_output:
            echo_json({"id": media_id, "deleted": True})
        else:
            typer.echo(f"Media {media_id} deleted")


@app.command("fields")
def describe_fields(
    media_type: str = typer.Argument(..., help="song or podcast"),
    json_output: bool = typer.Option(False, "--json", help="Output in JSON format"),
):
    """Describe the attributes of a media type."""
    with reported_errors(json_output, "describing fields"):
        try:
            variant = VARIANTS[MediaType.parse(media_type)]
        except ValueError as e:
            raise InvalidInputError(str(e)) from e
        fields = variant.describe_fields()

        if json_output:
            echo_json(
                {
                    "type": variant.VARIANT.value,
                    "fields": [field._asdict() for field in fields],
                }
            )
            return

        typer.echo(f"{variant.VARIANT.value} fields:")
        for field in fields:
            marker = " (required)" if field.required else ""
            typer.echo(f"  {field.name}: {field.type_name}{marker}")
