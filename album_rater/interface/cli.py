"""CLI commands for the album rater application."""

import locale
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from ..catalog.services import CatalogService
from ..core.config import AppInfo, CatalogConfig, ExportFormat, Paths, RatingConfig
from ..core.exceptions import AlbumRaterError, ExportError, NotFoundError
from ..ratings.collection import parse_sort_option
from ..ratings.database import RatingDatabase
from ..ratings.models import CollectionQuery, RatingSubmission
from ..ratings.services import RatingService
from .display import ProgressTracker, RatingDisplay
from .export import default_export_path, export_tracklist, write_export

# Initialize Rich console and Typer app
console = Console()
app = typer.Typer(
    name=AppInfo.NAME,
    help=AppInfo.DESCRIPTION,
    rich_markup_mode="rich",
    no_args_is_help=True,
)

# Initialize display components
display = RatingDisplay(console)
progress = ProgressTracker(console)


def handle_error(error: Exception) -> None:
    """Centralized error handling."""
    if isinstance(error, AlbumRaterError):
        display.show_error_message(error.message)
        if error.details:
            console.print(f"[dim]Details: {error.details}[/dim]")
    else:
        display.show_error_message(f"Unexpected error: {str(error)}")

    raise typer.Exit(1)


def get_catalog() -> CatalogService:
    """Build the catalog client from the environment."""
    return CatalogService()


def get_rating_service(ctx: typer.Context) -> RatingService:
    """Build the rating service for the database chosen on the command line."""
    return RatingService(RatingDatabase(ctx.obj.get("db_path")))


def _configure_collation() -> None:
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error:
        logging.getLogger(__name__).debug("System collation locale unavailable, using C")


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable verbose output"
    ),
    db_path: Optional[Path] = typer.Option(
        None,
        "--db",
        help="Ratings database file (defaults to $ALBUM_RATER_DB or ~/.album-rater/ratings.db)",
    ),
):
    """Search albums, rate tracks and browse your rated collection."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["db_path"] = Paths.get_db_path(db_path)

    _configure_logging(verbose)
    _configure_collation()

    if ctx.invoked_subcommand and ctx.invoked_subcommand != "--help":
        display.show_app_header()


@app.command()
def search(
    query: str = typer.Argument(help="Free-text album search"),
    limit: int = typer.Option(
        CatalogConfig.DEFAULT_SEARCH_LIMIT, "--limit", "-l", help="Maximum number of results"
    ),
):
    """Search the catalog for albums."""
    try:
        catalog = get_catalog()

        with progress.processing_progress("Searching catalog..."):
            results = catalog.search_albums(query, limit=limit)

        if not results:
            console.print("[yellow]No results found.[/yellow]")
            return

        display.show_search_results(results)

    except AlbumRaterError as e:
        handle_error(e)


@app.command()
def album(
    ctx: typer.Context,
    release_id: str = typer.Argument(help="Catalog release ID"),
):
    """Show an album's tracklist with your scores."""
    try:
        catalog = get_catalog()
        service = get_rating_service(ctx)

        with progress.processing_progress("Fetching album..."):
            album_info, tracks = catalog.get_album(release_id)

        stored = {}
        for track in tracks:
            saved = service.get_track(track.id)
            if saved is not None:
                stored[track.id] = saved

        album_score = service.get_album_score(album_info.id)
        display.show_album_tracks(album_info, tracks, stored, album_score)

    except AlbumRaterError as e:
        handle_error(e)


@app.command()
def rate(
    ctx: typer.Context,
    track_id: str = typer.Argument(help="Track ID (see the album command)"),
    beat: int = typer.Option(RatingConfig.DEFAULT_SCORE, "--beat", help="Beat (0-20)"),
    lyrics: int = typer.Option(
        RatingConfig.DEFAULT_SCORE, "--lyrics", help="Lyrics (0-20)"
    ),
    flow: int = typer.Option(RatingConfig.DEFAULT_SCORE, "--flow", help="Flow (0-20)"),
    content: int = typer.Option(
        RatingConfig.DEFAULT_SCORE, "--content", help="Content (0-20)"
    ),
    replay_value: int = typer.Option(
        RatingConfig.DEFAULT_SCORE, "--replay-value", help="Replay value (0-20)"
    ),
    notes: Optional[str] = typer.Option(None, "--notes", "-n", help="Free-text notes"),
    release_id: Optional[str] = typer.Option(
        None,
        "--release",
        "-r",
        help="Release ID to register the track from before rating",
    ),
):
    """Rate a track on five dimensions."""
    try:
        service = get_rating_service(ctx)

        if release_id:
            catalog = get_catalog()
            with progress.processing_progress("Fetching album..."):
                album_info, track = catalog.find_track(release_id, track_id)
            service.register_track(track, album_info)

        rating = service.submit_rating(
            RatingSubmission(
                track_id=track_id,
                beat=beat,
                lyrics=lyrics,
                flow=flow,
                content=content,
                replay_value=replay_value,
                notes=notes,
            )
        )

        display.show_rating(rating)
        display.show_success_message(f"Rating saved for {track_id}")

        saved = service.get_track(track_id)
        if saved is not None and saved.is_skit_or_interlude:
            display.show_warning_message(
                "Track is marked as skit/interlude and does not count toward the album"
            )

    except AlbumRaterError as e:
        handle_error(e)


@app.command()
def skit(
    ctx: typer.Context,
    track_id: str = typer.Argument(help="Track ID"),
    release_id: str = typer.Option(..., "--release", "-r", help="Release ID of the track"),
    off: bool = typer.Option(
        False, "--off", help="Unmark the track so it counts again"
    ),
):
    """Mark a track as skit/interlude so it is left out of album scores."""
    try:
        catalog = get_catalog()
        service = get_rating_service(ctx)

        with progress.processing_progress("Fetching album..."):
            album_info, track = catalog.find_track(release_id, track_id)

        saved = service.set_skit_or_interlude(track, album_info, not off)

        state = "marked as skit/interlude" if saved.is_skit_or_interlude else "counted as a track"
        display.show_success_message(f"{saved.name} is now {state}")
        if saved.rating is not None and saved.is_skit_or_interlude:
            display.show_info_message(
                "Existing rating kept; it is ignored while the track is a skit/interlude"
            )

    except AlbumRaterError as e:
        handle_error(e)


@app.command()
def score(
    ctx: typer.Context,
    album_id: str = typer.Argument(help="Album ID"),
):
    """Show the score of a stored album."""
    try:
        service = get_rating_service(ctx)

        album_info = service.get_album(album_id)
        if album_info is None:
            raise NotFoundError(f"Album {album_id} has no saved tracks", album_id=album_id)

        album_score, breakdown = service.get_album_report(album_id)
        display.show_album_score(album_info, album_score, breakdown)

    except AlbumRaterError as e:
        handle_error(e)


@app.command()
def collection(
    ctx: typer.Context,
    name: Optional[str] = typer.Option(None, "--name", help="Album name contains"),
    year: Optional[int] = typer.Option(None, "--year", help="Release year"),
    decade: Optional[int] = typer.Option(None, "--decade", help="Release decade, e.g. 1990"),
    genre: Optional[str] = typer.Option(None, "--genre", help="Genre contains"),
    sort: str = typer.Option(
        "rating-desc",
        "--sort",
        "-s",
        help="rating|name|artist|year, optionally suffixed with -asc or -desc",
    ),
):
    """Browse rated albums with filters and sorting."""
    try:
        service = get_rating_service(ctx)
        sort_by, sort_order = parse_sort_option(sort)

        query = CollectionQuery(
            name=name,
            year=year,
            decade=decade,
            genre=genre,
            sort_by=sort_by,
            sort_order=sort_order,
        )
        albums = service.get_collection(query)
        decades, _ = service.get_collection_periods()

        display.show_collection(albums, decades)
        if not albums and query.has_filters:
            display.show_info_message("Try clearing some filters")

    except AlbumRaterError as e:
        handle_error(e)


@app.command()
def export(
    release_id: str = typer.Argument(help="Catalog release ID"),
    export_format: str = typer.Option(
        "csv", "--format", "-f", help="Export format (csv, html, text)"
    ),
    output_file: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Output file"
    ),
):
    """Export an album tracklist."""
    try:
        try:
            format_enum = ExportFormat(export_format.lower())
        except ValueError:
            raise ExportError(
                f"Unsupported format: {export_format}", export_format=export_format
            )

        catalog = get_catalog()
        with progress.processing_progress("Fetching album..."):
            album_info, tracks = catalog.get_album(release_id)

        content = export_tracklist(album_info, tracks, format_enum)
        path = write_export(content, output_file or default_export_path(album_info, format_enum))
        display.show_success_message(f"Tracklist saved to {path}")

    except AlbumRaterError as e:
        handle_error(e)


@app.command()
def stats(ctx: typer.Context):
    """Show ratings database statistics."""
    try:
        service = get_rating_service(ctx)
        display.show_stats(service.db.get_database_stats())

    except AlbumRaterError as e:
        handle_error(e)
