"""Rich console display components for album rater."""

from contextlib import contextmanager
from typing import Dict, List, Optional

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table
from rich.text import Text

from ..core.config import AppInfo, RatingConfig
from ..ratings.aggregation import track_score
from ..ratings.models import Album, AlbumScore, RatedAlbum, Rating, Track, TrackScore

NOT_RATED = "Not yet rated"


def format_score(score: Optional[float]) -> str:
    """Round a score for display; absent scores are never shown as zero."""
    if score is None:
        return NOT_RATED
    return f"{score:.{RatingConfig.DISPLAY_PRECISION}f}"


def format_rated_count(album_score: AlbumScore) -> str:
    """'N of M tracks rated'."""
    return (
        f"{album_score.rated_tracks} of {album_score.total_ratable_tracks} tracks rated"
    )


class RatingDisplay:
    """Handles all rich console output for ratings and the collection."""

    def __init__(self, console: Optional[Console] = None):
        """Initialize with optional console instance."""
        self.console = console or Console()

    def show_app_header(self) -> None:
        """Display application header with branding."""
        header_text = Text()
        header_text.append(AppInfo.NAME.upper(), style="bold blue")
        header_text.append(f" v{AppInfo.VERSION}", style="dim")
        header_text.append(f"\n{AppInfo.DESCRIPTION}", style="italic")

        panel = Panel(Align.center(header_text), border_style="blue", padding=(1, 2))
        self.console.print(panel)

    def show_search_results(self, results: List[dict]) -> None:
        """Display catalog search results in a formatted table."""
        table = Table(title="Catalog Search Results")
        table.add_column("Release ID", justify="right", style="cyan", no_wrap=True)
        table.add_column("Artist", style="magenta")
        table.add_column("Title", style="blue")
        table.add_column("Year", justify="right", style="green")
        table.add_column("Format", style="yellow")
        table.add_column("Label", style="dim")
        table.add_column("Country", style="dim")

        for result in results:
            table.add_row(
                result.get("id", ""),
                result.get("artist", "Unknown"),
                result.get("title", "Unknown"),
                str(result.get("year", "")) if result.get("year") else "",
                result.get("format") or "",
                result.get("label") or "",
                result.get("country") or "",
            )

        self.console.print(table)

    def show_album_tracks(
        self,
        album: Album,
        tracks: List[Track],
        stored: Dict[str, Track],
        album_score: AlbumScore,
    ) -> None:
        """Display a catalog tracklist merged with stored flags and ratings."""
        info_lines = [f"[bold blue]{album.artist} - {album.name}[/bold blue]"]
        if album.year:
            info_lines.append(f"Year: [green]{album.year}[/green]")
        if album.genre:
            info_lines.append(f"Genre: [yellow]{album.genre}[/yellow]")
        info_lines.append(f"Album ID: [dim]{album.id}[/dim]")
        info_lines.append(
            f"Album rating: [bold]{format_score(album_score.score)}[/bold] "
            f"[dim]({format_rated_count(album_score)})[/dim]"
        )
        self.console.print(
            Panel("\n".join(info_lines), title="Album Information", border_style="blue")
        )

        table = Table(title=f"Tracklist ({len(tracks)} tracks)")
        table.add_column("#", justify="right", style="cyan", no_wrap=True)
        table.add_column("Track ID", style="dim")
        table.add_column("Title", style="blue")
        table.add_column("Duration", justify="right", style="green")
        table.add_column("Score", justify="right", style="magenta")

        for track in tracks:
            saved = stored.get(track.id)
            if saved is not None and saved.is_skit_or_interlude:
                score_text = "[dim]skit/interlude[/dim]"
            elif saved is not None and saved.rating is not None:
                score_text = format_score(track_score(saved.rating))
            else:
                score_text = "[dim]-[/dim]"

            table.add_row(
                str(track.track_number or ""),
                track.id,
                track.name,
                track.duration_str,
                score_text,
            )

        self.console.print(table)

    def show_rating(self, rating: Rating) -> None:
        """Display a stored track rating."""
        table = Table(title=f"Rating for {rating.track_id}")
        table.add_column("Dimension", style="cyan")
        table.add_column("Score", justify="right", style="magenta")

        for name, value in zip(RatingConfig.DIMENSIONS, rating.dimensions):
            table.add_row(name.replace("_", " ").title(), str(value))
        table.add_row(
            "[bold]Track score[/bold]", f"[bold]{format_score(track_score(rating))}[/bold]"
        )

        self.console.print(table)
        if rating.notes:
            self.console.print(Panel(rating.notes, title="Notes", border_style="dim"))

    def show_album_score(
        self,
        album: Optional[Album],
        album_score: AlbumScore,
        breakdown: List[TrackScore],
    ) -> None:
        """Display an album score with per-track breakdown."""
        title = f"{album.artist} - {album.name}" if album else "Album"
        self.console.print(
            Panel.fit(
                f"[bold blue]{title}[/bold blue]\n"
                f"Rating: [bold]{format_score(album_score.score)}[/bold] / "
                f"{RatingConfig.ALBUM_SCALE}\n"
                f"[dim]{format_rated_count(album_score)}[/dim]",
                border_style="blue",
            )
        )

        if breakdown:
            table = Table(title="Rated Tracks")
            table.add_column("#", justify="right", style="cyan")
            table.add_column("Title", style="blue")
            table.add_column("Score", justify="right", style="magenta")
            for entry in breakdown:
                table.add_row(
                    str(entry.track_number or ""), entry.name, format_score(entry.score)
                )
            self.console.print(table)

    def show_collection(
        self, albums: List[RatedAlbum], decades: Optional[List[int]] = None
    ) -> None:
        """Display the rated album collection."""
        if decades:
            self.console.print(
                "[dim]Decades: " + ", ".join(f"{decade}s" for decade in decades) + "[/dim]"
            )

        if not albums:
            self.console.print("[yellow]No rated albums found.[/yellow]")
            return

        table = Table(title=f"Rated Albums ({len(albums)})")
        table.add_column("Rating", justify="right", style="magenta", no_wrap=True)
        table.add_column("Album", style="blue")
        table.add_column("Artist", style="cyan")
        table.add_column("Year", justify="right", style="green")
        table.add_column("Tracks Rated", style="dim")

        for rated in albums:
            table.add_row(
                format_score(rated.score),
                rated.album.name,
                rated.album.artist,
                str(rated.year) if rated.year else "",
                format_rated_count(rated.album_score),
            )

        self.console.print(table)

    def show_stats(self, stats: Dict[str, int]) -> None:
        """Display database statistics."""
        table = Table(title="Database Statistics")
        table.add_column("Metric", style="cyan")
        table.add_column("Count", justify="right", style="magenta")
        for key, value in stats.items():
            table.add_row(key.replace("_", " ").capitalize(), str(value))
        self.console.print(table)

    def show_success_message(self, message: str) -> None:
        """Display a success message."""
        self.console.print(f"[green]✓ {message}[/green]")

    def show_warning_message(self, message: str) -> None:
        """Display a warning message."""
        self.console.print(f"[yellow]⚠ {message}[/yellow]")

    def show_error_message(self, message: str) -> None:
        """Display an error message."""
        self.console.print(f"[red]✗ {message}[/red]")

    def show_info_message(self, message: str) -> None:
        """Display an informational message."""
        self.console.print(f"[blue]ℹ {message}[/blue]")


class ProgressTracker:
    """Manages spinners while waiting on the catalog."""

    def __init__(self, console: Optional[Console] = None):
        """Initialize with optional console instance."""
        self.console = console or Console()

    @contextmanager
    def processing_progress(self, description: str):
        """Context manager showing a spinner for an indeterminate task."""
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=self.console,
            transient=True,
        ) as progress:
            task = progress.add_task(description, total=None)
            yield progress, task
