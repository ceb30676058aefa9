"""Tracklist export to CSV, HTML and plain text."""

import csv
import html
import io
from datetime import date
from pathlib import Path
from typing import List, Optional

from ..core.config import ExportConfig, ExportFormat
from ..core.exceptions import ExportError
from ..ratings.models import Album, Track


def format_mm_ss(duration_ms: Optional[int]) -> str:
    """Zero-padded minutes and seconds, e.g. 03:42."""
    if duration_ms is None:
        return ""
    total_seconds = duration_ms // 1000
    return f"{total_seconds // 60:02d}:{total_seconds % 60:02d}"


def tracklist_to_csv(album: Album, tracks: List[Track]) -> str:
    """Album/artist preamble followed by one CSV row per track."""
    buffer = io.StringIO()
    buffer.write(f"Album: {album.name}\n")
    buffer.write(f"Artist: {album.artist}\n")
    buffer.write("\n")

    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(ExportConfig.CSV_HEADERS)
    for track in tracks:
        writer.writerow(
            [
                track.track_number if track.track_number is not None else "",
                track.name,
                format_mm_ss(track.duration_ms),
            ]
        )
    return buffer.getvalue()


def tracklist_to_html(
    album: Album, tracks: List[Track], generated_on: Optional[date] = None
) -> str:
    """Standalone HTML page with an ordered tracklist."""
    generated_on = generated_on or date.today()
    name = html.escape(album.name)
    artist = html.escape(album.artist)
    items = "\n        ".join(f"<li>{html.escape(track.name)}</li>" for track in tracks)

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{name} - Track List</title>
    <style>
        body {{ font-family: sans-serif; max-width: 800px; margin: 2rem auto; padding: 0 1rem; line-height: 1.5; }}
        h1 {{ color: #333; border-bottom: 2px solid #eee; padding-bottom: 0.5rem; }}
        h2 {{ color: #666; font-size: 1.2rem; margin-bottom: 1.5rem; }}
        li {{ margin-bottom: 0.5rem; color: #444; }}
        footer {{ margin-top: 2rem; padding-top: 1rem; border-top: 1px solid #eee; color: #666; font-size: 0.9rem; }}
    </style>
</head>
<body>
    <h1>{name}</h1>
    <h2>by {artist}</h2>
    <ol>
        {items}
    </ol>
    <footer>
        Generated on {generated_on.isoformat()}
    </footer>
</body>
</html>
"""


def tracklist_to_text(album: Album, tracks: List[Track]) -> str:
    """Plain-text tracklist with durations."""
    lines = [f"{album.artist} - {album.name}", ""]
    for index, track in enumerate(tracks, 1):
        number = track.track_number if track.track_number is not None else index
        line = f"{number}. {track.name}"
        if track.duration_ms is not None:
            line += f" ({track.duration_str})"
        lines.append(line)
    return "\n".join(lines) + "\n"


def export_tracklist(
    album: Album, tracks: List[Track], export_format: ExportFormat
) -> str:
    """Render a tracklist in the requested format."""
    if export_format is ExportFormat.CSV:
        return tracklist_to_csv(album, tracks)
    if export_format is ExportFormat.HTML:
        return tracklist_to_html(album, tracks)
    if export_format is ExportFormat.TEXT:
        return tracklist_to_text(album, tracks)
    raise ExportError(f"Unsupported export format: {export_format}")


def default_export_path(album: Album, export_format: ExportFormat) -> Path:
    """<album name> - Tracklist.<ext> in the current directory."""
    safe_name = "".join(c for c in album.name if c not in '<>:"/\\|?*').strip() or album.id
    return Path.cwd() / f"{safe_name}{ExportConfig.FILENAME_SUFFIX}{export_format.extension}"


def write_export(content: str, output_path: Path) -> Path:
    """Write rendered export content to disk."""
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(content, encoding="utf-8")
        return output_path
    except OSError as e:
        raise ExportError(
            "Failed to write export", file_path=str(output_path), details=str(e)
        )
