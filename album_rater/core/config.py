"""Configuration constants and settings for album rater."""

import os
from enum import Enum
from pathlib import Path
from typing import Optional


class RatingConfig:
    """Track rating constants."""

    MIN_SCORE = 0
    MAX_SCORE = 20
    DEFAULT_SCORE = 10

    # Order matters: this is the column order in storage and display
    DIMENSIONS = ("beat", "lyrics", "flow", "content", "replay_value")

    # Album scores are reported on a 0-10 scale
    ALBUM_SCALE = 10
    DISPLAY_PRECISION = 1


class StoreConfig:
    """SQLite store configuration."""

    DB_ENV_VAR = "ALBUM_RATER_DB"
    DEFAULT_DB_NAME = "ratings.db"
    BUSY_TIMEOUT_SECONDS = 10.0


class CatalogConfig:
    """Catalog (Discogs) configuration."""

    TOKEN_ENV_VAR = "DISCOGS_API_TOKEN"
    USER_AGENT = "AlbumRater/1.0"
    DEFAULT_SEARCH_LIMIT = 10
    SEARCH_TYPE = "release"
    ARTIST_SEPARATOR = ", "
    GENRE_SEPARATOR = ", "


class ExportConfig:
    """Tracklist export configuration."""

    CSV_HEADERS = ["Track Number", "Track Name", "Duration"]
    FILENAME_SUFFIX = " - Tracklist"


class SortKey(Enum):
    """Fields a rated collection can be ordered by."""

    RATING = "rating"
    NAME = "name"
    ARTIST = "artist"
    YEAR = "year"


class SortOrder(Enum):
    """Sort direction."""

    ASC = "asc"
    DESC = "desc"

    @property
    def reverse(self) -> bool:
        """Whether this direction reverses the natural order."""
        return self is SortOrder.DESC


class ExportFormat(Enum):
    """Supported tracklist export formats."""

    CSV = "csv"
    HTML = "html"
    TEXT = "text"

    @property
    def extension(self) -> str:
        """File extension for this format."""
        if self is ExportFormat.TEXT:
            return ".txt"
        return f".{self.value}"


class AppInfo:
    """Application metadata."""

    NAME = "album-rater"
    VERSION = "1.0.0"
    DESCRIPTION = "Search albums, rate tracks and browse your rated collection"


class Paths:
    """Default paths and directories."""

    @staticmethod
    def get_data_dir() -> Path:
        """Get default data directory."""
        return Path.home() / ".album-rater"

    @staticmethod
    def get_db_path(override: Optional[Path] = None) -> Path:
        """Resolve the ratings database path.

        An explicit override wins, then the ALBUM_RATER_DB environment
        variable, then the default location in the data directory.
        """
        if override is not None:
            return override
        env_path = os.getenv(StoreConfig.DB_ENV_VAR)
        if env_path:
            return Path(env_path).expanduser()
        return Paths.get_data_dir() / StoreConfig.DEFAULT_DB_NAME

    @staticmethod
    def ensure_dir(path: Path) -> Path:
        """Ensure directory exists and return it."""
        path.mkdir(parents=True, exist_ok=True)
        return path
