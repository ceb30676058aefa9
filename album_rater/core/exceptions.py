"""Custom exceptions for the album rater application."""

from typing import Optional


class AlbumRaterError(Exception):
    """Base exception for all album rater errors."""

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class ValidationError(AlbumRaterError):
    """Raised when a submission violates an input constraint."""

    def __init__(
        self, message: str, field: Optional[str] = None, details: Optional[str] = None
    ):
        super().__init__(message, details)
        self.field = field


class NotFoundError(AlbumRaterError):
    """Raised when a write path references a track or album that does not exist."""

    def __init__(
        self,
        message: str,
        track_id: Optional[str] = None,
        album_id: Optional[str] = None,
        details: Optional[str] = None,
    ):
        super().__init__(message, details)
        self.track_id = track_id
        self.album_id = album_id


class StorageError(AlbumRaterError):
    """Raised when ratings database operations fail."""

    def __init__(
        self, message: str, db_path: Optional[str] = None, details: Optional[str] = None
    ):
        super().__init__(message, details)
        self.db_path = db_path


class CatalogError(AlbumRaterError):
    """Raised when the album catalog is unreachable or returns unusable data."""

    def __init__(
        self,
        message: str,
        release_id: Optional[str] = None,
        details: Optional[str] = None,
    ):
        super().__init__(message, details)
        self.release_id = release_id


class ExportError(AlbumRaterError):
    """Raised when a tracklist export fails."""

    def __init__(
        self,
        message: str,
        file_path: Optional[str] = None,
        export_format: Optional[str] = None,
        details: Optional[str] = None,
    ):
        super().__init__(message, details)
        self.file_path = file_path
        self.export_format = export_format
