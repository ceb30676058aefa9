"""Rating domain models."""

import re
from dataclasses import dataclass
from typing import Optional, List, Tuple

from ..core.config import RatingConfig, SortKey, SortOrder

_YEAR_PATTERN = re.compile(r"(\d{4})")


def parse_release_year(release_date: Optional[str]) -> Optional[int]:
    """Extract the calendar year from a free-form release date.

    Catalog dates come as "1994-05-03", "1994-05", "1994" or worse;
    the first four-digit run is taken as the year.
    """
    if not release_date:
        return None
    match = _YEAR_PATTERN.search(str(release_date))
    if not match:
        return None
    return int(match.group(1))


def decade_of(year: Optional[int]) -> Optional[int]:
    """Floor a year to its decade (1994 -> 1990)."""
    if year is None:
        return None
    return (year // 10) * 10


@dataclass
class Rating:
    """Five-dimension score for a single track."""

    track_id: str
    beat: int
    lyrics: int
    flow: int
    content: int
    replay_value: int
    notes: Optional[str] = None

    @property
    def dimensions(self) -> Tuple[int, int, int, int, int]:
        """Scores in canonical dimension order."""
        return (self.beat, self.lyrics, self.flow, self.content, self.replay_value)

    @property
    def total(self) -> int:
        """Sum of all five dimensions (0-100)."""
        return sum(self.dimensions)


@dataclass
class Album:
    """Album snapshot as stored when its first track is saved."""

    id: str
    name: str
    artist: str
    release_date: Optional[str] = None
    image_url: Optional[str] = None
    genre: Optional[str] = None

    @property
    def year(self) -> Optional[int]:
        """Release year derived from the release date."""
        return parse_release_year(self.release_date)

    @property
    def decade(self) -> Optional[int]:
        """Release decade derived from the release year."""
        return decade_of(self.year)


@dataclass
class Track:
    """A single track on an album, optionally carrying its rating."""

    id: str
    name: str
    album_id: str
    track_number: Optional[int] = None
    duration_ms: Optional[int] = None
    is_skit_or_interlude: bool = False
    rating: Optional[Rating] = None

    @property
    def is_ratable(self) -> bool:
        """Skits and interludes are never scored."""
        return not self.is_skit_or_interlude

    @property
    def is_rated_ratable(self) -> bool:
        """Eligible for album aggregation."""
        return self.is_ratable and self.rating is not None

    @property
    def duration_str(self) -> str:
        """Human-readable duration string."""
        if self.duration_ms is None:
            return ""
        minutes = self.duration_ms // 60000
        seconds = (self.duration_ms % 60000) // 1000
        return f"{minutes}:{seconds:02d}"


@dataclass
class TrackScore:
    """Unrounded score of one rated track."""

    track_id: str
    name: str
    track_number: Optional[int]
    score: float


@dataclass
class AlbumScore:
    """Album aggregate plus the counts needed for "N of M tracks rated"."""

    score: Optional[float]
    rated_tracks: int
    total_ratable_tracks: int

    @property
    def is_rated(self) -> bool:
        """Whether at least one ratable track has a rating."""
        return self.score is not None


@dataclass
class RatedAlbum:
    """An album in the rated collection with its aggregate attached."""

    album: Album
    album_score: AlbumScore

    @property
    def score(self) -> Optional[float]:
        return self.album_score.score

    @property
    def year(self) -> Optional[int]:
        return self.album.year

    @property
    def decade(self) -> Optional[int]:
        return self.album.decade


@dataclass
class CollectionQuery:
    """Filters and ordering for a rated collection view."""

    name: Optional[str] = None
    year: Optional[int] = None
    decade: Optional[int] = None
    genre: Optional[str] = None
    sort_by: SortKey = SortKey.RATING
    sort_order: SortOrder = SortOrder.DESC

    @property
    def has_filters(self) -> bool:
        """Whether any narrowing filter is set."""
        return any(
            value is not None and value != ""
            for value in (self.name, self.year, self.decade, self.genre)
        )


@dataclass
class RatingSubmission:
    """A rating as submitted by a caller, before validation."""

    track_id: Optional[str]
    beat: int = RatingConfig.DEFAULT_SCORE
    lyrics: int = RatingConfig.DEFAULT_SCORE
    flow: int = RatingConfig.DEFAULT_SCORE
    content: int = RatingConfig.DEFAULT_SCORE
    replay_value: int = RatingConfig.DEFAULT_SCORE
    notes: Optional[str] = None

    def scores(self) -> List[Tuple[str, int]]:
        """(dimension, value) pairs in canonical order."""
        return [(name, getattr(self, name)) for name in RatingConfig.DIMENSIONS]
