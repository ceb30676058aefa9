"""Rating service: validated write paths and on-demand aggregate reads."""

import logging
from typing import List, Optional, Tuple

from .aggregation import album_breakdown, album_score
from .collection import (
    available_decades,
    available_years,
    build_collection,
    query_collection,
)
from .database import RatingDatabase
from .models import (
    Album,
    AlbumScore,
    CollectionQuery,
    RatedAlbum,
    Rating,
    RatingSubmission,
    Track,
    TrackScore,
)
from ..core.config import RatingConfig
from ..core.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def validate_submission(submission: RatingSubmission) -> None:
    """Check a rating submission, raising ValidationError on the first violation."""
    if not submission.track_id or not str(submission.track_id).strip():
        raise ValidationError("Track ID is required", field="track_id")

    low, high = RatingConfig.MIN_SCORE, RatingConfig.MAX_SCORE
    for name, value in submission.scores():
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValidationError(
                f"Rating '{name}' must be an integer",
                field=name,
                details=f"got {value!r}",
            )
        if value < low or value > high:
            raise ValidationError(
                f"Ratings must be between {low} and {high}",
                field=name,
                details=f"{name}={value}",
            )


class RatingService:
    """Service for rating tracks and reading album and collection scores."""

    def __init__(self, db: Optional[RatingDatabase] = None):
        """Initialize with optional database instance."""
        self.db = db or RatingDatabase()

    def submit_rating(self, submission: RatingSubmission) -> Rating:
        """Validate a submission and upsert it for an existing track."""
        validate_submission(submission)

        track = self.db.get_track(submission.track_id)
        if track is None:
            raise NotFoundError("Track not found", track_id=submission.track_id)

        if track.is_skit_or_interlude:
            logger.warning(
                "Track %s is marked as skit/interlude; its rating will not count",
                track.id,
            )

        rating = self.db.upsert_rating(
            submission.track_id,
            tuple(value for _, value in submission.scores()),
            submission.notes or None,
        )
        logger.info("Saved rating for track %s", submission.track_id)
        return rating

    def register_track(self, track: Track, album: Album) -> Track:
        """Store the track snapshot if missing, leaving an existing flag untouched."""
        return self.db.upsert_track_classification(track, album, None)

    def set_skit_or_interlude(
        self, track: Track, album: Album, is_skit_or_interlude: bool
    ) -> Track:
        """Mark or unmark a track as skit/interlude.

        Any rating the track already has is kept; aggregation skips it while
        the flag is set.
        """
        saved = self.db.upsert_track_classification(track, album, is_skit_or_interlude)
        logger.info(
            "Track %s skit/interlude flag set to %s", track.id, is_skit_or_interlude
        )
        return saved

    def get_rating(self, track_id: str) -> Optional[Rating]:
        """Get the rating of a track, None if unrated."""
        return self.db.get_rating(track_id)

    def get_track(self, track_id: str) -> Optional[Track]:
        """Get a stored track, None if unknown."""
        return self.db.get_track(track_id)

    def get_album(self, album_id: str) -> Optional[Album]:
        """Get a stored album snapshot, None if unknown."""
        return self.db.get_album(album_id)

    def get_album_score(self, album_id: str) -> AlbumScore:
        """Compute the current score of a stored album."""
        return album_score(self.db.get_album_tracks(album_id))

    def get_album_report(self, album_id: str) -> Tuple[AlbumScore, List[TrackScore]]:
        """Album score plus the per-track scores behind it."""
        tracks = self.db.get_album_tracks(album_id)
        return album_score(tracks), album_breakdown(tracks)

    def get_collection(self, query: Optional[CollectionQuery] = None) -> List[RatedAlbum]:
        """Rated albums filtered and ordered by the query."""
        collection = build_collection(self.db.get_rated_albums())
        return query_collection(collection, query)

    def get_collection_periods(
        self, decade: Optional[int] = None
    ) -> Tuple[List[int], List[int]]:
        """Decades and years available in the rated collection."""
        collection = build_collection(self.db.get_rated_albums())
        return available_decades(collection), available_years(collection, decade)
