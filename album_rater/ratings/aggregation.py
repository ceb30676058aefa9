"""Track and album score aggregation.

Scores are returned unrounded; rounding to one decimal happens only when
they are displayed, so callers can keep aggregating without drift.
"""

from typing import Iterable, List

from .models import AlbumScore, Rating, Track, TrackScore
from ..core.config import RatingConfig

_DIMENSION_COUNT = len(RatingConfig.DIMENSIONS)
_MAX_TRACK_TOTAL = RatingConfig.MAX_SCORE * _DIMENSION_COUNT


def track_score(rating: Rating) -> float:
    """Mean of the five dimensions on the 0-20 scale."""
    return rating.total / _DIMENSION_COUNT


def rated_ratable_tracks(tracks: Iterable[Track]) -> List[Track]:
    """Tracks that are not skits/interludes and carry a rating."""
    return [track for track in tracks if track.is_rated_ratable]


def album_score(tracks: Iterable[Track]) -> AlbumScore:
    """Aggregate an album's tracks into a 0-10 score.

    Sums every dimension over the rated, ratable tracks and divides by the
    maximum attainable total; this equals the mean track score halved.
    Score is None when no ratable track has been rated yet.
    """
    tracks = list(tracks)
    eligible = rated_ratable_tracks(tracks)
    total_ratable = sum(1 for track in tracks if track.is_ratable)

    if not eligible:
        return AlbumScore(
            score=None, rated_tracks=0, total_ratable_tracks=total_ratable
        )

    total_points = sum(track.rating.total for track in eligible)
    score = total_points / (len(eligible) * _MAX_TRACK_TOTAL) * RatingConfig.ALBUM_SCALE

    return AlbumScore(
        score=score,
        rated_tracks=len(eligible),
        total_ratable_tracks=total_ratable,
    )


def album_breakdown(tracks: Iterable[Track]) -> List[TrackScore]:
    """Per-track scores of the rated, ratable tracks in tracklist order."""
    eligible = sorted(
        rated_ratable_tracks(tracks),
        key=lambda track: track.track_number if track.track_number is not None else 0,
    )
    return [
        TrackScore(
            track_id=track.id,
            name=track.name,
            track_number=track.track_number,
            score=track_score(track.rating),
        )
        for track in eligible
    ]
