"""Shared fixtures for album rater tests."""

from __future__ import annotations

from types import SimpleNamespace
from typing import Callable, Optional

import pytest

from album_rater.ratings.database import RatingDatabase
from album_rater.ratings.models import Album, Rating, Track
from album_rater.ratings.services import RatingService


@pytest.fixture
def db(tmp_path) -> RatingDatabase:
    return RatingDatabase(tmp_path / "ratings.db")


@pytest.fixture
def service(db: RatingDatabase) -> RatingService:
    return RatingService(db)


@pytest.fixture
def album() -> Album:
    return Album(
        id="249504",
        name="Illmatic",
        artist="Nas",
        release_date="1994-04-19",
        genre="Hip Hop",
    )


@pytest.fixture
def make_track() -> Callable[..., Track]:
    def _make(
        number: int,
        album_id: str = "249504",
        skit: bool = False,
        scores: Optional[tuple] = None,
        name: Optional[str] = None,
    ) -> Track:
        track_id = f"{album_id}-A{number}"
        rating = None
        if scores is not None:
            rating = Rating(track_id, *scores)
        return Track(
            id=track_id,
            name=name or f"Track {number}",
            album_id=album_id,
            track_number=number,
            duration_ms=180_000 + number * 1000,
            is_skit_or_interlude=skit,
            rating=rating,
        )

    return _make


class FakeDiscogsClient:
    """Stands in for discogs_client.Client: one release, fixed search results."""

    def __init__(self, release=None, results=None, error=None):
        self._release = release
        self._results = results or []
        self._error = error
        self.requested = []

    def release(self, release_id):
        self.requested.append(release_id)
        if self._error:
            raise self._error
        return self._release

    def search(self, query, type=None):
        if self._error:
            raise self._error
        return self._results


def _make_release(**overrides):
    fields = dict(
        id=249504,
        title="Illmatic",
        artists=[SimpleNamespace(name="Nas")],
        year=1994,
        data={"released": "1994-04-19"},
        images=[{"uri": "https://img.example/illmatic.jpg"}],
        thumb="https://img.example/thumb.jpg",
        genres=["Hip Hop"],
        tracklist=[
            SimpleNamespace(data={"type_": "track", "position": "A1", "title": "The Genesis", "duration": "1:45"}),
            SimpleNamespace(data={"type_": "heading", "position": "", "title": "Side B"}),
            SimpleNamespace(data={"type_": "track", "position": "A2", "title": "N.Y. State Of Mind", "duration": "4:54"}),
            SimpleNamespace(data={"type_": "track", "position": "", "title": "Untimed"}),
        ],
    )
    fields.update(overrides)
    return SimpleNamespace(**fields)


@pytest.fixture
def fake_client_cls():
    return FakeDiscogsClient


@pytest.fixture
def make_release():
    return _make_release
