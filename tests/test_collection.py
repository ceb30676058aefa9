"""Tests for filtering and sorting the rated collection."""

from __future__ import annotations

from typing import Optional

import pytest

from album_rater.core.config import SortKey, SortOrder
from album_rater.core.exceptions import ValidationError
from album_rater.ratings.collection import (
    available_decades,
    available_years,
    build_collection,
    filter_albums,
    parse_sort_option,
    query_collection,
    sort_albums,
)
from album_rater.ratings.models import (
    Album,
    AlbumScore,
    CollectionQuery,
    RatedAlbum,
    decade_of,
    parse_release_year,
)


def rated(
    album_id: str,
    name: str,
    score: Optional[float],
    release_date: Optional[str] = None,
    artist: str = "Artist",
    genre: Optional[str] = None,
) -> RatedAlbum:
    return RatedAlbum(
        album=Album(
            id=album_id,
            name=name,
            artist=artist,
            release_date=release_date,
            genre=genre,
        ),
        album_score=AlbumScore(score=score, rated_tracks=1, total_ratable_tracks=1),
    )


@pytest.fixture
def zeta_alpha() -> list:
    return [
        rated("a", "Zeta", 8.5, "1999-06-01"),
        rated("b", "Alpha", 8.5, "2005-02-14"),
    ]


@pytest.mark.parametrize(
    "release_date,year",
    [
        ("1994-04-19", 1994),
        ("1994-04", 1994),
        ("2005", 2005),
        (None, None),
        ("", None),
        ("unknown", None),
    ],
)
def test_parse_release_year(release_date, year) -> None:
    assert parse_release_year(release_date) == year


@pytest.mark.parametrize("year,decade", [(1994, 1990), (2005, 2000), (2000, 2000), (None, None)])
def test_decade_of(year, decade) -> None:
    assert decade_of(year) == decade


def test_album_derives_year_and_decade() -> None:
    album = Album(id="1", name="Illmatic", artist="Nas", release_date="1994-04-19")
    assert album.year == 1994
    assert album.decade == 1990


def test_sort_by_name_asc(zeta_alpha) -> None:
    result = sort_albums(zeta_alpha, SortKey.NAME, SortOrder.ASC)
    assert [r.album.name for r in result] == ["Alpha", "Zeta"]


def test_sort_by_rating_desc_keeps_ties_stable(zeta_alpha) -> None:
    first = sort_albums(zeta_alpha, SortKey.RATING, SortOrder.DESC)
    second = sort_albums(zeta_alpha, SortKey.RATING, SortOrder.DESC)
    assert [r.album.id for r in first] == ["a", "b"]
    assert [r.album.id for r in first] == [r.album.id for r in second]


def test_sort_by_rating_orders_numerically() -> None:
    albums = [
        rated("low", "Low", 3.2),
        rated("high", "High", 9.1),
        rated("mid", "Mid", 6.0),
    ]
    desc = sort_albums(albums, SortKey.RATING, SortOrder.DESC)
    asc = sort_albums(albums, SortKey.RATING, SortOrder.ASC)
    assert [r.album.id for r in desc] == ["high", "mid", "low"]
    assert [r.album.id for r in asc] == ["low", "mid", "high"]


def test_missing_rating_and_year_compare_as_zero() -> None:
    albums = [
        rated("none", "No Score", None),
        rated("some", "Some Score", 0.5, "1970"),
    ]
    assert [r.album.id for r in sort_albums(albums, SortKey.RATING, SortOrder.DESC)] == [
        "some",
        "none",
    ]
    assert [r.album.id for r in sort_albums(albums, SortKey.YEAR, SortOrder.ASC)] == [
        "none",
        "some",
    ]


def test_sort_by_artist_ignores_case() -> None:
    albums = [
        rated("1", "X", 5.0, artist="outkast"),
        rated("2", "Y", 5.0, artist="Mobb Deep"),
        rated("3", "Z", 5.0, artist="A Tribe Called Quest"),
    ]
    result = sort_albums(albums, SortKey.ARTIST, SortOrder.ASC)
    assert [r.album.artist for r in result] == [
        "A Tribe Called Quest",
        "Mobb Deep",
        "outkast",
    ]


def test_sort_by_year_desc() -> None:
    albums = [
        rated("1", "A", 5.0, "1994"),
        rated("2", "B", 5.0, "2005-01-01"),
        rated("3", "C", 5.0, "1988-07-01"),
    ]
    result = sort_albums(albums, SortKey.YEAR, SortOrder.DESC)
    assert [r.year for r in result] == [2005, 1994, 1988]


def test_name_filter_is_case_insensitive_substring() -> None:
    albums = [rated("1", "Zeta 2000", 7.0), rated("2", "Alpha", 7.0)]
    result = filter_albums(albums, CollectionQuery(name="zeta"))
    assert [r.album.name for r in result] == ["Zeta 2000"]


def test_filters_combine_with_and() -> None:
    albums = [
        rated("1", "Blue Lines", 8.0, "1991-04-08", genre="Electronic, Hip Hop"),
        rated("2", "Blue Train", 9.0, "1958", genre="Jazz"),
        rated("3", "Blueprint", 8.7, "2001-09-11", genre="Hip Hop"),
    ]
    assert [r.album.id for r in filter_albums(albums, CollectionQuery(name="blue", decade=1990))] == ["1"]
    assert [r.album.id for r in filter_albums(albums, CollectionQuery(year=2001))] == ["3"]
    assert [r.album.id for r in filter_albums(albums, CollectionQuery(genre="hip hop"))] == ["1", "3"]
    assert filter_albums(albums, CollectionQuery(name="blue", year=1958, genre="rock")) == []


def test_genre_filter_never_matches_album_without_genre() -> None:
    albums = [rated("1", "Untagged", 6.0)]
    assert filter_albums(albums, CollectionQuery(genre="jazz")) == []


def test_query_collection_empty_input() -> None:
    assert query_collection([], CollectionQuery(name="anything")) == []
    assert query_collection([]) == []


def test_query_collection_defaults_to_rating_desc() -> None:
    albums = [rated("1", "A", 4.0), rated("2", "B", 9.0)]
    assert [r.album.id for r in query_collection(albums)] == ["2", "1"]


def test_build_collection_drops_unrated_albums(make_track) -> None:
    rated_album = Album(id="r", name="Rated", artist="X")
    skit_only = Album(id="s", name="Skit Only", artist="Y")
    result = build_collection(
        [
            (rated_album, [make_track(1, album_id="r", scores=(10, 10, 10, 10, 10))]),
            (skit_only, [make_track(1, album_id="s", skit=True, scores=(20, 20, 20, 20, 20))]),
        ]
    )
    assert [r.album.id for r in result] == ["r"]
    assert result[0].score == pytest.approx(5.0)
    assert result[0].album_score.rated_tracks == 1


def test_available_decades_and_years() -> None:
    albums = [
        rated("1", "A", 5.0, "1994"),
        rated("2", "B", 5.0, "1996"),
        rated("3", "C", 5.0, "2005"),
        rated("4", "D", 5.0, None),
        rated("5", "E", 5.0, "1994-10-10"),
    ]
    assert available_decades(albums) == [1990, 2000]
    assert available_years(albums) == [1994, 1996, 2005]
    assert available_years(albums, decade=1990) == [1994, 1996]


@pytest.mark.parametrize(
    "option,expected",
    [
        ("rating-desc", (SortKey.RATING, SortOrder.DESC)),
        ("name-asc", (SortKey.NAME, SortOrder.ASC)),
        ("YEAR-ASC", (SortKey.YEAR, SortOrder.ASC)),
        ("artist", (SortKey.ARTIST, SortOrder.DESC)),
    ],
)
def test_parse_sort_option(option, expected) -> None:
    assert parse_sort_option(option) == expected


@pytest.mark.parametrize("option", ["genre-asc", "rating-sideways"])
def test_parse_sort_option_rejects_unknown(option) -> None:
    with pytest.raises(ValidationError):
        parse_sort_option(option)


def test_sort_by_name_places_accented_names_with_plain_letters() -> None:
    albums = [
        rated("1", "Zeta", 5.0),
        rated("2", "Élan", 5.0),
        rated("3", "Alpha", 5.0),
        rated("4", "elan", 5.0),
    ]
    result = sort_albums(albums, SortKey.NAME, SortOrder.ASC)
    assert [r.album.name for r in result] == ["Alpha", "elan", "Élan", "Zeta"]


def test_sort_by_artist_desc_with_accents() -> None:
    albums = [
        rated("1", "X", 5.0, artist="Björk"),
        rated("2", "Y", 5.0, artist="Cassius"),
        rated("3", "Z", 5.0, artist="Bonobo"),
    ]
    result = sort_albums(albums, SortKey.ARTIST, SortOrder.DESC)
    assert [r.album.artist for r in result] == ["Cassius", "Bonobo", "Björk"]
