"""Filtering and ordering of the rated album collection."""

import locale
import unicodedata
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from .aggregation import album_score
from .models import Album, CollectionQuery, RatedAlbum, Track
from ..core.config import SortKey, SortOrder
from ..core.exceptions import ValidationError


def parse_sort_option(option: str) -> Tuple[SortKey, SortOrder]:
    """Parse a combined sort selector such as "rating-desc" or "name"."""
    key_part, _, order_part = option.strip().lower().partition("-")
    try:
        sort_key = SortKey(key_part)
    except ValueError:
        valid = ", ".join(key.value for key in SortKey)
        raise ValidationError(
            f"Unsupported sort key: {key_part}", field="sort_by", details=f"use one of {valid}"
        )
    try:
        sort_order = SortOrder(order_part) if order_part else SortOrder.DESC
    except ValueError:
        raise ValidationError(
            f"Unsupported sort direction: {order_part}",
            field="sort_order",
            details="use asc or desc",
        )
    return sort_key, sort_order


def build_collection(albums: Iterable[Tuple[Album, List[Track]]]) -> List[RatedAlbum]:
    """Attach album scores, dropping albums without a rated ratable track."""
    rated = []
    for album, tracks in albums:
        score = album_score(tracks)
        if score.is_rated:
            rated.append(RatedAlbum(album=album, album_score=score))
    return rated


def _matches(rated: RatedAlbum, query: CollectionQuery) -> bool:
    album = rated.album
    if query.name and query.name.casefold() not in album.name.casefold():
        return False
    if query.year is not None and album.year != query.year:
        return False
    if query.decade is not None and album.decade != query.decade:
        return False
    if query.genre:
        if not album.genre or query.genre.casefold() not in album.genre.casefold():
            return False
    return True


def filter_albums(albums: Iterable[RatedAlbum], query: CollectionQuery) -> List[RatedAlbum]:
    """Keep albums matching every filter set on the query."""
    return [rated for rated in albums if _matches(rated, query)]


def _fold(value: str) -> str:
    decomposed = unicodedata.normalize("NFKD", value.casefold())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def _text_key(value: Optional[str]) -> Tuple[str, str]:
    # Base letters decide first so accented names sit beside their plain
    # spelling in any locale; the accented form breaks ties.
    text = value or ""
    return locale.strxfrm(_fold(text)), locale.strxfrm(text.casefold())


# Missing rating or year compares as 0: such albums sink to the bottom of a
# descending sort and float to the top of an ascending one.
_SORT_KEYS: Dict[SortKey, Callable[[RatedAlbum], object]] = {
    SortKey.RATING: lambda rated: rated.score if rated.score is not None else 0,
    SortKey.NAME: lambda rated: _text_key(rated.album.name),
    SortKey.ARTIST: lambda rated: _text_key(rated.album.artist),
    SortKey.YEAR: lambda rated: rated.year if rated.year is not None else 0,
}


def sort_albums(
    albums: Iterable[RatedAlbum],
    sort_by: SortKey = SortKey.RATING,
    sort_order: SortOrder = SortOrder.DESC,
) -> List[RatedAlbum]:
    """Order albums; ties keep their input order in both directions."""
    return sorted(albums, key=_SORT_KEYS[sort_by], reverse=sort_order.reverse)


def query_collection(
    albums: Iterable[RatedAlbum], query: Optional[CollectionQuery] = None
) -> List[RatedAlbum]:
    """Filter then sort a rated collection."""
    query = query or CollectionQuery()
    return sort_albums(filter_albums(albums, query), query.sort_by, query.sort_order)


def available_decades(albums: Iterable[RatedAlbum]) -> List[int]:
    """Distinct decades present in the collection, ascending."""
    return sorted({rated.decade for rated in albums if rated.decade is not None})


def available_years(
    albums: Iterable[RatedAlbum], decade: Optional[int] = None
) -> List[int]:
    """Distinct years present, ascending, optionally within one decade."""
    return sorted(
        {
            rated.year
            for rated in albums
            if rated.year is not None and (decade is None or rated.decade == decade)
        }
    )
