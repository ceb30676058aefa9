"""Discogs catalog service for searching albums and fetching tracklists."""

import logging
import os
import re
from typing import Any, Dict, List, Optional, Tuple

import discogs_client

from ..core.config import CatalogConfig
from ..core.exceptions import CatalogError
from ..ratings.models import Album, Track

logger = logging.getLogger(__name__)

_DURATION_PATTERN = re.compile(r"^(?:(\d+):)?(\d+):(\d{1,2})$")


def parse_duration_ms(duration: Optional[str]) -> Optional[int]:
    """Convert a Discogs duration such as "3:42" or "1:02:05" to milliseconds."""
    if not duration:
        return None
    match = _DURATION_PATTERN.match(duration.strip())
    if not match:
        return None
    hours, minutes, seconds = match.groups()
    total = int(hours or 0) * 3600 + int(minutes) * 60 + int(seconds)
    return total * 1000


def make_track_id(release_id: Any, position: str) -> str:
    """Tracks have no id of their own on Discogs; derive one from the release."""
    return f"{release_id}-{position}"


class CatalogService:
    """Read-only album catalog backed by the Discogs API."""

    def __init__(
        self,
        api_token: Optional[str] = None,
        client: Optional[discogs_client.Client] = None,
    ):
        """Initialize with optional API token or pre-built client."""
        if client is not None:
            self.client = client
            return

        self.api_token = api_token or os.getenv(CatalogConfig.TOKEN_ENV_VAR)
        if not self.api_token:
            raise CatalogError(
                f"{CatalogConfig.TOKEN_ENV_VAR} environment variable required"
            )

        self.client = discogs_client.Client(
            CatalogConfig.USER_AGENT, user_token=self.api_token
        )

    def search_albums(
        self, query: str, limit: int = CatalogConfig.DEFAULT_SEARCH_LIMIT
    ) -> List[Dict[str, Any]]:
        """Search for albums by free text."""
        try:
            results = self.client.search(query, type=CatalogConfig.SEARCH_TYPE)

            formatted_results = []
            for result in results[:limit]:
                # Release search titles read "Artist - Title"
                artist, _, title = result.title.partition(" - ")
                if not title:
                    artist, title = "Unknown", result.title

                formatted_results.append(
                    {
                        "id": str(result.id),
                        "artist": artist,
                        "title": title,
                        "year": getattr(result, "year", None) or None,
                        "format": self._first(getattr(result, "format", None)),
                        "label": self._first(getattr(result, "label", None)),
                        "country": getattr(result, "country", None),
                    }
                )

            logger.debug("Catalog search %r returned %d results", query, len(formatted_results))
            return formatted_results

        except Exception as e:
            raise CatalogError("Failed to search catalog", details=str(e))

    def get_album(self, release_id: str) -> Tuple[Album, List[Track]]:
        """Get album metadata and tracklist for a release id."""
        try:
            release = self.client.release(int(release_id))
            album = self._parse_release_to_album(release)
            tracks = self._parse_release_to_tracks(release, album.id)
            return album, tracks

        except CatalogError:
            raise
        except Exception as e:
            raise CatalogError(
                "Failed to get album from catalog", release_id=str(release_id), details=str(e)
            )

    def find_track(self, release_id: str, track_id: str) -> Tuple[Album, Track]:
        """Fetch a release and pick one of its tracks."""
        album, tracks = self.get_album(release_id)
        for track in tracks:
            if track.id == track_id:
                return album, track
        raise CatalogError(
            f"Track {track_id} is not on release {release_id}",
            release_id=str(release_id),
        )

    @staticmethod
    def _first(value: Any) -> Optional[str]:
        """Search fields come back as lists or strings depending on the result."""
        if isinstance(value, (list, tuple)):
            return value[0] if value else None
        return value or None

    def _parse_release_to_album(self, release) -> Album:
        """Convert discogs_client Release to Album."""
        data = getattr(release, "data", None) or {}

        artists = getattr(release, "artists", None) or []
        artist = CatalogConfig.ARTIST_SEPARATOR.join(a.name for a in artists) or "Unknown"

        release_date = data.get("released") or None
        if not release_date:
            year = getattr(release, "year", None)
            release_date = str(year) if year else None

        image_url = None
        images = getattr(release, "images", None) or []
        if images:
            image_url = images[0].get("uri") or images[0].get("resource_url")
        if not image_url:
            image_url = getattr(release, "thumb", None) or None

        genres = getattr(release, "genres", None) or []
        genre = CatalogConfig.GENRE_SEPARATOR.join(genres) or None

        return Album(
            id=str(release.id),
            name=release.title,
            artist=artist,
            release_date=release_date,
            image_url=image_url,
            genre=genre,
        )

    def _parse_release_to_tracks(self, release, album_id: str) -> List[Track]:
        """Convert discogs_client Release tracklist to Track objects."""
        tracks = []
        track_counter = 1

        for track_item in getattr(release, "tracklist", None) or []:
            track_data = getattr(track_item, "data", None) or {}

            # Only actual tracks, skip index tracks and headings
            if track_data.get("type_", "track") != "track":
                continue

            position = track_data.get("position") or str(track_counter)
            tracks.append(
                Track(
                    id=make_track_id(album_id, position),
                    name=track_data.get("title") or f"Track {track_counter}",
                    album_id=album_id,
                    track_number=track_counter,
                    duration_ms=parse_duration_ms(track_data.get("duration")),
                )
            )
            track_counter += 1

        return tracks
