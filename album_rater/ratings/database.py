"""SQLite database service for storing track ratings and classifications."""

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple

from .models import Album, Rating, Track
from ..core.config import Paths, StoreConfig
from ..core.exceptions import StorageError

logger = logging.getLogger(__name__)

_TRACK_COLUMNS = """
    t.id AS id,
    t.name AS name,
    t.album_id AS album_id,
    t.track_number AS track_number,
    t.duration_ms AS duration_ms,
    t.is_skit_or_interlude AS is_skit_or_interlude,
    r.track_id AS rating_track_id,
    r.beat AS beat,
    r.lyrics AS lyrics,
    r.flow AS flow,
    r.content AS content,
    r.replay_value AS replay_value,
    r.notes AS notes
"""


class RatingDatabase:
    """SQLite database backing the rating and track classification stores.

    Albums and tracks are created lazily from caller snapshots. Ratings are
    keyed by track id, so every write is a single conditional statement.
    """

    def __init__(self, db_path: Optional[Path] = None):
        """Initialize database with optional custom path."""
        self.db_path = Paths.get_db_path(db_path)
        Paths.ensure_dir(self.db_path.parent)
        self._init_database()

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        """Open a connection that commits on success and always closes."""
        conn = sqlite3.connect(self.db_path, timeout=StoreConfig.BUSY_TIMEOUT_SECONDS)
        conn.row_factory = sqlite3.Row
        try:
            with conn:
                yield conn
        finally:
            conn.close()

    def _init_database(self):
        """Initialize database with schema."""
        try:
            with self._connect() as conn:
                conn.execute("""CREATE TABLE IF NOT EXISTS albums (
                    id TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    artist TEXT NOT NULL,
                    release_date TEXT,
                    image_url TEXT,
                    genre TEXT,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )""")

                conn.execute("""CREATE TABLE IF NOT EXISTS tracks (
                    id TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    album_id TEXT NOT NULL REFERENCES albums (id),
                    track_number INTEGER,
                    duration_ms INTEGER,
                    is_skit_or_interlude INTEGER NOT NULL DEFAULT 0,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )""")

                conn.execute("""CREATE TABLE IF NOT EXISTS ratings (
                    track_id TEXT PRIMARY KEY REFERENCES tracks (id),
                    beat INTEGER NOT NULL,
                    lyrics INTEGER NOT NULL,
                    flow INTEGER NOT NULL,
                    content INTEGER NOT NULL,
                    replay_value INTEGER NOT NULL,
                    notes TEXT,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )""")

                conn.execute("""CREATE INDEX IF NOT EXISTS idx_tracks_album
                               ON tracks (album_id)""")

        except sqlite3.Error as e:
            raise StorageError(
                "Failed to initialize database", str(self.db_path), str(e)
            )

    def get_rating(self, track_id: str) -> Optional[Rating]:
        """Get the rating for a track, or None if it has not been rated."""
        try:
            with self._connect() as conn:
                row = conn.execute(
                    "SELECT * FROM ratings WHERE track_id = ?", (track_id,)
                ).fetchone()

                if not row:
                    return None

                return self._row_to_rating(row)

        except sqlite3.Error as e:
            raise StorageError("Failed to get rating", str(self.db_path), str(e))

    def upsert_rating(
        self,
        track_id: str,
        dimensions: Tuple[int, int, int, int, int],
        notes: Optional[str] = None,
    ) -> Rating:
        """Create or fully replace the rating for a track.

        One INSERT ... ON CONFLICT statement, so two writers for the same
        track can never leave a record mixing both submissions.
        """
        beat, lyrics, flow, content, replay_value = dimensions
        try:
            with self._connect() as conn:
                conn.execute(
                    """INSERT INTO ratings
                    (track_id, beat, lyrics, flow, content, replay_value, notes)
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                    ON CONFLICT (track_id) DO UPDATE SET
                        beat = excluded.beat,
                        lyrics = excluded.lyrics,
                        flow = excluded.flow,
                        content = excluded.content,
                        replay_value = excluded.replay_value,
                        notes = excluded.notes,
                        updated_at = CURRENT_TIMESTAMP
                    """,
                    (track_id, beat, lyrics, flow, content, replay_value, notes),
                )
                row = conn.execute(
                    "SELECT * FROM ratings WHERE track_id = ?", (track_id,)
                ).fetchone()

            logger.debug("Upserted rating for track %s", track_id)
            return self._row_to_rating(row)

        except sqlite3.Error as e:
            raise StorageError("Failed to save rating", str(self.db_path), str(e))

    def get_track(self, track_id: str) -> Optional[Track]:
        """Get a track with its rating attached, or None if unknown."""
        try:
            with self._connect() as conn:
                row = conn.execute(
                    f"""SELECT {_TRACK_COLUMNS}
                    FROM tracks t LEFT JOIN ratings r ON r.track_id = t.id
                    WHERE t.id = ?""",
                    (track_id,),
                ).fetchone()

                if not row:
                    return None

                return self._row_to_track(row)

        except sqlite3.Error as e:
            raise StorageError("Failed to get track", str(self.db_path), str(e))

    def upsert_track_classification(
        self, track: Track, album: Album, is_skit_or_interlude: Optional[bool]
    ) -> Track:
        """Create a track from its snapshot or update only its skit flag.

        The album row is inserted on first sight and never updated. A flag of
        None registers the track without touching an existing flag.
        """
        try:
            with self._connect() as conn:
                conn.execute(
                    """INSERT INTO albums
                    (id, name, artist, release_date, image_url, genre)
                    VALUES (?, ?, ?, ?, ?, ?)
                    ON CONFLICT (id) DO NOTHING
                    """,
                    (
                        album.id,
                        album.name,
                        album.artist,
                        album.release_date,
                        album.image_url,
                        album.genre,
                    ),
                )

                values = (
                    track.id,
                    track.name,
                    album.id,
                    track.track_number,
                    track.duration_ms,
                    int(bool(is_skit_or_interlude)),
                )
                if is_skit_or_interlude is None:
                    conn.execute(
                        """INSERT INTO tracks
                        (id, name, album_id, track_number, duration_ms, is_skit_or_interlude)
                        VALUES (?, ?, ?, ?, ?, ?)
                        ON CONFLICT (id) DO NOTHING
                        """,
                        values,
                    )
                else:
                    conn.execute(
                        """INSERT INTO tracks
                        (id, name, album_id, track_number, duration_ms, is_skit_or_interlude)
                        VALUES (?, ?, ?, ?, ?, ?)
                        ON CONFLICT (id) DO UPDATE SET
                            is_skit_or_interlude = excluded.is_skit_or_interlude,
                            updated_at = CURRENT_TIMESTAMP
                        """,
                        values,
                    )

                row = conn.execute(
                    f"""SELECT {_TRACK_COLUMNS}
                    FROM tracks t LEFT JOIN ratings r ON r.track_id = t.id
                    WHERE t.id = ?""",
                    (track.id,),
                ).fetchone()

            logger.debug(
                "Saved track %s (skit/interlude=%s)", track.id, is_skit_or_interlude
            )
            return self._row_to_track(row)

        except sqlite3.Error as e:
            raise StorageError("Failed to save track", str(self.db_path), str(e))

    def get_album(self, album_id: str) -> Optional[Album]:
        """Get album snapshot by id."""
        try:
            with self._connect() as conn:
                row = conn.execute(
                    "SELECT * FROM albums WHERE id = ?", (album_id,)
                ).fetchone()

                if not row:
                    return None

                return self._row_to_album(row)

        except sqlite3.Error as e:
            raise StorageError("Failed to get album", str(self.db_path), str(e))

    def get_album_tracks(self, album_id: str) -> List[Track]:
        """Get all stored tracks of an album, ratings attached."""
        try:
            with self._connect() as conn:
                rows = conn.execute(
                    f"""SELECT {_TRACK_COLUMNS}
                    FROM tracks t LEFT JOIN ratings r ON r.track_id = t.id
                    WHERE t.album_id = ?
                    ORDER BY t.track_number, t.rowid""",
                    (album_id,),
                ).fetchall()

                return [self._row_to_track(row) for row in rows]

        except sqlite3.Error as e:
            raise StorageError("Failed to get album tracks", str(self.db_path), str(e))

    def get_rated_albums(self) -> List[Tuple[Album, List[Track]]]:
        """Get every album with at least one rated track, with all its tracks.

        Albums come back in the order they were first saved.
        """
        try:
            with self._connect() as conn:
                album_rows = conn.execute(
                    """SELECT a.* FROM albums a
                    WHERE EXISTS (
                        SELECT 1 FROM tracks t
                        JOIN ratings r ON r.track_id = t.id
                        WHERE t.album_id = a.id
                    )
                    ORDER BY a.rowid"""
                ).fetchall()

                track_rows = conn.execute(
                    f"""SELECT {_TRACK_COLUMNS}
                    FROM tracks t LEFT JOIN ratings r ON r.track_id = t.id
                    WHERE t.album_id IN (
                        SELECT DISTINCT t2.album_id FROM tracks t2
                        JOIN ratings r2 ON r2.track_id = t2.id
                    )
                    ORDER BY t.track_number, t.rowid"""
                ).fetchall()

            tracks_by_album: Dict[str, List[Track]] = {}
            for row in track_rows:
                track = self._row_to_track(row)
                tracks_by_album.setdefault(track.album_id, []).append(track)

            return [
                (self._row_to_album(row), tracks_by_album.get(row["id"], []))
                for row in album_rows
            ]

        except sqlite3.Error as e:
            raise StorageError("Failed to get rated albums", str(self.db_path), str(e))

    def _row_to_rating(self, row) -> Rating:
        """Convert database row to Rating object."""
        return Rating(
            track_id=row["track_id"],
            beat=row["beat"],
            lyrics=row["lyrics"],
            flow=row["flow"],
            content=row["content"],
            replay_value=row["replay_value"],
            notes=row["notes"],
        )

    def _row_to_track(self, row) -> Track:
        """Convert joined track/rating row to Track object."""
        rating = None
        if row["rating_track_id"] is not None:
            rating = Rating(
                track_id=row["rating_track_id"],
                beat=row["beat"],
                lyrics=row["lyrics"],
                flow=row["flow"],
                content=row["content"],
                replay_value=row["replay_value"],
                notes=row["notes"],
            )

        return Track(
            id=row["id"],
            name=row["name"],
            album_id=row["album_id"],
            track_number=row["track_number"],
            duration_ms=row["duration_ms"],
            is_skit_or_interlude=bool(row["is_skit_or_interlude"]),
            rating=rating,
        )

    def _row_to_album(self, row) -> Album:
        """Convert database row to Album object."""
        return Album(
            id=row["id"],
            name=row["name"],
            artist=row["artist"],
            release_date=row["release_date"],
            image_url=row["image_url"],
            genre=row["genre"],
        )

    def get_database_stats(self) -> Dict[str, int]:
        """Get database statistics."""
        try:
            with self._connect() as conn:
                albums = conn.execute("SELECT COUNT(*) FROM albums").fetchone()[0]
                tracks = conn.execute("SELECT COUNT(*) FROM tracks").fetchone()[0]
                ratings = conn.execute("SELECT COUNT(*) FROM ratings").fetchone()[0]
                skits = conn.execute(
                    "SELECT COUNT(*) FROM tracks WHERE is_skit_or_interlude = 1"
                ).fetchone()[0]

                return {
                    "albums": albums,
                    "tracks": tracks,
                    "ratings": ratings,
                    "skits_or_interludes": skits,
                }

        except sqlite3.Error as e:
            raise StorageError("Failed to get database stats", str(self.db_path), str(e))
