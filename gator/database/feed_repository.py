"""
Feed repository - CRUD operations for feeds and poll scheduling.
"""

import uuid
from datetime import datetime

from ..exceptions import Constraint, ConstraintViolation
from .connection import DatabaseConnection
from .converters import row_to_feed, to_db_time, utcnow
from .models import DBFeed


class FeedRepository:
    """Repository for feed operations."""

    def __init__(self, db: DatabaseConnection):
        self._db = db

    def create(self, name: str, url: str, user_id: str) -> DBFeed:
        """
        Add a new feed owned by user_id.

        Raises:
            ConstraintViolation: FEED_URL if a feed with this url exists
        """
        now = to_db_time(utcnow())
        feed_id = str(uuid.uuid4())
        with self._db.conn() as conn:
            cursor = conn.execute(
                """
                INSERT INTO feeds (id, name, url, user_id, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT(url) DO NOTHING
                """,
                (feed_id, name, url, user_id, now, now)
            )
            if cursor.rowcount == 0:
                raise ConstraintViolation(Constraint.FEED_URL, url)
            row = conn.execute("SELECT * FROM feeds WHERE id = ?", (feed_id,)).fetchone()
            return row_to_feed(row)

    def get(self, feed_id: str) -> DBFeed | None:
        """Get single feed by ID."""
        with self._db.conn() as conn:
            row = conn.execute(
                "SELECT * FROM feeds WHERE id = ?", (feed_id,)
            ).fetchone()
            return row_to_feed(row) if row else None

    def get_by_url(self, url: str) -> DBFeed | None:
        """Get feed by exact url; no normalization is applied."""
        with self._db.conn() as conn:
            row = conn.execute(
                "SELECT * FROM feeds WHERE url = ?", (url,)
            ).fetchone()
            return row_to_feed(row) if row else None

    def get_all(self) -> list[DBFeed]:
        """Get all feeds with their creator's name."""
        with self._db.conn() as conn:
            rows = conn.execute("""
                SELECT f.*, u.name AS user_name
                FROM feeds f
                LEFT JOIN users u ON u.id = f.user_id
                ORDER BY f.created_at, f.name
            """).fetchall()
            return [row_to_feed(row) for row in rows]

    def get_next_to_fetch(self) -> DBFeed | None:
        """
        Get the feed polled longest ago.

        Never-polled feeds come first; ties are broken by id so repeated
        selection over a tied set is deterministic.
        """
        with self._db.conn() as conn:
            row = conn.execute("""
                SELECT * FROM feeds
                ORDER BY last_fetched_at IS NOT NULL, last_fetched_at, id
                LIMIT 1
            """).fetchone()
            return row_to_feed(row) if row else None

    def mark_fetched(self, feed_id: str, fetched_at: datetime | None = None) -> bool:
        """Record a poll attempt. Returns False if the feed does not exist."""
        stamp = to_db_time(fetched_at or utcnow())
        with self._db.conn() as conn:
            cursor = conn.execute(
                "UPDATE feeds SET last_fetched_at = ?, updated_at = ? WHERE id = ?",
                (stamp, stamp, feed_id)
            )
            return cursor.rowcount > 0
