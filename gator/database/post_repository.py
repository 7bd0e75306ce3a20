"""
Post repository - ingestion target and per-user browsing.
"""

from datetime import datetime

from ..exceptions import Constraint, ConstraintViolation
from .connection import DatabaseConnection
from .converters import row_to_post, to_db_time, utcnow
from .models import DBPost


class PostRepository:
    """Repository for post operations."""

    def __init__(self, db: DatabaseConnection):
        self._db = db

    def create(
        self,
        post_id: str,
        title: str,
        url: str,
        feed_id: str,
        description: str | None = None,
        published_at: datetime | None = None,
    ) -> DBPost:
        """
        Insert a post.

        Raises:
            ConstraintViolation: POST_URL if a post with this url is stored
        """
        now = to_db_time(utcnow())
        with self._db.conn() as conn:
            cursor = conn.execute(
                """
                INSERT INTO posts
                    (id, title, url, description, published_at, feed_id, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(url) DO NOTHING
                """,
                (post_id, title, url, description, to_db_time(published_at), feed_id, now, now)
            )
            if cursor.rowcount == 0:
                raise ConstraintViolation(Constraint.POST_URL, url)
            row = conn.execute("SELECT * FROM posts WHERE id = ?", (post_id,)).fetchone()
            return row_to_post(row)

    def get_by_url(self, url: str) -> DBPost | None:
        """Get post by url."""
        with self._db.conn() as conn:
            row = conn.execute(
                "SELECT * FROM posts WHERE url = ?", (url,)
            ).fetchone()
            return row_to_post(row) if row else None

    def get_for_feed(self, feed_id: str) -> list[DBPost]:
        """Get all posts of a feed, newest first."""
        with self._db.conn() as conn:
            rows = conn.execute(
                "SELECT * FROM posts WHERE feed_id = ? ORDER BY published_at DESC, created_at DESC",
                (feed_id,)
            ).fetchall()
            return [row_to_post(row) for row in rows]

    def get_for_user(self, user_id: str, limit: int) -> list[DBPost]:
        """Newest posts from the feeds a user follows; undated posts last."""
        with self._db.conn() as conn:
            rows = conn.execute("""
                SELECT p.*, f.name AS feed_name
                FROM posts p
                JOIN feed_follows ff ON ff.feed_id = p.feed_id
                JOIN feeds f ON f.id = p.feed_id
                WHERE ff.user_id = ?
                ORDER BY p.published_at IS NULL, p.published_at DESC, p.created_at DESC
                LIMIT ?
            """, (user_id, limit)).fetchall()
            return [row_to_post(row) for row in rows]
