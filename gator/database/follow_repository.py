"""
Follow repository - the user/feed subscription relation.
"""

import uuid

from ..exceptions import Constraint, ConstraintViolation
from .connection import DatabaseConnection
from .converters import row_to_follow, to_db_time, utcnow
from .models import DBFollow

_FOLLOW_WITH_NAMES = """
    SELECT ff.*, u.name AS user_name, f.name AS feed_name
    FROM feed_follows ff
    JOIN users u ON u.id = ff.user_id
    JOIN feeds f ON f.id = ff.feed_id
"""


class FollowRepository:
    """Repository for follow operations."""

    def __init__(self, db: DatabaseConnection):
        self._db = db

    def create(self, user_id: str, feed_id: str) -> DBFollow:
        """
        Create a follow and return it with user and feed names.

        Raises:
            ConstraintViolation: FOLLOW_PAIR if the user already follows the feed
        """
        now = to_db_time(utcnow())
        follow_id = str(uuid.uuid4())
        with self._db.conn() as conn:
            cursor = conn.execute(
                """
                INSERT INTO feed_follows (id, user_id, feed_id, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?)
                ON CONFLICT(user_id, feed_id) DO NOTHING
                """,
                (follow_id, user_id, feed_id, now, now)
            )
            if cursor.rowcount == 0:
                raise ConstraintViolation(Constraint.FOLLOW_PAIR)
            row = conn.execute(
                _FOLLOW_WITH_NAMES + " WHERE ff.id = ?", (follow_id,)
            ).fetchone()
            return row_to_follow(row)

    def delete(self, user_id: str, feed_id: str) -> bool:
        """Delete a follow. Returns False if there was none."""
        with self._db.conn() as conn:
            cursor = conn.execute(
                "DELETE FROM feed_follows WHERE user_id = ? AND feed_id = ?",
                (user_id, feed_id)
            )
            return cursor.rowcount > 0

    def get_for_user(self, user_id: str) -> list[DBFollow]:
        """Get all follows of a user with feed names."""
        with self._db.conn() as conn:
            rows = conn.execute(
                _FOLLOW_WITH_NAMES + " WHERE ff.user_id = ?", (user_id,)
            ).fetchall()
            return [row_to_follow(row) for row in rows]
