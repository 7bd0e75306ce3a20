"""
Repository for user operations.
"""

import uuid

from ..exceptions import Constraint, ConstraintViolation
from .connection import DatabaseConnection
from .converters import row_to_user, to_db_time, utcnow
from .models import DBUser


class UserRepository:
    """Repository for user CRUD operations."""

    def __init__(self, db: DatabaseConnection):
        self._db = db

    def create(self, name: str) -> DBUser:
        """
        Create a user.

        Raises:
            ConstraintViolation: USER_NAME if the name is taken
        """
        now = to_db_time(utcnow())
        user_id = str(uuid.uuid4())
        with self._db.conn() as conn:
            cursor = conn.execute(
                """
                INSERT INTO users (id, name, created_at, updated_at)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(name) DO NOTHING
                """,
                (user_id, name, now, now)
            )
            if cursor.rowcount == 0:
                raise ConstraintViolation(Constraint.USER_NAME, name)
            row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
            return row_to_user(row)

    def get_by_name(self, name: str) -> DBUser | None:
        """Get user by exact (case-sensitive) name."""
        with self._db.conn() as conn:
            row = conn.execute(
                "SELECT * FROM users WHERE name = ?", (name,)
            ).fetchone()
            return row_to_user(row) if row else None

    def get_by_id(self, user_id: str) -> DBUser | None:
        """Get user by ID."""
        with self._db.conn() as conn:
            row = conn.execute(
                "SELECT * FROM users WHERE id = ?", (user_id,)
            ).fetchone()
            return row_to_user(row) if row else None

    def get_all(self) -> list[DBUser]:
        """Get all users in registration order."""
        with self._db.conn() as conn:
            rows = conn.execute(
                "SELECT * FROM users ORDER BY created_at, name"
            ).fetchall()
            return [row_to_user(row) for row in rows]

    def delete_all(self) -> int:
        """Delete every user; feeds, follows and posts cascade. Returns count."""
        with self._db.conn() as conn:
            cursor = conn.execute("DELETE FROM users")
            return cursor.rowcount
