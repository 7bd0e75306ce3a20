"""
Database connection management and schema initialization.
"""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from ..exceptions import PersistenceError


class DatabaseConnection:
    """Manages database connection and schema."""

    def __init__(self, db_path: Path):
        self.db_path = db_path
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    @contextmanager
    def conn(self) -> Iterator[sqlite3.Connection]:
        """
        Get database connection with row factory.

        Commits when the block succeeds. Driver errors are re-raised as
        PersistenceError so callers never see sqlite3 types.
        """
        try:
            connection = sqlite3.connect(self.db_path)
        except sqlite3.Error as e:
            raise PersistenceError(f"Cannot open database {self.db_path}: {e}") from e
        connection.row_factory = sqlite3.Row
        try:
            connection.execute("PRAGMA foreign_keys = ON")
            yield connection
            connection.commit()
        except sqlite3.Error as e:
            raise PersistenceError(str(e)) from e
        finally:
            connection.close()

    def _init_schema(self):
        """Initialize database schema."""
        with self.conn() as connection:
            connection.executescript("""
                CREATE TABLE IF NOT EXISTS users (
                    id TEXT PRIMARY KEY,
                    name TEXT UNIQUE NOT NULL,
                    created_at TIMESTAMP NOT NULL,
                    updated_at TIMESTAMP NOT NULL
                );

                CREATE TABLE IF NOT EXISTS feeds (
                    id TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    url TEXT UNIQUE NOT NULL,
                    user_id TEXT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
                    created_at TIMESTAMP NOT NULL,
                    updated_at TIMESTAMP NOT NULL,
                    last_fetched_at TIMESTAMP
                );

                CREATE TABLE IF NOT EXISTS feed_follows (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
                    feed_id TEXT NOT NULL REFERENCES feeds(id) ON DELETE CASCADE,
                    created_at TIMESTAMP NOT NULL,
                    updated_at TIMESTAMP NOT NULL,
                    UNIQUE (user_id, feed_id)
                );

                CREATE TABLE IF NOT EXISTS posts (
                    id TEXT PRIMARY KEY,
                    title TEXT NOT NULL,
                    url TEXT UNIQUE NOT NULL,
                    description TEXT,
                    published_at TIMESTAMP,
                    feed_id TEXT NOT NULL REFERENCES feeds(id) ON DELETE CASCADE,
                    created_at TIMESTAMP NOT NULL,
                    updated_at TIMESTAMP NOT NULL
                );

                CREATE INDEX IF NOT EXISTS idx_feeds_last_fetched ON feeds(last_fetched_at);
                CREATE INDEX IF NOT EXISTS idx_feed_follows_user ON feed_follows(user_id);
                CREATE INDEX IF NOT EXISTS idx_posts_feed ON posts(feed_id);
                CREATE INDEX IF NOT EXISTS idx_posts_published ON posts(published_at DESC);
            """)
