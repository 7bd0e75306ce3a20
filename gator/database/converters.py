"""
Database row converters - convert SQLite rows to dataclasses.
"""

import sqlite3
from datetime import datetime, timezone

from .models import DBFeed, DBFollow, DBPost, DBUser


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def to_db_time(value: datetime | None) -> str | None:
    """
    Serialize a datetime for storage.

    Naive values are taken as UTC. Fixed microsecond precision keeps the
    stored strings ordered the same way as the instants they represent.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


def from_db_time(value: str | None) -> datetime | None:
    """Parse a stored timestamp, tolerating bad values."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None


def _optional(row: sqlite3.Row, col: str) -> str | None:
    """Column that is only present in some queries."""
    try:
        return row[col]
    except (IndexError, KeyError):
        return None


def row_to_user(row: sqlite3.Row) -> DBUser:
    """Convert a database row to a DBUser."""
    return DBUser(
        id=row["id"],
        name=row["name"],
        created_at=from_db_time(row["created_at"]) or utcnow(),
        updated_at=from_db_time(row["updated_at"]) or utcnow(),
    )


def row_to_feed(row: sqlite3.Row) -> DBFeed:
    """Convert a database row to a DBFeed."""
    return DBFeed(
        id=row["id"],
        name=row["name"],
        url=row["url"],
        user_id=row["user_id"],
        created_at=from_db_time(row["created_at"]) or utcnow(),
        updated_at=from_db_time(row["updated_at"]) or utcnow(),
        last_fetched_at=from_db_time(row["last_fetched_at"]),
        user_name=_optional(row, "user_name"),
    )


def row_to_follow(row: sqlite3.Row) -> DBFollow:
    """Convert a database row to a DBFollow."""
    return DBFollow(
        id=row["id"],
        user_id=row["user_id"],
        feed_id=row["feed_id"],
        created_at=from_db_time(row["created_at"]) or utcnow(),
        updated_at=from_db_time(row["updated_at"]) or utcnow(),
        user_name=_optional(row, "user_name"),
        feed_name=_optional(row, "feed_name"),
    )


def row_to_post(row: sqlite3.Row) -> DBPost:
    """Convert a database row to a DBPost."""
    return DBPost(
        id=row["id"],
        title=row["title"],
        url=row["url"],
        description=row["description"],
        published_at=from_db_time(row["published_at"]),
        feed_id=row["feed_id"],
        created_at=from_db_time(row["created_at"]) or utcnow(),
        updated_at=from_db_time(row["updated_at"]) or utcnow(),
        feed_name=_optional(row, "feed_name"),
    )
