"""
Database models - dataclasses for database entities.
"""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class DBUser:
    id: str
    name: str
    created_at: datetime
    updated_at: datetime


@dataclass
class DBFeed:
    id: str
    name: str
    url: str
    user_id: str
    created_at: datetime
    updated_at: datetime
    last_fetched_at: datetime | None = None
    user_name: str | None = None  # Creator's name, populated by listing queries


@dataclass
class DBFollow:
    id: str
    user_id: str
    feed_id: str
    created_at: datetime
    updated_at: datetime
    user_name: str | None = None
    feed_name: str | None = None


@dataclass
class DBPost:
    id: str
    title: str
    url: str
    description: str | None
    published_at: datetime | None
    feed_id: str
    created_at: datetime
    updated_at: datetime
    feed_name: str | None = None
