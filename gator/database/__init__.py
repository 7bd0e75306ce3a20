"""
Database module - SQLite storage for users, feeds, follows and posts.

Uses repository pattern for better separation of concerns.
"""

from .connection import DatabaseConnection
from .models import DBUser, DBFeed, DBFollow, DBPost
from .user_repository import UserRepository
from .feed_repository import FeedRepository
from .follow_repository import FollowRepository
from .post_repository import PostRepository
from .database import Database

__all__ = [
    "Database",
    "DatabaseConnection",
    "DBUser",
    "DBFeed",
    "DBFollow",
    "DBPost",
    "UserRepository",
    "FeedRepository",
    "FollowRepository",
    "PostRepository",
]
