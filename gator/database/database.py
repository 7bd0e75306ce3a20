"""
Database facade - provides unified access to all repositories.

The method names mirror the operations the aggregator core consumes, while
the work is delegated to specialized repositories.
"""

from datetime import datetime
from pathlib import Path

from .connection import DatabaseConnection
from .feed_repository import FeedRepository
from .follow_repository import FollowRepository
from .models import DBFeed, DBFollow, DBPost, DBUser
from .post_repository import PostRepository
from .user_repository import UserRepository


class Database:
    """Unified database access facade."""

    def __init__(self, db_path: Path):
        self._connection = DatabaseConnection(db_path)

        # Initialize repositories
        self.users = UserRepository(self._connection)
        self.feeds = FeedRepository(self._connection)
        self.follows = FollowRepository(self._connection)
        self.posts = PostRepository(self._connection)

    # ─────────────────────────────────────────────────────────────
    # User operations (delegated to UserRepository)
    # ─────────────────────────────────────────────────────────────

    def get_user(self, name: str) -> DBUser | None:
        return self.users.get_by_name(name)

    def get_user_by_id(self, user_id: str) -> DBUser | None:
        return self.users.get_by_id(user_id)

    def create_user(self, name: str) -> DBUser:
        return self.users.create(name)

    def delete_all_users(self) -> int:
        return self.users.delete_all()

    def list_users(self) -> list[DBUser]:
        return self.users.get_all()

    # ─────────────────────────────────────────────────────────────
    # Feed operations (delegated to FeedRepository)
    # ─────────────────────────────────────────────────────────────

    def create_feed(self, name: str, url: str, user_id: str) -> DBFeed:
        return self.feeds.create(name, url, user_id)

    def get_feed_by_url(self, url: str) -> DBFeed | None:
        return self.feeds.get_by_url(url)

    def get_feed_by_id(self, feed_id: str) -> DBFeed | None:
        return self.feeds.get(feed_id)

    def list_feeds(self) -> list[DBFeed]:
        return self.feeds.get_all()

    def get_next_feed_to_fetch(self) -> DBFeed | None:
        return self.feeds.get_next_to_fetch()

    def mark_feed_fetched(self, feed_id: str, fetched_at: datetime | None = None) -> bool:
        return self.feeds.mark_fetched(feed_id, fetched_at)

    # ─────────────────────────────────────────────────────────────
    # Follow operations (delegated to FollowRepository)
    # ─────────────────────────────────────────────────────────────

    def create_follow(self, user_id: str, feed_id: str) -> DBFollow:
        return self.follows.create(user_id, feed_id)

    def delete_follow(self, user_id: str, feed_id: str) -> bool:
        return self.follows.delete(user_id, feed_id)

    def list_follows_for_user(self, user_id: str) -> list[DBFollow]:
        return self.follows.get_for_user(user_id)

    # ─────────────────────────────────────────────────────────────
    # Post operations (delegated to PostRepository)
    # ─────────────────────────────────────────────────────────────

    def create_post(
        self,
        post_id: str,
        title: str,
        url: str,
        feed_id: str,
        description: str | None = None,
        published_at: datetime | None = None,
    ) -> DBPost:
        return self.posts.create(post_id, title, url, feed_id, description, published_at)

    def list_posts_for_user(self, user_id: str, limit: int) -> list[DBPost]:
        return self.posts.get_for_user(user_id, limit)
