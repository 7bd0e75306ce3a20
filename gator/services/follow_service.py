"""
Follow service: the many-to-many relation between users and feeds.
"""

import logging

from ..database import Database
from ..database.models import DBFeed, DBFollow, DBUser
from ..exceptions import (
    ConflictError,
    Constraint,
    ConstraintViolation,
    NotFoundError,
    require_feed,
)

logger = logging.getLogger(__name__)


class FollowGraph:
    """Service for feed catalog and follow operations."""

    def __init__(self, db: Database):
        self.db = db

    # ─────────────────────────────────────────────────────────────
    # Feed Catalog
    # ─────────────────────────────────────────────────────────────

    def add_feed(self, name: str, url: str, owner: DBUser) -> DBFeed:
        """
        Create a feed and subscribe its owner to it.

        Args:
            name: Display name of the feed
            url: Feed URL, stored as given
            owner: The creating user

        Returns:
            The created feed

        Raises:
            ConflictError: If a feed with this url already exists
        """
        try:
            feed = self.db.create_feed(name, url, owner.id)
        except ConstraintViolation as e:
            if e.constraint is not Constraint.FEED_URL:
                raise
            raise ConflictError(f"Feed with url {url} already exists") from e

        self.db.create_follow(owner.id, feed.id)
        logger.info(f"User {owner.name} added feed {name} ({url})")
        return feed

    def list_feeds(self) -> list[DBFeed]:
        """List every feed with its creator's name."""
        return self.db.list_feeds()

    # ─────────────────────────────────────────────────────────────
    # Follows
    # ─────────────────────────────────────────────────────────────

    def follow(self, url: str, user: DBUser) -> DBFollow:
        """
        Follow the feed with exactly this url.

        Returns:
            The follow, carrying the user and feed names

        Raises:
            NotFoundError: If no feed has this url
            ConflictError: If the user already follows the feed
        """
        feed = require_feed(self.db.get_feed_by_url(url), url)
        try:
            return self.db.create_follow(user.id, feed.id)
        except ConstraintViolation as e:
            if e.constraint is not Constraint.FOLLOW_PAIR:
                raise
            raise ConflictError(f"User {user.name} already follows {feed.name}") from e

    def unfollow(self, url: str, user: DBUser) -> None:
        """
        Stop following the feed with this url.

        Raises:
            NotFoundError: If no feed has this url, or the user does not follow it
        """
        feed = require_feed(self.db.get_feed_by_url(url), url)
        if not self.db.delete_follow(user.id, feed.id):
            raise NotFoundError(f"User {user.name} is not following {feed.name}")

    def list_following(self, user: DBUser) -> list[str]:
        """Names of the feeds a user follows, in no particular order."""
        return [
            follow.feed_name or ""
            for follow in self.db.list_follows_for_user(user.id)
        ]
