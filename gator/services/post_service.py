"""
Post service: reading the posts of followed feeds.
"""

from ..database import Database
from ..database.models import DBPost, DBUser
from ..exceptions import InputError

DEFAULT_BROWSE_LIMIT = 2


class PostService:
    """Service for browsing stored posts."""

    def __init__(self, db: Database):
        self.db = db

    def browse(self, user: DBUser, limit: int = DEFAULT_BROWSE_LIMIT) -> list[DBPost]:
        """Newest posts from the feeds a user follows."""
        if limit <= 0:
            raise InputError(f"Limit must be a positive number, got {limit}")
        return self.db.list_posts_for_user(user.id, limit)
