"""
Service layer for business logic.

Services encapsulate the aggregator's rules, keeping the CLI a thin adapter.
Each service receives the Database via constructor injection.
"""

from .follow_service import FollowGraph
from .ingester import IngestResult, PostIngester, parse_pub_date
from .post_service import PostService
from .user_service import UserService

__all__ = [
    "FollowGraph",
    "IngestResult",
    "PostIngester",
    "PostService",
    "UserService",
    "parse_pub_date",
]
