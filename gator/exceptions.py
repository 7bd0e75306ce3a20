"""
Error hierarchy for the aggregator.

Every failure surfaced to a command is a GatorError subclass so the CLI can
report it uniformly and exit with a nonzero status.
"""

from enum import Enum
from typing import TypeVar

T = TypeVar("T")


class GatorError(Exception):
    """Base class for all aggregator errors."""


class InputError(GatorError):
    """Missing or invalid command arguments."""


class ConfigError(InputError):
    """The local configuration file is unreadable or invalid."""


class NotFoundError(GatorError):
    """Unknown user or feed."""


class ConflictError(GatorError):
    """Duplicate user name, feed url or follow pair."""


class AuthError(GatorError):
    """No resolvable current user."""


class FeedTransportError(GatorError):
    """The feed could not be retrieved over the network."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to fetch {url}: {reason}")


class FeedParseError(GatorError):
    """The feed document is not well-formed."""


class PersistenceError(GatorError):
    """Storage failure."""


class Constraint(Enum):
    """Uniqueness constraints enforced by the storage layer."""
    USER_NAME = "users.name"
    FEED_URL = "feeds.url"
    FOLLOW_PAIR = "feed_follows.user_id,feed_id"
    POST_URL = "posts.url"


class ConstraintViolation(PersistenceError):
    """An insert collided with a uniqueness constraint."""

    def __init__(self, constraint: Constraint, value: str = ""):
        self.constraint = constraint
        self.value = value
        detail = f" ({value})" if value else ""
        super().__init__(f"Unique constraint violated: {constraint.value}{detail}")


def require_resource(resource: T | None, detail: str = "Resource not found") -> T:
    """
    Raise NotFoundError if resource is None, otherwise return the resource.

    Usage:
        feed = require_resource(db.get_feed_by_url(url), f"No feed with url {url}")
    """
    if resource is None:
        raise NotFoundError(detail)
    return resource


def require_feed(feed: T | None, url: str) -> T:
    """Raise NotFoundError if no feed matched the url."""
    return require_resource(feed, f"No feed found with url {url}")


def require_user(user: T | None, name: str) -> T:
    """Raise NotFoundError if no user matched the name."""
    return require_resource(user, f"User {name} does not exist")
