"""
Post ingestion: turn parsed feed items into stored posts, exactly once.
"""

import logging
import re
import uuid
from dataclasses import dataclass, field
from datetime import datetime

from ..database import Database
from ..database.models import DBPost
from ..exceptions import Constraint, ConstraintViolation
from ..feeds import ParsedItem

logger = logging.getLogger(__name__)

# RFC 1123 with a numeric zone, e.g. "Mon, 02 Jan 2006 15:04:05 -0700"
PUB_DATE_FORMAT = "%a, %d %b %Y %H:%M:%S %z"

# strptime alone also takes one-digit days, "Z" and "+07:00"
_PUB_DATE_SHAPE = re.compile(
    r"[A-Za-z]{3}, \d{2} [A-Za-z]{3} \d{4} \d{2}:\d{2}:\d{2} [+-]\d{4}"
)


def parse_pub_date(raw: str) -> datetime | None:
    """
    Parse an item's pubDate; None if it does not match the format.

    Surrounding whitespace is ignored.
    """
    text = raw.strip()
    if not _PUB_DATE_SHAPE.fullmatch(text):
        return None
    try:
        return datetime.strptime(text, PUB_DATE_FORMAT)
    except ValueError:
        return None


@dataclass
class IngestResult:
    """Outcome of ingesting one batch of items."""
    feed_id: str
    created: list[DBPost] = field(default_factory=list)
    skipped: int = 0


class PostIngester:
    """Persists parsed items as posts, skipping urls that are already stored."""

    def __init__(self, db: Database):
        self.db = db

    def ingest(self, feed_id: str, items: list[ParsedItem]) -> IngestResult:
        """
        Store every new item of a feed.

        An item whose url is already stored is skipped. Any other storage
        failure stops the batch and propagates; posts stored before it stay.
        """
        result = IngestResult(feed_id=feed_id)

        for item in items:
            try:
                post = self.db.create_post(
                    post_id=str(uuid.uuid4()),
                    title=item.title,
                    url=item.link,
                    feed_id=feed_id,
                    description=item.description or None,
                    published_at=parse_pub_date(item.pub_date),
                )
            except ConstraintViolation as e:
                if e.constraint is not Constraint.POST_URL:
                    raise
                result.skipped += 1
                logger.debug(f"Skipping already stored post {item.link}")
                continue

            result.created.append(post)
            logger.info(f"Stored post {post.title!r} ({post.url})")

        return result
