"""
Feed Polling Scheduler.

Polls one feed per tick: select the least recently polled feed, mark it,
fetch it and ingest its items.
"""

import asyncio
import logging
from datetime import timedelta
from typing import TYPE_CHECKING

from .database.converters import utcnow
from .services.ingester import IngestResult, PostIngester

if TYPE_CHECKING:
    from .database import Database
    from .feeds import FeedFetcher


logger = logging.getLogger(__name__)


class FeedScheduler:
    """
    Sequential feed poller.

    Feeds are marked as fetched before the fetch is attempted, so a slow or
    failing feed is not picked again on the next tick. A crash between the
    mark and the inserts leaves the feed marked with no new posts for that
    cycle; the next cycle of that feed stores them, url uniqueness keeping
    the result free of duplicates.

    By default the first failed cycle ends run(). With stop_on_error=False a
    failed cycle is logged and polling continues with the next tick.
    """

    def __init__(
        self,
        db: "Database",
        fetcher: "FeedFetcher",
        ingester: PostIngester | None = None,
        stop_on_error: bool = True,
    ):
        self.db = db
        self.fetcher = fetcher
        self.ingester = ingester or PostIngester(db)
        self.stop_on_error = stop_on_error

    async def run(self, interval: timedelta, max_cycles: int | None = None) -> None:
        """
        Poll every interval, starting immediately.

        Returns only when max_cycles is reached. A cycle that takes longer
        than the interval delays the next one; cycles never overlap.
        """
        if interval < timedelta(0):
            raise ValueError("interval must not be negative")

        loop = asyncio.get_running_loop()
        period = interval.total_seconds()
        cycles = 0

        while max_cycles is None or cycles < max_cycles:
            started = loop.time()
            try:
                await self.run_once()
            except Exception:
                if self.stop_on_error:
                    raise
                logger.exception("Polling cycle failed, continuing with next tick")

            cycles += 1
            if max_cycles is not None and cycles >= max_cycles:
                break

            # Wait for next tick
            elapsed = loop.time() - started
            await asyncio.sleep(max(0.0, period - elapsed))

    async def run_once(self) -> IngestResult | None:
        """Perform a single polling cycle. Returns None if there are no feeds."""
        feed = self.db.get_next_feed_to_fetch()
        if feed is None:
            logger.info("No feeds to fetch")
            return None

        self.db.mark_feed_fetched(feed.id, utcnow())
        logger.info(f"Fetching feed {feed.name} ({feed.url})")

        parsed = await self.fetcher.fetch(feed.url)
        result = self.ingester.ingest(feed.id, parsed.items)

        logger.info(
            f"Feed {feed.name}: stored {len(result.created)} new posts, "
            f"skipped {result.skipped}"
        )
        return result
