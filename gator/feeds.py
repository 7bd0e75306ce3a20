"""
Feed Fetcher - Fetch and parse RSS feeds.

Handles:
- A single GET per poll with a fixed client-agent string
- RSS channel/item decoding via feedparser
- HTML entity unescaping of titles and descriptions
"""

import asyncio
import html
import io
import logging
from dataclasses import dataclass, field

import aiohttp
import feedparser

from .exceptions import FeedParseError, FeedTransportError

logger = logging.getLogger(__name__)

# feedparser flags these as bozo although the document itself is well-formed
_BENIGN_BOZO = (feedparser.CharacterEncodingOverride,)


@dataclass
class ParsedItem:
    """Represents a single item from a feed."""
    title: str
    link: str
    description: str
    pub_date: str  # Raw pubDate text, parsed at ingestion


@dataclass
class ParsedFeed:
    """Represents a parsed feed channel."""
    title: str
    link: str
    description: str
    items: list[ParsedItem] = field(default_factory=list)


class FeedFetcher:
    """Fetches and parses one remote feed document."""

    def __init__(self, user_agent: str = "gator", timeout: float | None = None):
        self.user_agent = user_agent
        self.timeout = timeout

    async def fetch(self, url: str) -> ParsedFeed:
        """
        Fetch and parse a feed URL.

        Raises:
            FeedTransportError: network failure or non-2xx response
            FeedParseError: the body is not a well-formed feed
        """
        headers = {"User-Agent": self.user_agent}

        try:
            async with aiohttp.ClientSession() as session:
                async with session.get(
                    url,
                    headers=headers,
                    timeout=aiohttp.ClientTimeout(total=self.timeout)
                ) as resp:
                    resp.raise_for_status()
                    content = await resp.read()
        except aiohttp.ClientResponseError as e:
            raise FeedTransportError(url, f"HTTP {e.status} {e.message}") from e
        except aiohttp.ClientError as e:
            raise FeedTransportError(url, str(e) or type(e).__name__) from e
        except asyncio.TimeoutError as e:
            raise FeedTransportError(url, "timed out") from e

        logger.debug(f"Fetched {len(content)} bytes from {url}")
        return parse_feed(content)


def parse_feed(content: bytes | str) -> ParsedFeed:
    """
    Parse an RSS document that has already been fetched.

    No partial result is returned: a malformed document raises FeedParseError
    even if feedparser managed to recover some entries.
    """
    if isinstance(content, str):
        content = content.encode("utf-8")

    # A stream keeps feedparser from treating the content as a path or URL.
    # Markup in titles and descriptions is kept as the feed wrote it.
    parsed = feedparser.parse(
        io.BytesIO(content),
        sanitize_html=False,
        resolve_relative_uris=False,
    )

    if parsed.bozo and not isinstance(parsed.bozo_exception, _BENIGN_BOZO):
        raise FeedParseError(f"Failed to parse feed: {parsed.bozo_exception}")

    items = [
        ParsedItem(
            title=html.unescape(entry.get("title", "")),
            link=_item_link(entry),
            description=html.unescape(_item_description(entry)),
            pub_date=entry.get("published", ""),
        )
        for entry in parsed.entries
    ]

    channel = parsed.feed
    return ParsedFeed(
        title=html.unescape(channel.get("title", "")),
        link=channel.get("link", ""),
        description=html.unescape(channel.get("description", "")),
        items=items,
    )


def _item_link(entry) -> str:
    """The item's <link> text; feedparser's fallback to a permalink guid is ignored."""
    has_link_element = any(
        link.get("rel") == "alternate" for link in entry.get("links", [])
    )
    return entry.get("link", "") if has_link_element else ""


def _item_description(entry) -> str:
    """
    The item's <description> text.

    feedparser copies <content:encoded> into the summary when an item has no
    description; such a copy carries no summary_detail and is ignored.
    """
    if "summary_detail" not in entry:
        return ""
    return entry.get("summary", "")
