"""
Tests for feed fetching and parsing.
"""

import pytest
from aiohttp import web
from aiohttp import test_utils

from gator.exceptions import FeedParseError, FeedTransportError
from gator.feeds import FeedFetcher, parse_feed

SAMPLE_RSS = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>Tom &amp; Jerry Weekly</title>
    <link>https://example.com/</link>
    <description>Cats &amp; mice</description>
    <item>
      <title>First &amp; best</title>
      <link>https://example.com/posts/1</link>
      <description>Fish &amp; chips</description>
      <pubDate>Mon, 02 Jan 2006 15:04:05 -0700</pubDate>
    </item>
    <item>
      <title>Second</title>
      <link>https://example.com/posts/2</link>
      <description></description>
      <pubDate>sometime last week</pubDate>
    </item>
    <item>
      <title>Third</title>
      <link>https://example.com/posts/3</link>
    </item>
  </channel>
</rss>
"""

MARKUP_RSS = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:content="http://purl.org/rss/1.0/modules/content/">
  <channel>
    <title>Markup</title>
    <link>https://example.com/</link>
    <description>Feed with markup</description>
    <item>
      <title>Scripted</title>
      <link>https://example.com/posts/scripted</link>
      <description>&lt;p&gt;hi&lt;/p&gt;&lt;script&gt;alert(1)&lt;/script&gt;&lt;iframe src="https://evil.example/"&gt;&lt;/iframe&gt;</description>
    </item>
    <item>
      <title>Content only</title>
      <guid isPermaLink="true">https://example.com/g</guid>
      <content:encoded>&lt;p&gt;body&lt;/p&gt;</content:encoded>
    </item>
    <item>
      <title>Both</title>
      <guid isPermaLink="true">https://example.com/g2</guid>
      <link>https://example.com/posts/both</link>
      <description>Short summary</description>
      <content:encoded>&lt;p&gt;Long body&lt;/p&gt;</content:encoded>
    </item>
  </channel>
</rss>
"""


class TestParseFeed:
    """Tests for parse_feed."""

    def test_parses_channel(self):
        """Channel fields should be decoded and unescaped."""
        feed = parse_feed(SAMPLE_RSS)
        assert feed.title == "Tom & Jerry Weekly"
        assert feed.link == "https://example.com/"
        assert feed.description == "Cats & mice"

    def test_parses_items(self):
        """Every item should be returned in document order."""
        feed = parse_feed(SAMPLE_RSS)
        assert [item.link for item in feed.items] == [
            "https://example.com/posts/1",
            "https://example.com/posts/2",
            "https://example.com/posts/3",
        ]

    def test_item_fields_are_unescaped(self):
        """Item title and description should have entities decoded."""
        first = parse_feed(SAMPLE_RSS).items[0]
        assert first.title == "First & best"
        assert first.description == "Fish & chips"

    def test_pub_date_kept_raw(self):
        """pubDate should be returned as the raw string."""
        items = parse_feed(SAMPLE_RSS).items
        assert items[0].pub_date == "Mon, 02 Jan 2006 15:04:05 -0700"
        assert items[1].pub_date == "sometime last week"

    def test_missing_fields_are_empty(self):
        """Absent description and pubDate should come back empty."""
        third = parse_feed(SAMPLE_RSS).items[2]
        assert third.description == ""
        assert third.pub_date == ""

    def test_description_markup_kept(self):
        """Escaped markup in a description should come back as written, scripts included."""
        feed = parse_feed(MARKUP_RSS)
        assert feed.items[0].description == (
            '<p>hi</p><script>alert(1)</script>'
            '<iframe src="https://evil.example/"></iframe>'
        )

    def test_content_only_item_has_no_description(self):
        """<content:encoded> should not stand in for a missing <description>."""
        assert parse_feed(MARKUP_RSS).items[1].description == ""

    def test_description_wins_over_content(self):
        """An item with both elements should keep its <description>."""
        assert parse_feed(MARKUP_RSS).items[2].description == "Short summary"

    def test_link_read_from_link_element_only(self):
        """A permalink guid should not be used as the item link."""
        items = parse_feed(MARKUP_RSS).items
        assert items[1].link == ""
        assert items[2].link == "https://example.com/posts/both"

    def test_accepts_bytes(self):
        """Raw response bodies should parse the same as text."""
        assert parse_feed(SAMPLE_RSS.encode("utf-8")).title == "Tom & Jerry Weekly"

    def test_malformed_xml_raises(self):
        """Broken XML should raise instead of returning partial items."""
        broken = "<rss><channel><title>Broken</title><item><title>x</title></channel>"
        with pytest.raises(FeedParseError):
            parse_feed(broken)

    def test_not_xml_raises(self):
        """Plain text should not parse as a feed."""
        with pytest.raises(FeedParseError):
            parse_feed("this is not a feed at all")


class TestFeedFetcher:
    """Tests for FeedFetcher against a local HTTP server."""

    @pytest.mark.asyncio
    async def test_fetch_sends_user_agent(self):
        """Fetch should identify itself and parse the body."""
        seen_agents = []

        async def handler(request):
            seen_agents.append(request.headers.get("User-Agent"))
            return web.Response(text=SAMPLE_RSS, content_type="application/rss+xml")

        app = web.Application()
        app.router.add_get("/feed.xml", handler)

        async with test_utils.TestServer(app) as server:
            feed = await FeedFetcher().fetch(str(server.make_url("/feed.xml")))

        assert seen_agents == ["gator"]
        assert feed.title == "Tom & Jerry Weekly"
        assert len(feed.items) == 3

    @pytest.mark.asyncio
    async def test_fetch_custom_user_agent(self):
        """A configured user agent should be sent instead."""
        seen_agents = []

        async def handler(request):
            seen_agents.append(request.headers.get("User-Agent"))
            return web.Response(text=SAMPLE_RSS, content_type="application/rss+xml")

        app = web.Application()
        app.router.add_get("/feed.xml", handler)

        async with test_utils.TestServer(app) as server:
            await FeedFetcher(user_agent="gator-test/1.0").fetch(str(server.make_url("/feed.xml")))

        assert seen_agents == ["gator-test/1.0"]

    @pytest.mark.asyncio
    async def test_fetch_http_error(self):
        """Non-2xx responses should raise FeedTransportError."""
        async def handler(request):
            return web.Response(status=404, text="gone")

        app = web.Application()
        app.router.add_get("/feed.xml", handler)

        async with test_utils.TestServer(app) as server:
            url = str(server.make_url("/feed.xml"))
            with pytest.raises(FeedTransportError, match="404"):
                await FeedFetcher().fetch(url)

    @pytest.mark.asyncio
    async def test_fetch_malformed_body(self):
        """A 200 with a broken document should raise FeedParseError."""
        async def handler(request):
            return web.Response(text="<rss><channel>", content_type="application/rss+xml")

        app = web.Application()
        app.router.add_get("/feed.xml", handler)

        async with test_utils.TestServer(app) as server:
            url = str(server.make_url("/feed.xml"))
            with pytest.raises(FeedParseError):
                await FeedFetcher().fetch(url)

    @pytest.mark.asyncio
    async def test_fetch_connection_refused(self):
        """Unreachable hosts should raise FeedTransportError."""
        with pytest.raises(FeedTransportError) as exc:
            await FeedFetcher(timeout=5).fetch("http://127.0.0.1:1/feed.xml")
        assert exc.value.url == "http://127.0.0.1:1/feed.xml"
