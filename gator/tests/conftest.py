"""
Pytest fixtures for aggregator tests.
"""

import json
import os
import tempfile
from pathlib import Path

import pytest
from click.testing import CliRunner

from gator.cli import cli
from gator.database import Database
from gator.feeds import ParsedFeed, ParsedItem


@pytest.fixture
def temp_db_path():
    """Create a temporary database file path."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        yield Path(f.name)
    # Cleanup
    if os.path.exists(f.name):
        os.unlink(f.name)


@pytest.fixture
def test_db(temp_db_path):
    """Create a test database instance."""
    db = Database(temp_db_path)
    yield db


@pytest.fixture
def alice(test_db):
    """A registered user."""
    return test_db.create_user("alice")


@pytest.fixture
def bob(test_db):
    """A second registered user."""
    return test_db.create_user("bob")


@pytest.fixture
def blog_feed(test_db, alice):
    """A feed owned by alice."""
    return test_db.create_feed("Boot.dev Blog", "https://blog.boot.dev/index.xml", alice.id)


class FakeFetcher:
    """Stands in for FeedFetcher; maps urls to a ParsedFeed or an exception."""

    def __init__(self, responses: dict | None = None, on_fetch=None):
        self.responses = responses or {}
        self.on_fetch = on_fetch
        self.calls: list[str] = []

    async def fetch(self, url: str) -> ParsedFeed:
        self.calls.append(url)
        if self.on_fetch:
            self.on_fetch(url)
        result = self.responses.get(url, ParsedFeed(title="", link="", description=""))
        if isinstance(result, Exception):
            raise result
        return result


def make_items(*urls: str, pub_date: str = "Mon, 02 Jan 2006 15:04:05 -0700") -> list[ParsedItem]:
    """Parsed items with distinct urls."""
    return [
        ParsedItem(
            title=f"Post {i}",
            link=url,
            description=f"Description of post {i}",
            pub_date=pub_date,
        )
        for i, url in enumerate(urls, start=1)
    ]


@pytest.fixture
def fake_fetcher():
    return FakeFetcher()


@pytest.fixture
def config_file():
    """A config file pointing at a fresh database, with no current user."""
    with tempfile.TemporaryDirectory() as d:
        path = Path(d) / ".gatorconfig.json"
        db_path = Path(d) / "gator.db"
        path.write_text(json.dumps({"db_url": f"sqlite:///{db_path}"}))
        yield path


@pytest.fixture
def run_cli(config_file):
    """Invoke the CLI against the temporary config file."""
    runner = CliRunner()

    def invoke(*args: str):
        return runner.invoke(cli, ["--config-file", str(config_file), *args])

    return invoke
