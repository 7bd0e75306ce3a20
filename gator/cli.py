"""
Command-line interface.

    gator register <name>     gator addfeed <name> <url>
    gator login <name>        gator feeds
    gator users               gator follow <url>
    gator reset               gator following
    gator agg <interval>      gator unfollow <url>
                              gator browse [limit]
"""

import asyncio
import logging
import re
from datetime import timedelta
from pathlib import Path

import click

from .auth import requires_user
from .config import AppContext, LocalConfig, config
from .database import Database
from .database.models import DBUser
from .exceptions import GatorError, InputError
from .feeds import FeedFetcher
from .scheduler import FeedScheduler
from .services import FollowGraph, PostIngester, PostService, UserService
from .services.post_service import DEFAULT_BROWSE_LIMIT

_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")
_DURATION_SECONDS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}


def parse_duration(value: str) -> timedelta:
    """
    Parse a duration such as "30s", "1m", "1h30m" or "1.5h".

    Raises:
        InputError: If the string is not a positive duration
    """
    text = value.strip()
    parts = list(_DURATION_PART.finditer(text))
    if not parts or "".join(p.group(0) for p in parts) != text:
        raise InputError(f"Invalid duration {value!r}, expected something like 30s, 1m or 1h30m")

    seconds = sum(float(p.group(1)) * _DURATION_SECONDS[p.group(2)] for p in parts)
    total = timedelta(seconds=seconds)

    if total <= timedelta(0):
        raise InputError(f"Duration must be positive, got {value!r}")
    return total


class GatorGroup(click.Group):
    """Group that reports aggregator errors as click errors (exit status 1)."""

    def invoke(self, ctx: click.Context):
        try:
            return super().invoke(ctx)
        except GatorError as e:
            raise click.ClickException(str(e)) from e


@click.group(cls=GatorGroup)
@click.option(
    "--config-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Path of the JSON config file (default: ~/.gatorconfig.json).",
)
@click.pass_context
def cli(ctx: click.Context, config_file: Path | None):
    """Gator, an RSS feed aggregator."""
    config_path = config_file or config.CONFIG_PATH
    local_config = LocalConfig.read(config_path)
    ctx.obj = AppContext(
        db=Database(local_config.db_path),
        local_config=local_config,
        config_path=config_path,
    )


# ─────────────────────────────────────────────────────────────
# Users
# ─────────────────────────────────────────────────────────────

@cli.command()
@click.argument("name")
@click.pass_obj
def login(app: AppContext, name: str):
    """Set the current user."""
    user = UserService(app.db).login(name)
    app.set_current_user(user.name)
    click.echo(f"User has been set to {user.name}")


@cli.command()
@click.argument("name")
@click.pass_obj
def register(app: AppContext, name: str):
    """Create a user and make it the current user."""
    user = UserService(app.db).register(name)
    app.set_current_user(user.name)
    click.echo(f"User {user.name} was created (id {user.id})")


@cli.command()
@click.pass_obj
def reset(app: AppContext):
    """Delete all users, feeds, follows and posts."""
    UserService(app.db).reset()
    click.echo("All users have been deleted")


@cli.command()
@click.pass_obj
def users(app: AppContext):
    """List registered users."""
    current = app.local_config.current_user_name
    for user in UserService(app.db).list_users():
        suffix = " (current)" if user.name == current else ""
        click.echo(f"* {user.name}{suffix}")


# ─────────────────────────────────────────────────────────────
# Aggregation
# ─────────────────────────────────────────────────────────────

@cli.command()
@click.argument("interval")
@click.option(
    "--keep-going",
    is_flag=True,
    help="Log failed polling cycles and continue instead of stopping.",
)
@click.pass_obj
def agg(app: AppContext, interval: str, keep_going: bool):
    """Poll one feed every INTERVAL (e.g. 30s, 1m, 1h)."""
    period = parse_duration(interval)
    scheduler = FeedScheduler(
        db=app.db,
        fetcher=FeedFetcher(
            user_agent=app.settings.USER_AGENT,
            timeout=app.settings.FETCH_TIMEOUT,
        ),
        ingester=PostIngester(app.db),
        stop_on_error=not keep_going,
    )
    click.echo(f"Collecting feeds every {interval}")
    asyncio.run(scheduler.run(period))


# ─────────────────────────────────────────────────────────────
# Feeds and follows
# ─────────────────────────────────────────────────────────────

@cli.command()
@click.argument("name")
@click.argument("url")
@requires_user
def addfeed(app: AppContext, user: DBUser, name: str, url: str):
    """Add a feed and follow it."""
    feed = FollowGraph(app.db).add_feed(name, url, user)
    click.echo(f"Feed {feed.name} was created ({feed.url})")
    click.echo(f"User {user.name} now follows {feed.name}")


@cli.command()
@click.pass_obj
def feeds(app: AppContext):
    """List every feed and who added it."""
    for feed in FollowGraph(app.db).list_feeds():
        click.echo(f"* {feed.name}")
        click.echo(f"  url: {feed.url}")
        click.echo(f"  added by: {feed.user_name}")


@cli.command()
@click.argument("url")
@requires_user
def follow(app: AppContext, user: DBUser, url: str):
    """Follow the feed with URL."""
    record = FollowGraph(app.db).follow(url, user)
    click.echo(f"User {record.user_name} now follows {record.feed_name}")


@cli.command()
@requires_user
def following(app: AppContext, user: DBUser):
    """List the feeds the current user follows."""
    for name in FollowGraph(app.db).list_following(user):
        click.echo(f"* {name}")


@cli.command()
@click.argument("url")
@requires_user
def unfollow(app: AppContext, user: DBUser, url: str):
    """Stop following the feed with URL."""
    FollowGraph(app.db).unfollow(url, user)
    click.echo(f"User {user.name} unfollowed {url}")


@cli.command()
@click.argument("limit", type=int, default=DEFAULT_BROWSE_LIMIT)
@requires_user
def browse(app: AppContext, user: DBUser, limit: int):
    """Show the newest posts from followed feeds."""
    for post in PostService(app.db).browse(user, limit):
        published = post.published_at.isoformat() if post.published_at else "unknown date"
        click.echo(f"{post.title} ({post.feed_name}, {published})")
        click.echo(f"  {post.url}")
        if post.description:
            click.echo(f"  {post.description}")


def main():
    """Console script entry point."""
    logging.basicConfig(
        level=config.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    cli()


if __name__ == "__main__":
    main()
