"""
Tests for current-user resolution.
"""

from pathlib import Path
from unittest.mock import MagicMock

import click
import pytest

from gator.auth import AuthContext, requires_user
from gator.config import AppContext, LocalConfig
from gator.database import Database
from gator.exceptions import AuthError
from gator.services import FollowGraph, PostService


class TestAuthContext:
    """Tests for AuthContext.current_user."""

    def test_resolves_configured_user(self, test_db, alice):
        """The configured name should resolve to the stored user."""
        assert AuthContext(test_db, "alice").current_user() == alice

    def test_no_user_configured(self, test_db):
        """No configured name should raise AuthError."""
        with pytest.raises(AuthError, match="No user logged in"):
            AuthContext(test_db, None).current_user()

    def test_user_removed_after_reset(self, test_db, alice):
        """A name that no longer resolves should raise AuthError."""
        test_db.delete_all_users()
        with pytest.raises(AuthError, match="does not exist"):
            AuthContext(test_db, "alice").current_user()


class TestRequiresUser:
    """Tests for the requires_user command decorator."""

    def _app(self, current_user_name):
        db = MagicMock(spec=Database)
        db.get_user.return_value = None
        return AppContext(
            db=db,
            local_config=LocalConfig(current_user_name=current_user_name),
            config_path=Path("unused.json"),
        )

    @pytest.mark.parametrize("current_user_name", [None, "ghost"])
    def test_fails_before_touching_feeds(self, current_user_name):
        """Auth failure should happen before any feed, follow or post call."""
        app = self._app(current_user_name)

        @requires_user
        def handler(app, user):
            FollowGraph(app.db).follow("https://example.com/feed", user)
            PostService(app.db).browse(user)

        with click.Context(click.Command("follow"), obj=app):
            with pytest.raises(AuthError):
                handler()

        app.db.get_feed_by_url.assert_not_called()
        app.db.create_follow.assert_not_called()
        app.db.create_feed.assert_not_called()
        app.db.list_posts_for_user.assert_not_called()

    def test_injects_user(self, test_db, alice):
        """A resolvable user should be passed to the handler."""
        app = AppContext(
            db=test_db,
            local_config=LocalConfig(current_user_name="alice"),
            config_path=Path("unused.json"),
        )

        @requires_user
        def handler(app, user, extra):
            return user, extra

        with click.Context(click.Command("browse"), obj=app):
            assert handler(extra=5) == (alice, 5)
