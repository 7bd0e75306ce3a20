"""
Current-user resolution.

Commands that act on behalf of a user resolve the configured user name to a
stored user first, and fail before touching feeds, follows or posts if that
is not possible.
"""

import functools
from typing import Callable

import click

from .config import AppContext
from .database import Database
from .database.models import DBUser
from .exceptions import AuthError


class AuthContext:
    """Resolves the configured current user."""

    def __init__(self, db: Database, current_user_name: str | None):
        self._db = db
        self.current_user_name = current_user_name

    def current_user(self) -> DBUser:
        """
        Return the logged-in user.

        Raises:
            AuthError: If no user is configured or the name no longer resolves
        """
        if not self.current_user_name:
            raise AuthError("No user logged in. Run `gator login <name>` first.")

        user = self._db.get_user(self.current_user_name)
        if user is None:
            raise AuthError(
                f"Current user {self.current_user_name} does not exist. "
                "Register or log in again."
            )
        return user


def requires_user(handler: Callable) -> Callable:
    """
    Click command decorator that injects the current user.

    The wrapped handler is called as handler(app, user, *args, **kwargs).

    Usage:
        @cli.command()
        @click.argument("url")
        @requires_user
        def follow(app, user, url): ...
    """
    @click.pass_obj
    @functools.wraps(handler)
    def wrapper(app: AppContext, *args, **kwargs):
        user = app.auth.current_user()
        return handler(app, user, *args, **kwargs)

    return wrapper
