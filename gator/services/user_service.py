"""
User service: registration, login and the bulk reset.
"""

import logging

from ..database import Database
from ..database.models import DBUser
from ..exceptions import ConflictError, Constraint, ConstraintViolation, require_user

logger = logging.getLogger(__name__)


class UserService:
    """Service for user-related operations."""

    def __init__(self, db: Database):
        self.db = db

    def register(self, name: str) -> DBUser:
        """Create a user; ConflictError if the name is taken."""
        try:
            user = self.db.create_user(name)
        except ConstraintViolation as e:
            if e.constraint is not Constraint.USER_NAME:
                raise
            raise ConflictError(f"User {name} already exists") from e
        logger.info(f"Registered user {name}")
        return user

    def login(self, name: str) -> DBUser:
        """Resolve a user by name; NotFoundError if unknown."""
        return require_user(self.db.get_user(name), name)

    def reset(self) -> int:
        """Delete all users and, by cascade, everything they own."""
        deleted = self.db.delete_all_users()
        logger.info(f"Reset removed {deleted} users")
        return deleted

    def list_users(self) -> list[DBUser]:
        return self.db.list_users()
