"""
Configuration and per-invocation context.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from dotenv import load_dotenv
from pydantic import BaseModel, ValidationError

from .exceptions import ConfigError

if TYPE_CHECKING:
    from .auth import AuthContext
    from .database import Database

# Load environment variables
load_dotenv()

DEFAULT_CONFIG_FILE = Path.home() / ".gatorconfig.json"
DEFAULT_DB_URL = f"sqlite:///{Path.home() / '.gator' / 'gator.db'}"
SQLITE_PREFIX = "sqlite:///"


def _parse_timeout(name: str) -> float | None:
    """Parse an optional positive number of seconds from environment variable."""
    value = os.getenv(name)
    if not value:
        return None
    try:
        seconds = float(value)
    except ValueError:
        raise ConfigError(f"{name} must be a number of seconds, got {value!r}") from None
    if not seconds > 0:
        raise ConfigError(f"{name} must be positive, got {value!r}")
    return seconds


class Config:
    """Application configuration from environment."""
    CONFIG_PATH: Path = Path(os.getenv("GATOR_CONFIG_PATH", str(DEFAULT_CONFIG_FILE))).expanduser()
    USER_AGENT: str = os.getenv("GATOR_USER_AGENT", "gator")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    @property
    def FETCH_TIMEOUT(self) -> float | None:
        # No timeout by default; the fetch is bounded only by task cancellation
        return _parse_timeout("GATOR_FETCH_TIMEOUT")


config = Config()


class LocalConfig(BaseModel):
    """The JSON file holding the connection string and the current user."""
    db_url: str = DEFAULT_DB_URL
    current_user_name: str | None = None

    @classmethod
    def read(cls, path: Path) -> "LocalConfig":
        """
        Load the config file.

        A missing file yields the defaults; an unreadable or invalid one
        raises ConfigError.
        """
        if not path.exists():
            return cls()
        try:
            return cls.model_validate_json(path.read_text(encoding="utf-8"))
        except OSError as e:
            raise ConfigError(f"Cannot read config file {path}: {e}") from e
        except ValidationError as e:
            raise ConfigError(f"Invalid config file {path}: {e}") from e

    def write(self, path: Path) -> None:
        """Persist the config file."""
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(self.model_dump_json(), encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Cannot write config file {path}: {e}") from e

    def with_user(self, name: str) -> "LocalConfig":
        """Return a copy pointing at another current user."""
        return self.model_copy(update={"current_user_name": name})

    @property
    def db_path(self) -> Path:
        """SQLite database location derived from db_url."""
        url = self.db_url
        if url.startswith(SQLITE_PREFIX):
            url = url[len(SQLITE_PREFIX):]
        elif "://" in url:
            raise ConfigError(f"Unsupported database url: {self.db_url}")
        if not url:
            raise ConfigError("Database url is empty")
        return Path(url).expanduser()


@dataclass
class AppContext:
    """Everything one command invocation needs, passed explicitly."""
    db: "Database"
    local_config: LocalConfig
    config_path: Path
    settings: Config = config

    @property
    def auth(self) -> "AuthContext":
        from .auth import AuthContext
        return AuthContext(self.db, self.local_config.current_user_name)

    def set_current_user(self, name: str) -> None:
        """Point the local config at a user and persist it."""
        self.local_config = self.local_config.with_user(name)
        self.local_config.write(self.config_path)
