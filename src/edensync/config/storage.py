"""Where the reconciliation cache lives on disk."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError

from .env import optional_env_var
from .errors import ConfigurationError

APP_DIR_NAME: Final[str] = "edensync"
DEFAULT_CACHE_FILENAME: Final[str] = "edensync-cache.db"
CACHE_URI_VAR: Final[str] = "EDEN_CACHE_URI"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path
    cache_filename: str = DEFAULT_CACHE_FILENAME

    def cache_path(self) -> Path:
        data_dir = self.data_dir.expanduser().resolve()
        data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir / self.cache_filename

    def cache_uri(self) -> str:
        return f"sqlite+pysqlite:///{self.cache_path()}"


def _platform_data_dir() -> Path:
    if os.name == "nt":
        base = os.getenv("LOCALAPPDATA")
        return Path(base) if base else Path.home() / "AppData" / "Local"
    base = os.getenv("XDG_DATA_HOME")
    return Path(base) if base else Path.home() / ".local" / "share"


def get_storage_config() -> StorageConfig:
    env_dir = optional_env_var("EDEN_DATA_DIR")
    data_dir = Path(env_dir) if env_dir else _platform_data_dir() / APP_DIR_NAME
    return StorageConfig(data_dir=data_dir.expanduser().resolve())


def get_cache_uri(*, storage: StorageConfig | None = None) -> str:
    """Return ``EDEN_CACHE_URI`` when set, else a SQLite file in the data dir.

    An override that SQLAlchemy cannot parse raises ``ConfigurationError`` here
    rather than when the first owner session opens the cache.
    """

    env_uri = optional_env_var(CACHE_URI_VAR)
    if env_uri is None:
        return (storage or get_storage_config()).cache_uri()
    try:
        make_url(env_uri)
    except ArgumentError as exc:
        raise ConfigurationError(CACHE_URI_VAR, f"is not a database URL: {env_uri!r}") from exc
    return env_uri
