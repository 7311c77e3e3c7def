"""Where the resource database lives."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .env import read_env

APP_DIR_NAME: Final[str] = "phaserules"
DEFAULT_DB_FILENAME: Final[str] = "phaserules.db"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    """Local data directory holding the default SQLite database."""

    data_dir: Path
    database_filename: str = DEFAULT_DB_FILENAME

    @property
    def database_path(self) -> Path:
        return self.data_dir.expanduser().resolve() / self.database_filename

    def database_uri(self) -> str:
        path = self.database_path
        path.parent.mkdir(parents=True, exist_ok=True)
        return f"sqlite+pysqlite:///{path}"


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str


def _platform_data_home() -> Path:
    if os.name == "nt":
        local = read_env("LOCALAPPDATA")
        return Path(local) if local else Path.home() / "AppData" / "Local"
    xdg = read_env("XDG_DATA_HOME")
    return Path(xdg) if xdg else Path.home() / ".local" / "share"


def get_storage_config() -> StorageConfig:
    data_dir = read_env("PHASERULES_DATA_DIR")
    if data_dir is None:
        return StorageConfig(data_dir=_platform_data_home() / APP_DIR_NAME)
    return StorageConfig(data_dir=Path(data_dir))


def get_database_config(*, storage: StorageConfig | None = None) -> DatabaseConfig:
    """Prefer ``DATABASE_URI``; otherwise use a SQLite file in the data directory."""

    uri = read_env("DATABASE_URI")
    if uri is not None:
        return DatabaseConfig(uri=uri)
    return DatabaseConfig(uri=(storage or get_storage_config()).database_uri())
