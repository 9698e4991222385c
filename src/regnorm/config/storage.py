"""Where the reference database lives.

``DATABASE_URI`` names any SQLAlchemy URL directly. Without it the database is a
SQLite file called ``regnorm.db`` inside ``REGNORM_DATA_DIR`` (default: the
platform's per-user data directory).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

DATA_DIR_ENV_VAR: Final[str] = "REGNORM_DATA_DIR"
DATABASE_URI_ENV_VAR: Final[str] = "DATABASE_URI"
DATABASE_FILENAME: Final[str] = "regnorm.db"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    """Local directory holding the SQLite reference database."""

    data_dir: Path
    database_filename: str = DATABASE_FILENAME

    @property
    def directory(self) -> Path:
        return self.data_dir.expanduser().resolve()

    def database_path(self, *, create_dir: bool = True) -> Path:
        if create_dir:
            self.directory.mkdir(parents=True, exist_ok=True)
        return self.directory / self.database_filename

    def sqlite_uri(self) -> str:
        return f"sqlite+pysqlite:///{self.database_path()}"


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str


def platform_data_dir() -> Path:
    """``$XDG_DATA_HOME/regnorm`` on POSIX, ``%LOCALAPPDATA%\\regnorm`` on Windows."""
    if os.name == "nt":
        root = os.getenv("LOCALAPPDATA") or str(Path.home() / "AppData" / "Local")
    else:
        root = os.getenv("XDG_DATA_HOME") or str(Path.home() / ".local" / "share")
    return Path(root) / "regnorm"


def get_storage_config() -> StorageConfig:
    configured = os.getenv(DATA_DIR_ENV_VAR)
    return StorageConfig(data_dir=Path(configured) if configured else platform_data_dir())


def get_database_config(*, storage: StorageConfig | None = None) -> DatabaseConfig:
    if uri := os.getenv(DATABASE_URI_ENV_VAR):
        return DatabaseConfig(uri=uri)
    return DatabaseConfig(uri=(storage or get_storage_config()).sqlite_uri())
