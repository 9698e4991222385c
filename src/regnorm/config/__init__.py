"""Application configuration helpers."""

from __future__ import annotations

from .env import optional_float_env
from .errors import ConfigurationError
from .legislation import load_legislation_tables, tables_from_document
from .logging import configure_logging
from .matching import get_match_thresholds
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "ConfigurationError",
    "DatabaseConfig",
    "StorageConfig",
    "configure_logging",
    "get_database_config",
    "get_match_thresholds",
    "get_storage_config",
    "load_legislation_tables",
    "optional_float_env",
    "tables_from_document",
]
