"""SQLAlchemy adapter package for regnorm."""

from __future__ import annotations

from .mappings import create_all_tables, legislation_table, metadata, offender_table
from .repositories import SqlAlchemyLegislationRepository, SqlAlchemyOffenderRepository
from .unit_of_work import (
    SqlAlchemyNormalizationUnitOfWork,
    enable_sqlite_savepoints,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyLegislationRepository",
    "SqlAlchemyNormalizationUnitOfWork",
    "SqlAlchemyOffenderRepository",
    "create_all_tables",
    "enable_sqlite_savepoints",
    "legislation_table",
    "metadata",
    "offender_table",
    "shutdown",
    "startup",
]
