from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from regnorm.adapters.memory import InMemoryLegislationStore, InMemoryOffenderStore
from regnorm.adapters.sqlalchemy import create_all_tables, enable_sqlite_savepoints
from regnorm.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyNormalizationUnitOfWork,
    shutdown,
    startup,
)
from regnorm.config import load_legislation_tables
from regnorm.domain.legislation import LegislationTables  # noqa: TC001

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator


@pytest.fixture(scope="session")
def legislation_tables() -> LegislationTables:
    return load_legislation_tables()


@pytest.fixture
def legislation_store() -> InMemoryLegislationStore:
    return InMemoryLegislationStore()


@pytest.fixture
def offender_store() -> InMemoryOffenderStore:
    return InMemoryOffenderStore()


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    # One shared connection so worker threads see the same in-memory database.
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    enable_sqlite_savepoints(engine)
    create_all_tables(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_session(sqlite_engine: Engine) -> Iterator[Session]:
    session_factory = sessionmaker(bind=sqlite_engine)
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def sqlite_unit_of_work(
    sqlite_engine: Engine,
) -> Iterator[Callable[[], SqlAlchemyNormalizationUnitOfWork]]:
    startup(engine=sqlite_engine, force=True)

    def factory() -> SqlAlchemyNormalizationUnitOfWork:
        return SqlAlchemyNormalizationUnitOfWork()

    try:
        yield factory
    finally:
        shutdown()
