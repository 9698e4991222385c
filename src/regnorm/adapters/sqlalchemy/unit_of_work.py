"""SQLAlchemy engine lifecycle and the per-record unit of work."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Final, Literal

from sqlalchemy import create_engine, event
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, sessionmaker

from regnorm.adapters.sqlalchemy.mappings import create_all_tables
from regnorm.adapters.sqlalchemy.repositories import (
    SqlAlchemyLegislationRepository,
    SqlAlchemyOffenderRepository,
)
from regnorm.config import get_database_config
from regnorm.domain.errors import TransientStoreError
from regnorm.domain.ports import NormalizationRepositories

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Connection, Engine

log = logging.getLogger(__name__)

SQLITE_BUSY_TIMEOUT_MS: Final[int] = 30_000


class StartupError(RuntimeError):
    """Raised when the adapter is used before ``startup`` or started twice."""


class _EngineSlot:
    """Process-wide engine plus the session factory bound to it."""

    __slots__ = ("engine", "sessions")

    def __init__(self) -> None:
        self.engine: Engine | None = None
        self.sessions: sessionmaker[Session] | None = None

    def bind(self, engine: Engine) -> None:
        self.engine = engine
        self.sessions = sessionmaker(bind=engine, expire_on_commit=False)

    def release(self) -> None:
        if self.engine is not None:
            self.engine.dispose()
        self.engine = None
        self.sessions = None

    def session_factory(self) -> sessionmaker[Session]:
        if self.sessions is None:
            raise StartupError(
                "SQLAlchemy adapter not initialised; call "
                "regnorm.adapters.sqlalchemy.startup() first"
            )
        return self.sessions


_SLOT = _EngineSlot()


def enable_sqlite_savepoints(engine: Engine) -> None:
    """Hand transaction control to SQLAlchemy so pysqlite honours SAVEPOINT.

    The repositories insert inside ``begin_nested`` to recover from unique-key
    collisions without losing the surrounding record transaction. Transactions
    start with ``BEGIN IMMEDIATE`` so concurrent workers queue for the write
    lock up to ``SQLITE_BUSY_TIMEOUT_MS`` instead of failing on lock upgrade.
    """
    if engine.dialect.name != "sqlite":
        return

    @event.listens_for(engine, "connect")
    def _autocommit_driver(dbapi_connection: Any, _record: Any) -> None:
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute(f"PRAGMA busy_timeout = {SQLITE_BUSY_TIMEOUT_MS}")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _explicit_begin(connection: Connection) -> None:
        connection.exec_driver_sql("BEGIN IMMEDIATE")


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Bind the adapter to ``engine`` (or a new one for ``database_uri``) and create tables."""
    if is_started():
        if not force:
            raise StartupError("SQLAlchemy adapter already initialised; pass force=True")
        shutdown()

    if engine is None:
        engine = create_engine(database_uri or get_database_config().uri)
        enable_sqlite_savepoints(engine)
    create_all_tables(engine)
    _SLOT.bind(engine)
    log.info("Reference database ready at %s", engine.url.render_as_string(hide_password=True))


def is_started() -> bool:
    return _SLOT.engine is not None


def shutdown() -> None:
    _SLOT.release()


class SqlAlchemyNormalizationUnitOfWork:
    """One session, and one transaction, per scraped record."""

    def __init__(self, session_factory: sessionmaker[Session] | None = None) -> None:
        self._session_factory = session_factory or _SLOT.session_factory()
        self._session: Session | None = None
        self._repositories: NormalizationRepositories | None = None

    def __enter__(self) -> SqlAlchemyNormalizationUnitOfWork:
        if self._session is not None:
            raise StartupError("Unit of work session already open")
        session = self._session_factory()
        self._session = session
        self._repositories = NormalizationRepositories(
            legislation=SqlAlchemyLegislationRepository(session),
            offenders=SqlAlchemyOffenderRepository(session),
        )
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        session = self._require_session()
        try:
            if exc_type is not None:
                session.rollback()
        finally:
            session.close()
            self._session = None
            self._repositories = None
        if isinstance(exc_value, OperationalError):
            # busy database or lost connection; the record can be retried
            raise TransientStoreError(f"Database unavailable: {exc_value.orig}") from exc_value
        return False

    def commit(self) -> None:
        self._require_session().commit()

    def rollback(self) -> None:
        self._require_session().rollback()

    @property
    def repositories(self) -> NormalizationRepositories:
        if self._repositories is None:
            raise StartupError("Unit of work session not initialised; use it as a context manager")
        return self._repositories

    def _require_session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work session not initialised; use it as a context manager")
        return self._session


if TYPE_CHECKING:
    from regnorm.domain.ports import NormalizationUnitOfWork

    _uow_check: NormalizationUnitOfWork = SqlAlchemyNormalizationUnitOfWork()
