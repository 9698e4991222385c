"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING

from regnorm.adapters.memory import InMemoryUnitOfWork
from regnorm.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyNormalizationUnitOfWork,
    is_started,
    startup,
)
from regnorm.config import get_match_thresholds, load_legislation_tables
from regnorm.domain.legislation import LegislationNormalizer
from regnorm.domain.pipeline import DEFAULT_WORKERS, BatchRunner
from regnorm.domain.ports import NormalizationUnitOfWork

if TYPE_CHECKING:
    from collections.abc import Iterable

    from regnorm.domain.legislation import LegislationTables
    from regnorm.domain.model import LegislationReference, RawScrapedRecord
    from regnorm.domain.pipeline import BatchResult

UnitOfWorkFactory = Callable[[], NormalizationUnitOfWork]


log = getLogger(__name__)


def normalize_records(
    records: Iterable[RawScrapedRecord],
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    tables: LegislationTables | None = None,
    workers: int = DEFAULT_WORKERS,
    database_uri: str | None = None,
) -> BatchResult:
    """Normalize and resolve scraped records against the configured database."""

    if unit_of_work_factory is None:
        if not is_started():
            startup(database_uri=database_uri)
        unit_of_work_factory = SqlAlchemyNormalizationUnitOfWork
    runner = BatchRunner(
        tables=tables or load_legislation_tables(),
        unit_of_work_factory=unit_of_work_factory,
        workers=workers,
        thresholds=get_match_thresholds(),
    )
    log.info("Starting normalization: workers=%s", workers)
    return runner.run(records)


def parse_legislation(
    breach_texts: Iterable[str],
    *,
    tables: LegislationTables | None = None,
) -> list[LegislationReference]:
    """Normalize breach texts against a throwaway in-memory legislation store."""

    uow = InMemoryUnitOfWork()
    normalizer = LegislationNormalizer(
        tables or load_legislation_tables(), uow.repositories.legislation
    )
    return normalizer.normalize_breaches(breach_texts)
