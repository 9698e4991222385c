"""Batch execution of the pipeline over a worker pool."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final

from regnorm.domain.errors import PipelineError, TransientStoreError
from regnorm.domain.model import RawField
from regnorm.domain.offenders import DEFAULT_THRESHOLDS
from regnorm.domain.pipeline.locks import KeyedLocks
from regnorm.domain.pipeline.orchestrator import PipelineOrchestrator

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from regnorm.domain.legislation import LegislationTables
    from regnorm.domain.model import RawScrapedRecord, ResolvedRecord
    from regnorm.domain.offenders import MatchThresholds
    from regnorm.domain.ports import NormalizationUnitOfWork

log = logging.getLogger(__name__)

DEFAULT_WORKERS: Final[int] = 4


@dataclass(slots=True, kw_only=True)
class RecordFailure:
    index: int
    regulator_id: str | None
    error: str
    transient: bool = False


@dataclass(slots=True, kw_only=True)
class BatchResult:
    resolved: list[ResolvedRecord] = field(default_factory=list)
    failures: list[RecordFailure] = field(default_factory=list)

    @property
    def processed(self) -> int:
        return len(self.resolved) + len(self.failures)


class BatchRunner:
    """Processes records in parallel, one unit of work per record.

    Records that fail with a pipeline error are reported in the result rather
    than aborting the batch; transient failures can be resubmitted later.
    """

    def __init__(
        self,
        *,
        tables: LegislationTables,
        unit_of_work_factory: Callable[[], NormalizationUnitOfWork],
        workers: int = DEFAULT_WORKERS,
        thresholds: MatchThresholds = DEFAULT_THRESHOLDS,
        locks: KeyedLocks | None = None,
    ) -> None:
        if workers < 1:
            raise ValueError("workers must be at least 1")
        self.tables = tables
        self.unit_of_work_factory = unit_of_work_factory
        self.workers = workers
        self.thresholds = thresholds
        self.locks = locks or KeyedLocks()

    def process_one(self, record: RawScrapedRecord) -> ResolvedRecord:
        """Resolve and commit one record.

        The key locks are held until the commit, so a worker waiting on the same
        offender or legislation key reads the committed row instead of inserting
        its own.
        """
        with self.unit_of_work_factory() as uow:
            orchestrator = PipelineOrchestrator(
                tables=self.tables,
                repositories=uow.repositories,
                thresholds=self.thresholds,
            )
            prepared = orchestrator.prepare(record)
            with self.locks.hold_all(prepared.lock_keys):
                resolved = orchestrator.resolve(prepared)
                uow.commit()
        return resolved

    def run(self, records: Iterable[RawScrapedRecord]) -> BatchResult:
        pending = list(records)
        outcomes: dict[int, ResolvedRecord | RecordFailure] = {}

        with ThreadPoolExecutor(max_workers=self.workers, thread_name_prefix="regnorm") as pool:
            futures = {
                pool.submit(self.process_one, record): index
                for index, record in enumerate(pending)
            }
            for future in as_completed(futures):
                index = futures[future]
                try:
                    outcomes[index] = future.result()
                except PipelineError as exc:
                    regulator_id = pending[index].get(RawField.REGULATOR_ID)
                    log.exception("Record %s (#%d) failed", regulator_id or "<no id>", index)
                    outcomes[index] = RecordFailure(
                        index=index,
                        regulator_id=regulator_id,
                        error=str(exc),
                        transient=isinstance(exc, TransientStoreError),
                    )

        result = BatchResult()
        for index in range(len(pending)):
            outcome = outcomes[index]
            if isinstance(outcome, RecordFailure):
                result.failures.append(outcome)
            else:
                result.resolved.append(outcome)
        log.info(
            "Batch finished: resolved=%d, failed=%d, workers=%d",
            len(result.resolved),
            len(result.failures),
            self.workers,
        )
        return result
