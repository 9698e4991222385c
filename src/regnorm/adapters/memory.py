"""In-process reference stores.

Both stores enforce the same unique keys as the SQL tables and are safe to
share between worker threads.
"""

from __future__ import annotations

import threading
import uuid
from dataclasses import replace
from typing import TYPE_CHECKING, Final, Literal

from regnorm.domain.errors import DuplicateKeyError
from regnorm.domain.model import LegislationReference, OffenderRecord
from regnorm.domain.offenders import trigram_similarity
from regnorm.domain.ports import NormalizationRepositories
from regnorm.domain.text import postcode_key

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import TracebackType

    from regnorm.domain.model import LegislationKey, OffenderCandidate

DEFAULT_POOL_LIMIT: Final[int] = 25


class InMemoryLegislationStore:
    def __init__(self) -> None:
        self._rows: dict[LegislationKey, LegislationReference] = {}
        self._lock = threading.Lock()

    def find_legislation(
        self, title: str, year: int | None, number: int | None
    ) -> LegislationReference | None:
        with self._lock:
            if number is not None:
                return self._rows.get((title, year, number))
            matches = [
                row for row in self._rows.values() if row.title == title and row.year == year
            ]
        if not matches:
            return None
        return max(matches, key=lambda row: row.populated_fields)

    def create_legislation(self, reference: LegislationReference) -> LegislationReference:
        with self._lock:
            if reference.key in self._rows:
                raise DuplicateKeyError(reference.key)
            stored = replace(reference, id=uuid.uuid4(), section_label=None)
            self._rows[reference.key] = stored
            return stored

    def legislation_candidates(self, year: int | None) -> Sequence[LegislationReference]:
        with self._lock:
            return [row for row in self._rows.values() if row.year in (year, None)]

    def all(self) -> list[LegislationReference]:
        with self._lock:
            return list(self._rows.values())


class InMemoryOffenderStore:
    def __init__(self, pool_limit: int = DEFAULT_POOL_LIMIT) -> None:
        self._rows: dict[tuple[str, str | None], OffenderRecord] = {}
        self._lock = threading.Lock()
        self.pool_limit = pool_limit

    def add(self, record: OffenderRecord) -> None:
        key = (record.normalized_name, postcode_key(record.postcode))
        with self._lock:
            if key in self._rows:
                raise DuplicateKeyError(key)
            self._rows[key] = record

    def find_exact(self, normalized_name: str, postcode: str | None) -> OffenderRecord | None:
        with self._lock:
            return self._rows.get((normalized_name, postcode_key(postcode)))

    def find_similar(self, normalized_name: str, threshold: float) -> Sequence[OffenderRecord]:
        with self._lock:
            rows = list(self._rows.values())
        scored = [
            (similarity, row)
            for row in rows
            if (similarity := trigram_similarity(normalized_name, row.normalized_name)) > threshold
        ]
        scored.sort(key=lambda item: item[0], reverse=True)
        return [row for _, row in scored[: self.pool_limit]]

    def create_offender(self, candidate: OffenderCandidate) -> OffenderRecord:
        record = OffenderRecord(
            id=uuid.uuid4(),
            raw_name=candidate.raw_name,
            normalized_name=candidate.normalized_name,
            postcode=candidate.postcode,
            address=candidate.address,
            business_type=candidate.business_type,
        )
        self.add(record)
        return record

    def all(self) -> list[OffenderRecord]:
        with self._lock:
            return list(self._rows.values())


class InMemoryUnitOfWork:
    """Unit of work over shared in-memory stores; writes are visible immediately."""

    def __init__(
        self,
        legislation: InMemoryLegislationStore | None = None,
        offenders: InMemoryOffenderStore | None = None,
    ) -> None:
        self._repositories = NormalizationRepositories(
            legislation=legislation or InMemoryLegislationStore(),
            offenders=offenders or InMemoryOffenderStore(),
        )
        self.committed = False

    @property
    def repositories(self) -> NormalizationRepositories:
        return self._repositories

    def __enter__(self) -> InMemoryUnitOfWork:
        self.committed = False
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        return False

    def commit(self) -> None:
        self.committed = True

    def rollback(self) -> None:
        self.committed = False


if TYPE_CHECKING:
    from regnorm.domain.ports import LegislationStore, NormalizationUnitOfWork, OffenderStore

    _legislation_check: LegislationStore = InMemoryLegislationStore()
    _offender_check: OffenderStore = InMemoryOffenderStore()
    _uow_check: NormalizationUnitOfWork = InMemoryUnitOfWork()
