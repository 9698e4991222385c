"""Transaction boundary for resolving one scraped record.

A unit of work is opened per record. Everything the orchestrator appends to the
reference stores while it is open becomes visible to other workers on
``commit``; leaving the block on an exception discards it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, Self

if TYPE_CHECKING:
    from types import TracebackType

    from regnorm.domain.ports.persistence import LegislationStore, OffenderStore


class RepositoryCollection(Protocol):
    """Stores handed out together by one unit of work."""


class UnitOfWork[TRepositories: RepositoryCollection](Protocol):
    @property
    def repositories(self) -> TRepositories: ...

    def __enter__(self) -> Self: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool:
        """Roll back when leaving on an exception. Never suppresses it."""
        ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...


@dataclass(frozen=True, slots=True)
class NormalizationRepositories:
    """The two reference stores the orchestrator reads and appends to."""

    legislation: LegislationStore
    offenders: OffenderStore


type NormalizationUnitOfWork = UnitOfWork[NormalizationRepositories]
