"""Ports for the reference stores the pipeline reads and appends to."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from regnorm.domain.model import LegislationReference, OffenderCandidate, OffenderRecord


@runtime_checkable
class LegislationStore(Protocol):
    """Lookup/insert contract for the canonical legislation table."""

    def find_legislation(
        self, title: str, year: int | None, number: int | None
    ) -> LegislationReference | None:
        """Return the stored row for the key; ``number=None`` matches any number."""
        ...

    def create_legislation(self, reference: LegislationReference) -> LegislationReference:
        """Insert a row or raise ``DuplicateKeyError`` if its key already exists."""
        ...

    def legislation_candidates(self, year: int | None) -> Sequence[LegislationReference]:
        """Rows eligible for approximate matching: same year or unknown year."""
        ...


@runtime_checkable
class OffenderPoolProvider(Protocol):
    """Read-only view of stored offenders used by the resolver."""

    def find_exact(self, normalized_name: str, postcode: str | None) -> OffenderRecord | None: ...

    def find_similar(self, normalized_name: str, threshold: float) -> Sequence[OffenderRecord]: ...


@runtime_checkable
class OffenderStore(OffenderPoolProvider, Protocol):
    """Offender pool that can also append new offenders."""

    def create_offender(self, candidate: OffenderCandidate) -> OffenderRecord:
        """Insert a new offender or raise ``DuplicateKeyError``."""
        ...
