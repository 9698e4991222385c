"""Domain ports (Protocols) implemented by adapters."""

from __future__ import annotations

from regnorm.domain.ports.persistence import LegislationStore, OffenderPoolProvider, OffenderStore
from regnorm.domain.ports.unit_of_work import (
    NormalizationRepositories,
    NormalizationUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "LegislationStore",
    "NormalizationRepositories",
    "NormalizationUnitOfWork",
    "OffenderPoolProvider",
    "OffenderStore",
    "RepositoryCollection",
    "UnitOfWork",
]
