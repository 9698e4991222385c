"""Breach text to canonical, stored legislation references."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Final
from uuid import UUID

from rapidfuzz.distance import Indel

from regnorm.domain.errors import (
    DuplicateKeyError,
    MalformedProviderResponseError,
    TransientStoreError,
)
from regnorm.domain.legislation.citations import (
    build_section_label,
    split_citation,
    split_citations,
)
from regnorm.domain.legislation.titles import TitleCleaner, classify_legislation_type
from regnorm.domain.model import LegislationReference, valid_number

if TYPE_CHECKING:
    from collections.abc import Iterable

    from regnorm.domain.legislation.tables import LegislationTables
    from regnorm.domain.pipeline.locks import KeyedLocks
    from regnorm.domain.ports import LegislationStore

log = logging.getLogger(__name__)

LEGISLATION_SIMILARITY_FLOOR: Final[float] = 0.93


class LegislationNormalizer:
    """Extracts legislation references from breach text and find-or-creates them."""

    def __init__(
        self,
        tables: LegislationTables,
        store: LegislationStore,
        *,
        locks: KeyedLocks | None = None,
        similarity_floor: float = LEGISLATION_SIMILARITY_FLOOR,
    ) -> None:
        self.tables = tables
        self.store = store
        self.locks = locks
        self.similarity_floor = similarity_floor
        self._cleaner = TitleCleaner(tables)

    def parse(self, breach_text: str) -> list[LegislationReference]:
        """Parse every citation in ``breach_text`` without touching the store."""

        return [self.parse_citation(citation) for citation in split_citations(breach_text)]

    def parse_citation(self, citation: str) -> LegislationReference:
        parts = split_citation(citation)
        title = self._cleaner.clean(parts.title)
        year = parts.year
        if self._cleaner.is_unresolved(title):
            log.warning("Unrecognised legislation %r, using placeholder title", citation)
            title = self.tables.placeholder_title
        if year is None:
            year = self.tables.missing_year_for(title)

        known = self.tables.lookup_known(title, year)
        if known is not None:
            legislation_type = known.type
            reference = LegislationReference(
                title=known.title,
                year=known.year,
                number=valid_number(known.number),
                type=legislation_type,
            )
        else:
            legislation_type = classify_legislation_type(title)
            reference = LegislationReference(title=title, year=year, type=legislation_type)
        return reference.with_section(build_section_label(parts.sections, legislation_type))

    def normalize(self, breach_text: str) -> list[LegislationReference]:
        """Parse ``breach_text`` and resolve each citation against the store."""

        return [self.find_or_create(reference) for reference in self.parse(breach_text)]

    def normalize_breaches(self, breaches: Iterable[str]) -> list[LegislationReference]:
        references: list[LegislationReference] = []
        for breach in breaches:
            references.extend(self.normalize(breach))
        return references

    def find_or_create(self, reference: LegislationReference) -> LegislationReference:
        """Return the stored row for ``reference``, creating it when missing.

        The section label of ``reference`` is carried over to the returned value;
        stored rows never hold one.
        """

        if self.locks is None:
            stored = self._find_or_create(reference)
        else:
            with self.locks.hold(legislation_lock_key(reference)):
                stored = self._find_or_create(reference)
        return stored.with_section(reference.section_label)

    def _find_or_create(self, reference: LegislationReference) -> LegislationReference:
        existing = self.store.find_legislation(reference.title, reference.year, reference.number)
        if existing is None:
            existing = self._closest(reference)
        if existing is not None:
            return _checked(existing)

        try:
            created = self.store.create_legislation(reference.with_section(None))
        except DuplicateKeyError:
            log.info("Concurrent insert for legislation %s, re-reading", reference.key)
            winner = self.store.find_legislation(
                reference.title, reference.year, reference.number
            )
            if winner is None:
                raise TransientStoreError(
                    f"Legislation {reference.key!r} collided on insert but cannot be read back"
                ) from None
            return _checked(winner)
        log.debug("Created legislation %s", created.key)
        return _checked(created)

    def _closest(self, reference: LegislationReference) -> LegislationReference | None:
        title = reference.title.lower()
        best: tuple[float, int, LegislationReference] | None = None
        for candidate in self.store.legislation_candidates(reference.year):
            if candidate.type != reference.type:
                continue
            score = Indel.normalized_similarity(title, candidate.title.lower())
            if score < self.similarity_floor:
                continue
            ranking = (score, candidate.populated_fields, candidate)
            if best is None or ranking[:2] > best[:2]:
                best = ranking
        if best is None:
            return None
        log.debug(
            "Matched legislation %r to stored %r (similarity %.3f)",
            reference.title,
            best[2].title,
            best[0],
        )
        return best[2]


def legislation_lock_key(reference: LegislationReference) -> tuple[object, ...]:
    return ("legislation", *reference.key)


def build_offence_description(reference: LegislationReference) -> str:
    if reference.section_label:
        return f"{reference.title} - {reference.section_label}"
    return reference.title


def _checked(reference: LegislationReference) -> LegislationReference:
    if not isinstance(reference.id, UUID):
        raise MalformedProviderResponseError(
            f"Legislation store returned {reference.key!r} without an identifier"
        )
    return reference
