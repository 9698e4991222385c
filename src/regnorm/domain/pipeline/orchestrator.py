"""Turns one raw scraped record into a typed, resolved record."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from regnorm.domain.legislation import (
    LegislationNormalizer,
    build_offence_description,
    legislation_lock_key,
)
from regnorm.domain.model import OffenceLine, RawField, ResolvedRecord
from regnorm.domain.offenders import (
    DEFAULT_THRESHOLDS,
    find_or_create_offender,
    make_candidate,
    offender_lock_key,
)
from regnorm.domain.parsing import parse_fields, proportional_fine

if TYPE_CHECKING:
    from collections.abc import Hashable

    from regnorm.domain.legislation import LegislationTables
    from regnorm.domain.model import (
        LegislationReference,
        OffenderCandidate,
        ParsedFields,
        RawScrapedRecord,
    )
    from regnorm.domain.offenders import MatchThresholds
    from regnorm.domain.pipeline.locks import KeyedLocks
    from regnorm.domain.ports import NormalizationRepositories

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True, kw_only=True)
class PreparedRecord:
    """A record parsed without touching the stores."""

    regulator_id: str | None
    agency: str | None
    fields: ParsedFields
    references: tuple[LegislationReference, ...]
    candidate: OffenderCandidate

    @property
    def lock_keys(self) -> list[Hashable]:
        """Keys of every row the record may create."""
        keys: list[Hashable] = [legislation_lock_key(ref) for ref in self.references]
        keys.append(offender_lock_key(self.candidate))
        return keys


class PipelineOrchestrator:
    """Runs field parsing, legislation normalization and offender resolution in turn.

    ``process`` takes each key lock only around its own find-or-create. Callers
    that commit later should ``prepare`` the record, hold ``lock_keys`` through
    the commit and call ``resolve`` with an orchestrator built without locks.
    """

    def __init__(
        self,
        *,
        tables: LegislationTables,
        repositories: NormalizationRepositories,
        locks: KeyedLocks | None = None,
        thresholds: MatchThresholds = DEFAULT_THRESHOLDS,
    ) -> None:
        self.repositories = repositories
        self.locks = locks
        self.thresholds = thresholds
        self.normalizer = LegislationNormalizer(tables, repositories.legislation, locks=locks)

    def process(self, record: RawScrapedRecord) -> ResolvedRecord:
        return self.resolve(self.prepare(record))

    def prepare(self, record: RawScrapedRecord) -> PreparedRecord:
        regulator_id = record.get(RawField.REGULATOR_ID)
        fields = parse_fields(record)
        self._report_fallbacks(regulator_id, fields)

        breaches = record.get(RawField.BREACHES)
        return PreparedRecord(
            regulator_id=regulator_id,
            agency=record.get(RawField.AGENCY),
            fields=fields,
            references=tuple(self.normalizer.parse(breaches)) if breaches else (),
            candidate=make_candidate(
                record.get(RawField.OFFENDER_NAME),
                postcode=record.get(RawField.OFFENDER_POSTCODE),
                address=record.get(RawField.OFFENDER_ADDRESS),
                business_type=fields.business_type,
            ),
        )

    def resolve(self, prepared: PreparedRecord) -> ResolvedRecord:
        legislation = tuple(
            self.normalizer.find_or_create(reference) for reference in prepared.references
        )
        offender_id, decision = find_or_create_offender(
            prepared.candidate,
            self.repositories.offenders,
            thresholds=self.thresholds,
            locks=self.locks,
        )

        return ResolvedRecord(
            regulator_id=prepared.regulator_id,
            agency=prepared.agency,
            fields=prepared.fields,
            offender_id=offender_id,
            decision=decision,
            legislation=legislation,
            offences=_offence_lines(prepared.fields, legislation),
        )

    def _report_fallbacks(self, regulator_id: str | None, fields: ParsedFields) -> None:
        label = regulator_id or "<no id>"
        if fields.defaulted_fields:
            log.warning(
                "Record %s: fields fell back to defaults: %s",
                label,
                ", ".join(fields.defaulted_fields),
            )
        if not fields.dates_consistent:
            log.warning(
                "Record %s: hearing date %s precedes action date %s",
                label,
                fields.hearing_date,
                fields.action_date,
            )


def _offence_lines(
    fields: ParsedFields, legislation: tuple[LegislationReference, ...]
) -> tuple[OffenceLine, ...]:
    share = proportional_fine(fields.fine, len(legislation))
    return tuple(
        OffenceLine(
            legislation=reference,
            description=build_offence_description(reference),
            fine=share,
        )
        for reference in legislation
    )
