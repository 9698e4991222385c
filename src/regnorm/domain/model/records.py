"""Value objects flowing through the normalization pipeline."""

from __future__ import annotations

from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import TYPE_CHECKING, Literal

from regnorm.domain.model.enums import BusinessType, DecisionStatus, LegislationType, MatchKind
from regnorm.domain.model.primitives import ZERO_MONEY

if TYPE_CHECKING:
    from collections.abc import Mapping
    from datetime import date
    from uuid import UUID

    from regnorm.domain.model.primitives import Money, Postcode

type LegislationKey = tuple[str, int | None, int | None]
type OffenderKey = tuple[str, str | None]


@dataclass(frozen=True, slots=True)
class RawScrapedRecord:
    """Field name to raw string mapping handed over by a scraper.

    The mapping is copied into a read-only proxy on construction so a record
    cannot be altered once it enters the pipeline.
    """

    fields: Mapping[str, str | None]

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    @classmethod
    def of(cls, **fields: str | None) -> RawScrapedRecord:
        return cls(fields=fields)

    def get(self, name: str) -> str | None:
        value = self.fields.get(name)
        if value is None:
            return None
        stripped = value.strip()
        return stripped or None


@dataclass(frozen=True, slots=True, kw_only=True)
class ParsedFields:
    action_date: date | None = None
    hearing_date: date | None = None
    fine: Money = ZERO_MONEY
    costs: Money = ZERO_MONEY
    business_type: BusinessType = BusinessType.INDIVIDUAL
    action_type: str = "Other"
    defaulted_fields: tuple[str, ...] = ()

    @property
    def dates_consistent(self) -> bool:
        """Whether the hearing (if any) does not precede the action date."""

        if self.action_date is None or self.hearing_date is None:
            return True
        return self.hearing_date >= self.action_date


@dataclass(frozen=True, slots=True, kw_only=True)
class LegislationReference:
    title: str
    year: int | None = None
    number: int | None = None
    type: LegislationType = LegislationType.REGULATION
    section_label: str | None = None
    id: UUID | None = None

    @property
    def key(self) -> LegislationKey:
        return (self.title, self.year, self.number)

    @property
    def populated_fields(self) -> int:
        return sum(value is not None for value in (self.year, self.number))

    def with_section(self, section_label: str | None) -> LegislationReference:
        return replace(self, section_label=section_label)


@dataclass(frozen=True, slots=True, kw_only=True)
class OffenderCandidate:
    raw_name: str
    normalized_name: str
    postcode: Postcode | None = None
    address: str | None = None
    business_type: BusinessType = BusinessType.INDIVIDUAL

    @property
    def key(self) -> OffenderKey:
        return (self.normalized_name, self.postcode)


@dataclass(frozen=True, slots=True, kw_only=True)
class OffenderRecord:
    """Stored offender as read back from an offender store.

    Aggregate counters are maintained by the storage layer; the pipeline only
    reads them.
    """

    id: UUID
    raw_name: str
    normalized_name: str
    postcode: Postcode | None = None
    address: str | None = None
    business_type: BusinessType = BusinessType.INDIVIDUAL
    total_cases: int = 0
    total_notices: int = 0
    total_fines: Money = ZERO_MONEY


@dataclass(frozen=True, slots=True, kw_only=True)
class Matched:
    """Candidate resolved to an existing offender."""

    existing_id: UUID
    score: float
    match_kind: MatchKind
    postcode_match: bool = False
    status: Literal[DecisionStatus.MATCHED] = DecisionStatus.MATCHED


@dataclass(frozen=True, slots=True, kw_only=True)
class CreateNew:
    """No stored offender is close enough; a new one must be created."""

    reason: str | None = None
    status: Literal[DecisionStatus.CREATE_NEW] = DecisionStatus.CREATE_NEW


type MatchDecision = Matched | CreateNew


@dataclass(frozen=True, slots=True, kw_only=True)
class OffenceLine:
    legislation: LegislationReference
    description: str
    fine: Money = ZERO_MONEY


@dataclass(frozen=True, slots=True, kw_only=True)
class ResolvedRecord:
    regulator_id: str | None
    agency: str | None
    fields: ParsedFields
    offender_id: UUID
    decision: MatchDecision
    legislation: tuple[LegislationReference, ...] = ()
    offences: tuple[OffenceLine, ...] = ()
