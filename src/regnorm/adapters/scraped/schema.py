"""Pydantic models for scraper JSON output and resolved record output."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date  # noqa: TC003
from decimal import Decimal  # noqa: TC003
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from regnorm.domain.model import DecisionStatus, Matched, RawScrapedRecord

if TYPE_CHECKING:
    from regnorm.domain.model import LegislationReference, OffenceLine, ResolvedRecord


def _coerce_text(value: object) -> object:
    if value is None:
        return None
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    if isinstance(value, bool):
        return value
    if isinstance(value, int | float):
        return str(value)
    return value


def _join_breaches(value: object) -> object:
    if isinstance(value, Sequence) and not isinstance(value, str):
        parts = [str(part).strip() for part in value if part is not None and str(part).strip()]
        return "\n".join(parts) or None
    return _coerce_text(value)


class ScrapedBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)


class ScrapedRecordPayload(ScrapedBaseModel):
    """One scraped enforcement record as emitted by the HSE/EA scrapers."""

    regulator_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("regulator_id", "case_reference", "notice_id"),
    )
    agency: str | None = None
    offender_name: str | None = Field(
        default=None,
        validation_alias=AliasChoices("offender_name", "defendant", "company_name"),
    )
    offender_address: str | None = Field(
        default=None, validation_alias=AliasChoices("offender_address", "address")
    )
    offender_postcode: str | None = Field(
        default=None, validation_alias=AliasChoices("offender_postcode", "postcode")
    )
    action_date: str | None = Field(
        default=None,
        validation_alias=AliasChoices("action_date", "offence_action_date", "notice_date"),
    )
    hearing_date: str | None = Field(
        default=None, validation_alias=AliasChoices("hearing_date", "date_of_hearing")
    )
    action_type: str | None = Field(
        default=None,
        validation_alias=AliasChoices("action_type", "offence_action_type", "notice_type"),
    )
    fine: str | None = Field(default=None, validation_alias=AliasChoices("fine", "offence_fine"))
    costs: str | None = Field(
        default=None, validation_alias=AliasChoices("costs", "offence_costs")
    )
    breaches: str | None = Field(
        default=None,
        validation_alias=AliasChoices("breaches", "offence_breaches", "offence_breach"),
    )
    business_type: str | None = Field(
        default=None, validation_alias=AliasChoices("business_type", "offender_business_type")
    )

    _normalize_text = field_validator(
        "regulator_id",
        "agency",
        "offender_name",
        "offender_address",
        "offender_postcode",
        "action_date",
        "hearing_date",
        "action_type",
        "fine",
        "costs",
        "business_type",
        mode="before",
    )(_coerce_text)
    _normalize_breaches = field_validator("breaches", mode="before")(_join_breaches)

    def to_raw_record(self) -> RawScrapedRecord:
        return RawScrapedRecord(fields=self.model_dump())


class LegislationPayload(BaseModel):
    id: UUID | None
    title: str
    year: int | None
    number: int | None
    type: str
    section_label: str | None

    @classmethod
    def from_reference(cls, reference: LegislationReference) -> LegislationPayload:
        return cls(
            id=reference.id,
            title=reference.title,
            year=reference.year,
            number=reference.number,
            type=reference.type.value,
            section_label=reference.section_label,
        )


class OffencePayload(BaseModel):
    description: str
    fine: Decimal
    legislation_id: UUID | None

    @classmethod
    def from_line(cls, line: OffenceLine) -> OffencePayload:
        return cls(
            description=line.description, fine=line.fine, legislation_id=line.legislation.id
        )


class ResolvedRecordPayload(BaseModel):
    regulator_id: str | None
    agency: str | None
    action_date: date | None
    hearing_date: date | None
    action_type: str
    fine: Decimal
    costs: Decimal
    business_type: str
    offender_id: UUID
    decision: DecisionStatus
    match_score: float | None = None
    match_kind: str | None = None
    legislation: list[LegislationPayload] = Field(default_factory=list)
    offences: list[OffencePayload] = Field(default_factory=list)
    defaulted_fields: list[str] = Field(default_factory=list)

    @classmethod
    def from_resolved(cls, record: ResolvedRecord) -> ResolvedRecordPayload:
        decision = record.decision
        matched = isinstance(decision, Matched)
        return cls(
            regulator_id=record.regulator_id,
            agency=record.agency,
            action_date=record.fields.action_date,
            hearing_date=record.fields.hearing_date,
            action_type=record.fields.action_type,
            fine=record.fields.fine,
            costs=record.fields.costs,
            business_type=record.fields.business_type.value,
            offender_id=record.offender_id,
            decision=decision.status,
            match_score=decision.score if matched else None,
            match_kind=decision.match_kind.value if matched else None,
            legislation=[LegislationPayload.from_reference(ref) for ref in record.legislation],
            offences=[OffencePayload.from_line(line) for line in record.offences],
            defaulted_fields=list(record.fields.defaulted_fields),
        )
