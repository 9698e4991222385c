"""Public domain model surface."""

from __future__ import annotations

from regnorm.domain.model.enums import (
    BusinessType,
    DecisionStatus,
    LegislationType,
    MatchKind,
    RawField,
)
from regnorm.domain.model.primitives import (
    MAX_LEGISLATION_YEAR,
    MIN_LEGISLATION_YEAR,
    ZERO_MONEY,
    Money,
    Postcode,
    quantize_money,
    valid_number,
    valid_year,
)
from regnorm.domain.model.records import (
    CreateNew,
    LegislationKey,
    LegislationReference,
    Matched,
    MatchDecision,
    OffenceLine,
    OffenderCandidate,
    OffenderKey,
    OffenderRecord,
    ParsedFields,
    RawScrapedRecord,
    ResolvedRecord,
)

__all__ = [
    "MAX_LEGISLATION_YEAR",
    "MIN_LEGISLATION_YEAR",
    "ZERO_MONEY",
    "BusinessType",
    "CreateNew",
    "DecisionStatus",
    "LegislationKey",
    "LegislationReference",
    "LegislationType",
    "MatchDecision",
    "MatchKind",
    "Matched",
    "Money",
    "OffenceLine",
    "OffenderCandidate",
    "OffenderKey",
    "OffenderRecord",
    "ParsedFields",
    "Postcode",
    "RawField",
    "RawScrapedRecord",
    "ResolvedRecord",
    "quantize_money",
    "valid_number",
    "valid_year",
]
