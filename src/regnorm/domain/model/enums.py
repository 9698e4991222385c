"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class BusinessType(StrEnum):
    LIMITED_COMPANY = "limited_company"
    PLC = "plc"
    PARTNERSHIP = "partnership"
    INDIVIDUAL = "individual"
    OTHER = "other"


class LegislationType(StrEnum):
    ACT = "act"
    REGULATION = "regulation"
    ORDER = "order"
    ACOP = "acop"


class MatchKind(StrEnum):
    """How the resolver matched a candidate against stored offenders."""

    EXACT = "exact"
    FUZZY = "fuzzy"


class DecisionStatus(StrEnum):
    MATCHED = "matched"
    CREATE_NEW = "create_new"


class RawField(StrEnum):
    """Well-known field names of a scraped record."""

    REGULATOR_ID = "regulator_id"
    AGENCY = "agency"
    OFFENDER_NAME = "offender_name"
    OFFENDER_ADDRESS = "offender_address"
    OFFENDER_POSTCODE = "offender_postcode"
    ACTION_DATE = "action_date"
    HEARING_DATE = "hearing_date"
    ACTION_TYPE = "action_type"
    FINE = "fine"
    COSTS = "costs"
    BREACHES = "breaches"
    BUSINESS_TYPE = "business_type"
