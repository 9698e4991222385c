"""Total conversions from raw scraped strings to typed values."""

from __future__ import annotations

from regnorm.domain.parsing.action_types import normalize_action_type
from regnorm.domain.parsing.business_type import (
    BUSINESS_TYPE_RULES,
    business_type_from_hint,
    classify_business_type,
    match_business_type,
)
from regnorm.domain.parsing.dates import parse_date, parse_dates, to_iso8601, to_uk_format
from regnorm.domain.parsing.fields import parse_fields
from regnorm.domain.parsing.money import parse_amount, parse_money, proportional_fine

__all__ = [
    "BUSINESS_TYPE_RULES",
    "business_type_from_hint",
    "classify_business_type",
    "match_business_type",
    "normalize_action_type",
    "parse_amount",
    "parse_date",
    "parse_dates",
    "parse_fields",
    "parse_money",
    "proportional_fine",
    "to_iso8601",
    "to_uk_format",
]
