"""Business type classification from offender names and scraped hints."""

from __future__ import annotations

import re
from typing import Final

from regnorm.domain.model import BusinessType
from regnorm.domain.rules import Rule, first_match, pattern

# Order matters: several patterns overlap ("PLC" names often also say "Limited").
BUSINESS_TYPE_RULES: Final[tuple[Rule[BusinessType], ...]] = (
    Rule("llc", pattern(r"\b(?:LLC|llc)\b"), BusinessType.LIMITED_COMPANY),
    Rule("inc", pattern(r"\b[Ii]nc\.?$"), BusinessType.LIMITED_COMPANY),
    Rule("corp", pattern(r"\s[Cc]orp(?:\.|\b)"), BusinessType.LIMITED_COMPANY),
    Rule("plc", pattern(r"\b(?:PLC|[Pp]lc)\b"), BusinessType.PLC),
    Rule("limited", pattern(r"\b(?:limited|ltd)\b", re.IGNORECASE), BusinessType.LIMITED_COMPANY),
    Rule("llp", pattern(r"\b(?:LLP|[Ll]lp)\b"), BusinessType.PARTNERSHIP),
)

DEFAULT_BUSINESS_TYPE: Final[BusinessType] = BusinessType.INDIVIDUAL

_HINTS: Final[dict[str, BusinessType]] = {
    "LTD": BusinessType.LIMITED_COMPANY,
    "LIMITED": BusinessType.LIMITED_COMPANY,
    "LIMITED COMPANY": BusinessType.LIMITED_COMPANY,
    "LLC": BusinessType.LIMITED_COMPANY,
    "INC": BusinessType.LIMITED_COMPANY,
    "CORP": BusinessType.LIMITED_COMPANY,
    "PLC": BusinessType.PLC,
    "LLP": BusinessType.PARTNERSHIP,
    "PARTNERSHIP": BusinessType.PARTNERSHIP,
    "SOLE": BusinessType.INDIVIDUAL,
    "SOLE TRADER": BusinessType.INDIVIDUAL,
    "INDIVIDUAL": BusinessType.INDIVIDUAL,
}


def match_business_type(company_name: str) -> BusinessType | None:
    """Return the type named by the first matching rule, if any."""

    rule = first_match(BUSINESS_TYPE_RULES, company_name.strip())
    return rule.result if rule is not None else None


def classify_business_type(company_name: str) -> BusinessType:
    """Classify an offender by its name; names without a legal suffix are individuals."""

    return match_business_type(company_name) or DEFAULT_BUSINESS_TYPE


def business_type_from_hint(hint: str) -> BusinessType:
    """Map a scraped business-type code to the enum; unknown codes become ``other``."""

    cleaned = " ".join(hint.replace("_", " ").split())
    try:
        return BusinessType(cleaned.lower().replace(" ", "_"))
    except ValueError:
        return _HINTS.get(cleaned.upper(), BusinessType.OTHER)
