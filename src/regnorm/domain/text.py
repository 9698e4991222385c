"""String-cleaning primitives shared by the legislation and offender code."""

from __future__ import annotations

import re
from typing import Final

_WHITESPACE = re.compile(r"\s+")
_SEPARATORS = re.compile(r"[-/\\]")
_NON_WORD = re.compile(r"[^\w\s]")
_POSTCODE = re.compile(r"^[A-Z]{1,2}\d[A-Z\d]?\d[A-Z]{2}$")
_TRAILING_POSTCODE = re.compile(r"([A-Z]{1,2}\d[A-Z\d]?\s*\d[A-Z]{2})$", re.IGNORECASE)

# Spellings of legal-form suffixes collapsed to a single token.
LEGAL_SUFFIX_SPELLINGS: Final[dict[str, str]] = {
    "ltd": "limited",
    "limited": "limited",
    "plc": "plc",
    "llp": "llp",
    "llc": "llc",
    "inc": "inc",
    "incorporated": "inc",
    "corp": "corporation",
}


def collapse_whitespace(value: str) -> str:
    return _WHITESPACE.sub(" ", value).strip()


def normalize_company_name(raw_name: str) -> str:
    """Return the comparison form of an offender name.

    ``"ACME Ltd."``, ``"Acme LIMITED"`` and ``"acme limited"`` all become
    ``"acme limited"``; ``"P.L.C."`` becomes ``"plc"``. Returns an empty string
    when nothing word-like is left.
    """

    lowered = raw_name.lower().replace("&", " and ")
    spaced = _SEPARATORS.sub(" ", lowered)
    stripped = _NON_WORD.sub("", spaced)
    tokens = [LEGAL_SUFFIX_SPELLINGS.get(token, token) for token in stripped.split()]
    return " ".join(tokens)


def name_tokens(normalized_name: str) -> frozenset[str]:
    return frozenset(normalized_name.split())


def normalize_postcode(raw: str | None) -> str | None:
    """Uppercase a postcode and space it in the UK ``OUTWARD INWARD`` layout.

    Values that do not look like UK postcodes are returned uppercased with
    whitespace removed.
    """

    if raw is None:
        return None
    compact = "".join(raw.split()).upper()
    if not compact:
        return None
    if _POSTCODE.match(compact):
        return f"{compact[:-3]} {compact[-3:]}"
    return compact


def postcode_key(postcode: str | None) -> str | None:
    """Comparison form of a postcode: uppercase, no whitespace."""

    if postcode is None:
        return None
    compact = "".join(postcode.split()).upper()
    return compact or None


def extract_postcode(address: str | None) -> str | None:
    """Pull a trailing UK postcode out of a free-text address."""

    if not address:
        return None
    match = _TRAILING_POSTCODE.search(address.strip().rstrip(".,;"))
    if match is None:
        return None
    return normalize_postcode(match.group(1))


def normalize_address(raw: str | None) -> str | None:
    if raw is None:
        return None
    cleaned = collapse_whitespace(raw)
    while ",," in cleaned:
        cleaned = cleaned.replace(",,", ",")
    cleaned = cleaned.strip(" ,")
    return cleaned or None
