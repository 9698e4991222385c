"""Date parsing for the date formats found on regulator websites."""

from __future__ import annotations

import re
from datetime import date
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Iterable

# Tried in order; the first pattern producing a real calendar date wins.
DATE_PATTERNS: Final[tuple[tuple[str, re.Pattern[str]], ...]] = (
    ("iso", re.compile(r"^(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})(?:[T ].*)?$")),
    ("uk_slash", re.compile(r"^(?P<day>\d{1,2})/(?P<month>\d{1,2})/(?P<year>\d{4})$")),
    ("uk_dash", re.compile(r"^(?P<day>\d{1,2})-(?P<month>\d{1,2})-(?P<year>\d{4})$")),
    (
        "digits_year_first",
        re.compile(r"(?<!\d)(?P<year>\d{4})[./\- ](?P<month>\d{1,2})[./\- ](?P<day>\d{1,2})(?!\d)"),
    ),
    (
        "digits_day_first",
        re.compile(r"(?<!\d)(?P<day>\d{1,2})[./\- ](?P<month>\d{1,2})[./\- ](?P<year>\d{4})(?!\d)"),
    ),
)

_TEXTUAL_DATE = re.compile(
    r"(?<!\d)(?P<day>\d{1,2})(?:st|nd|rd|th)?\s+"
    r"(?P<month>[A-Za-z]{3,9})\.?,?\s+(?P<year>\d{4})(?!\d)"
)

_MONTHS: Final[dict[str, int]] = {
    name: index
    for index, name in enumerate(
        ("jan", "feb", "mar", "apr", "may", "jun", "jul", "aug", "sep", "oct", "nov", "dec"),
        start=1,
    )
}


def parse_date(raw: str | None) -> date | None:
    """Parse a scraped date string; ``None`` when no supported form matches.

    Supported, in order: ``YYYY-MM-DD``, ``DD/MM/YYYY``, ``DD-MM-YYYY``, then
    loose day/month/year digit groups and ``23 October 2025`` style dates. A
    four-digit year is always required.
    """

    if raw is None:
        return None
    text = raw.strip()
    if not text:
        return None

    for _name, regex in DATE_PATTERNS:
        match = regex.search(text)
        if match is None:
            continue
        parsed = _build_date(match.group("year"), match.group("month"), match.group("day"))
        if parsed is not None:
            return parsed

    match = _TEXTUAL_DATE.search(text)
    if match is not None:
        month = _MONTHS.get(match.group("month")[:3].lower())
        if month is not None:
            return _build_date(match.group("year"), str(month), match.group("day"))
    return None


def parse_dates(values: Iterable[str | None]) -> list[date | None]:
    return [parse_date(value) for value in values]


def to_iso8601(value: date | None) -> str | None:
    return value.isoformat() if value is not None else None


def to_uk_format(value: date | None) -> str | None:
    return value.strftime("%d/%m/%Y") if value is not None else None


def _build_date(year: str, month: str, day: str) -> date | None:
    try:
        return date(int(year), int(month), int(day))
    except ValueError:
        return None
