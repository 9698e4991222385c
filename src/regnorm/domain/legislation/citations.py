"""Splitting breach text into citations and citations into title/year/section."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Final

from regnorm.domain.model import LegislationType, valid_year
from regnorm.domain.text import collapse_whitespace

_CITATION_BOUNDARY = re.compile(r"[;\r\n]+")
_YEAR = re.compile(r"(?<!\d)(\d{4})(?!\d)")
_SUB_PART = re.compile(r"^\(?(\w{1,4})\)?$")

# (pattern, label) pairs recognised at the start of a section reference.
SECTION_PREFIXES: Final[tuple[tuple[re.Pattern[str], str], ...]] = (
    (re.compile(r"^sch(?:ed(?:ule)?)?\.?\s*(?=\d)", re.IGNORECASE), "Schedule"),
    (re.compile(r"^para(?:graph)?s?\.?\s*(?=\d)", re.IGNORECASE), "Paragraph"),
    (re.compile(r"^art(?:icle)?s?\.?\s*(?=\d)", re.IGNORECASE), "Article"),
    (re.compile(r"^reg(?:ulation)?s?\.?\s*(?=\d)", re.IGNORECASE), "Regulation"),
    (re.compile(r"^(?:s|sec|sect|section)s?\.?\s*(?=\d)", re.IGNORECASE), "Section"),
)

_BARE_LABEL_BY_TYPE: Final[dict[LegislationType, str]] = {
    LegislationType.ACT: "Section",
    LegislationType.REGULATION: "Regulation",
    LegislationType.ORDER: "Article",
}


@dataclass(frozen=True, slots=True)
class CitationParts:
    """Raw pieces of one citation before title cleaning."""

    title: str
    year: int | None
    sections: tuple[str, ...]


def split_citations(breach_text: str) -> list[str]:
    """Split text holding several citations on ``;`` and line breaks."""

    return [
        cleaned
        for part in _CITATION_BOUNDARY.split(breach_text)
        if (cleaned := collapse_whitespace(part).strip(" /"))
    ]


def split_citation(citation: str) -> CitationParts:
    """Split ``"Title Year / Article / Sub-article"`` into its parts.

    The first valid four-digit year in the leading segment separates the title
    from anything trailing it, which is treated as the first section part.
    """

    segments = [collapse_whitespace(segment) for segment in citation.split("/")]
    segments = [segment for segment in segments if segment]
    if not segments:
        return CitationParts(title="", year=None, sections=())

    leading, rest = segments[0], segments[1:]
    for match in _YEAR.finditer(leading):
        year = valid_year(int(match.group(1)))
        if year is None:
            continue
        title = leading[: match.start()].rstrip(" ,(")
        trailing = leading[match.end() :].strip(" ,")
        if trailing.startswith(")") and trailing.count(")") > trailing.count("("):
            # closes a bracketed year: "Act (1974)"
            trailing = trailing[1:].strip(" ,")
        sections = (trailing, *rest) if trailing else tuple(rest)
        return CitationParts(title=title, year=year, sections=sections)
    return CitationParts(title=leading.rstrip(" ,"), year=None, sections=tuple(rest))


def normalize_section_reference(part: str) -> str:
    """``"reg 4"`` -> ``"Regulation 4"``, ``"s.2"`` -> ``"Section 2"``."""

    text = collapse_whitespace(part)
    for prefix, label in SECTION_PREFIXES:
        match = prefix.match(text)
        if match is not None:
            return f"{label} {text[match.end() :]}"
    return text[:1].upper() + text[1:]


def build_section_label(
    sections: tuple[str, ...], legislation_type: LegislationType
) -> str | None:
    """Join article and sub-article parts: ``("Section 2", "1")`` -> ``"Section 2(1)"``.

    A bare leading number is labelled after the legislation type.
    """

    if not sections:
        return None
    head = normalize_section_reference(sections[0])
    if head[:1].isdigit() and legislation_type in _BARE_LABEL_BY_TYPE:
        head = f"{_BARE_LABEL_BY_TYPE[legislation_type]} {head}"
    label = head
    for part in sections[1:]:
        sub = _SUB_PART.match(part)
        if sub is not None:
            label = f"{label}({sub.group(1)})"
        else:
            label = f"{label} {normalize_section_reference(part)}"
    return label
