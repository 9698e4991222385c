"""Lookup tables driving legislation title normalization.

The tables are plain configuration data: they are loaded once (see
``regnorm.config.legislation``) and handed to ``LegislationNormalizer``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final

from regnorm.domain.model import LegislationType

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

DEFAULT_PLACEHOLDER_TITLE: Final[str] = "Unknown Legislation"


@dataclass(frozen=True, slots=True, kw_only=True)
class KnownLegislation:
    """A statute or statutory instrument with its canonical title and number."""

    title: str
    year: int
    type: LegislationType
    number: int | None = None
    aliases: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class Rewrite:
    """Regex rewrite applied to a title (``pattern.sub(replacement, title)``)."""

    pattern: re.Pattern[str]
    replacement: str

    @classmethod
    def compile(cls, regex: str, replacement: str, *, ignore_case: bool = True) -> Rewrite:
        return cls(re.compile(regex, re.IGNORECASE if ignore_case else 0), replacement)


@dataclass(frozen=True, slots=True, kw_only=True)
class LegislationTables:
    version: str
    abbreviations: Mapping[str, str] = field(default_factory=dict)
    word_expansions: tuple[Rewrite, ...] = ()
    title_variants: tuple[Rewrite, ...] = ()
    missing_years: tuple[tuple[str, int], ...] = ()
    known: tuple[KnownLegislation, ...] = ()
    placeholder_title: str = DEFAULT_PLACEHOLDER_TITLE
    _known_index: dict[tuple[str, int], KnownLegislation] = field(
        init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        # Upper-cased abbreviation keys and longest-first missing-year keys keep
        # lookups independent of the order entries were written in.
        object.__setattr__(
            self,
            "abbreviations",
            {code.upper(): title for code, title in self.abbreviations.items()},
        )
        object.__setattr__(
            self,
            "missing_years",
            tuple(
                sorted(
                    ((key.lower(), year) for key, year in self.missing_years),
                    key=lambda item: len(item[0]),
                    reverse=True,
                )
            ),
        )
        index: dict[tuple[str, int], KnownLegislation] = {}
        for entry in self.known:
            for title in (entry.title, *entry.aliases):
                index.setdefault((title.lower(), entry.year), entry)
        object.__setattr__(self, "_known_index", index)

    def expand_abbreviation(self, code: str) -> str | None:
        return self.abbreviations.get(code.strip().upper())

    def missing_year_for(self, title: str) -> int | None:
        lowered = title.lower()
        for key, year in self.missing_years:
            if key in lowered:
                return year
        return None

    def lookup_known(self, title: str, year: int | None) -> KnownLegislation | None:
        if year is None:
            return None
        return self._known_index.get((title.lower(), year))


def build_tables(
    *,
    version: str,
    abbreviations: Mapping[str, str] | None = None,
    word_expansions: Iterable[tuple[str, str]] = (),
    title_variants: Iterable[tuple[str, str]] = (),
    missing_years: Mapping[str, int] | None = None,
    known: Iterable[KnownLegislation] = (),
    placeholder_title: str = DEFAULT_PLACEHOLDER_TITLE,
) -> LegislationTables:
    """Build tables from raw strings, compiling the regex-based entries.

    Title variants are anchored so that a variant only ever rewrites a whole
    title, which keeps repeated cleaning stable.
    """

    return LegislationTables(
        version=version,
        abbreviations=dict(abbreviations or {}),
        word_expansions=tuple(
            Rewrite.compile(regex, replacement) for regex, replacement in word_expansions
        ),
        title_variants=tuple(
            Rewrite.compile(rf"^(?:{regex})$", canonical) for regex, canonical in title_variants
        ),
        missing_years=tuple((missing_years or {}).items()),
        known=tuple(known),
        placeholder_title=placeholder_title,
    )
