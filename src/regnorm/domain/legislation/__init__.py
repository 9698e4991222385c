"""Legislation citation parsing and canonicalization."""

from __future__ import annotations

from regnorm.domain.legislation.citations import (
    build_section_label,
    normalize_section_reference,
    split_citation,
    split_citations,
)
from regnorm.domain.legislation.normalizer import (
    LEGISLATION_SIMILARITY_FLOOR,
    LegislationNormalizer,
    build_offence_description,
    legislation_lock_key,
)
from regnorm.domain.legislation.tables import (
    KnownLegislation,
    LegislationTables,
    Rewrite,
    build_tables,
)
from regnorm.domain.legislation.titles import (
    LEGISLATION_TYPE_RULES,
    TitleCleaner,
    classify_legislation_type,
)

__all__ = [
    "LEGISLATION_SIMILARITY_FLOOR",
    "LEGISLATION_TYPE_RULES",
    "KnownLegislation",
    "LegislationNormalizer",
    "LegislationTables",
    "Rewrite",
    "TitleCleaner",
    "build_offence_description",
    "build_section_label",
    "build_tables",
    "classify_legislation_type",
    "legislation_lock_key",
    "normalize_section_reference",
    "split_citation",
    "split_citations",
]
