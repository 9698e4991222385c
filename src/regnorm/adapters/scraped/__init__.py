"""Scraper payload adapter: JSON records in, resolved records out."""

from __future__ import annotations

from .reader import ScrapedFileError, read_scraped_records
from .schema import (
    LegislationPayload,
    OffencePayload,
    ResolvedRecordPayload,
    ScrapedRecordPayload,
)

__all__ = [
    "LegislationPayload",
    "OffencePayload",
    "ResolvedRecordPayload",
    "ScrapedFileError",
    "ScrapedRecordPayload",
    "read_scraped_records",
]
