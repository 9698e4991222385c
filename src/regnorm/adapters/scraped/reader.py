"""Reading scraper output files."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

from pydantic import ValidationError

from .schema import ScrapedRecordPayload

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from regnorm.domain.model import RawScrapedRecord

log = logging.getLogger(__name__)


class ScrapedFileError(ValueError):
    """Raised when a scraper output file cannot be decoded."""


def read_scraped_records(path: Path) -> Iterator[RawScrapedRecord]:
    """Yield records from a JSON Lines file, or from a file holding one JSON array."""

    text = path.read_text(encoding="utf-8")
    if text.lstrip().startswith("["):
        try:
            items = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ScrapedFileError(f"{path}: invalid JSON: {exc}") from exc
        for index, item in enumerate(items, start=1):
            yield _validate(item, path, index)
        return

    for line_number, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue
        try:
            item = json.loads(line)
        except json.JSONDecodeError as exc:
            raise ScrapedFileError(f"{path}:{line_number}: invalid JSON: {exc}") from exc
        yield _validate(item, path, line_number)


def _validate(item: object, path: Path, position: int) -> RawScrapedRecord:
    try:
        payload = ScrapedRecordPayload.model_validate(item)
    except ValidationError as exc:
        raise ScrapedFileError(f"{path}:{position}: invalid record: {exc}") from exc
    log.debug("Read record %s from %s:%d", payload.regulator_id, path, position)
    return payload.to_raw_record()
