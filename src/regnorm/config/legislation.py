"""Loading of the versioned legislation lookup tables."""

from __future__ import annotations

import logging
import os
import re
import tomllib
from importlib import resources
from pathlib import Path
from typing import TYPE_CHECKING, Any, Final

from regnorm.domain.legislation import KnownLegislation, LegislationTables, build_tables
from regnorm.domain.model import LegislationType

from .errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Mapping

log = logging.getLogger(__name__)

TABLES_ENV_VAR: Final[str] = "REGNORM_LEGISLATION_TABLES"
PACKAGED_TABLES: Final[str] = "legislation.toml"


def load_legislation_tables(path: Path | None = None) -> LegislationTables:
    """Load lookup tables from ``path``, ``$REGNORM_LEGISLATION_TABLES`` or the packaged file."""

    source = path
    if source is None:
        env_path = os.getenv(TABLES_ENV_VAR)
        source = Path(env_path) if env_path else None

    try:
        if source is None:
            raw = (
                resources.files("regnorm.config.data")
                .joinpath(PACKAGED_TABLES)
                .read_text(encoding="utf-8")
            )
            origin = f"package:{PACKAGED_TABLES}"
        else:
            raw = source.read_text(encoding="utf-8")
            origin = str(source)
        document = tomllib.loads(raw)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigurationError(f"Cannot load legislation tables: {exc}") from exc

    tables = tables_from_document(document)
    log.debug(
        "Loaded legislation tables %s from %s (%d abbreviations, %d known titles)",
        tables.version,
        origin,
        len(tables.abbreviations),
        len(tables.known),
    )
    return tables


def tables_from_document(document: Mapping[str, Any]) -> LegislationTables:
    try:
        return build_tables(
            version=str(document["version"]),
            abbreviations={str(k): str(v) for k, v in document.get("abbreviations", {}).items()},
            word_expansions=[
                (entry["pattern"], entry["replacement"])
                for entry in document.get("word_expansions", [])
            ],
            title_variants=[
                (entry["pattern"], entry["canonical"])
                for entry in document.get("title_variants", [])
            ],
            missing_years={str(k): int(v) for k, v in document.get("missing_years", {}).items()},
            known=[_known_entry(entry) for entry in document.get("legislation", [])],
            placeholder_title=document.get("placeholder_title", "Unknown Legislation"),
        )
    except (KeyError, TypeError, ValueError, re.error) as exc:
        raise ConfigurationError(f"Invalid legislation tables: {exc!r}") from exc


def _known_entry(entry: Mapping[str, Any]) -> KnownLegislation:
    return KnownLegislation(
        title=entry["title"],
        year=int(entry["year"]),
        type=LegislationType(entry["type"]),
        number=entry.get("number"),
        aliases=tuple(entry.get("aliases", ())),
    )
