from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from regnorm.config import ConfigurationError, load_legislation_tables, tables_from_document
from regnorm.config.legislation import TABLES_ENV_VAR
from regnorm.domain.model import LegislationType

if TYPE_CHECKING:
    from pathlib import Path

CUSTOM_TABLES = """
version = "test-1"
placeholder_title = "Unidentified Legislation"

[abbreviations]
abc = "Alpha Beta Control Regulations"

[[word_expansions]]
pattern = '\\bAB\\b'
replacement = "Alpha Beta"

[[title_variants]]
pattern = 'Alpha Beta Control(?: Regulations)?'
canonical = "Alpha Beta Control Regulations"

[missing_years]
"alpha beta control regulations" = 2001

[[legislation]]
title = "Alpha Beta Control Regulations"
year = 2001
number = 12
type = "regulation"
"""


def test_packaged_tables_load(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(TABLES_ENV_VAR, raising=False)

    tables = load_legislation_tables()

    assert tables.version == "2025.1"
    assert tables.expand_abbreviation("puwer") == (
        "Provision and Use of Work Equipment Regulations"
    )
    known = tables.lookup_known("Provision and Use of Work Equipment Regulations", 1998)
    assert known is not None
    assert known.number == 2306


def test_tables_from_explicit_path(tmp_path: Path) -> None:
    path = tmp_path / "tables.toml"
    path.write_text(CUSTOM_TABLES, encoding="utf-8")

    tables = load_legislation_tables(path)

    assert tables.version == "test-1"
    assert tables.placeholder_title == "Unidentified Legislation"
    assert tables.expand_abbreviation("ABC") == "Alpha Beta Control Regulations"
    assert tables.missing_year_for("Alpha Beta Control Regulations") == 2001
    known = tables.lookup_known("alpha beta control regulations", 2001)
    assert known is not None
    assert known.type == LegislationType.REGULATION


def test_tables_path_from_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = tmp_path / "tables.toml"
    path.write_text(CUSTOM_TABLES, encoding="utf-8")
    monkeypatch.setenv(TABLES_ENV_VAR, str(path))

    assert load_legislation_tables().version == "test-1"


def test_missing_file_is_a_configuration_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError, match="Cannot load legislation tables"):
        load_legislation_tables(tmp_path / "absent.toml")


def test_invalid_toml_is_a_configuration_error(tmp_path: Path) -> None:
    path = tmp_path / "broken.toml"
    path.write_text("version = ", encoding="utf-8")

    with pytest.raises(ConfigurationError, match="Cannot load legislation tables"):
        load_legislation_tables(path)


@pytest.mark.parametrize(
    "document",
    [
        {},
        {"version": "1", "legislation": [{"title": "X", "year": 2000, "type": "statute"}]},
        {"version": "1", "title_variants": [{"pattern": "(", "canonical": "X"}]},
    ],
)
def test_invalid_documents_are_rejected(document: dict[str, object]) -> None:
    with pytest.raises(ConfigurationError, match="Invalid legislation tables"):
        tables_from_document(document)
