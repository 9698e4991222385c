from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from regnorm import app as app_module
from regnorm.adapters.memory import (
    InMemoryLegislationStore,
    InMemoryOffenderStore,
    InMemoryUnitOfWork,
)
from regnorm.ui import cli as cli_module

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from regnorm.domain.model import RawScrapedRecord
    from regnorm.domain.pipeline import BatchResult

RECORDS = [
    {
        "regulator_id": "HSE-1",
        "offender_name": "Acme Construction Ltd",
        "offender_address": "1 High Street, London SW1A 1AA",
        "action_date": "23/10/2025",
        "fine": "£12,000",
        "breaches": "PUWER 1998 / Regulation 4",
    },
    {
        "regulator_id": "HSE-2",
        "offender_name": "Acme Constrution Limited",
        "offender_postcode": "SW1A 1AA",
        "breaches": ["PUWER 1998 / Regulation 11"],
    },
]


@pytest.fixture
def captured(monkeypatch: pytest.MonkeyPatch) -> dict[str, object]:
    calls: dict[str, object] = {}
    legislation = InMemoryLegislationStore()
    offenders = InMemoryOffenderStore()

    def fake_normalize(records: Iterable[RawScrapedRecord], **kwargs: object) -> BatchResult:
        calls.update(kwargs)
        return app_module.normalize_records(
            records,
            unit_of_work_factory=lambda: InMemoryUnitOfWork(legislation, offenders),
            workers=1,
        )

    monkeypatch.setattr(cli_module, "normalize_records", fake_normalize)
    return calls


def _write_input(tmp_path: Path, records: list[dict[str, object]]) -> Path:
    path = tmp_path / "scraped.jsonl"
    path.write_text("\n".join(json.dumps(record) for record in records), encoding="utf-8")
    return path


def test_normalize_writes_resolved_records(
    tmp_path: Path, captured: dict[str, object]
) -> None:
    output = tmp_path / "resolved.jsonl"

    cli_module.main(
        [
            "normalize",
            str(_write_input(tmp_path, RECORDS)),
            "--output",
            str(output),
            "--workers",
            "3",
            "--database-uri",
            "sqlite+pysqlite:///:memory:",
        ]
    )

    assert captured == {"workers": 3, "database_uri": "sqlite+pysqlite:///:memory:"}
    first, second = (json.loads(line) for line in output.read_text("utf-8").splitlines())
    assert first["decision"] == "create_new"
    assert second["decision"] == "matched"
    assert second["offender_id"] == first["offender_id"]
    assert second["legislation"][0]["id"] == first["legislation"][0]["id"]
    assert second["offences"][0]["description"] == (
        "Provision and Use of Work Equipment Regulations - Regulation 11"
    )


def test_normalize_defaults_to_stdout(
    tmp_path: Path, captured: dict[str, object], capsys: pytest.CaptureFixture[str]
) -> None:
    cli_module.main(["normalize", str(_write_input(tmp_path, RECORDS[:1]))])

    assert captured["database_uri"] is None
    [line] = capsys.readouterr().out.splitlines()
    assert json.loads(line)["regulator_id"] == "HSE-1"


def test_normalize_exits_with_failure_code(
    tmp_path: Path, captured: dict[str, object]
) -> None:
    records = [*RECORDS, {"regulator_id": "HSE-3", "offender_name": "   "}]

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(
            ["normalize", str(_write_input(tmp_path, records)), "--output", str(tmp_path / "o")]
        )

    assert excinfo.value.code == 1
    assert len((tmp_path / "o").read_text("utf-8").splitlines()) == 2


def test_normalize_rejects_unreadable_input(
    tmp_path: Path, captured: dict[str, object]
) -> None:
    path = tmp_path / "broken.jsonl"
    path.write_text("{oops", encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["normalize", str(path)])

    assert excinfo.value.code == 2
    assert captured == {}


def test_normalize_rejects_non_positive_workers(
    tmp_path: Path, captured: dict[str, object]
) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["normalize", str(_write_input(tmp_path, RECORDS)), "--workers", "0"])

    assert excinfo.value.code == 2


def test_legislation_command(capsys: pytest.CaptureFixture[str]) -> None:
    cli_module.main(["legislation", "PUWER 1998 / Regulation 4; Confined Spaces Regulations"])

    assert capsys.readouterr().out.splitlines() == [
        "Provision and Use of Work Equipment Regulations\t1998\t2306\tregulation\tRegulation 4",
        "Confined Spaces Regulations\t-\t-\tregulation\t-",
    ]


def test_classify_command(capsys: pytest.CaptureFixture[str]) -> None:
    cli_module.main(["classify", "Acme Ltd", "Tesco Stores PLC", "John Smith"])

    assert capsys.readouterr().out.splitlines() == [
        "Acme Ltd\tlimited_company",
        "Tesco Stores PLC\tplc",
        "John Smith\tindividual",
    ]


def test_missing_command_is_a_usage_error() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main([])

    assert excinfo.value.code == 2
