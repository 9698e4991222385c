from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import func, select

from regnorm.adapters.sqlalchemy import (
    SqlAlchemyLegislationRepository,
    SqlAlchemyOffenderRepository,
    legislation_table,
    offender_table,
)
from regnorm.domain.errors import DuplicateKeyError
from regnorm.domain.legislation import LegislationNormalizer
from regnorm.domain.model import BusinessType, LegislationReference, LegislationType
from regnorm.domain.offenders import find_or_create_offender, make_candidate

if TYPE_CHECKING:
    from sqlalchemy import Table
    from sqlalchemy.orm import Session

    from regnorm.domain.legislation import LegislationTables


def _count(session: Session, table: Table) -> int:
    return session.execute(select(func.count()).select_from(table)).scalar_one()


def test_legislation_round_trip(sqlite_session: Session) -> None:
    repository = SqlAlchemyLegislationRepository(sqlite_session)

    created = repository.create_legislation(
        LegislationReference(
            title="Health and Safety at Work etc. Act",
            year=1974,
            number=37,
            type=LegislationType.ACT,
            section_label="Section 2",
        )
    )
    found = repository.find_legislation("Health and Safety at Work etc. Act", 1974, 37)

    assert found is not None
    assert found.id == created.id
    assert found.type == LegislationType.ACT
    assert found.section_label is None
    assert repository.find_legislation("Health and Safety at Work etc. Act", 1974, None) == found


def test_legislation_duplicate_with_null_parts_is_rejected(sqlite_session: Session) -> None:
    repository = SqlAlchemyLegislationRepository(sqlite_session)
    reference = LegislationReference(title="Confined Spaces Regulations")
    repository.create_legislation(reference)

    with pytest.raises(DuplicateKeyError):
        repository.create_legislation(reference)

    assert _count(sqlite_session, legislation_table) == 1


def test_legislation_candidates(sqlite_session: Session) -> None:
    repository = SqlAlchemyLegislationRepository(sqlite_session)
    for title, year in (("B Regulations", 2005), ("A Regulations", None), ("C Act", 1990)):
        repository.create_legislation(LegislationReference(title=title, year=year))

    assert [row.title for row in repository.legislation_candidates(2005)] == [
        "A Regulations",
        "B Regulations",
    ]
    assert [row.title for row in repository.legislation_candidates(None)] == ["A Regulations"]


def test_normalizer_over_sql_store_reuses_rows(
    sqlite_session: Session, legislation_tables: LegislationTables
) -> None:
    normalizer = LegislationNormalizer(
        legislation_tables, SqlAlchemyLegislationRepository(sqlite_session)
    )

    [first] = normalizer.normalize("PUWER 1998 / Regulation 4")
    [second] = normalizer.normalize("Provision and Use of Work Equipment Regulations 1998 / reg 5")

    assert first.id == second.id
    assert second.section_label == "Regulation 5"
    assert _count(sqlite_session, legislation_table) == 1


def test_offender_round_trip(sqlite_session: Session) -> None:
    repository = SqlAlchemyOffenderRepository(sqlite_session)

    created = repository.create_offender(
        make_candidate("Acme Ltd", address="1 High Street, London SW1A 1AA")
    )
    found = repository.find_exact("acme limited", "sw1a1aa")

    assert found is not None
    assert found.id == created.id
    assert found.postcode == "SW1A 1AA"
    assert found.business_type == BusinessType.LIMITED_COMPANY
    assert found.total_fines == Decimal("0.00")


def test_offender_duplicate_without_postcode_is_rejected(sqlite_session: Session) -> None:
    repository = SqlAlchemyOffenderRepository(sqlite_session)
    repository.create_offender(make_candidate("Acme Ltd"))

    with pytest.raises(DuplicateKeyError):
        repository.create_offender(make_candidate("ACME LIMITED"))

    assert _count(sqlite_session, offender_table) == 1


def test_find_similar_ranks_by_trigram_similarity(sqlite_session: Session) -> None:
    repository = SqlAlchemyOffenderRepository(sqlite_session, pool_limit=2)
    for name in ("Acme Construction Ltd", "Acme Holdings Ltd", "Acme Ltd", "Zenith PLC"):
        repository.create_offender(make_candidate(name))

    pool = repository.find_similar("acme constrution limited", 0.3)

    assert [record.normalized_name for record in pool][0] == "acme construction limited"
    assert len(pool) <= 2
    assert all(record.normalized_name != "zenith plc" for record in pool)


def test_find_similar_escapes_like_wildcards(sqlite_session: Session) -> None:
    repository = SqlAlchemyOffenderRepository(sqlite_session)
    repository.create_offender(make_candidate("Acme Ltd"))

    assert repository.find_similar("100%", 0.0) == []


def test_find_or_create_over_sql_store(sqlite_session: Session) -> None:
    repository = SqlAlchemyOffenderRepository(sqlite_session)

    first_id, _ = find_or_create_offender(
        make_candidate("Acme Ltd", postcode="SW1A 1AA"), repository
    )
    second_id, _ = find_or_create_offender(
        make_candidate("Acme Constrution Ltd", postcode="SW1A 1AA"), repository
    )

    assert first_id == second_id
    assert _count(sqlite_session, offender_table) == 1
