"""Reference store implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

import uuid
from dataclasses import replace
from typing import TYPE_CHECKING, Any, Final

from sqlalchemy import insert, or_, select
from sqlalchemy.exc import IntegrityError

from regnorm.adapters.sqlalchemy.mappings import legislation_table, offender_table
from regnorm.domain.errors import DuplicateKeyError
from regnorm.domain.model import LegislationReference, OffenderRecord, quantize_money
from regnorm.domain.offenders import trigram_similarity
from regnorm.domain.text import postcode_key

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from sqlalchemy import ColumnElement, Select
    from sqlalchemy.orm import Session

    from regnorm.domain.model import OffenderCandidate

DEFAULT_POOL_LIMIT: Final[int] = 25
MIN_PREFILTER_TOKEN: Final[int] = 3


def _nullable_eq(column: Any, value: object) -> ColumnElement[bool]:
    return column.is_(None) if value is None else column == value


def _to_reference(row: Mapping[str, Any]) -> LegislationReference:
    return LegislationReference(
        id=row["id"],
        title=row["title"],
        year=row["year"],
        number=row["number"],
        type=row["type"],
    )


def _to_offender(row: Mapping[str, Any]) -> OffenderRecord:
    return OffenderRecord(
        id=row["id"],
        raw_name=row["raw_name"],
        normalized_name=row["normalized_name"],
        postcode=row["postcode"],
        address=row["address"],
        business_type=row["business_type"],
        total_cases=row["total_cases"],
        total_notices=row["total_notices"],
        total_fines=quantize_money(row["total_fines"]),
    )


class SqlAlchemyLegislationRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def find_legislation(
        self, title: str, year: int | None, number: int | None
    ) -> LegislationReference | None:
        stmt = select(legislation_table).where(
            legislation_table.c.title == title,
            _nullable_eq(legislation_table.c.year, year),
        )
        if number is not None:
            stmt = stmt.where(legislation_table.c.number == number)
        references = [_to_reference(row) for row in self._rows(stmt)]
        if not references:
            return None
        return max(references, key=lambda reference: reference.populated_fields)

    def create_legislation(self, reference: LegislationReference) -> LegislationReference:
        # NULLs never collide in a SQL unique constraint, so check the full key first.
        exact = select(legislation_table.c.id).where(
            legislation_table.c.title == reference.title,
            _nullable_eq(legislation_table.c.year, reference.year),
            _nullable_eq(legislation_table.c.number, reference.number),
        )
        if self.session.execute(exact).first() is not None:
            raise DuplicateKeyError(reference.key)

        new_id = uuid.uuid4()
        try:
            with self.session.begin_nested():
                self.session.execute(
                    insert(legislation_table).values(
                        id=new_id,
                        title=reference.title,
                        year=reference.year,
                        number=reference.number,
                        type=reference.type,
                    )
                )
        except IntegrityError as exc:
            raise DuplicateKeyError(reference.key) from exc
        return replace(reference, id=new_id, section_label=None)

    def legislation_candidates(self, year: int | None) -> Sequence[LegislationReference]:
        condition = legislation_table.c.year.is_(None)
        if year is not None:
            condition = or_(condition, legislation_table.c.year == year)
        stmt = select(legislation_table).where(condition).order_by(legislation_table.c.title)
        return [_to_reference(row) for row in self._rows(stmt)]

    def _rows(self, stmt: Select[Any]) -> Sequence[Mapping[str, Any]]:
        return self.session.execute(stmt).mappings().all()


class SqlAlchemyOffenderRepository:
    def __init__(self, session: Session, pool_limit: int = DEFAULT_POOL_LIMIT) -> None:
        self.session = session
        self.pool_limit = pool_limit

    def find_exact(self, normalized_name: str, postcode: str | None) -> OffenderRecord | None:
        stmt = select(offender_table).where(
            offender_table.c.normalized_name == normalized_name,
            _nullable_eq(offender_table.c.postcode_key, postcode_key(postcode)),
        )
        row = self.session.execute(stmt).mappings().first()
        return _to_offender(row) if row is not None else None

    def find_similar(self, normalized_name: str, threshold: float) -> Sequence[OffenderRecord]:
        """Offenders whose trigram similarity to the name exceeds ``threshold``.

        Rows are pre-selected in SQL by shared words, then ranked in Python.
        """

        tokens = normalized_name.split()
        long_tokens = [token for token in tokens if len(token) >= MIN_PREFILTER_TOKEN]
        prefilter = long_tokens or tokens
        if not prefilter:
            return []
        stmt = select(offender_table).where(
            or_(
                *(
                    offender_table.c.normalized_name.contains(token, autoescape=True)
                    for token in prefilter
                )
            )
        )
        scored = [
            (similarity, record)
            for record in (_to_offender(row) for row in self.session.execute(stmt).mappings())
            if (similarity := trigram_similarity(normalized_name, record.normalized_name))
            > threshold
        ]
        scored.sort(key=lambda item: item[0], reverse=True)
        return [record for _, record in scored[: self.pool_limit]]

    def create_offender(self, candidate: OffenderCandidate) -> OffenderRecord:
        if self.find_exact(candidate.normalized_name, candidate.postcode) is not None:
            raise DuplicateKeyError(candidate.key)

        record = OffenderRecord(
            id=uuid.uuid4(),
            raw_name=candidate.raw_name,
            normalized_name=candidate.normalized_name,
            postcode=candidate.postcode,
            address=candidate.address,
            business_type=candidate.business_type,
        )
        try:
            with self.session.begin_nested():
                self.session.execute(
                    insert(offender_table).values(
                        id=record.id,
                        raw_name=record.raw_name,
                        normalized_name=record.normalized_name,
                        postcode=record.postcode,
                        postcode_key=postcode_key(record.postcode),
                        address=record.address,
                        business_type=record.business_type,
                    )
                )
        except IntegrityError as exc:
            raise DuplicateKeyError(candidate.key) from exc
        return record


if TYPE_CHECKING:
    from regnorm.domain.ports import LegislationStore, OffenderStore

    def _check_ports(session: Session) -> None:
        _legislation: LegislationStore = SqlAlchemyLegislationRepository(session)
        _offenders: OffenderStore = SqlAlchemyOffenderRepository(session)
