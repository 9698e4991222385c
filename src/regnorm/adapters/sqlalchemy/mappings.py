"""SQLAlchemy table metadata for the reference stores."""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    Dialect,
    Enum,
    Integer,
    MetaData,
    Numeric,
    String,
    Table,
    Text,
    TypeDecorator,
    UniqueConstraint,
    Uuid,
)

from regnorm.domain.model import BusinessType, LegislationType

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


def _utcnow() -> datetime:
    return datetime.now(UTC)


metadata = MetaData(
    naming_convention={
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_label)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "pk": "pk_%(table_name)s",
    }
)

legislation_table = Table(
    "legislation",
    metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("title", String(512), nullable=False, index=True),
    Column("year", Integer, nullable=True),
    Column("number", Integer, nullable=True),
    Column("type", Enum(LegislationType, native_enum=False), nullable=False),
    Column("created_at", UTCDateTime(), nullable=False, default=_utcnow),
    UniqueConstraint("title", "year", "number", name="uq_legislation_key"),
    CheckConstraint("year IS NULL OR (year >= 1800 AND year <= 2100)", name="year_range"),
    CheckConstraint("number IS NULL OR number >= 1", name="number_positive"),
)

offender_table = Table(
    "offender",
    metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("raw_name", String(512), nullable=False),
    Column("normalized_name", String(512), nullable=False, index=True),
    Column("postcode", String(16), nullable=True),
    # postcode without whitespace; part of the unique key
    Column("postcode_key", String(16), nullable=True),
    Column("address", Text, nullable=True),
    Column("business_type", Enum(BusinessType, native_enum=False), nullable=False),
    Column("total_cases", Integer, nullable=False, default=0),
    Column("total_notices", Integer, nullable=False, default=0),
    Column("total_fines", Numeric(14, 2), nullable=False, default=Decimal("0.00")),
    Column("created_at", UTCDateTime(), nullable=False, default=_utcnow),
    UniqueConstraint("normalized_name", "postcode_key", name="uq_offender_key"),
)


def create_all_tables(engine: Engine) -> None:
    """Create the reference tables if they do not exist yet."""

    log.info("Creating all tables")
    metadata.create_all(engine)
