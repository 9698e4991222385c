"""Typed projection of a raw scraped record."""

from __future__ import annotations

from typing import TYPE_CHECKING

from regnorm.domain.model import ZERO_MONEY, BusinessType, ParsedFields, RawField
from regnorm.domain.parsing.action_types import normalize_action_type
from regnorm.domain.parsing.business_type import (
    DEFAULT_BUSINESS_TYPE,
    business_type_from_hint,
    match_business_type,
)
from regnorm.domain.parsing.dates import parse_date
from regnorm.domain.parsing.money import parse_amount

if TYPE_CHECKING:
    from datetime import date

    from regnorm.domain.model import Money, RawScrapedRecord


def parse_fields(record: RawScrapedRecord) -> ParsedFields:
    """Convert the typed subset of a scraped record; never raises.

    Fields present in the record whose value could not be parsed are reported
    in ``defaulted_fields``. Absent fields are not.
    """

    defaulted: list[str] = []
    action_date = _date_field(record, RawField.ACTION_DATE, defaulted)
    hearing_date = _date_field(record, RawField.HEARING_DATE, defaulted)
    fine = _money_field(record, RawField.FINE, defaulted)
    costs = _money_field(record, RawField.COSTS, defaulted)
    business_type = _business_type(record, defaulted)
    action_type = normalize_action_type(record.get(RawField.ACTION_TYPE))
    return ParsedFields(
        action_date=action_date,
        hearing_date=hearing_date,
        fine=fine,
        costs=costs,
        business_type=business_type,
        action_type=action_type,
        defaulted_fields=tuple(defaulted),
    )


def _date_field(record: RawScrapedRecord, name: RawField, defaulted: list[str]) -> date | None:
    raw = record.get(name)
    value = parse_date(raw)
    if raw is not None and value is None:
        defaulted.append(name.value)
    return value


def _money_field(record: RawScrapedRecord, name: RawField, defaulted: list[str]) -> Money:
    raw = record.get(name)
    value = parse_amount(raw)
    if value is None:
        if raw is not None:
            defaulted.append(name.value)
        return ZERO_MONEY
    return value


def _business_type(record: RawScrapedRecord, defaulted: list[str]) -> BusinessType:
    hint = record.get(RawField.BUSINESS_TYPE)
    if hint is not None:
        return business_type_from_hint(hint)
    name = record.get(RawField.OFFENDER_NAME)
    matched = match_business_type(name) if name is not None else None
    if matched is None:
        defaulted.append(RawField.BUSINESS_TYPE.value)
        return DEFAULT_BUSINESS_TYPE
    return matched
