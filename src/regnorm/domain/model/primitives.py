"""Domain primitives and value helpers."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Final

type Money = Decimal
type Postcode = str

ZERO_MONEY: Final[Money] = Decimal("0.00")
MONEY_QUANTUM: Final[Decimal] = Decimal("0.01")

MIN_LEGISLATION_YEAR: Final[int] = 1800
MAX_LEGISLATION_YEAR: Final[int] = 2100


def quantize_money(value: Decimal) -> Money:
    """Round to two decimal places (half-up, as currency amounts are quoted)."""

    return value.quantize(MONEY_QUANTUM, rounding=ROUND_HALF_UP)


def valid_year(year: int | None) -> int | None:
    if year is None or not MIN_LEGISLATION_YEAR <= year <= MAX_LEGISLATION_YEAR:
        return None
    return year


def valid_number(number: int | None) -> int | None:
    if number is None or number < 1:
        return None
    return number
