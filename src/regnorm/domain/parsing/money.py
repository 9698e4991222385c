"""Currency amount parsing."""

from __future__ import annotations

import logging
import re
from decimal import Decimal, InvalidOperation

from regnorm.domain.model import ZERO_MONEY, Money, quantize_money

log = logging.getLogger(__name__)

_AMOUNT = re.compile(r"\d+(?:,\d+)*(?:\.\d+)?")


def parse_amount(raw: str | None) -> Money | None:
    """Return the first amount found in ``raw``, or ``None`` if there is none.

    Currency symbols, signs and surrounding text are ignored, so the result is
    never negative.
    """

    if raw is None:
        return None
    match = _AMOUNT.search(raw)
    if match is None:
        return None
    try:
        return quantize_money(Decimal(match.group().replace(",", "")))
    except InvalidOperation:
        log.debug("Amount out of range: %r", raw)
        return None


def parse_money(raw: str | None) -> Money:
    """Parse a money string, falling back to zero.

    A stated zero and an unparseable value are indistinguishable in the
    result.
    """

    amount = parse_amount(raw)
    return ZERO_MONEY if amount is None else amount


def proportional_fine(total: Money, count: int) -> Money:
    """Split a fine evenly across ``count`` offences."""

    if count < 1:
        return ZERO_MONEY
    return quantize_money(total / count)
