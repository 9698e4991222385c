"""Ordered first-match rule tables."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence


@dataclass(frozen=True, slots=True)
class Rule[TResult]:
    """One ``(predicate, result)`` pair of an ordered rule table."""

    name: str
    predicate: Callable[[str], bool]
    result: TResult

    def matches(self, value: str) -> bool:
        return self.predicate(value)


def pattern(regex: str, flags: int = 0) -> Callable[[str], bool]:
    compiled = re.compile(regex, flags)

    def _predicate(value: str) -> bool:
        return compiled.search(value) is not None

    return _predicate


def first_match[TResult](rules: Sequence[Rule[TResult]], value: str) -> Rule[TResult] | None:
    """Return the first rule whose predicate accepts ``value``."""

    for rule in rules:
        if rule.matches(value):
            return rule
    return None
