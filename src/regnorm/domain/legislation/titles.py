"""Legislation title cleaning and type classification."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Final

from regnorm.domain.model import LegislationType
from regnorm.domain.rules import Rule, first_match, pattern
from regnorm.domain.text import collapse_whitespace

if TYPE_CHECKING:
    from regnorm.domain.legislation.tables import LegislationTables

LEGISLATION_TYPE_RULES: Final[tuple[Rule[LegislationType], ...]] = (
    Rule(
        "acop",
        pattern(r"\bacop\b|approved code of practice", re.IGNORECASE),
        LegislationType.ACOP,
    ),
    Rule("regulation", pattern(r"\bregulations?\b", re.IGNORECASE), LegislationType.REGULATION),
    Rule("order", pattern(r"\border\b", re.IGNORECASE), LegislationType.ORDER),
    Rule("act", pattern(r"\bact\b", re.IGNORECASE), LegislationType.ACT),
)

DEFAULT_LEGISLATION_TYPE: Final[LegislationType] = LegislationType.REGULATION

SMALL_WORDS: Final[frozenset[str]] = frozenset(
    {
        "a", "an", "and", "at", "by", "etc", "etc.", "for", "from",
        "in", "of", "on", "or", "the", "to", "under", "with",
    }
)

_TOKEN = re.compile(r"[A-Za-z][A-Za-z0-9&]*")
_BARE_CODE = re.compile(r"^[A-Z][A-Z0-9&]{1,9}$")
_REPEATED_WORD = re.compile(r"\b(\w+)(?:\s+\1\b)+", re.IGNORECASE)


def classify_legislation_type(title: str) -> LegislationType:
    rule = first_match(LEGISLATION_TYPE_RULES, title)
    return rule.result if rule is not None else DEFAULT_LEGISLATION_TYPE


def title_case(text: str) -> str:
    """Title-case a legislation title, keeping joining words lowercase."""

    words: list[str] = []
    for index, word in enumerate(text.lower().split(" ")):
        if index > 0 and word in SMALL_WORDS:
            words.append(word)
            continue
        first_letter = next((i for i, char in enumerate(word) if char.isalpha()), None)
        if first_letter is None:
            words.append(word)
        else:
            head, rest = word[:first_letter], word[first_letter + 1 :]
            words.append(head + word[first_letter].upper() + rest)
    return " ".join(words)


class TitleCleaner:
    """Turns a raw citation title into its canonical spelling.

    Steps run in a fixed order and cleaning an already clean title returns it
    unchanged.
    """

    def __init__(self, tables: LegislationTables) -> None:
        self.tables = tables

    def clean(self, raw_title: str) -> str:
        title = collapse_whitespace(raw_title)
        if not title:
            return ""

        whole = self.tables.expand_abbreviation(title)
        if whole is not None:
            title = whole
        elif self._is_single_case(title):
            title = self._recase(title)

        title = self._expand_codes(title)
        for rewrite in self.tables.word_expansions:
            title = rewrite.pattern.sub(rewrite.replacement, title)
        title = collapse_whitespace(title.replace("&", " and "))
        for rewrite in self.tables.title_variants:
            title = rewrite.pattern.sub(rewrite.replacement, title)
        return collapse_whitespace(_REPEATED_WORD.sub(r"\1", title))

    def is_unresolved(self, cleaned_title: str) -> bool:
        """Whether cleaning left nothing usable: empty, or an unknown bare code."""

        return not cleaned_title or _BARE_CODE.match(cleaned_title) is not None

    def _is_single_case(self, title: str) -> bool:
        letters = [char for char in title if char.isalpha()]
        if not letters:
            return False
        upper = all(char.isupper() for char in letters)
        lower = all(char.islower() for char in letters)
        # A lone all-caps token is an abbreviation, not shouting.
        return lower or (upper and " " in title)

    def _recase(self, title: str) -> str:
        # Known codes survive re-casing so they can still be expanded.
        protected = {
            token for token in _TOKEN.findall(title) if self.tables.expand_abbreviation(token)
        }
        recased = title_case(title)
        for token in protected:
            recased = re.sub(rf"\b{re.escape(title_case(token))}\b", token.upper(), recased)
        return recased

    def _expand_codes(self, title: str) -> str:
        def _replace(match: re.Match[str]) -> str:
            token = match.group(0)
            if not token.isupper():
                return token
            return self.tables.expand_abbreviation(token) or token

        head, _, rest = title.partition(" ")
        expansion = self.tables.expand_abbreviation(head) if head.isupper() else None
        if expansion is None:
            return _TOKEN.sub(_replace, title)
        # "PPE at Work Regs": the words after a leading code often restate it
        if self._restates(rest, expansion):
            return expansion
        return f"{expansion} {_TOKEN.sub(_replace, rest)}"

    def _restates(self, rest: str, expansion: str) -> bool:
        for rewrite in self.tables.word_expansions:
            rest = rewrite.pattern.sub(rewrite.replacement, rest)
        known = {word.lower() for word in _TOKEN.findall(expansion)}
        return all(word.lower() in known for word in _TOKEN.findall(rest))
