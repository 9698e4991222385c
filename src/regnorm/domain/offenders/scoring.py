"""Pairwise similarity scoring between an offender candidate and stored offenders.

Thresholds live in ``MatchThresholds`` so they can be tuned independently;
the module constants are the defaults.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from rapidfuzz.distance import JaroWinkler

from regnorm.domain.text import name_tokens, postcode_key

if TYPE_CHECKING:
    from regnorm.domain.model import OffenderCandidate, OffenderRecord

POOL_SIMILARITY_THRESHOLD: Final[float] = 0.3
POSTCODE_BOOST_GATE: Final[float] = 0.6
POSTCODE_BOOST: Final[float] = 0.15
MATCH_THRESHOLD: Final[float] = 0.7

TOKEN_WEIGHT: Final[float] = 0.3
EDIT_WEIGHT: Final[float] = 0.7


@dataclass(frozen=True, slots=True, kw_only=True)
class MatchThresholds:
    pool_similarity: float = POOL_SIMILARITY_THRESHOLD
    postcode_boost_gate: float = POSTCODE_BOOST_GATE
    postcode_boost: float = POSTCODE_BOOST
    match: float = MATCH_THRESHOLD
    token_weight: float = TOKEN_WEIGHT
    edit_weight: float = EDIT_WEIGHT


DEFAULT_THRESHOLDS: Final[MatchThresholds] = MatchThresholds()


@dataclass(frozen=True, slots=True)
class CandidateScore:
    record: OffenderRecord
    score: float
    base: float
    postcode_match: bool
    postcode_conflict: bool

    @property
    def ranking(self) -> tuple[float, bool]:
        return (self.score, self.postcode_match)


def jaccard_similarity(left: str, right: str) -> float:
    """Word-set intersection over union."""

    left_tokens = name_tokens(left)
    right_tokens = name_tokens(right)
    if not left_tokens and not right_tokens:
        return 1.0
    return len(left_tokens & right_tokens) / len(left_tokens | right_tokens)


def name_similarity(
    left: str, right: str, thresholds: MatchThresholds = DEFAULT_THRESHOLDS
) -> float:
    """Blend of token overlap and Jaro-Winkler similarity of two normalized names."""

    if left == right:
        return 1.0
    token_score = jaccard_similarity(left, right)
    edit_score = JaroWinkler.normalized_similarity(left, right)
    blended = thresholds.token_weight * token_score + thresholds.edit_weight * edit_score
    return min(blended, 1.0)


def score_candidate(
    candidate: OffenderCandidate,
    record: OffenderRecord,
    thresholds: MatchThresholds = DEFAULT_THRESHOLDS,
) -> CandidateScore:
    base = name_similarity(candidate.normalized_name, record.normalized_name, thresholds)
    candidate_postcode = postcode_key(candidate.postcode)
    record_postcode = postcode_key(record.postcode)

    if candidate_postcode is None or record_postcode is None:
        return CandidateScore(record, base, base, postcode_match=False, postcode_conflict=False)
    if candidate_postcode != record_postcode:
        return CandidateScore(record, 0.0, base, postcode_match=False, postcode_conflict=True)

    score = base
    if base > thresholds.postcode_boost_gate:
        score = min(base + thresholds.postcode_boost, 1.0)
    return CandidateScore(record, score, base, postcode_match=True, postcode_conflict=False)


def trigram_similarity(left: str, right: str) -> float:
    """Trigram overlap of two names, as used to pre-select the scoring pool.

    Each word is padded with two leading blanks and one trailing blank before
    trigrams are taken, mirroring PostgreSQL's ``pg_trgm``.
    """

    left_trigrams = _trigrams(left)
    right_trigrams = _trigrams(right)
    if not left_trigrams or not right_trigrams:
        return 0.0
    shared = len(left_trigrams & right_trigrams)
    return shared / len(left_trigrams | right_trigrams)


def _trigrams(value: str) -> set[str]:
    trigrams: set[str] = set()
    for word in value.lower().split():
        padded = f"  {word} "
        trigrams.update(padded[index : index + 3] for index in range(len(padded) - 2))
    return trigrams
