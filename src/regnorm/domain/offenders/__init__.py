"""Offender name normalization, scoring and resolution."""

from __future__ import annotations

from regnorm.domain.offenders.resolver import (
    EntityResolver,
    find_or_create_offender,
    make_candidate,
    offender_lock_key,
    resolve_offender,
)
from regnorm.domain.offenders.scoring import (
    DEFAULT_THRESHOLDS,
    EDIT_WEIGHT,
    MATCH_THRESHOLD,
    POOL_SIMILARITY_THRESHOLD,
    POSTCODE_BOOST,
    POSTCODE_BOOST_GATE,
    TOKEN_WEIGHT,
    CandidateScore,
    MatchThresholds,
    jaccard_similarity,
    name_similarity,
    score_candidate,
    trigram_similarity,
)

__all__ = [
    "DEFAULT_THRESHOLDS",
    "EDIT_WEIGHT",
    "MATCH_THRESHOLD",
    "POOL_SIMILARITY_THRESHOLD",
    "POSTCODE_BOOST",
    "POSTCODE_BOOST_GATE",
    "TOKEN_WEIGHT",
    "CandidateScore",
    "EntityResolver",
    "MatchThresholds",
    "find_or_create_offender",
    "jaccard_similarity",
    "make_candidate",
    "name_similarity",
    "offender_lock_key",
    "resolve_offender",
    "score_candidate",
    "trigram_similarity",
]
