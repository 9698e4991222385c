"""Offender matching thresholds, overridable from the environment."""

from __future__ import annotations

from regnorm.domain.offenders import (
    MATCH_THRESHOLD,
    POOL_SIMILARITY_THRESHOLD,
    POSTCODE_BOOST,
    POSTCODE_BOOST_GATE,
    MatchThresholds,
)

from .env import optional_float_env
from .errors import ConfigurationError


def get_match_thresholds() -> MatchThresholds:
    thresholds = MatchThresholds(
        pool_similarity=optional_float_env("REGNORM_POOL_THRESHOLD", POOL_SIMILARITY_THRESHOLD),
        postcode_boost_gate=optional_float_env(
            "REGNORM_POSTCODE_BOOST_GATE", POSTCODE_BOOST_GATE
        ),
        postcode_boost=optional_float_env("REGNORM_POSTCODE_BOOST", POSTCODE_BOOST),
        match=optional_float_env("REGNORM_MATCH_THRESHOLD", MATCH_THRESHOLD),
    )
    for name in ("pool_similarity", "postcode_boost_gate", "postcode_boost", "match"):
        value = getattr(thresholds, name)
        if not 0.0 <= value <= 1.0:
            raise ConfigurationError(f"Match threshold {name} must be within [0, 1], got {value}")
    return thresholds
