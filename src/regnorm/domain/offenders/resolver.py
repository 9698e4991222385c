"""Offender entity resolution: match an incoming offender or create a new one."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from uuid import UUID

from regnorm.domain.errors import (
    DuplicateKeyError,
    EmptyOffenderNameError,
    MalformedProviderResponseError,
    TransientStoreError,
)
from regnorm.domain.model import (
    BusinessType,
    CreateNew,
    Matched,
    MatchKind,
    OffenderCandidate,
)
from regnorm.domain.offenders.scoring import DEFAULT_THRESHOLDS, MatchThresholds, score_candidate
from regnorm.domain.parsing import classify_business_type
from regnorm.domain.text import (
    collapse_whitespace,
    extract_postcode,
    normalize_address,
    normalize_company_name,
    normalize_postcode,
    postcode_key,
)

if TYPE_CHECKING:
    from regnorm.domain.model import MatchDecision, OffenderRecord
    from regnorm.domain.pipeline.locks import KeyedLocks
    from regnorm.domain.ports import OffenderPoolProvider, OffenderStore

log = logging.getLogger(__name__)


def make_candidate(
    raw_name: str | None,
    *,
    postcode: str | None = None,
    address: str | None = None,
    business_type: BusinessType | None = None,
) -> OffenderCandidate:
    """Build a candidate, normalizing its name and postcode.

    The postcode falls back to one found at the end of ``address``.
    """

    name = collapse_whitespace(raw_name or "")
    normalized_name = normalize_company_name(name)
    if not normalized_name:
        raise EmptyOffenderNameError(f"Offender name {raw_name!r} is empty once normalized")
    cleaned_address = normalize_address(address)
    return OffenderCandidate(
        raw_name=name,
        normalized_name=normalized_name,
        postcode=normalize_postcode(postcode) or extract_postcode(cleaned_address),
        address=cleaned_address,
        business_type=business_type or classify_business_type(name),
    )


class EntityResolver:
    """Decides whether a candidate is an offender the pool already knows.

    Exact ``(name, postcode)`` hits short-circuit; otherwise the pool provider's
    similar names are scored and the best one above the match threshold wins.
    Offenders whose postcodes are both known and differ are never matched.
    """

    def __init__(
        self,
        provider: OffenderPoolProvider,
        thresholds: MatchThresholds = DEFAULT_THRESHOLDS,
    ) -> None:
        self.provider = provider
        self.thresholds = thresholds

    def resolve(self, candidate: OffenderCandidate) -> MatchDecision:
        if not candidate.normalized_name.strip():
            raise EmptyOffenderNameError(f"Offender {candidate.raw_name!r} has no usable name")

        exact = self._exact_match(candidate)
        if exact is not None:
            return exact

        pool = self.provider.find_similar(
            candidate.normalized_name, self.thresholds.pool_similarity
        )
        scores = [
            score_candidate(candidate, _checked(record), self.thresholds) for record in pool
        ]
        accepted = [score for score in scores if score.score > self.thresholds.match]
        if not accepted:
            log.debug(
                "No match for %r among %d pooled offenders", candidate.normalized_name, len(pool)
            )
            return CreateNew(reason=f"no candidate above {self.thresholds.match}")

        accepted.sort(key=lambda score: score.ranking, reverse=True)
        best = accepted[0]
        log.debug(
            "Matched %r to %s (score %.3f, postcode match %s)",
            candidate.normalized_name,
            best.record.id,
            best.score,
            best.postcode_match,
        )
        return Matched(
            existing_id=best.record.id,
            score=best.score,
            match_kind=MatchKind.FUZZY,
            postcode_match=best.postcode_match,
        )

    def _exact_match(self, candidate: OffenderCandidate) -> Matched | None:
        if candidate.postcode is None:
            return None
        record = self.provider.find_exact(candidate.normalized_name, candidate.postcode)
        if record is None:
            return None
        _checked(record)
        if postcode_key(record.postcode) != postcode_key(candidate.postcode):
            return None
        return Matched(
            existing_id=record.id,
            score=1.0,
            match_kind=MatchKind.EXACT,
            postcode_match=True,
        )


def resolve_offender(
    candidate: OffenderCandidate,
    provider: OffenderPoolProvider,
    thresholds: MatchThresholds = DEFAULT_THRESHOLDS,
) -> MatchDecision:
    return EntityResolver(provider, thresholds).resolve(candidate)


def offender_lock_key(candidate: OffenderCandidate) -> tuple[object, ...]:
    return ("offender", candidate.normalized_name, postcode_key(candidate.postcode))


def find_or_create_offender(
    candidate: OffenderCandidate,
    store: OffenderStore,
    *,
    thresholds: MatchThresholds = DEFAULT_THRESHOLDS,
    locks: KeyedLocks | None = None,
) -> tuple[UUID, MatchDecision]:
    """Resolve ``candidate`` and create it when nothing matches.

    Returns the offender id together with the decision that produced it. An
    insert that loses a race for the same ``(name, postcode)`` re-reads the
    winner once.
    """

    if locks is None:
        return _find_or_create(candidate, store, thresholds)
    with locks.hold(offender_lock_key(candidate)):
        return _find_or_create(candidate, store, thresholds)


def _find_or_create(
    candidate: OffenderCandidate, store: OffenderStore, thresholds: MatchThresholds
) -> tuple[UUID, MatchDecision]:
    decision = EntityResolver(store, thresholds).resolve(candidate)
    if isinstance(decision, Matched):
        return decision.existing_id, decision

    try:
        created = _checked(store.create_offender(candidate))
    except DuplicateKeyError:
        log.info("Concurrent insert for offender %s, re-reading", candidate.key)
        winner = store.find_exact(candidate.normalized_name, candidate.postcode)
        if winner is None:
            raise TransientStoreError(
                f"Offender {candidate.key!r} collided on insert but cannot be read back"
            ) from None
        _checked(winner)
        return winner.id, Matched(
            existing_id=winner.id,
            score=1.0,
            match_kind=MatchKind.EXACT,
            postcode_match=candidate.postcode is not None,
        )
    log.debug("Created offender %s for %r", created.id, candidate.normalized_name)
    return created.id, decision


def _checked(record: OffenderRecord) -> OffenderRecord:
    if not isinstance(record.id, UUID):
        raise MalformedProviderResponseError(
            f"Offender provider returned {record.normalized_name!r} without an identifier"
        )
    return record
