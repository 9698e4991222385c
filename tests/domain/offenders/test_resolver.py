from __future__ import annotations

from typing import TYPE_CHECKING, cast

import pytest

from regnorm.adapters.memory import InMemoryOffenderStore
from regnorm.domain.errors import (
    DuplicateKeyError,
    EmptyOffenderNameError,
    MalformedProviderResponseError,
    TransientStoreError,
)
from regnorm.domain.model import (
    BusinessType,
    CreateNew,
    DecisionStatus,
    Matched,
    MatchKind,
    OffenderCandidate,
    OffenderRecord,
)
from regnorm.domain.offenders import (
    EntityResolver,
    MatchThresholds,
    find_or_create_offender,
    make_candidate,
    resolve_offender,
)
from regnorm.domain.pipeline import KeyedLocks
from tests.helpers.offenders import StaticPool, make_offender

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID


class PoolMustNotBeQueried(StaticPool):
    def find_similar(self, normalized_name: str, threshold: float) -> Sequence[OffenderRecord]:
        pytest.fail("exact match should short-circuit the pool query")


class RacingOffenderStore(InMemoryOffenderStore):
    def create_offender(self, candidate: OffenderCandidate) -> OffenderRecord:
        super().create_offender(candidate)
        raise DuplicateKeyError(candidate.key)


class VanishingOffenderStore(InMemoryOffenderStore):
    def create_offender(self, candidate: OffenderCandidate) -> OffenderRecord:
        raise DuplicateKeyError(candidate.key)


def test_make_candidate_normalizes_inputs() -> None:
    candidate = make_candidate(
        "  ACME   Construction Ltd ", address="1 High Street,, London sw1a1aa"
    )

    assert candidate.raw_name == "ACME Construction Ltd"
    assert candidate.normalized_name == "acme construction limited"
    assert candidate.postcode == "SW1A 1AA"
    assert candidate.address == "1 High Street, London sw1a1aa"
    assert candidate.business_type == BusinessType.LIMITED_COMPANY


def test_explicit_postcode_wins_over_address() -> None:
    candidate = make_candidate("Acme Ltd", postcode="m1 1ae", address="London SW1A 1AA")

    assert candidate.postcode == "M1 1AE"


@pytest.mark.parametrize("name", [None, "", "   ", "..."])
def test_make_candidate_rejects_empty_names(name: str | None) -> None:
    with pytest.raises(EmptyOffenderNameError, match="empty"):
        make_candidate(name)


def test_resolver_rejects_empty_candidate() -> None:
    resolver = EntityResolver(StaticPool([]))

    with pytest.raises(EmptyOffenderNameError):
        resolver.resolve(OffenderCandidate(raw_name="", normalized_name="  "))


def test_exact_match_short_circuits_pool() -> None:
    existing = make_offender("Acme Ltd", postcode="SW1A 1AA")
    provider = PoolMustNotBeQueried([existing])

    decision = resolve_offender(make_candidate("ACME LIMITED", postcode="sw1a 1aa"), provider)

    assert decision == Matched(
        existing_id=existing.id, score=1.0, match_kind=MatchKind.EXACT, postcode_match=True
    )


def test_typo_with_same_postcode_matches() -> None:
    existing = make_offender("Acme Construction Limited", postcode="SW1A 1AA")

    decision = resolve_offender(
        make_candidate("Acme Constrution Ltd", postcode="SW1A 1AA"), StaticPool([existing])
    )

    assert isinstance(decision, Matched)
    assert decision.existing_id == existing.id
    assert decision.match_kind == MatchKind.FUZZY
    assert decision.postcode_match
    assert decision.score > 0.95


def test_suffix_variant_without_postcode_matches() -> None:
    existing = make_offender("Smith Construction Limited")

    decision = resolve_offender(
        make_candidate("Smith Construction Ltd"), StaticPool([existing])
    )

    assert isinstance(decision, Matched)
    assert decision.existing_id == existing.id
    assert decision.score > 0.7
    assert not decision.postcode_match


def test_identical_names_with_different_postcodes_create_new() -> None:
    existing = make_offender("Acme Ltd", postcode="M1 1AE")

    decision = resolve_offender(
        make_candidate("Acme Ltd", postcode="SW1A 1AA"), StaticPool([existing])
    )

    assert isinstance(decision, CreateNew)
    assert decision.status == DecisionStatus.CREATE_NEW


def test_unrelated_names_create_new() -> None:
    pool = StaticPool([make_offender("Zenith Holdings PLC")])

    decision = resolve_offender(make_candidate("Acme Ltd"), pool)

    assert isinstance(decision, CreateNew)


def test_tie_prefers_postcode_corroborated_candidate() -> None:
    unplaced = make_offender("Acme Ltd")
    placed = make_offender("Acme Ltd", postcode="SW1A 1AA")
    pool = StaticPool([unplaced, placed], exact=False)

    decision = resolve_offender(make_candidate("Acme Ltd", postcode="SW1A 1AA"), pool)

    assert isinstance(decision, Matched)
    assert decision.existing_id == placed.id
    assert decision.postcode_match


def test_pool_is_queried_with_configured_threshold() -> None:
    pool = StaticPool([])
    thresholds = MatchThresholds(pool_similarity=0.45)

    resolve_offender(make_candidate("Acme Ltd"), pool, thresholds)

    assert pool.similar_calls == [("acme limited", 0.45)]


def test_match_threshold_is_configurable() -> None:
    existing = make_offender("Acme Construction Limited", postcode="SW1A 1AA")
    strict = MatchThresholds(match=0.999)

    decision = resolve_offender(
        make_candidate("Acme Constrution Ltd", postcode="SW1A 1AA"),
        StaticPool([existing]),
        strict,
    )

    assert isinstance(decision, CreateNew)


def test_resolution_is_idempotent() -> None:
    pool = StaticPool(
        [
            make_offender("Acme Construction Limited", postcode="SW1A 1AA"),
            make_offender("Acme Builders Limited"),
        ]
    )
    candidate = make_candidate("Acme Constrution Ltd", postcode="SW1A 1AA")

    assert resolve_offender(candidate, pool) == resolve_offender(candidate, pool)


def test_pool_records_without_id_are_rejected() -> None:
    broken = OffenderRecord(
        id=cast("UUID", None), raw_name="Acme Ltd", normalized_name="acme limited"
    )

    with pytest.raises(MalformedProviderResponseError, match="without an identifier"):
        resolve_offender(make_candidate("Acme Ltd"), StaticPool([broken]))


def test_find_or_create_creates_then_reuses(offender_store: InMemoryOffenderStore) -> None:
    candidate = make_candidate("Acme Ltd", postcode="SW1A 1AA")

    first_id, first = find_or_create_offender(candidate, offender_store)
    second_id, second = find_or_create_offender(candidate, offender_store)

    assert isinstance(first, CreateNew)
    assert second == Matched(
        existing_id=first_id, score=1.0, match_kind=MatchKind.EXACT, postcode_match=True
    )
    assert second_id == first_id
    assert len(offender_store.all()) == 1


def test_find_or_create_without_postcode_matches_fuzzily(
    offender_store: InMemoryOffenderStore,
) -> None:
    first_id, _ = find_or_create_offender(make_candidate("Acme Ltd"), offender_store)
    second_id, decision = find_or_create_offender(
        make_candidate("ACME LIMITED"), offender_store, locks=KeyedLocks()
    )

    assert second_id == first_id
    assert isinstance(decision, Matched)
    assert decision.match_kind == MatchKind.FUZZY
    assert len(offender_store.all()) == 1


def test_find_or_create_recovers_from_lost_race() -> None:
    store = RacingOffenderStore()

    offender_id, decision = find_or_create_offender(
        make_candidate("Acme Ltd", postcode="SW1A 1AA"), store
    )

    [winner] = store.all()
    assert offender_id == winner.id
    assert isinstance(decision, Matched)
    assert decision.match_kind == MatchKind.EXACT


def test_find_or_create_unreadable_collision_is_transient() -> None:
    with pytest.raises(TransientStoreError, match="cannot be read back"):
        find_or_create_offender(make_candidate("Acme Ltd"), VanishingOffenderStore())
