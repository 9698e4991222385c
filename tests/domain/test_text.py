from __future__ import annotations

import pytest

from regnorm.domain.text import (
    extract_postcode,
    normalize_address,
    normalize_company_name,
    normalize_postcode,
    postcode_key,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("ACME Ltd.", "acme limited"),
        ("Acme LIMITED", "acme limited"),
        ("  acme   limited ", "acme limited"),
        ("British Gas P.L.C.", "british gas plc"),
        ("Smith & Jones", "smith and jones"),
        ("Smith-Jones Incorporated", "smith jones inc"),
        ("...", ""),
    ],
)
def test_normalize_company_name(raw: str, expected: str) -> None:
    assert normalize_company_name(raw) == expected


def test_normalize_company_name_is_idempotent() -> None:
    once = normalize_company_name("A.B. Builders (UK) Ltd")

    assert normalize_company_name(once) == once


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("sw1a1aa", "SW1A 1AA"),
        ("  m1 1ae ", "M1 1AE"),
        ("LS1  4AB", "LS1 4AB"),
        ("abc", "ABC"),
        ("", None),
        (None, None),
    ],
)
def test_normalize_postcode(raw: str | None, expected: str | None) -> None:
    assert normalize_postcode(raw) == expected


def test_postcode_key_ignores_spacing_and_case() -> None:
    assert postcode_key("sw1a 1aa") == postcode_key("SW1A1AA") == "SW1A1AA"
    assert postcode_key("  ") is None
    assert postcode_key(None) is None


@pytest.mark.parametrize(
    ("address", "expected"),
    [
        ("10 Downing Street, London SW1A 2AA", "SW1A 2AA"),
        ("Unit 5, Leeds ls14ab.", "LS1 4AB"),
        ("10 High Street, Leeds", None),
        (None, None),
    ],
)
def test_extract_postcode(address: str | None, expected: str | None) -> None:
    assert extract_postcode(address) == expected


def test_normalize_address() -> None:
    assert normalize_address(" 1 High St,,  Leeds , ") == "1 High St, Leeds"
    assert normalize_address("   ") is None
    assert normalize_address(None) is None
