"""Enforcement action labels."""

from __future__ import annotations

from typing import Final

OTHER_ACTION: Final[str] = "Other"

_CANONICAL_ACTIONS: Final[dict[str, str]] = {
    "court case": "Court Case",
    "prosecution": "Court Case",
    "improvement notice": "Improvement Notice",
    "prohibition notice": "Prohibition Notice",
    "formal caution": "Formal Caution",
    "enforcement notice": "Enforcement Notice",
    "warning letter": "Warning Letter",
}


def normalize_action_type(raw: str | None) -> str:
    if raw is None or not raw.strip():
        return OTHER_ACTION
    cleaned = " ".join(raw.split())
    for marker, label in _CANONICAL_ACTIONS.items():
        if marker in cleaned.lower():
            return label
    return cleaned.title()
