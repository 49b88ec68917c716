from __future__ import annotations

from typing import Any, Iterable

from campuslease.core.match_config import (
    COMPATIBILITY_WEIGHTS,
    INTEREST_POINTS_CAP,
    INTEREST_POINTS_PER_MATCH,
    MAX_COMPATIBILITY_SCORE,
)


def shared_interests(a: Iterable[str] | None, b: Iterable[str] | None) -> set[str]:
    return set(a or ()) & set(b or ())


def calculate_compatibility(current: Any, candidate: Any) -> int:
    """
    Score two roommate profiles from 0 to 100.

    Each weighted lifestyle field adds its points when both profiles hold the
    exact same value (no partial credit between neighbouring answers, and a
    missing answer never matches). Shared interest tags add 3 points each, up
    to 15. Works on ORM rows and pydantic models alike.
    """
    score = 0

    for attr, weight in COMPATIBILITY_WEIGHTS:
        mine = getattr(current, attr, None)
        theirs = getattr(candidate, attr, None)
        if mine is not None and mine == theirs:
            score += weight

    overlap = shared_interests(
        getattr(current, "interests", None),
        getattr(candidate, "interests", None),
    )
    score += min(len(overlap) * INTEREST_POINTS_PER_MATCH, INTEREST_POINTS_CAP)

    return min(score, MAX_COMPATIBILITY_SCORE)
