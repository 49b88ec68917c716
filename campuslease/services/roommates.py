from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from campuslease.models.roommate import RoommateProfile
from campuslease.services.compatibility import calculate_compatibility


@dataclass
class RoommateFilters:
    min_score: int = 0
    gender: Optional[str] = None
    university: Optional[str] = None
    max_budget: Optional[int] = None
    pets: Optional[str] = None
    smoking: Optional[str] = None


def score_profile(
    current: Optional[RoommateProfile], candidate: RoommateProfile
) -> Optional[int]:
    if current is None:
        return None
    return calculate_compatibility(current, candidate)


def _matches(
    profile: RoommateProfile, score: Optional[int], filters: RoommateFilters
) -> bool:
    if filters.gender and profile.gender != filters.gender:
        return False
    if filters.university and filters.university.lower() not in profile.university.lower():
        return False
    if filters.max_budget is not None and profile.budget_max > filters.max_budget:
        return False
    if filters.pets and profile.pets != filters.pets:
        return False
    if filters.smoking and profile.smoking != filters.smoking:
        return False
    # without a profile of their own the caller sees everything unscored
    if score is not None and score < filters.min_score:
        return False
    return True


def rank_profiles(
    current: Optional[RoommateProfile],
    candidates: Iterable[RoommateProfile],
    filters: RoommateFilters,
) -> List[Tuple[RoommateProfile, Optional[int]]]:
    """
    Score every candidate against ``current``, drop the ones the filters
    reject and return (profile, score) pairs, best match first. Ties keep
    the input order.
    """
    ranked = []
    for candidate in candidates:
        score = score_profile(current, candidate)
        if _matches(candidate, score, filters):
            ranked.append((candidate, score))

    ranked.sort(key=lambda pair: pair[1] or 0, reverse=True)
    return ranked
