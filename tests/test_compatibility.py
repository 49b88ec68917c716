import itertools
from types import SimpleNamespace

import pytest

from campuslease.core.match_config import COMPATIBILITY_WEIGHTS
from campuslease.services.compatibility import calculate_compatibility, shared_interests


def make_profile(**overrides):
    fields = {
        "sleep_schedule": "Early Bird",
        "cleanliness": "Very Clean",
        "noise": "Quiet",
        "social_level": "Low-key",
        "study_habits": "Focused",
        "smoking": "No",
        "pets": "No Pets",
        "interests": ["hiking", "coffee", "gaming", "cooking", "film", "yoga"],
    }
    fields.update(overrides)
    return SimpleNamespace(**fields)


OPPOSITE = {
    "sleep_schedule": "Night Owl",
    "cleanliness": "Relaxed",
    "noise": "Lively",
    "social_level": "Very Social",
    "study_habits": "Flexible",
    "smoking": "Yes",
    "pets": "Has Pets",
    "interests": ["chess"],
}


class TestScenarios:
    def test_identical_profiles_reach_95(self):
        a = make_profile()
        b = make_profile()
        assert calculate_compatibility(a, b) == 95

    def test_all_fields_and_exactly_five_shared_interests(self):
        a = make_profile(interests=["hiking", "coffee", "gaming", "cooking", "film", "art"])
        b = make_profile(interests=["hiking", "coffee", "gaming", "cooking", "film", "yoga"])
        assert len(shared_interests(a.interests, b.interests)) == 5
        assert calculate_compatibility(a, b) == 95

    def test_nothing_in_common_is_zero(self):
        a = make_profile()
        b = make_profile(**OPPOSITE)
        assert calculate_compatibility(a, b) == 0

    def test_partial_match(self):
        # sleep 15 + cleanliness 15 + two shared interests 6
        a = make_profile(interests=["hiking", "coffee", "art"])
        b = make_profile(
            noise="Lively",
            social_level="Very Social",
            study_habits="Flexible",
            smoking="Yes",
            pets="Open to Pets",
            interests=["hiking", "coffee", "running"],
        )
        assert calculate_compatibility(a, b) == 36

    @pytest.mark.parametrize("attr,weight", COMPATIBILITY_WEIGHTS)
    def test_each_field_contributes_its_weight(self, attr, weight):
        a = make_profile(interests=[])
        b_fields = dict(OPPOSITE, interests=[])
        b_fields[attr] = getattr(a, attr)
        b = make_profile(**b_fields)
        assert calculate_compatibility(a, b) == weight

    def test_weights_sum_to_80(self):
        assert sum(weight for _, weight in COMPATIBILITY_WEIGHTS) == 80

    def test_matching_is_case_sensitive(self):
        a = make_profile(interests=[])
        b = make_profile(**dict(OPPOSITE, sleep_schedule="early bird", interests=[]))
        assert calculate_compatibility(a, b) == 0

    def test_missing_values_never_match(self):
        a = make_profile(sleep_schedule=None, interests=None)
        b = make_profile(sleep_schedule=None, interests=None)
        assert calculate_compatibility(a, b) == 80 - 15


class TestInterests:
    @pytest.mark.parametrize(
        "shared,points",
        [(0, 0), (1, 3), (2, 6), (4, 12), (5, 15), (6, 15), (10, 15)],
    )
    def test_interest_points_are_capped(self, shared, points):
        tags = [f"tag{i}" for i in range(shared)]
        a = make_profile(**dict(OPPOSITE, interests=tags + ["only-a"]))
        b = make_profile(interests=tags + ["only-b"])
        assert calculate_compatibility(a, b) == points

    def test_duplicate_tags_count_once(self):
        assert shared_interests(["a", "a", "b"], ["a", "b", "b"]) == {"a", "b"}

    def test_none_is_empty(self):
        assert shared_interests(None, ["a"]) == set()


SLEEP = ("Early Bird", "Night Owl", "Flexible")
CLEAN = ("Very Clean", "Relaxed")
PETS = ("No Pets", "Open to Pets")
TAGS = ((), ("hiking",), ("hiking", "coffee", "film", "yoga", "chess", "art"))

VARIANTS = [
    make_profile(sleep_schedule=s, cleanliness=c, pets=p, interests=list(t))
    for s, c, p, t in itertools.product(SLEEP, CLEAN, PETS, TAGS)
]
PAIRS = list(itertools.product(VARIANTS[::5], VARIANTS[::7]))


class TestProperties:
    @pytest.mark.parametrize("a,b", PAIRS)
    def test_symmetric(self, a, b):
        assert calculate_compatibility(a, b) == calculate_compatibility(b, a)

    @pytest.mark.parametrize("a,b", PAIRS)
    def test_bounded(self, a, b):
        score = calculate_compatibility(a, b)
        assert isinstance(score, int)
        assert 0 <= score <= 100

    @pytest.mark.parametrize("a,b", PAIRS[:10])
    def test_deterministic(self, a, b):
        scores = {calculate_compatibility(a, b) for _ in range(5)}
        assert len(scores) == 1

    def test_never_exceeds_95_with_current_weights(self):
        assert max(calculate_compatibility(a, b) for a, b in PAIRS) <= 95
