# --------------------------------------------------
# ROOMMATE COMPATIBILITY
# --------------------------------------------------

# (profile attribute, points awarded on an exact match), applied in order.
# Sums to 80.
COMPATIBILITY_WEIGHTS = (
    ("sleep_schedule", 15),
    ("cleanliness", 15),
    ("noise", 10),
    ("social_level", 10),
    ("study_habits", 10),
    ("smoking", 10),
    ("pets", 10),
)

# Shared interest tags
INTEREST_POINTS_PER_MATCH = 3
INTEREST_POINTS_CAP = 15

# Reachable maximum is 80 + 15 = 95; the clamp only guards future weight changes.
MAX_COMPATIBILITY_SCORE = 100
