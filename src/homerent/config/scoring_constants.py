"""
Scoring and pricing constants.

Every number the recommendation scorer and the pricing engine rely on lives
here so it can be tuned and tested from one place.
"""

# ── Keyword bonuses ──────────────────────────────────────────────────
ESSENTIAL_BONUS = 3.0           # refrigerator, washing machine, ...
POPULAR_BONUS = 2.0             # vacuum, fan, heater, ...

# ── Budget ratio bands (price / budget) ─────────────────────────────
# (label, lower exclusive, upper inclusive, bonus); None means unbounded.
RATIO_BANDS = [
    ("high_value", 0.7, 1.0, 2.0),          # uses most of the budget
    ("good_value", 0.3, 0.7, 1.5),
    ("budget_friendly", None, 0.3, 1.0),
]

# ── Closeness to budget ─────────────────────────────────────────────
DISTANCE_WEIGHT = 0.5           # (1 - |budget - price| / budget) * weight

# ── Ranking ─────────────────────────────────────────────────────────
TOP_N = 12

# ── Pricing ─────────────────────────────────────────────────────────
INSURANCE_DEPOSIT = 20          # flat, added to every rental
MIN_RENTAL_DAYS = 1
DAYS_TO_CALENDAR_DAYS = 7       # one rental "day" unit spans a week on the calendar
MAX_START_DATE_DAYS_AHEAD = 365
