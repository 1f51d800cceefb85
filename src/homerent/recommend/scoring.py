"""Heuristic appliance scoring against a rental budget."""

from typing import Any, Dict, Iterable, Mapping, Tuple

import numpy as np

from ..config.rules import ESSENTIAL_KEYWORDS, POPULAR_KEYWORDS
from ..config.scoring_constants import (
    DISTANCE_WEIGHT,
    ESSENTIAL_BONUS,
    POPULAR_BONUS,
    RATIO_BANDS,
)


def _safe_num(value, default=0.0) -> float:
    """Return value as float, or ``default`` when missing/invalid."""
    try:
        if value is None:
            return default
        number = float(value)
    except (TypeError, ValueError):
        return default
    if np.isnan(number):
        return default
    return number


def _matches_any(name: str, keywords: Iterable[str]) -> bool:
    return any(k in name for k in keywords)


def ratio_band(ratio: float) -> Tuple[str, float]:
    """Return (label, bonus) of the single band ``ratio`` falls into."""
    for label, low, high, bonus in RATIO_BANDS:
        if (low is None or ratio > low) and ratio <= high:
            return label, bonus
    # price > budget never reaches scoring; treat it as no bonus
    return 'over_budget', 0.0


def distance_score(price: float, budget: float) -> float:
    """1.0 when the price equals the budget, falling linearly to 0 at price 0."""
    return 1 - (abs(budget - price) / budget)


def score_appliance(row: Mapping[str, Any], budget: float) -> Tuple[float, Dict[str, Any]]:
    """Score one appliance; returns (score, breakdown)."""
    name = str(row.get('name') or '').lower()
    price = _safe_num(row.get('price'))
    breakdown: Dict[str, Any] = {}
    score = 0.0

    # 1) Essential appliances always get a boost
    if _matches_any(name, ESSENTIAL_KEYWORDS):
        score += ESSENTIAL_BONUS
        breakdown['essential'] = ESSENTIAL_BONUS

    # 2) Popular / common appliances
    if _matches_any(name, POPULAR_KEYWORDS):
        score += POPULAR_BONUS
        breakdown['popular'] = POPULAR_BONUS

    # 3) Budget usage band
    ratio = price / budget
    band, bonus = ratio_band(ratio)
    score += bonus
    breakdown['ratio'] = round(ratio, 4)
    breakdown['ratio_band'] = band
    breakdown['ratio_bonus'] = bonus

    # 4) Closeness to budget (never over it)
    closeness = distance_score(price, budget) * DISTANCE_WEIGHT
    score += closeness
    breakdown['distance'] = round(closeness, 4)

    return score, breakdown
