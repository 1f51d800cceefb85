"""Recommendation engine: orchestrates filtering, scoring and ranking.

Submodules:
  - filtering: filter_by_budget
  - scoring: score_appliance, ratio_band, distance_score
"""

from typing import Any, Iterable, List, Mapping, Union

import pandas as pd

from ..config.scoring_constants import TOP_N
from ..processing.clean import CATALOG_COLUMNS, clean_catalog
from ..processing.validate import validate_budget
from ..utils.logging import get_logger
from .filtering import filter_by_budget
from .scoring import score_appliance, ratio_band, distance_score  # noqa: F401

logger = get_logger(__name__)

Catalog = Union[pd.DataFrame, Iterable[Mapping[str, Any]]]


def _empty_result() -> pd.DataFrame:
    return pd.DataFrame(columns=CATALOG_COLUMNS + ['score', 'score_breakdown'])


def get_recommendations(df: pd.DataFrame, budget: float, top_n: int = TOP_N) -> pd.DataFrame:
    """Rank a cleaned catalog DataFrame for ``budget`` (already validated, > 0)."""
    # 1) Budget + availability
    filtered = filter_by_budget(df, budget)
    if filtered.empty:
        logger.info("No available appliances within budget %.2f", budget)
        return _empty_result()

    # 2) Scoring
    scores, breakdowns = [], []
    for _, row in filtered.iterrows():
        score, breakdown = score_appliance(row, budget)
        scores.append(score)
        breakdowns.append(breakdown)
    filtered['score'] = scores
    filtered['score_breakdown'] = breakdowns

    # 3) Ranking; stable so catalog order breaks ties
    ranked = filtered.sort_values(by='score', ascending=False, kind='stable')

    # 4) Top-N
    result_df = ranked.head(top_n).reset_index(drop=True)

    # 5) Metadata
    result_df.attrs['budget'] = budget
    result_df.attrs['avg_score'] = float(result_df['score'].mean())
    prices = pd.to_numeric(result_df['price'], errors='coerce')
    result_df.attrs['price_range'] = (float(prices.min()), float(prices.max()))
    logger.info(
        "Recommended %d of %d candidates for budget %.2f", len(result_df), len(filtered), budget
    )
    return result_df


def recommend(budget: Any, catalog: Catalog, top_n: int = TOP_N) -> List[dict]:
    """Validate ``budget`` and return up to ``top_n`` scored appliances, best first.

    Raises BudgetValidationError for an empty, non-numeric or non-positive
    budget; an empty catalog or no match is just an empty list.
    """
    budget_amount = validate_budget(budget)
    df = clean_catalog(catalog)
    if df.empty:
        return []
    result_df = get_recommendations(df, budget_amount, top_n=top_n)
    return result_df.to_dict(orient='records')
