"""Budget and availability filtering for appliance recommendations."""

import pandas as pd

from ..utils.logging import get_logger

logger = get_logger(__name__)


def _price_series(df: pd.DataFrame) -> pd.Series:
    if 'price' not in df.columns:
        return pd.Series([0.0] * len(df), index=df.index, dtype="float64")
    return pd.to_numeric(df['price'], errors='coerce').fillna(0.0).astype(float)


def _available_series(df: pd.DataFrame) -> pd.Series:
    if 'available' not in df.columns:
        return pd.Series([False] * len(df), index=df.index, dtype=bool)
    return df['available'].eq(True)


def filter_by_budget(df: pd.DataFrame, budget: float) -> pd.DataFrame:
    """Keep rentable appliances whose daily price fits the budget.

    Catalog order is kept so ranking stays stable.
    """
    if df.empty:
        return df.copy()

    mask = (_price_series(df) <= float(budget)) & _available_series(df)
    filtered = df.loc[mask].copy()
    logger.debug(
        "Budget filter %.2f kept %d/%d appliances", float(budget), len(filtered), len(df)
    )
    return filtered
