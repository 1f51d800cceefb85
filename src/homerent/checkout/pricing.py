"""Rental pricing: daily price x duration, plus the flat insurance deposit."""

import math
import re
from dataclasses import asdict, dataclass
from decimal import Decimal
from typing import Any, Union

from ..config.scoring_constants import INSURANCE_DEPOSIT, MIN_RENTAL_DAYS
from ..processing.clean import clean_price

Number = Union[int, float, Decimal]

_LEADING_INT = re.compile(r'^\s*([-+]?\d+)')


@dataclass(frozen=True)
class RentalTotals:
    rental_amount: Number
    insurance_deposit: Number
    final_amount: Number

    def to_dict(self) -> dict:
        return asdict(self)


def clamp_days(days: Any) -> int:
    """Coerce a duration to a whole number of at least 1.

    Blank, non-numeric, NaN, zero and negative input all become 1;
    fractional input keeps its integer part.
    """
    if days is None or isinstance(days, bool):
        return MIN_RENTAL_DAYS
    if isinstance(days, (int, float, Decimal)):
        try:
            if math.isnan(days) or math.isinf(days):
                return MIN_RENTAL_DAYS
        except TypeError:
            return MIN_RENTAL_DAYS
        value = int(days)
    else:
        match = _LEADING_INT.match(str(days))
        if not match:
            return MIN_RENTAL_DAYS
        value = int(match.group(1))
    return value if value >= MIN_RENTAL_DAYS else MIN_RENTAL_DAYS


def clean_daily_price(price: Any) -> Number:
    """Missing or negative prices degrade to 0 instead of failing."""
    value = clean_price(price)
    try:
        if value < 0:
            return 0
    except TypeError:
        return 0
    return value


def insurance_deposit_for(price: Number) -> Number:
    return Decimal(INSURANCE_DEPOSIT) if isinstance(price, Decimal) else INSURANCE_DEPOSIT


def compute_totals(price_per_day: Any, days: Any) -> RentalTotals:
    """Return rental amount, deposit and final amount for ``days`` at ``price_per_day``.

    No rounding is applied; pass ``Decimal`` prices for exact money arithmetic.
    """
    price = clean_daily_price(price_per_day)
    duration = clamp_days(days)
    rental_amount = price * duration
    deposit = insurance_deposit_for(price)
    return RentalTotals(
        rental_amount=rental_amount,
        insurance_deposit=deposit,
        final_amount=rental_amount + deposit,
    )
