import math
import re
from decimal import Decimal
from typing import Any, Iterable, Mapping, Union

import pandas as pd

CATALOG_COLUMNS = ['id', 'name', 'price', 'details', 'available', 'imgUrl']

_LEADING_NUMBER = re.compile(r'^\s*([-+]?\d+(?:\.\d+)?)')
_TRUE_STRINGS = {'true', '1', 'yes', 'y', 'available', 'on'}


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def clean_price(value: Any) -> Union[int, float, Decimal]:
    """Coerce a price to a number; anything non-numeric becomes 0.

    Strings keep their leading number ("45 OMR" -> 45, "12.5/day" -> 12.5).
    Numeric input is returned unchanged so no rounding is introduced.
    """
    if _is_missing(value) or isinstance(value, bool):
        return 0
    if isinstance(value, (int, float, Decimal)):
        return value
    match = _LEADING_NUMBER.match(str(value))
    if not match:
        return 0
    text = match.group(1)
    return float(text) if '.' in text else int(text)


def clean_available(value: Any) -> bool:
    if _is_missing(value):
        return False
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return bool(value)


def clean_text(value: Any) -> str:
    if _is_missing(value):
        return ''
    return str(value).strip()


def clean_record(record: Mapping[str, Any]) -> dict:
    """Normalize one appliance document from the backend."""
    out = dict(record)
    raw_id = record.get('id', record.get('_id'))
    out['id'] = clean_text(raw_id)
    out['name'] = clean_text(record.get('name'))
    out['price'] = clean_price(record.get('price'))
    out['details'] = clean_text(record.get('details'))
    out['available'] = clean_available(record.get('available'))
    out['imgUrl'] = clean_text(record.get('imgUrl')) or None
    return out


def clean_catalog(catalog: Union[pd.DataFrame, Iterable[Mapping[str, Any]], None]) -> pd.DataFrame:
    """Return a catalog DataFrame with the typed columns the engine expects.

    Row order is preserved; it is the tie-breaker when ranking.
    """
    if catalog is None:
        return pd.DataFrame(columns=CATALOG_COLUMNS)
    if isinstance(catalog, pd.DataFrame):
        records = catalog.to_dict(orient='records')
    else:
        records = list(catalog)

    if not records:
        return pd.DataFrame(columns=CATALOG_COLUMNS)

    df = pd.DataFrame([clean_record(r) for r in records])
    ordered = CATALOG_COLUMNS + [c for c in df.columns if c not in CATALOG_COLUMNS]
    return df[ordered].reset_index(drop=True)
