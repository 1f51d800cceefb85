"""Input masks and display formatting for checkout forms and price labels."""

import re
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional, Union

from ..config.settings import CURRENCY
from .clean import clean_price

CARD_DIGITS = 16
EXPIRY_DIGITS = 4

_NON_DIGIT = re.compile(r'\D')
_PHONE_GROUPS = re.compile(r'(\d{3})(\d{3})(\d{3})')


def digits_only(value: Any) -> str:
    return _NON_DIGIT.sub('', str(value or ''))


def format_card_number(value: Any) -> str:
    """'4111111111111111' -> '4111 1111 1111 1111' (at most 16 digits kept)."""
    digits = digits_only(value)[:CARD_DIGITS]
    return ' '.join(digits[i:i + 4] for i in range(0, len(digits), 4))


def format_expiry_date(value: Any) -> str:
    """'1227' -> '12/27'; fewer than two digits are returned as typed."""
    digits = digits_only(value)[:EXPIRY_DIGITS]
    if len(digits) >= 2:
        return f"{digits[:2]}/{digits[2:]}"
    return digits


def format_phone(value: Any) -> str:
    """Group a local number as 'XXX XXX XXX' once more than three digits are typed."""
    digits = digits_only(value)
    if len(digits) > 3:
        return _PHONE_GROUPS.sub(r'\1 \2 \3', digits, count=1)
    return digits


def format_zip_code(value: Any) -> str:
    return re.sub(r'[^0-9A-Z]', '', str(value or '').upper())


def format_amount(value: Union[int, float, Decimal, None]) -> str:
    if value is None:
        return '0'
    if isinstance(value, Decimal):
        return format(value.normalize(), 'f') if value == value.to_integral() else str(value)
    number = float(value)
    if number.is_integer():
        return str(int(number))
    return str(round(number, 2))


def format_price(value: Any, currency: str = CURRENCY) -> str:
    """Price label as shown on catalog cards: '45 OMR'. Empty when there is no price."""
    if value is None or value == '' or value == 0:
        return ''
    text = str(value).strip()
    if currency.upper() in text.upper():
        return text
    return f"{format_amount(clean_price(value))} {currency}"


def parse_date(value: Any) -> Optional[date]:
    """Accept a date, datetime or 'YYYY-MM-DD' string; None when unparseable."""
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(str(value).strip()[:10], '%Y-%m-%d').date()
    except ValueError:
        return None


def format_display_date(value: Any) -> str:
    """'2025-01-15' -> 'Wednesday, January 15, 2025'."""
    parsed = parse_date(value)
    if parsed is None:
        return ''
    return f"{parsed.strftime('%A, %B')} {parsed.day}, {parsed.year}"
