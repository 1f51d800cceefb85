"""Unit tests for homerent.processing.normalize: input masks and labels."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from homerent.processing.normalize import (
    digits_only,
    format_amount,
    format_card_number,
    format_display_date,
    format_expiry_date,
    format_phone,
    format_price,
    format_zip_code,
    parse_date,
)


class TestCardMasks:
    def test_card_number_groups(self):
        assert format_card_number("4111111111111111") == "4111 1111 1111 1111"

    def test_card_number_strips_and_truncates(self):
        assert format_card_number("4111-1111-1111-1111-99") == "4111 1111 1111 1111"

    def test_partial_card_number(self):
        assert format_card_number("411111") == "4111 11"

    def test_expiry(self):
        assert format_expiry_date("1227") == "12/27"
        assert format_expiry_date("12/27") == "12/27"
        assert format_expiry_date("1") == "1"

    def test_digits_only(self):
        assert digits_only(None) == ""
        assert digits_only("+968 (91) 23") == "9689123"


class TestContactMasks:
    def test_phone_groups(self):
        assert format_phone("912345678") == "912 345 678"

    def test_short_phone_untouched(self):
        assert format_phone("91") == "91"

    def test_zip_code(self):
        assert format_zip_code(" 112-ab ") == "112AB"


class TestAmounts:
    @pytest.mark.parametrize("value,expected", [
        (30, "30"),
        (30.0, "30"),
        (12.5, "12.5"),
        (Decimal("20"), "20"),
        (Decimal("57.50"), "57.50"),
        (None, "0"),
    ])
    def test_format_amount(self, value, expected):
        assert format_amount(value) == expected

    def test_price_label(self):
        assert format_price(45) == "45 OMR"
        assert format_price("12", "USD") == "12 USD"

    def test_price_label_already_has_currency(self):
        assert format_price("45 OMR") == "45 OMR"

    def test_no_price(self):
        assert format_price(None) == ""
        assert format_price(0) == ""


class TestDates:
    def test_parse_string(self):
        assert parse_date("2025-01-15") == date(2025, 1, 15)

    def test_parse_datetime(self):
        assert parse_date(datetime(2025, 1, 15, 10, 30)) == date(2025, 1, 15)

    def test_parse_invalid(self):
        assert parse_date("15/01/2025") is None
        assert parse_date("") is None
        assert parse_date(None) is None

    def test_display_date(self):
        assert format_display_date("2025-01-15") == "Wednesday, January 15, 2025"

    def test_display_date_invalid(self):
        assert format_display_date("soon") == ""
