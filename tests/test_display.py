"""Tests for the console renderers in homerent.app.display."""

from datetime import date

from homerent.app.display import (
    display_catalog,
    display_confirmation,
    display_quote,
    display_recommendations,
)
from homerent.app.preferences import DARK_PALETTE, LIGHT_PALETTE, DisplayPreferences
from homerent.checkout.order import apply_delivery, apply_payment, start_booking, submit_booking
from homerent.checkout.pipeline import confirm_delivery
from homerent.checkout.pricing import compute_totals


class TestPreferences:
    def test_toggle(self):
        prefs = DisplayPreferences()
        dark = prefs.toggled_dark_mode()
        assert dark.dark_mode and not prefs.dark_mode
        assert dark.palette == DARK_PALETTE
        assert prefs.palette == LIGHT_PALETTE

    def test_css_uses_palette(self):
        css = DisplayPreferences(dark_mode=True).css()
        assert DARK_PALETTE["background"] in css


class TestDisplayCatalog:
    def test_lists_items(self, capsys, sample_catalog):
        display_catalog(sample_catalog)
        out = capsys.readouterr().out
        assert "Samsung Refrigerator  [18 OMR/day, available]" in out
        assert "Bosch Dishwasher  [14 OMR/day, rented out]" in out

    def test_empty(self, capsys):
        display_catalog([])
        assert "No appliances found." in capsys.readouterr().out


class TestDisplayRecommendations:
    def test_empty(self, capsys):
        display_recommendations([])
        assert "No appliances match this budget." in capsys.readouterr().out

    def test_ranked(self, capsys):
        recs = [{"name": "Fridge X", "price": 40, "score": 5.4, "score_breakdown": {"essential": 3.0}}]
        display_recommendations(recs, DisplayPreferences(show_breakdown=True), budget=50)
        out = capsys.readouterr().out
        assert "budget 50 OMR" in out
        assert "1. Fridge X" in out
        assert "Score: 5.40" in out
        assert "Detail: {'essential': 3.0}" in out

    def test_breakdown_hidden_by_default(self, capsys):
        display_recommendations([{"name": "Lamp", "price": 45, "score": 2.45}])
        assert "Detail" not in capsys.readouterr().out


class TestDisplayQuote:
    def test_amounts(self, capsys):
        display_quote(compute_totals(15, 2), 2)
        out = capsys.readouterr().out
        assert "Rental (2 day(s)): 30 OMR" in out
        assert "Insurance deposit:  20 OMR" in out
        assert "Final amount:       50 OMR" in out


class TestDisplayConfirmation:
    def test_summary(self, capsys, booking_state, card_payment_form, delivery_form, today):
        order = submit_booking(start_booking(booking_state), 1, True)
        order = apply_payment(order, card_payment_form, today=today)
        order = apply_delivery(order, delivery_form)
        confirmation = confirm_delivery(order, sleep=lambda _: None)

        display_confirmation(confirmation)
        out = capsys.readouterr().out
        assert confirmation.message in out
        assert "Appliance: Fridge" in out
        assert "Credit Card" in out
        assert "Wednesday, January 1, 2025" in out
        assert "Way 3021 12B, Al Khuwair, Muscat 112" in out
        assert "● ✓ Order Confirmed" in out
        assert "○ 🚚 On the Way" in out
