"""Console rendering of catalogs, recommendations, quotes and delivery confirmations."""

from typing import Any, Iterable, Mapping, Sequence

from ..checkout.pipeline import Confirmation
from ..checkout.pricing import RentalTotals
from ..config.rules import PAYMENT_METHODS
from ..processing.normalize import format_amount, format_display_date, format_price
from ..utils.console import rule, safe_print
from .preferences import DisplayPreferences


def _money(value: Any, prefs: DisplayPreferences) -> str:
    return f"{format_amount(value)} {prefs.currency}"


def display_catalog(appliances: Iterable[Mapping[str, Any]], prefs: DisplayPreferences = DisplayPreferences()):
    items = list(appliances)
    if not items:
        safe_print("No appliances found.")
        return
    for item in items:
        status = "available" if item.get('available') else "rented out"
        price = format_price(item.get('price'), prefs.currency) or "-"
        safe_print(f"• {item.get('name', '(unnamed)')}  [{price}/day, {status}]")
        if item.get('details'):
            safe_print(f"    {item['details']}")


def display_recommendations(recommendations: Sequence[Mapping[str, Any]],
                            prefs: DisplayPreferences = DisplayPreferences(), budget: float = None):
    """Print ranked candidates; with ``show_breakdown`` the score parts are listed too."""
    if not recommendations:
        safe_print("\nNo appliances match this budget.")
        return

    safe_print("")
    rule()
    title = "🏆 SMART RECOMMENDATIONS"
    if budget is not None:
        title += f" – budget {_money(budget, prefs)}"
    safe_print(title.center(60))
    rule()

    for i, item in enumerate(recommendations, 1):
        safe_print(f"\n{i}. {item.get('name', '(unnamed)')}")
        safe_print(f"   💰 Price: {_money(item.get('price'), prefs)}/day")
        safe_print(f"   ⭐ Score: {float(item.get('score', 0)):.2f}")
        if item.get('details'):
            safe_print(f"   📝 {item['details']}")
        if prefs.show_breakdown:
            safe_print(f"   📈 Detail: {item.get('score_breakdown', '')}")


def display_quote(totals: RentalTotals, days: int, prefs: DisplayPreferences = DisplayPreferences()):
    safe_print(f"Rental ({days} day(s)): {_money(totals.rental_amount, prefs)}")
    safe_print(f"Insurance deposit:  {_money(totals.insurance_deposit, prefs)}")
    rule("-", 40)
    safe_print(f"Final amount:       {_money(totals.final_amount, prefs)}")


def display_confirmation(confirmation: Confirmation, prefs: DisplayPreferences = DisplayPreferences()):
    order = confirmation.order
    safe_print("")
    rule()
    safe_print(confirmation.message)
    rule()
    if order.appliance:
        safe_print(f"Appliance: {order.appliance.get('name', '')}")
    safe_print(f"Total: {_money(order.final_amount, prefs)} "
               f"({PAYMENT_METHODS.get(order.payment_method, order.payment_method)})")
    if order.start_date:
        safe_print(f"Rental: {format_display_date(order.start_date)} → {format_display_date(order.end_date)}")
    safe_print(f"Deliver to: {order.street} {order.number}, {order.area}, {order.city} {order.zip_code}")
    safe_print("")
    for step in confirmation.timeline:
        mark = "●" if step.get('status') == 'completed' else "○"
        safe_print(f"{mark} {step['icon']} {step['title']} – {step['description']} ({step['time']})")
