import argparse
import getpass
import logging
from typing import Callable, List, Optional

from ..catalog.client import ApiError, CatalogClient
from ..catalog.search import search, suggest
from ..checkout.order import apply_delivery, apply_payment, start_booking, submit_booking
from ..checkout.pipeline import confirm_delivery
from ..checkout.pricing import clamp_days, compute_totals
from ..config.rules import (
    CARD_PAYMENT_METHODS,
    DELIVERY_REQUIRED_FIELDS,
    DELIVERY_TIME_SLOTS,
    GENDERS,
    PAYMENT_METHODS,
)
from ..config.settings import API_BASE_URL, SEED_CATALOG_FILE
from ..processing.read import load_catalog
from ..processing.validate import ValidationError
from ..recommend.engine import recommend
from ..utils.console import rule, safe_print
from ..utils.logging import get_logger, set_level
from .accounts import register_account
from .display import (
    display_catalog,
    display_confirmation,
    display_quote,
    display_recommendations,
)
from .preferences import DisplayPreferences

logger = get_logger(__name__)

_DELIVERY_PROMPTS = {
    'area': "Area",
    'city': "City",
    'street': "Street",
    'number': "House / apartment number",
    'zipCode': "Zip code",
    'phone': "Phone",
}


def _catalog(args) -> List[dict]:
    if args.api:
        return CatalogClient(args.api_url).fetch_appliances()
    return load_catalog(args.catalog)


def cmd_recommend(args, prefs: DisplayPreferences) -> int:
    results = recommend(args.budget, _catalog(args))
    display_recommendations(results, prefs, budget=float(args.budget))
    return 0


def cmd_search(args, prefs: DisplayPreferences) -> int:
    display_catalog(search(_catalog(args), args.term), prefs)
    return 0


def cmd_suggest(args, prefs: DisplayPreferences) -> int:
    if args.api:
        names = CatalogClient(args.api_url).fetch_suggestions(args.prefix)
    else:
        names = suggest(load_catalog(args.catalog), args.prefix)
    for name in names:
        safe_print(name)
    return 0


def cmd_quote(args, prefs: DisplayPreferences) -> int:
    display_quote(compute_totals(args.price, args.days), clamp_days(args.days), prefs)
    return 0


def _ask(prompt: str, ask: Callable[[str], str]) -> str:
    return ask(f"{prompt}: ").strip()


def cmd_rent(args, prefs: DisplayPreferences, ask: Callable[[str], str] = input) -> int:
    """Walk one appliance through booking, payment and delivery on the console."""
    matches = [a for a in search(_catalog(args), args.name) if a.get('available')]
    if not matches:
        safe_print(f"No available appliance matches '{args.name}'.")
        return 1
    appliance = matches[0]
    order = start_booking({'appliance': appliance, 'price': appliance.get('price')})
    safe_print(f"\n📦 {appliance['name']}")
    rule("-", 40)

    days = _ask("Rental duration (days)", ask)
    display_quote(compute_totals(order.price_per_day, days), clamp_days(days), prefs)
    agreed = _ask("Agree to the insurance deposit terms? [y/N]", ask).lower().startswith('y')
    order = submit_booking(order, days, agreed)

    methods = ", ".join(PAYMENT_METHODS)
    form = {
        'email': _ask("Email", ask),
        'startDate': _ask("Start date (YYYY-MM-DD)", ask),
        'paymentMethod': _ask(f"Payment method ({methods})", ask),
    }
    if form['paymentMethod'] in CARD_PAYMENT_METHODS:
        form['cardNumber'] = _ask("Card number", ask)
        form['expiryDate'] = _ask("Expiry (MM/YY)", ask)
        form['cvv'] = _ask("CVV", ask)
    order = apply_payment(order, form)
    if order.bank_details:
        for key, value in order.bank_details.items():
            safe_print(f"   {key}: {value}")

    delivery = {field: _ask(_DELIVERY_PROMPTS[field], ask) for field in DELIVERY_REQUIRED_FIELDS}
    slots = ", ".join(DELIVERY_TIME_SLOTS)
    delivery['preferredTime'] = _ask(f"Preferred time ({slots})", ask) or None
    delivery['message'] = _ask("Message (optional)", ask)
    order = apply_delivery(order, delivery)

    display_confirmation(confirm_delivery(order), prefs)
    return 0


def cmd_serve(args, prefs: DisplayPreferences) -> int:
    import uvicorn

    uvicorn.run("homerent.server.app:app", host=args.host, port=args.port, reload=args.reload)
    return 0


def cmd_seed(args, prefs: DisplayPreferences) -> int:
    client = CatalogClient(args.api_url)
    appliances = load_catalog(args.catalog)
    for appliance in appliances:
        payload = {k: appliance.get(k) for k in ('name', 'price', 'details', 'available', 'imgUrl')}
        payload['imgUrl'] = payload['imgUrl'] or ''
        client.insert_appliance(payload)
        logger.info("Seeded %s", payload['name'])
    safe_print(f"✅ {len(appliances)} appliances sent to {client.base_url}")
    return 0


def cmd_register(args, prefs: DisplayPreferences, read_password: Optional[Callable[[str], str]] = None) -> int:
    password = (read_password or getpass.getpass)("Password: ")
    register_account(
        CatalogClient(args.api_url), args.user, args.email, password, args.gender, is_admin=args.admin,
    )
    role = "admin" if args.admin else "user"
    safe_print(f"✅ Registered {role} {args.user.strip().lower()}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='homerent', description='Household appliance rental toolkit')
    parser.add_argument('--debug', action='store_true', help='Show score breakdowns and debug logs')
    parser.add_argument('--catalog', default=str(SEED_CATALOG_FILE), help='JSON catalog file')
    parser.add_argument('--api', action='store_true', help='Read the catalog from the backend instead')
    parser.add_argument('--api-url', default=API_BASE_URL, help='Backend base URL')
    sub = parser.add_subparsers(dest='command', required=True)

    p = sub.add_parser('recommend', help='Smart recommendations for a budget')
    p.add_argument('--budget', required=True)
    p.set_defaults(func=cmd_recommend)

    p = sub.add_parser('search', help='Search the catalog by name')
    p.add_argument('term', nargs='?', default='')
    p.set_defaults(func=cmd_search)

    p = sub.add_parser('suggest', help='Name suggestions for a prefix')
    p.add_argument('prefix')
    p.set_defaults(func=cmd_suggest)

    p = sub.add_parser('quote', help='Price a rental')
    p.add_argument('--price', required=True)
    p.add_argument('--days', default='1')
    p.set_defaults(func=cmd_quote)

    p = sub.add_parser('rent', help='Interactive booking, payment and delivery')
    p.add_argument('name', help='Appliance name (substring)')
    p.set_defaults(func=cmd_rent)

    p = sub.add_parser('serve', help='Run the backend API')
    p.add_argument('--host', default='127.0.0.1')
    p.add_argument('--port', type=int, default=5000)
    p.add_argument('--reload', action='store_true')
    p.set_defaults(func=cmd_serve)

    p = sub.add_parser('seed', help='Upload the catalog file to the backend')
    p.set_defaults(func=cmd_seed)

    p = sub.add_parser('register', help='Create an account on the backend')
    p.add_argument('user')
    p.add_argument('email')
    p.add_argument('--gender', choices=GENDERS, required=True)
    p.add_argument('--admin', action='store_true', help='Grant access to the Admin page')
    p.set_defaults(func=cmd_register)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if args.debug:
        set_level(logging.DEBUG)
    prefs = DisplayPreferences(show_breakdown=args.debug)
    try:
        return args.func(args, prefs)
    except ValidationError as exc:
        safe_print(f"⚠️ {exc.message}")
        return 2
    except ApiError as exc:
        safe_print(f"❌ {exc.message}")
        return 1
