"""Household appliance rental toolkit: pricing, checkout and smart recommendations.

Public API surface - import submodules directly for full access:
  homerent.config.rules        - keyword lists, payment methods, delivery timeline
  homerent.config.settings     - paths, backend URL, poll interval
  homerent.checkout.pricing    - rental totals
  homerent.checkout.order      - rental order record and checkout stages
  homerent.recommend.engine    - budget scoring + recommendations
  homerent.catalog.client      - REST client for the backend
  homerent.server.app          - FastAPI backend
  homerent.app.cli             - CLI entry point
"""

from .checkout.pricing import compute_totals
from .checkout.order import RentalOrder, start_booking
from .recommend.engine import recommend
from .catalog.search import search, suggest


def main():
    """CLI entry point."""
    from .app.main import main as _main
    return _main()


__all__ = [
    "compute_totals",
    "RentalOrder",
    "start_booking",
    "recommend",
    "search",
    "suggest",
    "main",
]
