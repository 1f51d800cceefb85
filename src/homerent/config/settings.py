import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parents[3]
DATA_DIR = BASE_DIR / "data"

# Seed catalog used by the demo UI and `homerent seed` when the backend is empty.
SEED_CATALOG_FILE = DATA_DIR / "appliances.json"

API_BASE_URL = os.environ.get("HOMERENT_API_URL", "http://localhost:5000").rstrip("/")
HTTP_TIMEOUT = float(os.environ.get("HOMERENT_HTTP_TIMEOUT", "10"))

# Catalog refresh cadence (seconds)
CATALOG_POLL_SECONDS = float(os.environ.get("HOMERENT_POLL_SECONDS", "10"))

SUGGESTION_LIMIT = 5

# Simulated processing delays (seconds)
RECOMMENDATION_DELAY = 0.5
PAYMENT_PROCESSING_DELAY = 2.0
DELIVERY_PROCESSING_DELAY = 2.0

CURRENCY = "OMR"
