"""Shared fixtures for the homerent test suite."""

import os
import sys
from datetime import date, timedelta
from pathlib import Path

import pytest

# Ensure src/ is on the path so "import homerent" works when running from repo root.
repo_root = Path(__file__).resolve().parents[1]
src_path = repo_root / "src"
for p in (src_path, repo_root):
    p_str = str(p)
    if p_str not in sys.path:
        sys.path.insert(0, p_str)

# Cheap password hashing for the backend tests.
os.environ.setdefault("BCRYPT_ROUNDS", "4")


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def sample_catalog():
    """A small catalog in backend wire format (``_id`` keys, mixed price types)."""
    return [
        {"_id": "a1", "name": "Samsung Refrigerator", "price": 18, "details": "400L", "available": True},
        {"_id": "a2", "name": "LG Washing Machine", "price": "15", "details": "8kg", "available": True},
        {"_id": "a3", "name": "Dyson Vacuum Cleaner", "price": 9, "details": "Cordless", "available": True},
        {"_id": "a4", "name": "Bosch Dishwasher", "price": 14, "details": "12 places", "available": False},
        {"_id": "a5", "name": "Smart TV", "price": 20, "details": "55 inch", "available": True},
        {"_id": "a6", "name": "Floor Lamp", "price": 3, "details": "LED", "available": True},
    ]


@pytest.fixture
def fridge_and_lamp():
    """Two appliances used for the budget-50 ranking example."""
    return [
        {"id": "f", "name": "Fridge X", "price": 40, "details": "", "available": True},
        {"id": "l", "name": "Lamp", "price": 45, "details": "", "available": True},
    ]


@pytest.fixture
def booking_state():
    """The state the catalog hands to the booking screen."""
    return {"appliance": {"name": "Fridge", "details": "Big", "price": 15, "id": "x"}, "price": 15}


@pytest.fixture
def today():
    return date(2024, 12, 31)


@pytest.fixture
def card_payment_form():
    return {
        "email": "renter@example.com",
        "startDate": "2025-01-01",
        "paymentMethod": "credit",
        "cardNumber": "4111111111111111",
        "expiryDate": "1227",
        "cvv": "123",
    }


@pytest.fixture
def bank_payment_form():
    return {
        "email": "renter@example.com",
        "startDate": "2025-01-01",
        "paymentMethod": "bank",
    }


@pytest.fixture
def delivery_form():
    return {
        "area": "Al Khuwair",
        "city": "Muscat",
        "street": "Way 3021",
        "number": "12B",
        "zipCode": "112",
        "phone": "912345678",
        "preferredTime": "evening",
        "message": "Call on arrival",
    }


@pytest.fixture
def future_start():
    return (date.today() + timedelta(days=3)).isoformat()


class FakeMailer:
    """Stands in for the SMTP mailer; records the OTPs it was asked to send."""

    def __init__(self, error=None):
        self.sent = []
        self.error = error

    async def send_otp(self, to_email, otp):
        if self.error is not None:
            raise self.error
        self.sent.append((to_email, otp))
        return True


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture
def api(mailer):
    """TestClient for the backend bound to a fresh in-memory SQLite database."""
    from fastapi.testclient import TestClient
    from sqlalchemy import create_engine
    from sqlalchemy.orm import sessionmaker
    from sqlalchemy.pool import StaticPool

    from homerent.server.app import app
    from homerent.server.db import Base, get_db
    from homerent.server.mailer import get_mailer

    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        db = TestingSession()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_mailer] = lambda: mailer
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
        engine.dispose()


@pytest.fixture
def backend_client(api):
    """CatalogClient speaking to the in-process backend."""
    from homerent.catalog.client import CatalogClient

    return CatalogClient(base_url="http://testserver", session=api)
