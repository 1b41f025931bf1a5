import sys, pathlib

ROOT = pathlib.Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from datetime import datetime

import pytest
import pytz

from rental_pricing import create_app
from rental_pricing.models.config import PricingConfig
from rental_pricing.models.store import Store
from rental_pricing.services.pricing_service import PricingService

# Fixed clock for service-level quotes; every test interval starts after it.
NOW = datetime(2030, 1, 1, 9, 0, tzinfo=pytz.utc)


@pytest.fixture(autouse=True)
def reset_store_singleton():
    """Never let one test see another test's singleton."""
    Store.reset_instance()
    yield
    Store.reset_instance()


@pytest.fixture
def store():
    """
    Clean in-memory store seeded with one car, two extras and a promo code.
    """
    st = Store()
    st.create_car({
        "car_id": "1", "brand": "Toyota", "model": "Camry",
        "daily_rate": "100.00", "weekly_rate": "600.00", "monthly_rate": "2000.00",
    })
    st.create_extra({"extra_id": "1", "name": "GPS", "daily_price": "20.00"})
    st.create_extra({"extra_id": "2", "name": "Child Seat", "daily_price": "15.00"})
    st.create_promo("WELCOME10", percentage="10", description="Welcome offer")
    return st


@pytest.fixture
def config():
    return PricingConfig()


@pytest.fixture
def service(config, store):
    return PricingService(config=config, store=store)


@pytest.fixture
def client(store):
    app = create_app(config={"TESTING": True}, store=store)
    with app.test_client() as c:
        yield c
