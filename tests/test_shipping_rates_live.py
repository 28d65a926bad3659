import asyncio
import json

import pytest

from storefront.application.use_cases.quote_shipping_rates import FREE_GROUND_NAME, QuoteShippingRatesUseCase
from storefront.core.config import settings
from storefront.infrastructure.orm import ShippingBoxModel
from test_usps_service import FakeUsps, live_service

PRICES = {"USPS_GROUND_ADVANTAGE": 7.355, "PRIORITY_MAIL": 10.4}


class RecordingUsps(FakeUsps):
    """Also keeps the body of every rate search"""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.rate_requests = []

    def __call__(self, request):
        if request.url.path == "/prices/v3/total-rates/search":
            self.rate_requests.append(json.loads(request.content))
        return super().__call__(request)


@pytest.fixture(autouse=True)
def origin_zip(monkeypatch):
    monkeypatch.setattr(settings, "USPS_FROM_ZIP", "10001")


def quote(db, fake, subtotal_cents, zip_code="78701"):
    use_case = QuoteShippingRatesUseCase(db, live_service(fake))
    return asyncio.run(use_case.execute(subtotal_cents, zip_code))


def test_ground_is_free_at_threshold(db):
    result = quote(db, FakeUsps(prices=PRICES), settings.FREE_SHIPPING_THRESHOLD_CENTS)

    assert result["source"] == "usps"
    ground, priority = result["shipping_rates"]
    assert ground["price_cents"] == 0
    assert ground["name"] == FREE_GROUND_NAME == "Standard Shipping (Free!)"
    assert priority["price_cents"] == 1040


def test_ground_is_charged_below_threshold(db):
    result = quote(db, FakeUsps(prices=PRICES), settings.FREE_SHIPPING_THRESHOLD_CENTS - 1)

    ground = result["shipping_rates"][0]
    assert ground["price_cents"] == 736
    assert ground["name"] == "Standard Shipping"


def test_oauth_rejection_falls_back_to_db_rates(db):
    fake = FakeUsps(prices=PRICES, oauth_status=401)
    result = quote(db, fake, 1000)

    assert result["source"] == "db"
    assert fake.calls == ["/oauth2/v3/token"]


def test_no_usps_prices_falls_back_to_db_rates(db):
    result = quote(db, FakeUsps(), 1000)

    assert result["source"] == "db"


def test_missing_origin_zip_skips_usps(db, monkeypatch):
    monkeypatch.setattr(settings, "USPS_FROM_ZIP", None)
    fake = FakeUsps(prices=PRICES)

    assert quote(db, fake, 1000)["source"] == "db"
    assert fake.calls == []


def test_package_comes_from_default_box(db):
    db.add(ShippingBoxModel(name="Spare", length_in=20, width_in=20, height_in=20, weight_oz=40))
    db.add(ShippingBoxModel(name="Mailer", length_in=12, width_in=9, height_in=4, weight_oz=8, is_default=True))
    db.commit()
    fake = RecordingUsps(prices=PRICES)

    quote(db, fake, 1000)

    assert len(fake.rate_requests) == 3
    for body in fake.rate_requests:
        assert (body["length"], body["width"], body["height"]) == (12.0, 9.0, 4.0)
        assert body["weight"] == 0.5
        assert body["originZIPCode"] == "10001"
        assert body["destinationZIPCode"] == "78701"


def test_fallback_package_without_default_box(db):
    fake = RecordingUsps(prices=PRICES)

    quote(db, fake, 1000)

    body = fake.rate_requests[0]
    assert (body["length"], body["width"], body["height"]) == (10.0, 13.0, 1.0)
    assert body["weight"] == 0.125
