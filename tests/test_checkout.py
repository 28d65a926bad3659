from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from conftest import make_product, make_variant, make_order, SHIPPING_ADDRESS
from storefront.domain.enums import PaymentStatus
from storefront.infrastructure.orm import (
    CartModel, CartItemModel, OrderModel, PromoCodeModel, ShippingRateModel, TaxRateModel,
)

SESSION = {"X-Session-Id": "checkout-session"}


def add_tax(db, state="TX", rate="0.0625", applies_to_shipping=False):
    db.add(TaxRateModel(state=state, rate=Decimal(rate), description=f"{state} sales tax",
                        applies_to_shipping=applies_to_shipping))
    db.commit()


def add_promo(db, code="SAVE10", **fields):
    fields.setdefault("discount_type", "percentage")
    fields.setdefault("discount_value", 10)
    promo = PromoCodeModel(code=code, **fields)
    db.add(promo)
    db.commit()
    return promo


def add_shipping_rate(db, name="Standard", price_cents=500, **fields):
    rate = ShippingRateModel(name=name, price_cents=price_cents, min_delivery_days=5, max_delivery_days=7, **fields)
    db.add(rate)
    db.commit()
    db.refresh(rate)
    return rate


@pytest.fixture
def cart(db):
    variant = make_variant(db, make_product(db, price_cents=2500))
    cart = CartModel(session_id="checkout-session")
    cart.items.append(CartItemModel(variant_id=variant.id, quantity=2))
    db.add(cart)
    db.commit()
    db.refresh(cart)
    return cart


def intent_request(cart, **fields):
    body = {
        "cart_id": str(cart.id),
        "email": "Shopper@Example.com",
        "shipping_address": dict(SHIPPING_ADDRESS),
        "billing_address": dict(SHIPPING_ADDRESS),
    }
    body.update(fields)
    return body


def test_calculate_tax(client, db):
    add_tax(db, rate="0.0625")
    add_tax(db, rate="0.02", applies_to_shipping=True)

    data = client.post("/api/checkout/calculate-tax",
                       json={"subtotal_cents": 10000, "shipping_cents": 1000, "state": "tx"}).json()["data"]

    assert data["tax_cents"] == 625 + 220
    assert data["tax_rate"] == pytest.approx(0.0825)
    assert data["state"] == "TX"
    assert len(data["tax_breakdown"]) == 2


def test_calculate_tax_for_untaxed_state(client):
    data = client.post("/api/checkout/calculate-tax", json={"subtotal_cents": 10000, "state": "OR"}).json()["data"]

    assert data["tax_cents"] == 0
    assert data["tax_breakdown"] == []


def test_validate_promo(client, db):
    add_promo(db, description="Ten percent off")

    data = client.post("/api/checkout/validate-promo", json={"code": " save10 ", "subtotal_cents": 5000}).json()["data"]

    assert data["valid"] is True
    assert data["discount_cents"] == 500
    assert data["message"] == "$5.00 off applied"
    assert data["promo_code"]["code"] == "SAVE10"


def test_invalid_promo_answers_ok(client, db):
    add_promo(db, code="OLD", expires_at=datetime.utcnow() - timedelta(days=1))

    response = client.post("/api/checkout/validate-promo", json={"code": "old", "subtotal_cents": 5000})
    assert response.status_code == 200
    assert response.json()["data"] == {"valid": False, "error": "This promo code has expired"}

    unknown = client.post("/api/checkout/validate-promo", json={"code": "nope", "subtotal_cents": 5000}).json()
    assert unknown["data"]["error"] == "Invalid promo code"


def test_free_shipping_promo_message(client, db):
    add_promo(db, code="SHIPFREE", discount_type="free_shipping", discount_value=0)

    data = client.post("/api/checkout/validate-promo", json={"code": "shipfree", "subtotal_cents": 5000}).json()["data"]
    assert data["free_shipping"] is True
    assert data["message"] == "Free shipping applied"


def test_per_customer_limit_counts_paid_orders(client, db):
    add_promo(db, code="ONCE", per_customer_limit=1)
    make_order(db, email="shopper@example.com", promo_code="ONCE", payment_status=PaymentStatus.PAID.value)

    data = client.post(
        "/api/checkout/validate-promo",
        json={"code": "once", "subtotal_cents": 5000, "email": "Shopper@example.com"},
    ).json()["data"]
    assert data["valid"] is False
    assert data["error"] == "You have already used this promo code"


def test_shipping_rates_from_database(client, db):
    add_shipping_rate(db, "Standard", 500, position=0, max_subtotal_cents=7499)
    add_shipping_rate(db, "Free Standard", 0, position=1, min_subtotal_cents=7500)
    add_shipping_rate(db, "Retired", 100, is_active=False)

    low = client.post("/api/checkout/shipping-rates", json={"subtotal_cents": 3000}).json()["data"]
    assert low["source"] == "db"
    assert [r["name"] for r in low["shipping_rates"]] == ["Standard"]

    high = client.post("/api/checkout/shipping-rates", json={"subtotal_cents": 9000}).json()["data"]
    assert [r["name"] for r in high["shipping_rates"]] == ["Free Standard"]


def test_shipping_rates_fall_back_when_weight_missing(client, db):
    variant = make_variant(db, make_product(db), weight_grams=None)
    cart = CartModel(session_id="x")
    cart.items.append(CartItemModel(variant_id=variant.id, quantity=1))
    db.add(cart)
    db.commit()

    data = client.post("/api/checkout/shipping-rates",
                       json={"subtotal_cents": 4800, "cart_id": str(cart.id)}).json()["data"]
    assert data["source"] == "free-fallback"
    assert data["reason"] == "missing-weight"
    assert data["shipping_rates"][0]["price_cents"] == 0


def test_create_payment_intent(client, db, cart, payment):
    add_tax(db, rate="0.0625")
    add_promo(db)
    rate = add_shipping_rate(db, "Standard", 500)

    response = client.post(
        "/api/checkout/create-payment-intent",
        json=intent_request(cart, promo_code="save10", shipping_rate_id=str(rate.id)),
        headers=SESSION,
    )

    assert response.status_code == 201
    data = response.json()["data"]
    order = data["order"]
    # 5000 subtotal, 500 off, 500 shipping, tax on 4500
    assert order["subtotal_cents"] == 5000
    assert order["discount_cents"] == 500
    assert order["shipping_cents"] == 500
    assert order["tax_cents"] == 281
    assert order["total_cents"] == 5000 - 500 + 500 + 281
    assert order["email"] == "shopper@example.com"
    assert order["shipping_method_name"] == "Standard"
    assert order["checkout_step"] == "payment"
    assert data["payment_intent"]["client_secret"] == "pi_test_1_secret"

    intent = payment.intents[0]
    assert intent["amount"] == order["total_cents"]
    assert intent["metadata"]["order_number"] == order["order_number"]

    row = db.query(OrderModel).one()
    assert row.stripe_payment_intent_id == "pi_test_1"
    assert row.guest_key == "checkout-session"
    assert len(row.items) == 1
    assert row.items[0].quantity == 2


def test_create_payment_intent_rejects_bad_promo_and_rate(client, cart):
    bad_promo = client.post("/api/checkout/create-payment-intent",
                            json=intent_request(cart, promo_code="nope"), headers=SESSION)
    assert bad_promo.status_code == 400
    assert bad_promo.json()["error"]["message"] == "Invalid promo code"

    bad_rate = client.post("/api/checkout/create-payment-intent",
                           json=intent_request(cart, shipping_rate_id="missing"), headers=SESSION)
    assert bad_rate.status_code == 400


def test_create_payment_intent_for_unknown_cart(client, cart, db):
    body = intent_request(cart)
    db.delete(cart)
    db.commit()

    response = client.post("/api/checkout/create-payment-intent", json=body, headers=SESSION)
    assert response.status_code == 404


def test_payment_provider_failure_removes_order(client, db, cart, payment):
    payment.fail = True

    response = client.post("/api/checkout/create-payment-intent", json=intent_request(cart), headers=SESSION)

    assert response.status_code == 502
    assert response.json()["error"]["code"] == "PAYMENT_PROVIDER_ERROR"
    assert db.query(OrderModel).count() == 0
