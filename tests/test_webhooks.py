import json

import pytest

from conftest import make_product, make_variant, make_order
from storefront.infrastructure.orm import (
    CartModel, OrderItemModel, OrderModel, ProductVariantModel, PromoCodeModel,
)

SIGNED = {"Stripe-Signature": "valid"}


def event(event_type, obj):
    return json.dumps({"type": event_type, "data": {"object": obj}})


@pytest.fixture
def pending_order(db):
    variant = make_variant(db, make_product(db), stock_quantity=3)
    cart = CartModel(session_id="webhook-session")
    db.add(cart)
    db.add(PromoCodeModel(code="SAVE10", discount_type="percentage", discount_value=10))
    db.commit()

    order = make_order(db, items=False, cart_id=cart.id, promo_code="SAVE10",
                       stripe_payment_intent_id="pi_123", guest_key="webhook-session")
    db.add(OrderItemModel(order_id=order.id, variant_id=variant.id, title="Linen Shirt", quantity=2, price_cents=2500))
    db.commit()
    return order


def test_missing_signature(client):
    response = client.post("/api/webhooks/stripe", content=event("payment_intent.succeeded", {}))

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "MISSING_SIGNATURE"


def test_invalid_signature(client):
    response = client.post("/api/webhooks/stripe", content="{}", headers={"Stripe-Signature": "forged"})

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_SIGNATURE"


def test_unhandled_event_is_acknowledged(client):
    response = client.post("/api/webhooks/stripe", content=event("customer.created", {}), headers=SIGNED)

    assert response.status_code == 200
    assert response.json() == {"received": True}


def test_payment_succeeded_settles_order(client, db, pending_order, notifier):
    body = event("payment_intent.succeeded", {
        "id": "pi_123",
        "payment_method": "pm_test",
        "metadata": {"order_id": str(pending_order.id)},
    })

    assert client.post("/api/webhooks/stripe", content=body, headers=SIGNED).status_code == 200

    db.expire_all()
    order = db.get(OrderModel, pending_order.id)
    assert order.payment_status == "paid"
    assert order.status == "processing"
    assert order.checkout_step == "complete"
    assert order.card_last4 == "4242"
    assert order.items[0].variant_id is not None
    assert db.query(CartModel).one().status == "converted"
    assert db.query(PromoCodeModel).one().usage_count == 1
    assert db.query(ProductVariantModel).one().stock_quantity == 1
    assert notifier.paid == [pending_order.id]


def test_duplicate_success_is_idempotent(client, db, pending_order, notifier):
    body = event("payment_intent.succeeded", {"id": "pi_123", "metadata": {}})

    client.post("/api/webhooks/stripe", content=body, headers=SIGNED)
    client.post("/api/webhooks/stripe", content=body, headers=SIGNED)

    db.expire_all()
    assert db.query(PromoCodeModel).one().usage_count == 1
    assert len(notifier.paid) == 1


def test_inventory_is_decremented_and_clamped(client, db, pending_order):
    variant = db.query(ProductVariantModel).one()
    variant.stock_quantity = 1
    db.commit()

    client.post("/api/webhooks/stripe", content=event("payment_intent.succeeded", {"id": "pi_123"}), headers=SIGNED)

    db.expire_all()
    assert db.query(ProductVariantModel).one().stock_quantity == 0


def test_payment_failed_records_error(client, db, pending_order):
    body = event("payment_intent.payment_failed", {
        "id": "pi_123",
        "last_payment_error": {"code": "card_declined", "message": "Your card was declined."},
    })

    client.post("/api/webhooks/stripe", content=body, headers=SIGNED)

    db.expire_all()
    order = db.get(OrderModel, pending_order.id)
    assert order.payment_status == "failed"
    assert order.payment_error_code == "card_declined"


def test_charge_events(client, db, pending_order):
    charge = {
        "id": "ch_1",
        "payment_intent": "pi_123",
        "outcome": {"risk_score": 12, "risk_level": "normal"},
        "billing_details": {"name": "Ada"},
    }
    client.post("/api/webhooks/stripe", content=event("charge.succeeded", charge), headers=SIGNED)
    db.expire_all()
    order = db.get(OrderModel, pending_order.id)
    assert order.stripe_charge_id == "ch_1"
    assert order.risk_level == "normal"

    client.post("/api/webhooks/stripe", content=event("charge.refunded", charge), headers=SIGNED)
    db.expire_all()
    order = db.get(OrderModel, pending_order.id)
    assert order.status == "refunded"
    assert order.payment_status == "refunded"
    assert order.refunded_at is not None


def test_late_success_for_refunded_order_is_acknowledged(client, db, pending_order, notifier):
    order = db.get(OrderModel, pending_order.id)
    order.status = "refunded"
    order.payment_status = "refunded"
    db.commit()

    for event_type in ("payment_intent.succeeded", "payment_intent.payment_failed"):
        response = client.post("/api/webhooks/stripe", content=event(event_type, {"id": "pi_123"}), headers=SIGNED)
        assert response.status_code == 200
        assert response.json() == {"received": True}

    db.expire_all()
    assert db.get(OrderModel, pending_order.id).payment_status == "refunded"
    assert db.query(ProductVariantModel).one().stock_quantity == 3
    assert notifier.paid == []
