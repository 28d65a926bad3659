from uuid import uuid4

from conftest import make_product, make_variant
from storefront.infrastructure.orm import OrderModel, ProductImageModel


def test_pos_requires_admin(client, member_headers):
    assert client.get("/api/pos/products", headers=member_headers).status_code == 403
    assert client.post("/api/pos/charge", json={}).status_code == 401


def test_pos_products_list_active_variants_and_primary_image(client, db, admin_headers):
    product = make_product(db)
    make_variant(db, product, title="Small", position=0)
    make_variant(db, product, title="Retired", is_active=False)
    db.add_all([
        ProductImageModel(product_id=product.id, bucket_name="product-images", object_path="a.jpg", sort_order=0),
        ProductImageModel(product_id=product.id, bucket_name="product-images", object_path="b.jpg",
                          sort_order=3, is_primary=True),
    ])
    db.commit()

    data = client.get("/api/pos/products", headers=admin_headers).json()["data"]

    assert [v["title"] for v in data[0]["variants"]] == ["Small"]
    assert data[0]["image_url"].endswith("/product-images/b.jpg")


def test_charge_uses_catalog_prices(client, db, admin, admin_headers, payment):
    product = make_product(db, price_cents=3000)
    variant = make_variant(db, product, price_cents=3500)

    response = client.post("/api/pos/charge", json={
        "items": [
            {"product_id": str(product.id), "variant_id": str(variant.id), "quantity": 2},
            {"product_id": str(product.id)},
        ],
        "custom_items": [{"label": "Alteration", "amount_cents": 1500}],
        "customer_email": "Walkin@Example.com",
    }, headers=admin_headers)

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["order"]["total_cents"] == 2 * 3500 + 3000 + 1500
    assert data["payment_intent"]["id"] == "pi_test_1"
    assert payment.intents[0]["metadata"]["order_source"] == "pos"

    order = db.query(OrderModel).one()
    assert order.source == "pos"
    assert order.order_number.startswith("DCG-POS-")
    assert order.pos_staff_id == admin.id
    assert order.email == "walkin@example.com"
    assert order.internal_notes == "[POS] In-person sale | Custom amounts: Alteration $15.00"
    assert order.stripe_payment_intent_id == "pi_test_1"


def test_charge_errors(client, db, admin_headers):
    empty = client.post("/api/pos/charge", json={}, headers=admin_headers)
    assert empty.status_code == 400
    assert empty.json()["error"]["code"] == "EMPTY_CART"

    unknown = client.post("/api/pos/charge", json={"items": [{"product_id": str(uuid4())}]}, headers=admin_headers)
    assert unknown.json()["error"]["code"] == "PRODUCT_NOT_FOUND"

    product = make_product(db)
    other = make_variant(db, make_product(db, slug="other"))
    mismatched = client.post(
        "/api/pos/charge",
        json={"items": [{"product_id": str(product.id), "variant_id": str(other.id)}]},
        headers=admin_headers,
    )
    assert mismatched.json()["error"]["code"] == "VARIANT_NOT_FOUND"

    free = make_product(db, slug="free", price_cents=0)
    zero = client.post("/api/pos/charge", json={"items": [{"product_id": str(free.id)}]}, headers=admin_headers)
    assert zero.json()["error"]["code"] == "INVALID_TOTAL"
    assert db.query(OrderModel).count() == 0


def test_charge_provider_failure(client, db, admin_headers, payment):
    payment.fail = True
    product = make_product(db)

    response = client.post("/api/pos/charge", json={"items": [{"product_id": str(product.id)}]}, headers=admin_headers)

    assert response.status_code == 502
    assert db.query(OrderModel).count() == 0


def test_connection_token(client, admin_headers):
    data = client.post("/api/pos/connection-token", headers=admin_headers).json()["data"]

    assert data == {"secret": "pst_test_secret"}
