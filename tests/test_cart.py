from datetime import datetime, timedelta
from uuid import UUID

import pytest

from conftest import make_product, make_variant
from storefront.infrastructure.orm import CartModel, SavedCartModel

SESSION = {"X-Session-Id": "anon-session-1"}


@pytest.fixture
def variant(db):
    return make_variant(db, make_product(db), stock_quantity=5)


def test_anonymous_cart_needs_session(client):
    response = client.get("/api/cart")

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "MISSING_SESSION"


def test_cart_is_created_once_per_session(client):
    first = client.get("/api/cart", headers=SESSION).json()["data"]
    second = client.get("/api/cart", headers=SESSION).json()["data"]

    assert first["id"] == second["id"]
    assert first["items"] == []
    assert first["subtotal_cents"] == 0


def test_member_cart_is_keyed_by_profile(client, member_headers):
    mine = client.get("/api/cart", headers=member_headers).json()["data"]
    anonymous = client.get("/api/cart", headers=SESSION).json()["data"]

    assert mine["id"] != anonymous["id"]


def test_adding_same_variant_merges_lines(client, variant):
    client.post("/api/cart/items", json={"variant_id": str(variant.id), "quantity": 2}, headers=SESSION)
    cart = client.post("/api/cart/items", json={"variant_id": str(variant.id)}, headers=SESSION).json()["data"]

    assert len(cart["items"]) == 1
    assert cart["items"][0]["quantity"] == 3
    assert cart["item_count"] == 3
    assert cart["subtotal_cents"] == 3 * 4800
    assert cart["items"][0]["product"]["slug"] == "linen-shirt"


def test_stock_is_enforced(client, variant):
    response = client.post("/api/cart/items", json={"variant_id": str(variant.id), "quantity": 6}, headers=SESSION)

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INSUFFICIENT_STOCK"


def test_backorder_ignores_stock(client, db):
    backorder = make_variant(db, make_product(db), stock_quantity=0, allow_backorder=True)

    response = client.post("/api/cart/items", json={"variant_id": str(backorder.id), "quantity": 4}, headers=SESSION)
    assert response.status_code == 200


def test_unknown_and_inactive_variants(client, db):
    from uuid import uuid4

    missing = client.post("/api/cart/items", json={"variant_id": str(uuid4())}, headers=SESSION)
    assert missing.status_code == 404

    inactive = make_variant(db, make_product(db), is_active=False)
    response = client.post("/api/cart/items", json={"variant_id": str(inactive.id)}, headers=SESSION)
    assert response.json()["error"]["code"] == "VARIANT_INACTIVE"


def test_update_and_remove_items(client, variant):
    cart = client.post("/api/cart/items", json={"variant_id": str(variant.id)}, headers=SESSION).json()["data"]
    item_id = cart["items"][0]["id"]

    updated = client.patch(f"/api/cart/items/{item_id}", json={"quantity": 4}, headers=SESSION).json()["data"]
    assert updated["items"][0]["quantity"] == 4

    assert client.patch(f"/api/cart/items/{item_id}", json={"quantity": 0}, headers=SESSION).status_code == 400

    emptied = client.delete(f"/api/cart/items/{item_id}", headers=SESSION).json()["data"]
    assert emptied["items"] == []

    assert client.delete(f"/api/cart/items/{item_id}", headers=SESSION).status_code == 404


def test_items_of_another_cart_are_not_found(client, variant):
    cart = client.post("/api/cart/items", json={"variant_id": str(variant.id)}, headers=SESSION).json()["data"]

    other = {"X-Session-Id": "someone-else"}
    response = client.patch(f"/api/cart/items/{cart['items'][0]['id']}", json={"quantity": 2}, headers=other)
    assert response.status_code == 404


def test_clear_cart(client, variant):
    client.post("/api/cart/items", json={"variant_id": str(variant.id)}, headers=SESSION)

    assert client.delete("/api/cart", headers=SESSION).json()["data"]["items"] == []


def test_share_and_clone(client, variant):
    client.post("/api/cart/items", json={"variant_id": str(variant.id), "quantity": 2}, headers=SESSION)
    shared = client.post("/api/cart/share", json={"name": "Gift ideas"}, headers=SESSION).json()["data"]
    again = client.post("/api/cart/share", json={}, headers=SESSION).json()["data"]

    assert again["share_token"] == shared["share_token"]
    assert shared["share_url"].endswith(f"/cart/shared/{shared['share_token']}")

    public = client.get(f"/api/cart/shared/{shared['share_token']}").json()["data"]
    assert public["is_shared"] is True
    assert public["items"][0]["quantity"] == 2

    friend = {"X-Session-Id": "friend-session"}
    client.post(f"/api/cart/shared/{shared['share_token']}/clone", headers=friend)
    cloned = client.post(f"/api/cart/shared/{shared['share_token']}/clone", headers=friend).json()["data"]
    assert cloned["items"][0]["quantity"] == 4
    assert cloned["id"] != public["id"]


def test_unknown_share_token(client):
    assert client.get("/api/cart/shared/nope").status_code == 404


def test_expired_share_link(client, db, variant):
    client.post("/api/cart/items", json={"variant_id": str(variant.id)}, headers=SESSION)
    shared = client.post("/api/cart/share", json={"expires_in_days": 7}, headers=SESSION).json()["data"]
    assert shared["share_expires_at"] is not None

    cart = db.query(CartModel).filter(CartModel.share_token == shared["share_token"]).one()
    cart.share_expires_at = datetime.utcnow() - timedelta(minutes=1)
    db.commit()

    read = client.get(f"/api/cart/shared/{shared['share_token']}")
    assert read.status_code == 410
    assert read.json()["error"]["code"] == "EXPIRED"
    clone = client.post(f"/api/cart/shared/{shared['share_token']}/clone", headers={"X-Session-Id": "friend"})
    assert clone.status_code == 410


def test_clone_saves_existing_cart_and_restore(client, db, variant):
    other = make_variant(db, make_product(db, slug="wool-scarf"), title="One Size", stock_quantity=3)
    sold_out = make_variant(db, make_product(db, slug="silk-tie"), title="Navy", stock_quantity=0)
    friend = {"X-Session-Id": "friend-session"}

    client.post("/api/cart/items", json={"variant_id": str(variant.id), "quantity": 2}, headers=SESSION)
    token = client.post("/api/cart/share", json={"name": "Gift ideas"}, headers=SESSION).json()["data"]["share_token"]
    client.post("/api/cart/items", json={"variant_id": str(other.id), "quantity": 1}, headers=friend)

    db.add(SavedCartModel(session_id="friend-session", trigger="clone", items=[], created_at=datetime.utcnow(),
                          expires_at=datetime.utcnow() - timedelta(days=1)))
    db.commit()

    cloned = client.post(f"/api/cart/shared/{token}/clone", headers=friend).json()
    assert cloned["meta"]["cloned"] == 1
    assert cloned["meta"]["skipped"] == 0
    assert {item["variant_id"] for item in cloned["data"]["items"]} == {str(variant.id), str(other.id)}

    saved = client.get("/api/saved-carts", headers=friend).json()["data"]
    assert [s["id"] for s in saved] == [cloned["meta"]["saved_cart_id"]]
    assert saved[0]["label"] == 'Your cart before adding "Gift ideas"'
    assert saved[0]["source_share_name"] == "Gift ideas"
    assert saved[0]["items"][0]["variant_id"] == str(other.id)
    assert saved[0]["item_count"] == 1
    assert client.get("/api/saved-carts", headers=SESSION).json()["data"] == []

    client.delete("/api/cart", headers=friend)
    snapshot = db.get(SavedCartModel, UUID(saved[0]["id"]))
    snapshot.items = snapshot.items + [{"variant_id": str(sold_out.id), "quantity": 1}]
    db.commit()

    restored = client.post(f"/api/saved-carts/{saved[0]['id']}/restore", headers=friend).json()
    assert restored["meta"]["restored"] == 1
    assert restored["meta"]["skipped"] == 1
    assert [item["variant_id"] for item in restored["data"]["items"]] == [str(other.id)]

    again = client.post(f"/api/saved-carts/{saved[0]['id']}/restore", headers=friend)
    assert again.status_code == 404


def test_restore_snapshots_current_cart(client, db, variant):
    other = make_variant(db, make_product(db, slug="wool-scarf"), title="One Size", stock_quantity=3)
    client.post("/api/cart/items", json={"variant_id": str(variant.id)}, headers=SESSION)
    token = client.post("/api/cart/share", json={}, headers=SESSION).json()["data"]["share_token"]

    friend = {"X-Session-Id": "friend-session"}
    client.post("/api/cart/items", json={"variant_id": str(other.id)}, headers=friend)
    saved_id = client.post(f"/api/cart/shared/{token}/clone", headers=friend).json()["meta"]["saved_cart_id"]

    client.post(f"/api/saved-carts/{saved_id}/restore", headers=friend)

    saved = client.get("/api/saved-carts", headers=friend).json()["data"]
    assert [s["trigger"] for s in saved] == ["manual"]
    assert saved[0]["item_count"] == 2


def test_clone_into_empty_cart_saves_nothing(client, variant):
    client.post("/api/cart/items", json={"variant_id": str(variant.id)}, headers=SESSION)
    token = client.post("/api/cart/share", json={}, headers=SESSION).json()["data"]["share_token"]

    cloned = client.post(f"/api/cart/shared/{token}/clone", headers={"X-Session-Id": "fresh"}).json()
    assert cloned["meta"]["saved_cart_id"] is None
    assert client.post("/api/saved-carts/not-a-uuid/restore", headers=SESSION).status_code == 404
