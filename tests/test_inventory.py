from uuid import uuid4

from conftest import make_product, make_variant
from storefront.infrastructure.orm import InventoryMovementModel, ProductVariantModel


def _move(client, headers, variant, movement_type, quantity, **fields):
    return client.post("/api/inventory/movements", json={
        "variant_id": str(variant.id), "movement_type": movement_type, "quantity": quantity, **fields,
    }, headers=headers)


def test_movements_update_stock(client, db, admin, admin_headers):
    variant = make_variant(db, make_product(db), stock_quantity=4)

    restock = _move(client, admin_headers, variant, "restock", 6, reference="PO-1001")
    assert restock.status_code == 201
    assert restock.json()["data"]["stock_before"] == 4
    assert restock.json()["data"]["stock_after"] == 10
    assert restock.json()["data"]["created_by"] == str(admin.id)

    sale = _move(client, admin_headers, variant, "sale", 25).json()["data"]
    assert sale["stock_after"] == 0

    recount = _move(client, admin_headers, variant, "adjustment", 7, note="Cycle count").json()["data"]
    assert (recount["stock_before"], recount["stock_after"]) == (0, 7)

    db.expire_all()
    assert db.get(ProductVariantModel, variant.id).stock_quantity == 7
    assert db.query(InventoryMovementModel).count() == 3

    listed = client.get(f"/api/inventory/movements?variant_id={variant.id}", headers=admin_headers).json()["data"]
    assert {m["movement_type"] for m in listed} == {"restock", "sale", "adjustment"}


def test_movement_validation(client, db, admin_headers, member_headers):
    variant = make_variant(db, make_product(db))

    zero = _move(client, admin_headers, variant, "restock", 0)
    assert zero.status_code == 400
    assert zero.json()["error"]["code"] == "INVALID_INPUT"
    assert _move(client, admin_headers, variant, "shrinkage", 1).status_code == 400

    missing = client.post("/api/inventory/movements", json={
        "variant_id": str(uuid4()), "movement_type": "restock", "quantity": 1,
    }, headers=admin_headers)
    assert missing.status_code == 404

    assert _move(client, member_headers, variant, "restock", 1).status_code == 403
