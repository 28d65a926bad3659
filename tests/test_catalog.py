from conftest import make_product, make_variant
from storefront.domain.enums import ProductStatus
from storefront.infrastructure.orm import CategoryModel, CollectionModel, ProductModel


def test_categories_crud(client, admin_headers):
    response = client.post("/api/categories", json={"name": "Apparel", "slug": "apparel"}, headers=admin_headers)
    assert response.status_code == 201
    apparel = response.json()["data"]

    child = client.post(
        "/api/categories",
        json={"name": "Shirts", "slug": "shirts", "parent_id": apparel["id"]},
        headers=admin_headers,
    ).json()["data"]
    assert child["parent_id"] == apparel["id"]

    duplicate = client.post("/api/categories", json={"name": "Again", "slug": "apparel"}, headers=admin_headers)
    assert duplicate.status_code == 409
    assert duplicate.json()["error"]["code"] == "DUPLICATE_SLUG"

    listed = client.get("/api/categories", params={"parent": "apparel"}).json()["data"]
    assert [c["slug"] for c in listed] == ["shirts"]

    tree = client.get("/api/categories/tree").json()["data"]
    assert tree[0]["children"][0]["slug"] == "shirts"

    assert client.delete(f"/api/categories/{apparel['id']}", headers=admin_headers).status_code == 200
    orphan = client.get("/api/categories").json()["data"]
    assert orphan[0]["slug"] == "shirts"
    assert orphan[0]["parent_id"] is None


def test_category_cannot_parent_itself(client, admin_headers):
    category = client.post("/api/categories", json={"name": "A", "slug": "a"}, headers=admin_headers).json()["data"]

    response = client.patch(f"/api/categories/{category['id']}", json={"parent_id": category["id"]}, headers=admin_headers)
    assert response.status_code == 400

    empty = client.patch(f"/api/categories/{category['id']}", json={}, headers=admin_headers)
    assert empty.json()["error"]["code"] == "NO_FIELDS"


def test_category_writes_require_admin(client, member_headers):
    response = client.post("/api/categories", json={"name": "A", "slug": "a"}, headers=member_headers)

    assert response.status_code == 403
    assert response.json() == {"ok": False, "error": {"code": "FORBIDDEN", "message": "Admin access required"}}


def test_collections_search(client, admin_headers):
    client.post("/api/collections", json={"name": "Summer Linen", "slug": "summer"}, headers=admin_headers)
    client.post("/api/collections", json={"name": "Winter", "slug": "winter"}, headers=admin_headers)

    found = client.get("/api/collections", params={"q": "linen"}).json()["data"]
    assert [c["slug"] for c in found] == ["summer"]


def test_tags_crud(client, admin_headers):
    tag = client.post("/api/tags", json={"name": "Organic", "slug": "organic"}, headers=admin_headers).json()["data"]

    renamed = client.patch("/api/tags", json={"id": tag["id"], "name": "Organic Cotton"}, headers=admin_headers)
    assert renamed.json()["data"]["name"] == "Organic Cotton"

    assert client.delete(f"/api/tags/{tag['id']}", headers=admin_headers).status_code == 200
    assert client.get("/api/tags").json()["data"] == []


def test_public_listing_only_shows_active(client, db):
    make_product(db, "linen-shirt", price_cents=4800)
    make_product(db, "draft-shirt", status=ProductStatus.DRAFT)

    body = client.get("/api/products").json()
    assert [p["slug"] for p in body["data"]] == ["linen-shirt"]
    assert body["meta"]["count"] == 1


def test_public_listing_sort_and_filters(client, db):
    make_product(db, "cheap", price_cents=1000)
    make_product(db, "pricey", price_cents=9000, featured=True)

    asc = client.get("/api/products", params={"sort": "price-asc"}).json()["data"]
    assert [p["slug"] for p in asc] == ["cheap", "pricey"]
    featured = client.get("/api/products", params={"featured": "true"}).json()["data"]
    assert [p["slug"] for p in featured] == ["pricey"]
    assert client.get("/api/products", params={"sort": "random"}).status_code == 400


def test_listing_by_collection(client, db):
    product = make_product(db, "linen-shirt")
    make_product(db, "other")
    collection = CollectionModel(name="Summer", slug="summer")
    collection.products.append(db.get(ProductModel, product.id))
    db.add(collection)
    db.commit()

    data = client.get("/api/products", params={"collection": "summer"}).json()["data"]
    assert [p["slug"] for p in data] == ["linen-shirt"]

    missing = client.get("/api/products", params={"collection": "nope"}).json()
    assert missing["data"] == []
    assert missing["meta"]["error"] == "Collection not found"


def test_product_detail(client, db):
    product = make_product(db, "linen-shirt")
    make_variant(db, product, stock_quantity=0)

    detail = client.get("/api/products/linen-shirt").json()["data"]
    assert detail["variants"][0]["title"] == "Medium"
    assert "stock_quantity" not in detail["variants"][0]

    with_inventory = client.get("/api/products/linen-shirt", params={"include": "inventory"}).json()["data"]
    assert with_inventory["variants"][0]["in_stock"] is False

    assert client.get("/api/products/unknown").status_code == 404


def test_admin_product_lifecycle(client, admin_headers):
    created = client.post(
        "/api/products/admin",
        json={"slug": "wool-coat", "title": "Wool Coat", "price_cents": 19000},
        headers=admin_headers,
    )
    assert created.status_code == 201
    product = created.json()["data"]
    assert product["status"] == "draft"

    duplicate = client.post(
        "/api/products/admin",
        json={"slug": "wool-coat", "title": "Again", "price_cents": 100},
        headers=admin_headers,
    )
    assert duplicate.status_code == 409

    url = f"/api/products/admin/{product['id']}"
    assert client.patch(url, json={"status": "sold"}, headers=admin_headers).json()["error"]["code"] == "INVALID_STATUS"
    assert client.patch(url, json={"price_cents": None}, headers=admin_headers).status_code == 400
    activated = client.patch(url, json={"status": "active", "featured": True}, headers=admin_headers).json()["data"]
    assert activated["status"] == "active"

    variant = client.post(f"{url}/variants", json={"title": "Small", "stock_quantity": 3}, headers=admin_headers)
    assert variant.status_code == 201
    assert variant.json()["data"]["price_cents"] == 19000
    assert variant.json()["data"]["position"] == 0
    second = client.post(f"{url}/variants", json={"title": "Large"}, headers=admin_headers).json()["data"]
    assert second["position"] == 1

    updated = client.patch(f"{url}/variants/{second['id']}", json={"stock_quantity": 7}, headers=admin_headers)
    assert updated.json()["data"]["stock_quantity"] == 7

    archived = client.delete(url, headers=admin_headers).json()["data"]
    assert archived["status"] == "archived"
    assert client.get("/api/products/wool-coat").status_code == 404

    listed = client.get("/api/products/admin", params={"status": "archived"}, headers=admin_headers).json()
    assert listed["meta"]["total"] == 1


def test_image_upload_and_delete(client, db, admin_headers, storage):
    product = make_product(db)
    url = f"/api/products/admin/{product.id}/images"

    rejected = client.post(f"{url}/upload", files={"file": ("a.txt", b"text", "text/plain")}, headers=admin_headers)
    assert rejected.json()["error"]["code"] == "INVALID_FILE_TYPE"

    first = client.post(f"{url}/upload", files={"file": ("a.png", b"png-bytes", "image/png")}, headers=admin_headers)
    assert first.status_code == 201
    assert first.json()["data"]["is_primary"] is True
    second = client.post(f"{url}/upload", files={"file": ("b.png", b"png-bytes", "image/png")}, headers=admin_headers)
    assert second.json()["data"]["is_primary"] is False
    assert len(storage.objects) == 2

    image_id = first.json()["data"]["id"]
    assert client.delete(f"{url}/{image_id}", headers=admin_headers).status_code == 200
    assert len(storage.objects) == 1


def test_assign_and_unassign_categories(client, db, admin_headers):
    product = make_product(db)
    category = CategoryModel(name="Shirts", slug="shirts")
    db.add(category)
    db.commit()
    url = f"/api/products/admin/{product.id}/categories"

    assigned = client.post(url, json={"ids": [str(category.id)]}, headers=admin_headers)
    assert assigned.json()["data"] == [str(category.id)]

    removed = client.delete(f"{url}/{category.id}", headers=admin_headers)
    assert removed.json()["data"] == []

    assert client.post(f"/api/products/admin/{product.id}/widgets", json={"ids": [str(category.id)]},
                       headers=admin_headers).status_code == 404
