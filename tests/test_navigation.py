from storefront.infrastructure.orm import CategoryModel, CollectionModel


def add_category(db, slug, parent=None, position=0, is_active=True):
    category = CategoryModel(name=slug.title(), slug=slug, parent_id=parent.id if parent else None,
                             position=position, is_active=is_active)
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


def test_tree_has_static_pages_and_cache_headers(client):
    response = client.get("/api/navigation/tree")

    assert response.status_code == 200
    assert response.headers["cache-control"] == "public, s-maxage=3600, stale-while-revalidate=86400"
    body = response.json()
    assert body["ok"] is True
    keys = [node["key"] for node in body["data"]["nodes"]]
    assert keys[0] == "home"
    assert keys[-3:] == ["about", "terms", "privacy"]
    assert body["data"]["version"] == "1.0"


def test_tree_nests_categories_and_hides_inactive(client, db):
    apparel = add_category(db, "apparel", position=1)
    add_category(db, "shirts", parent=apparel)
    add_category(db, "hidden", is_active=False)
    db.add(CollectionModel(name="Summer", slug="summer"))
    db.commit()

    nodes = client.get("/api/navigation/tree").json()["data"]["nodes"]
    by_key = {node["key"]: node for node in nodes}

    assert "hidden" not in by_key
    assert [child["key"] for child in by_key["apparel"]["children"]] == ["shirts"]
    assert by_key["summer"]["href"] == "/collections/summer"
    assert by_key["summer"]["type"] == "collection"


def test_tree_is_cached_until_revalidated(client, db, admin_headers):
    client.get("/api/navigation/tree")
    add_category(db, "late")

    keys = [n["key"] for n in client.get("/api/navigation/tree").json()["data"]["nodes"]]
    assert "late" not in keys

    response = client.post("/api/navigation/tree", headers=admin_headers)
    assert response.json()["data"] == {"revalidated": True}

    keys = [n["key"] for n in client.get("/api/navigation/tree").json()["data"]["nodes"]]
    assert "late" in keys


def test_revalidate_requires_admin(client, member_headers):
    assert client.post("/api/navigation/tree").status_code == 401
    assert client.post("/api/navigation/tree", headers=member_headers).status_code == 403


def test_node_lookup(client, db):
    apparel = add_category(db, "apparel")
    add_category(db, "shirts", parent=apparel)

    response = client.get("/api/navigation/nodes/shirts")
    assert response.status_code == 200
    assert response.json()["data"]["href"] == "/shirts"

    missing = client.get("/api/navigation/nodes/nope")
    assert missing.status_code == 404
    assert missing.json()["error"]["code"] == "NOT_FOUND"


def test_breadcrumbs(client, db):
    apparel = add_category(db, "apparel")
    add_category(db, "shirts", parent=apparel)

    trail = client.get("/api/navigation/breadcrumbs/shirts").json()["data"]
    assert [crumb["label"] for crumb in trail] == ["Home", "Apparel", "Shirts"]

    assert [c["label"] for c in client.get("/api/navigation/breadcrumbs/home").json()["data"]] == ["Home"]
    assert [c["label"] for c in client.get("/api/navigation/breadcrumbs/nope").json()["data"]] == ["Home"]


def test_category_nav_includes_inactive_categories(client, db):
    apparel = add_category(db, "apparel")
    add_category(db, "shirts", parent=apparel, is_active=False)

    tree = client.get("/api/nav").json()["data"]
    assert tree[0]["slug"] == "apparel"
    assert [child["slug"] for child in tree[0]["children"]] == ["shirts"]
