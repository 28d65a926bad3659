from conftest import make_product, make_variant, make_order
from storefront.domain.enums import PaymentStatus, ProfileRole
from storefront.infrastructure.orm import ProfileModel


def register(client, email="new@example.com", password="password123"):
    return client.post("/api/auth/register", json={"email": email, "password": password})


def test_register_and_login(client):
    response = register(client, "New@Example.com")
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["profile"]["email"] == "new@example.com"
    assert data["profile"]["role"] == "member"
    assert data["tokens"]["token_type"] == "bearer"

    login = client.post("/api/auth/login", json={"email": "new@example.com", "password": "password123"})
    assert login.status_code == 200
    assert login.json()["data"]["profile"]["last_login"] is not None


def test_register_duplicate_email(client):
    register(client)
    response = register(client, "NEW@example.com")

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "EMAIL_TAKEN"


def test_register_validates_input(client):
    response = register(client, "not-an-email", "short")

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_INPUT"
    assert response.json()["error"]["details"]


def test_bad_login(client, member):
    response = client.post("/api/auth/login", json={"email": "member@example.com", "password": "wrong-password"})

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "INVALID_CREDENTIALS"


def test_refresh_token(client):
    tokens = register(client).json()["data"]["tokens"]

    refreshed = client.post("/api/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert refreshed.status_code == 200
    access = refreshed.json()["data"]["access_token"]
    assert client.get("/api/profile", headers={"Authorization": f"Bearer {access}"}).status_code == 200

    # access tokens are not refresh tokens
    assert client.post("/api/auth/refresh", json={"refresh_token": tokens["access_token"]}).status_code == 401


def test_profile_read_and_update(client, member_headers):
    assert client.get("/api/profile").status_code == 401

    profile = client.get("/api/profile", headers=member_headers).json()["data"]
    assert profile["email"] == "member@example.com"

    updated = client.patch("/api/profile", json={"display_name": "  Ada  "}, headers=member_headers).json()["data"]
    assert updated["display_name"] == "Ada"


def test_invalid_token(client):
    response = client.get("/api/profile", headers={"Authorization": "Bearer garbage"})

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "UNAUTHORIZED"


def test_member_administration(client, db, admin, admin_headers, member, member_headers):
    assert client.get("/api/admin/members", headers=member_headers).status_code == 403

    members = client.get("/api/admin/members", headers=admin_headers).json()
    assert members["meta"]["count"] == 2

    promoted = client.post(f"/api/admin/members/{member.id}/role", json={"role": "ADMIN"}, headers=admin_headers)
    assert promoted.json()["data"]["role"] == "admin"

    invalid = client.post(f"/api/admin/members/{member.id}/role", json={"role": "owner"}, headers=admin_headers)
    assert invalid.status_code == 400

    self_demote = client.post(f"/api/admin/members/{admin.id}/role", json={"role": "member"}, headers=admin_headers)
    assert self_demote.status_code == 400

    stats = client.get("/api/admin/roles/stats", headers=admin_headers).json()["data"]
    assert stats["roles"]["admin"] == 2
    assert stats["total"] == 2

    assert client.delete(f"/api/admin/members/{admin.id}", headers=admin_headers).status_code == 400
    assert client.delete(f"/api/admin/members/{member.id}", headers=admin_headers).status_code == 200
    db.expire_all()
    assert db.query(ProfileModel).count() == 1
    assert client.delete("/api/admin/members/not-a-uuid", headers=admin_headers).status_code == 404


def test_dashboard(client, db, admin_headers, member):
    product = make_product(db)
    make_variant(db, product, stock_quantity=2)
    make_order(db, member, payment_status=PaymentStatus.PAID.value, total_cents=5400)
    make_order(db, total_cents=999)

    data = client.get("/api/admin/dashboard", headers=admin_headers).json()["data"]

    assert data["products"]["active"] == 1
    assert data["products"]["total"] == 1
    assert data["orders"]["total"] == 2
    assert data["orders"]["recent_24h"] == 2
    assert data["orders"]["by_payment_status"]["paid"] == 1
    assert data["revenue"] == {"paid_cents": 5400, "paid_formatted": "$54.00"}
    assert data["members"][ProfileRole.MEMBER.value] == 1
    assert data["members"]["total"] == 2
    assert [v["product_title"] for v in data["low_stock"]] == ["Linen Shirt"]


def test_health(client):
    assert client.get("/health").json()["database"] == "healthy"
    assert client.get("/api/health").json()["status"] == "healthy"
