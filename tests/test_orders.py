import io

import httpx
import pytest
from pypdf import PdfReader

from conftest import make_order, make_profile, auth_headers
from test_usps_service import FakeUsps
from storefront.api.dependencies import get_usps_service
from storefront.core.config import settings
from storefront.domain.enums import OrderSource, PaymentStatus
from storefront.infrastructure.external_services.usps_service import UspsService, UspsTokenCache
from storefront.infrastructure.orm import FulfillmentModel, OrderModel
from storefront.main import app

LABEL = {"weight_lb": 1.5, "length_in": 10, "width_in": 8, "height_in": 4}


def test_my_orders_and_history(client, db, member, member_headers):
    make_order(db, member, payment_status=PaymentStatus.PAID.value)
    make_order(db, member, payment_status=PaymentStatus.REFUNDED.value)
    make_order(db, member)
    make_order(db, payment_status=PaymentStatus.PAID.value)

    mine = client.get("/api/orders/mine", headers=member_headers).json()["data"]
    assert len(mine) == 3

    history = client.get("/api/orders/history", params={"limit": 1}, headers=member_headers).json()
    assert len(history["data"]) == 1
    assert history["meta"] == {"page": 1, "limit": 1, "total": 2, "total_pages": 2}
    assert history["data"][0]["points_earned"] == 50


def test_history_requires_sign_in(client):
    assert client.get("/api/orders/history").status_code == 401


def test_order_visibility(client, db, member, member_headers, admin_headers):
    order = make_order(db, member, internal_notes="vip")
    stranger = auth_headers(make_profile(db, "stranger@example.com"))

    owner_view = client.get(f"/api/orders/{order.id}", headers=member_headers).json()["data"]
    assert owner_view["order_number"] == order.order_number
    assert "internal_notes" not in owner_view

    admin_view = client.get(f"/api/orders/{order.id}", headers=admin_headers).json()["data"]
    assert admin_view["internal_notes"] == "vip"
    assert admin_view["is_member"] is True

    assert client.get(f"/api/orders/{order.id}", headers=stranger).status_code == 404
    assert client.get(f"/api/orders/{order.id}").status_code == 404
    by_email = client.get(f"/api/orders/{order.id}", params={"email": "MEMBER@example.com"})
    assert by_email.status_code == 200
    assert client.get("/api/orders/not-a-uuid").status_code == 404


def test_admin_order_list_filters(client, db, admin_headers):
    make_order(db, email="a@example.com", payment_status=PaymentStatus.PAID.value, guest_key="s1")
    make_order(db, email="b@example.com", source=OrderSource.POS.value)

    paid = client.get("/api/orders/admin", params={"payment_status": "paid"}, headers=admin_headers).json()
    assert paid["meta"]["total"] == 1
    assert paid["data"][0]["is_guest"] is True

    found = client.get("/api/orders/admin", params={"q": "B@EXAMPLE"}, headers=admin_headers).json()["data"]
    assert [o["email"] for o in found] == ["b@example.com"]
    assert found[0]["is_pos"] is True


def test_fulfill_order(client, db, admin_headers):
    order = make_order(db, payment_status=PaymentStatus.PAID.value, status="processing")

    response = client.patch(
        f"/api/orders/{order.id}/fulfill",
        json={"tracking_number": " 9400 ", "note": "Left at door"},
        headers=admin_headers,
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["status"] == "fulfilled"
    assert data["tracking_number"] == "9400"
    assert data["fulfillment_status"] == "fulfilled"

    # fulfilling twice keeps one fulfillment row
    client.patch(f"/api/orders/{order.id}/fulfill", json={"tracking_number": "9401"}, headers=admin_headers)
    db.expire_all()
    assert db.query(FulfillmentModel).count() == 1
    assert db.query(FulfillmentModel).one().tracking_number == "9401"


def test_cannot_fulfill_refunded_order(client, db, admin_headers):
    order = make_order(db, status="refunded", payment_status=PaymentStatus.REFUNDED.value)

    response = client.patch(f"/api/orders/{order.id}/fulfill", json={}, headers=admin_headers)
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "CANNOT_FULFILL"


def test_update_notes(client, db, admin_headers, member_headers):
    order = make_order(db)

    assert client.patch(f"/api/orders/{order.id}/notes", json={"internal_notes": "x"}, headers=member_headers).status_code == 403
    data = client.patch(f"/api/orders/{order.id}/notes", json={"internal_notes": "Gift wrap"},
                        headers=admin_headers).json()["data"]
    assert data["internal_notes"] == "Gift wrap"


def test_mock_label_leaves_order_untouched(client, db, admin_headers):
    order = make_order(db, shipping_method_name="Priority Mail")

    response = client.post(f"/api/orders/{order.id}/label", json=LABEL, headers=admin_headers)

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert response.headers["x-mock-mode"] == "true"
    assert response.headers["x-mail-class"] == "PRIORITY_MAIL"
    assert response.headers["x-postage"] == "0"
    tracking = response.headers["x-tracking-number"]
    assert tracking.startswith("9400111899")
    assert response.headers["x-tracking-url"].endswith(tracking)

    page = PdfReader(io.BytesIO(response.content)).pages[0]
    texts = [annotation.get_object()["/Contents"] for annotation in page["/Annots"]]
    assert "SAMPLE - NOT FOR MAILING" in texts
    assert "Austin, TX  78701" in texts
    db.expire_all()
    assert db.get(OrderModel, order.id).tracking_number is None


def test_label_needs_complete_address(client, db, admin_headers):
    order = make_order(db, shipping_address={"city": "Austin"})

    response = client.post(f"/api/orders/{order.id}/label", json=LABEL, headers=admin_headers)
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INCOMPLETE_ADDRESS"


@pytest.fixture
def live_usps(monkeypatch):
    for name, value in {
        "USPS_FROM_STREET": "1 Warehouse Rd", "USPS_FROM_CITY": "Dallas",
        "USPS_FROM_STATE": "TX", "USPS_FROM_ZIP": "75201",
    }.items():
        monkeypatch.setattr(settings, name, value)

    fake = FakeUsps()
    service = UspsService(transport=httpx.MockTransport(fake), cache=UspsTokenCache())
    service.env = "sandbox"
    service.consumer_key = "key"
    service.consumer_secret = "secret"
    app.dependency_overrides[get_usps_service] = lambda: service
    yield fake
    app.dependency_overrides.pop(get_usps_service, None)


def test_live_label_is_stored_and_downloadable(client, db, admin_headers, storage, live_usps):
    order = make_order(db)

    response = client.post(f"/api/orders/{order.id}/label", json=LABEL, headers=admin_headers)

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert response.headers["x-tracking-number"] == "9400100000000000000001"
    assert response.content.startswith(b"%PDF")

    db.expire_all()
    stored = db.get(OrderModel, order.id)
    assert stored.label_postage_cents == 815
    assert stored.internal_notes == "[Label] USPS 9400100000000000000001"
    assert (settings.SHIPPING_LABELS_BUCKET, stored.label_pdf_path) in storage.objects

    download = client.get(f"/api/orders/{order.id}/label", headers=admin_headers)
    assert download.content.startswith(b"%PDF")


def test_missing_label(client, db, admin_headers):
    order = make_order(db)

    assert client.get(f"/api/orders/{order.id}/label", headers=admin_headers).status_code == 404
