import asyncio
import json

import httpx
import pytest

from storefront.infrastructure.external_services.usps_service import (
    PAYMENT_TOKEN_LIFETIME_SECONDS, UspsService, UspsTokenCache, UspsError, PackageSpec, parse_label_response, zip5,
)

PACKAGE = PackageSpec(weight_oz=32, length_in=10, width_in=8, height_in=4)
BOUNDARY = "usps-boundary"


def label_body(metadata, pdf=b"%PDF-1.7 label"):
    return (
        f"--{BOUNDARY}\r\n"
        "Content-Type: application/json\r\n"
        'Content-Disposition: form-data; name="labelMetadata"\r\n\r\n'
        f"{json.dumps(metadata)}\r\n"
        f"--{BOUNDARY}\r\n"
        "Content-Type: application/pdf\r\n"
        'Content-Disposition: form-data; name="labelImage"\r\n\r\n'
    ).encode() + pdf + f"\r\n--{BOUNDARY}--\r\n".encode()


class FakeUsps:
    """Routes USPS API paths to canned responses and records every call"""

    def __init__(self, prices=None, oauth_status=200):
        self.calls = []
        self.prices = prices or {}
        self.oauth_status = oauth_status

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request.url.path)
        body = json.loads(request.content or b"{}")
        if request.url.path == "/oauth2/v3/token":
            if self.oauth_status != 200:
                return httpx.Response(self.oauth_status, text="denied")
            return httpx.Response(200, json={"access_token": "oauth-token", "expires_in": 3600})
        if request.url.path == "/payments/v3/payment-authorization":
            return httpx.Response(200, json={"paymentAuthorizationToken": "pay-token"})
        if request.url.path == "/prices/v3/total-rates/search":
            price = self.prices.get(body["mailClass"])
            if price is None:
                return httpx.Response(400, json={"error": "no price"})
            return httpx.Response(200, json={"rates": [{"totalBasePrice": price}]})
        if request.url.path == "/labels/v3/label":
            assert request.headers["X-Payment-Authorization-Token"] == "pay-token"
            return httpx.Response(
                200,
                content=label_body({"trackingNumber": "9400100000000000000001", "postage": 8.15}),
                headers={"content-type": f"multipart/form-data; boundary={BOUNDARY}"},
            )
        return httpx.Response(404)


def live_service(fake, clock=lambda: 1000.0):
    service = UspsService(transport=httpx.MockTransport(fake), cache=UspsTokenCache(), clock=clock)
    service.env = "sandbox"
    service.consumer_key = "key"
    service.consumer_secret = "secret"
    return service


def test_mock_env_is_not_live():
    service = UspsService(cache=UspsTokenCache())
    service.env = "mock"
    service.consumer_key = "key"
    service.consumer_secret = "secret"

    assert not service.is_live
    assert service.labels_mocked


def test_zip5():
    assert zip5("78701-1234") == "78701"
    assert zip5("") == ""


def test_oauth_token_is_cached_until_near_expiry():
    fake = FakeUsps()
    now = [1000.0]
    service = live_service(fake, clock=lambda: now[0])

    assert asyncio.run(service.get_oauth_token()) == "oauth-token"
    asyncio.run(service.get_oauth_token())
    assert fake.calls.count("/oauth2/v3/token") == 1

    # inside the refresh margin
    now[0] = 1000.0 + 3600 - 30
    asyncio.run(service.get_oauth_token())
    assert fake.calls.count("/oauth2/v3/token") == 2


def test_oauth_failure_raises():
    service = live_service(FakeUsps(oauth_status=401))

    with pytest.raises(UspsError):
        asyncio.run(service.get_oauth_token())


def test_quote_rates_skips_failed_mail_classes():
    fake = FakeUsps(prices={"USPS_GROUND_ADVANTAGE": 7.355, "PRIORITY_MAIL": 10.4})
    rates = asyncio.run(live_service(fake).quote_rates("10001", "78701-0001", PACKAGE))

    assert [r["mail_class"] for r in rates] == ["USPS_GROUND_ADVANTAGE", "PRIORITY_MAIL"]
    assert rates[0]["price_cents"] == 736
    assert rates[0]["id"] == "usps-ground-advantage"
    assert rates[1]["id"] == "priority-mail"
    assert rates[1]["price_cents"] == 1040
    assert rates[1]["carrier"] == "USPS"


def test_create_label_parses_multipart_response():
    fake = FakeUsps()
    label = asyncio.run(live_service(fake).create_label(
        to_address={"first_name": "Ada", "last_name": "Lovelace", "address1": "1 Main",
                    "city": "Austin", "state": "TX", "zip": "78701"},
        mail_class="PRIORITY_MAIL",
        weight_lb=2, length_in=10, width_in=8, height_in=4,
    ))

    assert label.tracking_number == "9400100000000000000001"
    assert label.postage == 8.15
    assert label.pdf.startswith(b"%PDF")
    assert label.tracking_url.endswith("9400100000000000000001")
    assert fake.calls == ["/oauth2/v3/token", "/payments/v3/payment-authorization", "/labels/v3/label"]


def test_payment_token_is_reused_until_near_expiry():
    fake = FakeUsps()
    now = [1000.0]
    service = live_service(fake, clock=lambda: now[0])
    label = dict(
        to_address={"address1": "1 Main", "city": "Austin", "state": "TX", "zip": "78701"},
        mail_class="USPS_GROUND_ADVANTAGE",
        weight_lb=1, length_in=10, width_in=8, height_in=4,
    )

    asyncio.run(service.create_label(**label))
    asyncio.run(service.create_label(**label))
    assert fake.calls.count("/payments/v3/payment-authorization") == 1
    assert fake.calls.count("/labels/v3/label") == 2

    # inside the refresh margin of the eight hour token
    now[0] = 1000.0 + PAYMENT_TOKEN_LIFETIME_SECONDS - 30
    asyncio.run(service.create_label(**label))
    assert fake.calls.count("/payments/v3/payment-authorization") == 2


def test_parse_label_response_requires_boundary():
    with pytest.raises(UspsError):
        parse_label_response("application/json", b"{}")


def test_parse_label_response_splits_parts():
    metadata, pdf = parse_label_response(
        f"multipart/form-data; boundary={BOUNDARY}",
        label_body({"trackingNumber": "1"}, pdf=b"%PDF-data"),
    )

    assert metadata == {"trackingNumber": "1"}
    assert pdf == b"%PDF-data"
