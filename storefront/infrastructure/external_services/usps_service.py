"""USPS REST API client: OAuth, payment authorization, rates and labels"""

import asyncio
import json
import logging
import time
from dataclasses import dataclass
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from email.parser import BytesParser
from email.policy import default as default_policy
from typing import Any, Dict, List, Optional

import httpx

from ...core.config import settings
from ...domain.value_objects.mail_class import resolve_rate_indicator

logger = logging.getLogger(__name__)

USPS_PRODUCTION_URL = "https://apis.usps.com"
USPS_TEST_URL = "https://apis-tem.usps.com"

# Refresh tokens this many seconds before they actually expire
TOKEN_SAFETY_MARGIN_SECONDS = 60
PAYMENT_TOKEN_LIFETIME_SECONDS = 8 * 60 * 60

TRACKING_URL = "https://tools.usps.com/go/TrackConfirmAction_input?origTrackNum={}"

RATE_MAIL_CLASSES = [
    {
        "mail_class": "USPS_GROUND_ADVANTAGE",
        "name": "Standard Shipping",
        "description": "5-7 business days",
        "min_days": 5,
        "max_days": 7,
    },
    {
        "mail_class": "PRIORITY_MAIL",
        "name": "Priority Mail",
        "description": "1-3 business days",
        "min_days": 1,
        "max_days": 3,
    },
    {
        "mail_class": "PRIORITY_MAIL_EXPRESS",
        "name": "Priority Mail Express",
        "description": "Next business day",
        "min_days": 1,
        "max_days": 1,
    },
]


class UspsError(Exception):
    """Raised when a USPS API call fails"""


@dataclass
class CachedToken:
    token: str
    expires_at: float  # epoch seconds

    def is_fresh(self, now: float) -> bool:
        return self.expires_at > now + TOKEN_SAFETY_MARGIN_SECONDS


class UspsTokenCache:
    """Process-local token cache. Not thread-safe; one instance per process."""

    def __init__(self):
        self.oauth: Optional[CachedToken] = None
        self.payment: Optional[CachedToken] = None

    def clear(self) -> None:
        self.oauth = None
        self.payment = None


token_cache = UspsTokenCache()


@dataclass
class PackageSpec:
    weight_oz: float
    length_in: float
    width_in: float
    height_in: float

    @property
    def weight_lb(self) -> float:
        return self.weight_oz / 16


@dataclass
class LabelResult:
    tracking_number: str
    tracking_url: str
    postage: float
    pdf: bytes
    metadata: Dict[str, Any]


def zip5(value: str) -> str:
    return "".join(ch for ch in (value or "") if ch.isdigit())[:5]


class UspsService:

    def __init__(
        self,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        cache: Optional[UspsTokenCache] = None,
        clock=time.time,
    ):
        self.env = settings.USPS_ENV
        self.consumer_key = settings.USPS_CONSUMER_KEY
        self.consumer_secret = settings.USPS_CONSUMER_SECRET
        self.transport = transport
        self.cache = cache if cache is not None else token_cache
        self.clock = clock

    @property
    def base_url(self) -> str:
        return USPS_PRODUCTION_URL if self.env == "production" else USPS_TEST_URL

    @property
    def is_live(self) -> bool:
        """Live rate quotes need credentials and a non-mock environment"""
        return bool(self.consumer_key and self.consumer_secret and self.env != "mock")

    @property
    def labels_mocked(self) -> bool:
        """Labels additionally need a complete origin address"""
        if self.env == "mock":
            return True
        return not (
            self.is_live
            and settings.USPS_FROM_STREET
            and settings.USPS_FROM_CITY
            and settings.USPS_FROM_STATE
            and settings.USPS_FROM_ZIP
        )

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=self.base_url, timeout=30.0, transport=self.transport)

    async def get_oauth_token(self) -> str:
        """Client-credentials token, cached until shortly before it expires"""
        now = self.clock()
        if self.cache.oauth and self.cache.oauth.is_fresh(now):
            return self.cache.oauth.token

        async with self._client() as client:
            response = await client.post(
                "/oauth2/v3/token",
                json={
                    "client_id": self.consumer_key,
                    "client_secret": self.consumer_secret,
                    "grant_type": "client_credentials",
                },
            )
        if response.status_code != 200:
            logger.error("USPS OAuth failed %s: %s", response.status_code, response.text)
            raise UspsError(f"USPS OAuth failed {response.status_code}: {response.text}")

        data = response.json()
        self.cache.oauth = CachedToken(
            token=data["access_token"],
            expires_at=now + float(data.get("expires_in", 0)),
        )
        return self.cache.oauth.token

    async def get_payment_token(self, oauth_token: str) -> str:
        """Payment authorization token for label purchases, valid 8 hours"""
        now = self.clock()
        if self.cache.payment and self.cache.payment.is_fresh(now):
            return self.cache.payment.token

        role = {
            "CRID": settings.USPS_CRID,
            "MID": settings.USPS_MID,
            "accountType": settings.USPS_ACCOUNT_TYPE or "EPS",
            "accountNumber": settings.USPS_ACCOUNT_NUMBER,
        }
        async with self._client() as client:
            response = await client.post(
                "/payments/v3/payment-authorization",
                headers={"Authorization": f"Bearer {oauth_token}"},
                json={
                    "roles": [
                        {"roleName": "PAYER", **role},
                        {"roleName": "LABEL_OWNER", **role},
                    ]
                },
            )
        if response.status_code != 200:
            logger.error("USPS payment authorization failed %s: %s", response.status_code, response.text)
            raise UspsError(f"USPS Payment Auth failed {response.status_code}: {response.text}")

        data = response.json()
        self.cache.payment = CachedToken(
            token=data["paymentAuthorizationToken"],
            expires_at=now + PAYMENT_TOKEN_LIFETIME_SECONDS,
        )
        return self.cache.payment.token

    async def fetch_rate(
        self,
        oauth_token: str,
        mail_class: str,
        origin_zip: str,
        destination_zip: str,
        package: PackageSpec,
        mailing_date: Optional[str] = None,
    ) -> Optional[int]:
        """Retail price in cents for one mail class, or None when USPS has no price"""
        payload = {
            "originZIPCode": zip5(origin_zip),
            "destinationZIPCode": zip5(destination_zip),
            "weight": package.weight_lb,
            "length": float(package.length_in),
            "width": float(package.width_in),
            "height": float(package.height_in),
            "mailClass": mail_class,
            "processingCategory": "MACHINABLE",
            "destinationEntryFacilityType": "NONE",
            "rateIndicator": resolve_rate_indicator(mail_class),
            "priceType": "RETAIL",
            "mailingDate": mailing_date or date.today().isoformat(),
        }
        try:
            async with self._client() as client:
                response = await client.post(
                    "/prices/v3/total-rates/search",
                    headers={"Authorization": f"Bearer {oauth_token}"},
                    json=payload,
                )
        except httpx.HTTPError as e:
            logger.error("USPS rate request for %s failed: %s", mail_class, e)
            return None

        if response.status_code != 200:
            logger.error("USPS rate %s error %s: %s", mail_class, response.status_code, response.text)
            return None

        data = response.json()
        price = data.get("totalBasePrice")
        if price is None:
            rates = data.get("rates") or []
            price = rates[0].get("totalBasePrice") if rates else None
        if price is None:
            return None
        cents = (Decimal(str(price)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
        return int(cents)

    async def quote_rates(self, origin_zip: str, destination_zip: str, package: PackageSpec) -> List[Dict[str, Any]]:
        """Query every offered mail class in parallel, dropping the ones that failed"""
        oauth_token = await self.get_oauth_token()
        mailing_date = date.today().isoformat()
        prices = await asyncio.gather(*[
            self.fetch_rate(oauth_token, mc["mail_class"], origin_zip, destination_zip, package, mailing_date)
            for mc in RATE_MAIL_CLASSES
        ])
        rates = []
        for mc, price_cents in zip(RATE_MAIL_CLASSES, prices):
            if price_cents is None:
                continue
            rates.append({
                "id": mc['mail_class'].lower().replace('_', '-'),
                "name": mc["name"],
                "description": mc["description"],
                "carrier": "USPS",
                "mail_class": mc["mail_class"],
                "price_cents": price_cents,
                "min_delivery_days": mc["min_days"],
                "max_delivery_days": mc["max_days"],
            })
        return rates

    async def create_label(
        self,
        to_address: Dict[str, Any],
        mail_class: str,
        weight_lb: float,
        length_in: float,
        width_in: float,
        height_in: float,
    ) -> LabelResult:
        """Buy a 4x6 PDF label; the response is multipart (JSON metadata + PDF)"""
        oauth_token = await self.get_oauth_token()
        payment_token = await self.get_payment_token(oauth_token)

        payload = {
            "imageInfo": {
                "imageType": "PDF",
                "labelType": "4X6LABEL",
                "receiptOption": "NONE",
                "suppressPostage": False,
                "suppressMailDate": False,
                "returnLabel": False,
            },
            "toAddress": {
                "firstName": to_address.get("first_name") or "",
                "lastName": to_address.get("last_name") or "",
                "streetAddress": to_address["address1"],
                "secondaryAddress": to_address.get("address2") or None,
                "city": to_address["city"],
                "state": to_address["state"],
                "ZIPCode": zip5(to_address["zip"]),
            },
            "fromAddress": {
                "firstName": settings.USPS_FROM_NAME,
                "firm": settings.USPS_FROM_FIRM,
                "streetAddress": settings.USPS_FROM_STREET,
                "secondaryAddress": settings.USPS_FROM_SECONDARY,
                "city": settings.USPS_FROM_CITY,
                "state": settings.USPS_FROM_STATE,
                "ZIPCode": zip5(settings.USPS_FROM_ZIP or ""),
            },
            "packageDescription": {
                "mailClass": mail_class,
                "rateIndicator": resolve_rate_indicator(mail_class),
                "weightUOM": "lb",
                "weight": weight_lb,
                "dimensionsUOM": "in",
                "length": length_in,
                "width": width_in,
                "height": height_in,
                "processingCategory": "MACHINABLE",
                "mailingDate": date.today().isoformat(),
                "destinationEntryFacilityType": "NONE",
            },
        }

        async with self._client() as client:
            response = await client.post(
                "/labels/v3/label",
                headers={
                    "Authorization": f"Bearer {oauth_token}",
                    "X-Payment-Authorization-Token": payment_token,
                },
                json=payload,
            )
        if response.status_code != 200:
            logger.error("USPS label API error %s: %s", response.status_code, response.text)
            raise UspsError(f"USPS API error {response.status_code}")

        metadata, pdf = parse_label_response(response.headers.get("content-type", ""), response.content)
        if not pdf:
            raise UspsError("USPS did not return a PDF label")

        tracking_number = metadata.get("trackingNumber") or ""
        tracking_url = next(
            (link.get("href") for link in metadata.get("links") or [] if "Tracking URL" in (link.get("rel") or [])),
            None,
        ) or TRACKING_URL.format(tracking_number)
        return LabelResult(
            tracking_number=tracking_number,
            tracking_url=tracking_url,
            postage=float(metadata.get("postage") or 0),
            pdf=pdf,
            metadata=metadata,
        )


def parse_label_response(content_type: str, body: bytes):
    """Split a multipart label response into (metadata dict, pdf bytes)"""
    if "boundary=" not in content_type:
        raise UspsError("Unexpected USPS response format: no multipart boundary")

    message = BytesParser(policy=default_policy).parsebytes(
        b"Content-Type: " + content_type.encode() + b"\r\n\r\n" + body
    )
    metadata: Dict[str, Any] = {}
    pdf: Optional[bytes] = None
    for part in message.iter_parts():
        part_type = part.get_content_type()
        disposition = part.get("Content-Disposition", "")
        payload = part.get_payload(decode=True) or b""
        if part_type == "application/json" or "labelMetadata" in disposition:
            try:
                metadata = json.loads(payload.decode("utf-8").strip())
            except ValueError:
                logger.warning("Could not decode USPS label metadata")
        elif part_type == "application/pdf" or "labelImage" in disposition:
            pdf = payload
    return metadata, pdf
