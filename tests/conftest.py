import json
import os
from uuid import uuid4

os.environ["TESTING"] = "true"
os.environ["USPS_ENV"] = "mock"
os.environ["SMTP_HOST"] = ""

import pytest
from fastapi.testclient import TestClient

from storefront.main import app
from storefront.api.dependencies import get_payment_service, get_storage_service, get_order_notifier
from storefront.core.security import create_access_token, get_password_hash
from storefront.db.database import SessionLocal, engine
from storefront.db.models import Base
from storefront.domain.entities.order import generate_order_number
from storefront.domain.enums import ProductStatus, ProfileRole, OrderSource
from storefront.infrastructure.cache.navigation_cache import navigation_cache
from storefront.infrastructure.external_services.payment_service import PaymentProviderError, WebhookSignatureError
from storefront.infrastructure.external_services.storage_service import StorageError
from storefront.infrastructure.external_services.usps_service import token_cache
from storefront.infrastructure.orm import (
    ProfileModel, ProductModel, ProductVariantModel, OrderModel, OrderItemModel,
)


class FakePaymentService:
    """Records payment intents instead of calling Stripe"""

    def __init__(self):
        self.intents = []
        self.fail = False
        self.card = {
            "id": "pm_test", "type": "card", "brand": "visa",
            "last4": "4242", "exp_month": 12, "exp_year": 2030,
        }

    async def create_payment_intent(self, amount_cents, metadata, description=None,
                                    receipt_email=None, shipping=None, currency="usd"):
        if self.fail:
            raise PaymentProviderError("card_declined")
        intent_id = f"pi_test_{len(self.intents) + 1}"
        intent = {
            "id": intent_id,
            "client_secret": f"{intent_id}_secret",
            "amount": amount_cents,
            "status": "requires_payment_method",
            "metadata": metadata,
            "shipping": shipping,
        }
        self.intents.append(intent)
        return intent

    def construct_event(self, payload, signature):
        if signature != "valid":
            raise WebhookSignatureError("bad signature")
        return json.loads(payload)

    async def get_card_details(self, payment_method_id):
        return self.card

    async def create_connection_token(self):
        if self.fail:
            raise PaymentProviderError("terminal unavailable")
        return "pst_test_secret"


class FakeStorageService:
    """In-memory object store"""

    def __init__(self):
        self.objects = {}

    async def upload_file(self, bucket, data, filename, content_type, prefix="", object_path=None):
        path = object_path or "/".join(part for part in (prefix, f"{uuid4().hex}-{filename}") if part)
        self.objects[(bucket, path)] = data
        return path

    async def delete_file(self, bucket, object_path):
        return self.objects.pop((bucket, object_path), None) is not None

    async def download_file(self, bucket, object_path):
        if (bucket, object_path) not in self.objects:
            raise StorageError("missing")
        return self.objects[(bucket, object_path)]


class FakeNotifier:

    def __init__(self):
        self.paid = []

    def order_paid(self, order_id):
        self.paid.append(order_id)


@pytest.fixture(autouse=True)
def database():
    Base.metadata.create_all(bind=engine)
    navigation_cache.revalidate()
    token_cache.clear()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def payment():
    return FakePaymentService()


@pytest.fixture
def storage():
    return FakeStorageService()


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def client(payment, storage, notifier):
    app.dependency_overrides[get_payment_service] = lambda: payment
    app.dependency_overrides[get_storage_service] = lambda: storage
    app.dependency_overrides[get_order_notifier] = lambda: notifier
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def make_profile(db, email, role=ProfileRole.MEMBER, password="password123"):
    profile = ProfileModel(
        email=email,
        hashed_password=get_password_hash(password),
        display_name=email.split("@")[0],
        role=role.value,
    )
    db.add(profile)
    db.commit()
    db.refresh(profile)
    return profile


def auth_headers(profile):
    return {"Authorization": f"Bearer {create_access_token(str(profile.id))}"}


@pytest.fixture
def admin(db):
    return make_profile(db, "admin@example.com", ProfileRole.ADMIN)


@pytest.fixture
def member(db):
    return make_profile(db, "member@example.com")


@pytest.fixture
def admin_headers(admin):
    return auth_headers(admin)


@pytest.fixture
def member_headers(member):
    return auth_headers(member)


def make_product(db, slug="linen-shirt", price_cents=4800, status=ProductStatus.ACTIVE, **fields):
    product = ProductModel(slug=slug, title=fields.pop("title", slug.replace("-", " ").title()),
                           price_cents=price_cents, status=status.value, **fields)
    db.add(product)
    db.commit()
    db.refresh(product)
    return product


def make_variant(db, product, title="Medium", stock_quantity=10, weight_grams=250, **fields):
    variant = ProductVariantModel(
        product_id=product.id,
        title=title,
        sku=fields.pop("sku", f"{product.slug}-{title}".upper()),
        price_cents=fields.pop("price_cents", product.price_cents),
        stock_quantity=stock_quantity,
        weight_grams=weight_grams,
        **fields,
    )
    db.add(variant)
    db.commit()
    db.refresh(variant)
    return variant


SHIPPING_ADDRESS = {
    "first_name": "Ada",
    "last_name": "Lovelace",
    "address1": "12 Analytical Way",
    "city": "Austin",
    "state": "TX",
    "zip": "78701",
    "country": "US",
}


def make_order(db, profile=None, items=True, **fields):
    order = OrderModel(
        order_number=fields.pop("order_number", generate_order_number(OrderSource.WEB)),
        profile_id=profile.id if profile else None,
        email=fields.pop("email", profile.email if profile else "guest@example.com"),
        subtotal_cents=fields.pop("subtotal_cents", 5000),
        total_cents=fields.pop("total_cents", 5400),
        shipping_address=fields.pop("shipping_address", dict(SHIPPING_ADDRESS)),
        **fields,
    )
    if items:
        order.items.append(OrderItemModel(title="Linen Shirt", variant_title="Medium", quantity=1, price_cents=5000))
    db.add(order)
    db.commit()
    db.refresh(order)
    return order
