"""Checkout ORM Models: tax rates, promo codes, shipping rates and boxes"""

from datetime import datetime
from decimal import Decimal
from uuid import uuid4

from sqlalchemy import Column, Integer, String, DateTime, Boolean, Text, Numeric, Uuid

from ...db.models import Base


class TaxRateModel(Base):
    __tablename__ = 'tax_rates'

    id = Column(Uuid, primary_key=True, default=uuid4, index=True)
    state = Column(String(2), nullable=False, index=True)
    rate = Column(Numeric(6, 5), nullable=False, default=Decimal("0"))  # 0.06250 = 6.25%
    type = Column(String, default='state', nullable=False)  # state | county | city | district
    description = Column(String, nullable=True)
    applies_to_shipping = Column(Boolean, default=False, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class PromoCodeModel(Base):
    __tablename__ = 'promo_codes'

    id = Column(Uuid, primary_key=True, default=uuid4, index=True)
    code = Column(String, unique=True, nullable=False, index=True)
    description = Column(Text, nullable=True)
    discount_type = Column(String, nullable=False)  # percentage | fixed_amount | free_shipping
    discount_value = Column(Integer, nullable=False, default=0)  # percent or cents
    min_subtotal_cents = Column(Integer, nullable=True)
    max_discount_cents = Column(Integer, nullable=True)
    starts_at = Column(DateTime, nullable=True)
    expires_at = Column(DateTime, nullable=True)
    usage_limit = Column(Integer, nullable=True)
    usage_count = Column(Integer, default=0, nullable=False)
    per_customer_limit = Column(Integer, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class ShippingRateModel(Base):
    __tablename__ = 'shipping_rates'

    id = Column(Uuid, primary_key=True, default=uuid4, index=True)
    name = Column(String, nullable=False)
    description = Column(String, nullable=True)
    carrier = Column(String, default='USPS', nullable=True)
    price_cents = Column(Integer, nullable=False, default=0)
    min_subtotal_cents = Column(Integer, nullable=True)
    max_subtotal_cents = Column(Integer, nullable=True)
    min_delivery_days = Column(Integer, nullable=True)
    max_delivery_days = Column(Integer, nullable=True)
    position = Column(Integer, default=0, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class ShippingBoxModel(Base):
    __tablename__ = 'shipping_boxes'

    id = Column(Uuid, primary_key=True, default=uuid4, index=True)
    name = Column(String, nullable=False)
    length_in = Column(Numeric(6, 2), nullable=False)
    width_in = Column(Numeric(6, 2), nullable=False)
    height_in = Column(Numeric(6, 2), nullable=False)
    weight_oz = Column(Numeric(6, 2), nullable=True)  # empty box weight
    is_default = Column(Boolean, default=False, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
