"""Order ORM Models"""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import Column, Integer, String, DateTime, Boolean, Text, ForeignKey, JSON, Uuid
from sqlalchemy.orm import relationship

from ...db.models import Base
from ...domain.enums import OrderStatus, PaymentStatus, OrderSource, FulfillmentStatus


class OrderModel(Base):
    __tablename__ = 'orders'

    id = Column(Uuid, primary_key=True, default=uuid4, index=True)
    order_number = Column(String, unique=True, nullable=False, index=True)

    # Identity: member (profile_id), guest (guest_key) or neither for legacy orders
    profile_id = Column(Uuid, ForeignKey('profiles.id', ondelete='SET NULL'), nullable=True, index=True)
    guest_key = Column(String, nullable=True, index=True)
    cart_id = Column(Uuid, ForeignKey('carts.id', ondelete='SET NULL'), nullable=True)
    source = Column(String, default=OrderSource.WEB.value, nullable=False)
    pos_staff_id = Column(Uuid, ForeignKey('profiles.id', ondelete='SET NULL'), nullable=True)

    # Status
    status = Column(String, default=OrderStatus.PENDING.value, nullable=False, index=True)
    payment_status = Column(String, default=PaymentStatus.PENDING.value, nullable=False, index=True)
    checkout_step = Column(String, nullable=True)

    # Amounts (cents)
    subtotal_cents = Column(Integer, nullable=True)
    discount_cents = Column(Integer, nullable=True)
    shipping_cents = Column(Integer, nullable=True)
    tax_cents = Column(Integer, nullable=True)
    total_cents = Column(Integer, nullable=False, default=0)
    currency = Column(String, default='USD', nullable=False)
    promo_code = Column(String, nullable=True)

    # Customer
    email = Column(String, nullable=True, index=True)
    phone = Column(String, nullable=True)
    customer_first_name = Column(String, nullable=True)
    customer_last_name = Column(String, nullable=True)
    shipping_address = Column(JSON, nullable=True)
    billing_address = Column(JSON, nullable=True)
    customer_notes = Column(Text, nullable=True)
    internal_notes = Column(Text, nullable=True)
    customer_ip = Column(String, nullable=True)
    user_agent = Column(String, nullable=True)

    # Shipping
    shipping_rate_id = Column(String, nullable=True)
    shipping_method_name = Column(String, nullable=True)
    tracking_number = Column(String, nullable=True)
    tracking_url = Column(String, nullable=True)
    label_pdf_path = Column(String, nullable=True)
    label_postage_cents = Column(Integer, nullable=True)

    # Stripe
    stripe_payment_intent_id = Column(String, unique=True, nullable=True, index=True)
    stripe_client_secret = Column(String, nullable=True)
    stripe_charge_id = Column(String, nullable=True)
    payment_method_id = Column(String, nullable=True)
    payment_method_type = Column(String, nullable=True)
    card_brand = Column(String, nullable=True)
    card_last4 = Column(String, nullable=True)
    card_exp_month = Column(Integer, nullable=True)
    card_exp_year = Column(Integer, nullable=True)
    payment_error_code = Column(String, nullable=True)
    payment_error_message = Column(Text, nullable=True)
    requires_action = Column(Boolean, default=False, nullable=False)
    risk_score = Column(Integer, nullable=True)
    risk_level = Column(String, nullable=True)
    billing_details = Column(JSON, nullable=True)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    payment_succeeded_at = Column(DateTime, nullable=True)
    payment_failed_at = Column(DateTime, nullable=True)
    fulfilled_at = Column(DateTime, nullable=True)
    refunded_at = Column(DateTime, nullable=True)

    # Relationships
    profile = relationship('ProfileModel', back_populates='orders', foreign_keys=[profile_id])
    items = relationship(
        'OrderItemModel',
        back_populates='order',
        cascade='all, delete-orphan',
        order_by='OrderItemModel.created_at',
    )
    fulfillments = relationship(
        'FulfillmentModel',
        back_populates='order',
        cascade='all, delete-orphan',
        order_by='FulfillmentModel.created_at',
    )


class OrderItemModel(Base):
    __tablename__ = 'order_items'

    id = Column(Uuid, primary_key=True, default=uuid4, index=True)
    order_id = Column(Uuid, ForeignKey('orders.id', ondelete='CASCADE'), nullable=False, index=True)
    product_id = Column(Uuid, ForeignKey('products.id', ondelete='SET NULL'), nullable=True)
    variant_id = Column(Uuid, ForeignKey('product_variants.id', ondelete='SET NULL'), nullable=True)
    title = Column(String, nullable=False)
    variant_title = Column(String, nullable=True)
    sku = Column(String, nullable=True)
    quantity = Column(Integer, nullable=False, default=1)
    price_cents = Column(Integer, nullable=False, default=0)
    product_snapshot = Column(JSON, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    order = relationship('OrderModel', back_populates='items')


class FulfillmentModel(Base):
    __tablename__ = 'fulfillments'

    id = Column(Uuid, primary_key=True, default=uuid4, index=True)
    order_id = Column(Uuid, ForeignKey('orders.id', ondelete='CASCADE'), nullable=False, index=True)
    status = Column(String, default=FulfillmentStatus.FULFILLED.value, nullable=False)
    tracking_number = Column(String, nullable=True)
    tracking_url = Column(String, nullable=True)
    note = Column(Text, nullable=True)
    fulfilled_by = Column(Uuid, ForeignKey('profiles.id', ondelete='SET NULL'), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    order = relationship('OrderModel', back_populates='fulfillments')
