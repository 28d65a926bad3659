"""Order entity with business logic"""

import secrets
import string
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from ..value_objects.money import Money
from ..value_objects.entity_ids import OrderId
from ..enums import OrderStatus, PaymentStatus, OrderSource, CheckoutStep
from ..events.order_events import OrderPaid, OrderFulfilled, OrderRefunded


_NUMBER_ALPHABET = string.ascii_uppercase + string.digits


def generate_order_number(source: OrderSource = OrderSource.WEB, now: Optional[datetime] = None) -> str:
    """DCG-YYYYMMDD-XXXXXX for web orders, DCG-POS-YYYYMMDD-XXXX for POS sales"""
    ymd = (now or datetime.utcnow()).strftime("%Y%m%d")
    if source == OrderSource.POS:
        suffix = ''.join(secrets.choice(_NUMBER_ALPHABET) for _ in range(4))
        return f"DCG-POS-{ymd}-{suffix}"
    suffix = ''.join(secrets.choice(_NUMBER_ALPHABET) for _ in range(6))
    return f"DCG-{ymd}-{suffix}"


@dataclass
class OrderLine:
    title: str
    quantity: int
    price_cents: int
    product_id: Optional[UUID] = None
    variant_id: Optional[UUID] = None
    variant_title: Optional[str] = None
    sku: Optional[str] = None
    product_snapshot: Optional[Dict[str, Any]] = None
    id: Optional[UUID] = None

    @property
    def line_total_cents(self) -> int:
        return self.price_cents * self.quantity


@dataclass
class Order:
    id: OrderId
    order_number: str
    total_cents: int
    source: OrderSource = OrderSource.WEB
    status: OrderStatus = OrderStatus.PENDING
    payment_status: PaymentStatus = PaymentStatus.PENDING
    checkout_step: Optional[str] = None

    # Identity
    profile_id: Optional[UUID] = None
    guest_key: Optional[str] = None
    cart_id: Optional[UUID] = None
    pos_staff_id: Optional[UUID] = None

    # Amounts
    subtotal_cents: Optional[int] = None
    discount_cents: Optional[int] = None
    shipping_cents: Optional[int] = None
    tax_cents: Optional[int] = None
    currency: str = "USD"
    promo_code: Optional[str] = None

    # Customer
    email: Optional[str] = None
    phone: Optional[str] = None
    customer_first_name: Optional[str] = None
    customer_last_name: Optional[str] = None
    shipping_address: Optional[Dict[str, Any]] = None
    billing_address: Optional[Dict[str, Any]] = None
    customer_notes: Optional[str] = None
    internal_notes: Optional[str] = None
    customer_ip: Optional[str] = None
    user_agent: Optional[str] = None

    # Shipping
    shipping_rate_id: Optional[str] = None
    shipping_method_name: Optional[str] = None
    tracking_number: Optional[str] = None
    tracking_url: Optional[str] = None
    label_pdf_path: Optional[str] = None
    label_postage_cents: Optional[int] = None

    # Payment provider
    stripe_payment_intent_id: Optional[str] = None
    stripe_client_secret: Optional[str] = None
    stripe_charge_id: Optional[str] = None
    payment_method_id: Optional[str] = None
    payment_method_type: Optional[str] = None
    card_brand: Optional[str] = None
    card_last4: Optional[str] = None
    card_exp_month: Optional[int] = None
    card_exp_year: Optional[int] = None
    payment_error_code: Optional[str] = None
    payment_error_message: Optional[str] = None
    requires_action: bool = False
    risk_score: Optional[int] = None
    risk_level: Optional[str] = None
    billing_details: Optional[Dict[str, Any]] = None

    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)
    payment_succeeded_at: Optional[datetime] = None
    payment_failed_at: Optional[datetime] = None
    fulfilled_at: Optional[datetime] = None
    refunded_at: Optional[datetime] = None

    items: List[OrderLine] = field(default_factory=list)

    # Domain events
    _events: List = field(default_factory=list, init=False)

    @classmethod
    def place(
        cls,
        items: List[OrderLine],
        subtotal_cents: int,
        discount_cents: int,
        shipping_cents: int,
        tax_cents: int,
        source: OrderSource = OrderSource.WEB,
        **details,
    ) -> 'Order':
        """Factory: a new pending order with its totals.

        total = subtotal - discount + shipping + tax, never below zero.
        """
        total = max(subtotal_cents - discount_cents + shipping_cents + tax_cents, 0)
        return cls(
            id=OrderId.generate(),
            order_number=generate_order_number(source),
            source=source,
            items=list(items),
            subtotal_cents=subtotal_cents,
            discount_cents=discount_cents,
            shipping_cents=shipping_cents,
            tax_cents=tax_cents,
            total_cents=total,
            **details,
        )

    def attach_payment_intent(self, intent_id: str, client_secret: Optional[str]) -> None:
        self.stripe_payment_intent_id = intent_id
        self.stripe_client_secret = client_secret
        self.checkout_step = CheckoutStep.PAYMENT.value
        self.updated_at = datetime.utcnow()

    def mark_as_paid(self, payment_intent_id: str, card: Optional[Dict[str, Any]] = None) -> bool:
        """Business logic: record a successful payment.

        Returns False when the order was already paid (duplicate webhook delivery).
        """
        if self.payment_status == PaymentStatus.PAID:
            return False
        if self.payment_status == PaymentStatus.REFUNDED:
            raise ValueError("Cannot mark a refunded order as paid")

        now = datetime.utcnow()
        self.payment_status = PaymentStatus.PAID
        self.status = OrderStatus.PROCESSING
        self.payment_succeeded_at = now
        self.checkout_step = CheckoutStep.COMPLETE.value
        self.requires_action = False
        self.stripe_payment_intent_id = self.stripe_payment_intent_id or payment_intent_id
        if card:
            self.payment_method_id = card.get("id")
            self.payment_method_type = card.get("type", "card")
            self.card_brand = card.get("brand")
            self.card_last4 = card.get("last4")
            self.card_exp_month = card.get("exp_month")
            self.card_exp_year = card.get("exp_year")
        self.updated_at = now

        self._events.append(OrderPaid(
            order_id=self.id,
            order_number=self.order_number,
            amount=Money(self.total_cents, self.currency),
            payment_intent_id=payment_intent_id,
            email=self.email,
        ))
        return True

    def mark_payment_failed(self, error_code: Optional[str], error_message: Optional[str]) -> None:
        if self.payment_status == PaymentStatus.PAID:
            raise ValueError("Cannot fail a paid order")
        self.payment_status = PaymentStatus.FAILED
        self.payment_failed_at = datetime.utcnow()
        self.payment_error_code = error_code
        self.payment_error_message = error_message
        self.updated_at = datetime.utcnow()

    def mark_requires_action(self) -> None:
        self.requires_action = True
        self.updated_at = datetime.utcnow()

    def record_charge(
        self,
        charge_id: str,
        risk_score: Optional[int] = None,
        risk_level: Optional[str] = None,
        billing_details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.stripe_charge_id = charge_id
        self.risk_score = risk_score
        self.risk_level = risk_level
        self.billing_details = billing_details
        self.updated_at = datetime.utcnow()

    def refund(self) -> None:
        """Business logic: full refund"""
        now = datetime.utcnow()
        self.status = OrderStatus.REFUNDED
        self.payment_status = PaymentStatus.REFUNDED
        self.refunded_at = now
        self.updated_at = now
        self._events.append(OrderRefunded(order_id=self.id, refunded_at=now))

    def fulfill(self, tracking_number: Optional[str] = None, tracking_url: Optional[str] = None) -> None:
        """Business logic: mark order shipped/handed over"""
        if not self.items:
            raise ValueError("Order has no items to fulfill")
        if self.status in (OrderStatus.CANCELLED, OrderStatus.REFUNDED):
            raise ValueError(f"Cannot fulfill order with status: {self.status.value}")

        now = datetime.utcnow()
        self.status = OrderStatus.FULFILLED
        self.fulfilled_at = now
        if tracking_number is not None:
            self.tracking_number = tracking_number.strip() or None
        if tracking_url is not None:
            self.tracking_url = tracking_url.strip() or None
        self.updated_at = now

        self._events.append(OrderFulfilled(
            order_id=self.id,
            tracking_number=self.tracking_number,
            fulfilled_at=now,
        ))

    def record_label(self, tracking_number: str, label_pdf_path: Optional[str], postage_cents: Optional[int], tracking_url: str) -> None:
        self.tracking_number = tracking_number
        self.tracking_url = tracking_url
        self.label_pdf_path = label_pdf_path
        self.label_postage_cents = postage_cents
        note = f"[Label] USPS {tracking_number}"
        self.internal_notes = f"{self.internal_notes} | {note}" if self.internal_notes else note
        self.updated_at = datetime.utcnow()

    @property
    def is_pos(self) -> bool:
        return self.source == OrderSource.POS

    @property
    def is_member(self) -> bool:
        return not self.is_pos and self.profile_id is not None

    @property
    def is_guest(self) -> bool:
        return not self.is_pos and self.profile_id is None and bool(self.guest_key)

    @property
    def is_legacy(self) -> bool:
        return not self.is_pos and self.profile_id is None and not self.guest_key

    @property
    def points_earned(self) -> int:
        return points_for(self.subtotal_cents, self.total_cents)

    @property
    def is_paid(self) -> bool:
        return self.payment_status == PaymentStatus.PAID

    @property
    def is_refunded(self) -> bool:
        return self.payment_status == PaymentStatus.REFUNDED

    def get_events(self) -> List:
        """Get and clear domain events"""
        events = self._events.copy()
        self._events.clear()
        return events


def points_for(subtotal_cents: Optional[int], total_cents: Optional[int]) -> int:
    """One loyalty point per whole dollar of merchandise"""
    return (subtotal_cents or total_cents or 0) // 100
