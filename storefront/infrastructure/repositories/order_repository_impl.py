"""Order repository implementation using SQLAlchemy ORM"""

from typing import Optional
from uuid import UUID
from sqlalchemy.orm import Session
from sqlalchemy import func, or_

from ...domain.entities.order import Order, OrderLine
from ...domain.repositories.order_repository import IOrderRepository
from ...domain.value_objects.entity_ids import OrderId
from ...domain.enums import OrderStatus, PaymentStatus, OrderSource, FulfillmentStatus
from ..orm.order_model import OrderModel, OrderItemModel, FulfillmentModel


# Plain columns copied one-to-one between the entity and the model
_PLAIN_FIELDS = (
    'order_number', 'checkout_step', 'profile_id', 'guest_key', 'cart_id', 'pos_staff_id',
    'subtotal_cents', 'discount_cents', 'shipping_cents', 'tax_cents', 'total_cents',
    'currency', 'promo_code', 'email', 'phone', 'customer_first_name', 'customer_last_name',
    'shipping_address', 'billing_address', 'customer_notes', 'internal_notes',
    'customer_ip', 'user_agent', 'shipping_rate_id', 'shipping_method_name',
    'tracking_number', 'tracking_url', 'label_pdf_path', 'label_postage_cents',
    'stripe_payment_intent_id', 'stripe_client_secret', 'stripe_charge_id',
    'payment_method_id', 'payment_method_type', 'card_brand', 'card_last4',
    'card_exp_month', 'card_exp_year', 'payment_error_code', 'payment_error_message',
    'requires_action', 'risk_score', 'risk_level', 'billing_details',
    'created_at', 'updated_at', 'payment_succeeded_at', 'payment_failed_at',
    'fulfilled_at', 'refunded_at',
)


class OrderRepositoryImpl(IOrderRepository):
    """Repository implementation for Order aggregate"""

    def __init__(self, session: Session):
        self.session = session

    async def get_by_id(self, order_id: OrderId) -> Optional[Order]:
        model = self.session.get(OrderModel, order_id.value)
        return self._map_to_entity(model) if model else None

    async def get_by_payment_intent_id(self, payment_intent_id: str) -> Optional[Order]:
        model = self.session.query(OrderModel).filter(
            OrderModel.stripe_payment_intent_id == payment_intent_id
        ).first()
        return self._map_to_entity(model) if model else None

    async def add(self, order: Order) -> Order:
        model = OrderModel(id=order.id.value)
        self._update_model_from_entity(model, order)
        for line in order.items:
            item = OrderItemModel(
                product_id=line.product_id,
                variant_id=line.variant_id,
                title=line.title,
                variant_title=line.variant_title,
                sku=line.sku,
                quantity=line.quantity,
                price_cents=line.price_cents,
                product_snapshot=line.product_snapshot,
            )
            model.items.append(item)
        self.session.add(model)
        self.session.flush()
        for line, item in zip(order.items, model.items):
            line.id = item.id
        return order

    async def update(self, order: Order) -> Order:
        model = self.session.get(OrderModel, order.id.value)
        if model:
            self._update_model_from_entity(model, order)
            self.session.flush()
        return order

    async def delete(self, order_id: OrderId) -> bool:
        model = self.session.get(OrderModel, order_id.value)
        if not model:
            return False
        self.session.delete(model)
        self.session.flush()
        return True

    async def upsert_fulfillment(
        self,
        order_id: OrderId,
        tracking_number: Optional[str],
        tracking_url: Optional[str],
        note: Optional[str],
        fulfilled_by: Optional[UUID],
    ) -> None:
        """One fulfillment row per order: create it or refresh its tracking"""
        fulfillment = self.session.query(FulfillmentModel).filter(
            FulfillmentModel.order_id == order_id.value
        ).order_by(FulfillmentModel.created_at).first()
        if fulfillment is None:
            fulfillment = FulfillmentModel(order_id=order_id.value)
            self.session.add(fulfillment)
        fulfillment.status = FulfillmentStatus.FULFILLED.value
        fulfillment.tracking_number = tracking_number
        fulfillment.tracking_url = tracking_url
        if note is not None:
            fulfillment.note = note
        fulfillment.fulfilled_by = fulfilled_by
        self.session.flush()

    async def count_paid_with_promo(self, code: str, profile_id: Optional[UUID], email: Optional[str]) -> int:
        """Paid orders this customer already placed with a promo code"""
        identity = []
        if profile_id is not None:
            identity.append(OrderModel.profile_id == profile_id)
        if email:
            identity.append(func.lower(OrderModel.email) == email.strip().lower())
        if not identity:
            return 0
        return self.session.query(OrderModel).filter(
            OrderModel.promo_code == code,
            OrderModel.payment_status == PaymentStatus.PAID.value,
            or_(*identity),
        ).count()

    def _update_model_from_entity(self, model: OrderModel, order: Order) -> None:
        """Update ORM model from domain entity"""
        for name in _PLAIN_FIELDS:
            setattr(model, name, getattr(order, name))
        model.source = order.source.value
        model.status = order.status.value
        model.payment_status = order.payment_status.value

    def _map_to_entity(self, model: OrderModel) -> Order:
        """Map ORM model to domain entity"""
        values = {name: getattr(model, name) for name in _PLAIN_FIELDS}
        values['requires_action'] = bool(model.requires_action)
        return Order(
            id=OrderId(model.id),
            source=OrderSource(model.source or OrderSource.WEB.value),
            status=OrderStatus(model.status),
            payment_status=PaymentStatus(model.payment_status),
            items=[
                OrderLine(
                    id=item.id,
                    product_id=item.product_id,
                    variant_id=item.variant_id,
                    title=item.title,
                    variant_title=item.variant_title,
                    sku=item.sku,
                    quantity=item.quantity,
                    price_cents=item.price_cents,
                    product_snapshot=item.product_snapshot,
                )
                for item in model.items
            ],
            **values,
        )
