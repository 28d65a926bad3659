"""Process Stripe webhook use case"""

import logging
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from ...domain.entities.order import Order
from ...domain.enums import CartStatus
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.value_objects.entity_ids import OrderId, parse_uuid
from ...application.services.order_notifier import OrderNotifier
from ...infrastructure.external_services.payment_service import PaymentService
from ...infrastructure.orm.cart_model import CartModel
from ...infrastructure.orm.catalog_model import ProductVariantModel
from ...infrastructure.orm.checkout_model import PromoCodeModel

logger = logging.getLogger(__name__)


class ProcessStripeWebhookUseCase:

    def __init__(
        self,
        db: Session,
        unit_of_work: IUnitOfWork,
        payment_service: PaymentService,
        notifier: OrderNotifier,
    ):
        self.db = db
        self.unit_of_work = unit_of_work
        self.payment_service = payment_service
        self.notifier = notifier

    async def execute(self, payload: bytes, signature: str) -> Dict[str, Any]:
        """Verify the event and apply it. Raises WebhookSignatureError on a bad signature."""
        event = self.payment_service.construct_event(payload, signature)
        event_type = event.get("type")
        obj = (event.get("data") or {}).get("object") or {}

        handlers = {
            "payment_intent.succeeded": self._handle_payment_succeeded,
            "payment_intent.payment_failed": self._handle_payment_failed,
            "payment_intent.requires_action": self._handle_requires_action,
            "charge.succeeded": self._handle_charge_succeeded,
            "charge.refunded": self._handle_charge_refunded,
        }
        handler = handlers.get(event_type)
        if handler is None:
            logger.info("Unhandled Stripe event type: %s", event_type)
        else:
            await handler(obj)
        return {"received": True}

    async def _order_for_intent(self, intent: Dict[str, Any]) -> Optional[Order]:
        order_id = parse_uuid((intent.get("metadata") or {}).get("order_id"))
        if order_id is not None:
            order = await self.unit_of_work.orders.get_by_id(OrderId(order_id))
            if order:
                return order
        if intent.get("id"):
            return await self.unit_of_work.orders.get_by_payment_intent_id(intent["id"])
        return None

    async def _order_for_charge(self, charge: Dict[str, Any]) -> Optional[Order]:
        intent_id = charge.get("payment_intent")
        if not intent_id:
            return None
        return await self.unit_of_work.orders.get_by_payment_intent_id(intent_id)

    async def _handle_payment_succeeded(self, intent: Dict[str, Any]) -> None:
        card = None
        if intent.get("payment_method"):
            card = await self.payment_service.get_card_details(intent["payment_method"])

        async with self.unit_of_work:
            order = await self._order_for_intent(intent)
            if not order:
                logger.error("No order for payment intent %s", intent.get("id"))
                return
            if order.is_refunded:
                logger.warning("Ignoring success event for refunded order %s", order.order_number)
                return

            if not order.mark_as_paid(intent.get("id"), card):
                logger.info("Order %s already paid, ignoring duplicate event", order.order_number)
                return

            await self.unit_of_work.orders.update(order)
            self._convert_cart(order)
            self._decrement_inventory(order)
            self._count_promo_use(order)
            await self.unit_of_work.commit()

        logger.info("Order %s paid via %s", order.order_number, intent.get("id"))
        for event in order.get_events():
            logger.debug("Domain event: %s", type(event).__name__)
        self.notifier.order_paid(order.id.value)

    def _convert_cart(self, order: Order) -> None:
        if not order.cart_id:
            return
        cart = self.db.get(CartModel, order.cart_id)
        if cart:
            cart.status = CartStatus.CONVERTED.value
            cart.converted_at = datetime.utcnow()

    def _decrement_inventory(self, order: Order) -> None:
        for line in order.items:
            if not line.variant_id:
                continue
            variant = self.db.get(ProductVariantModel, line.variant_id)
            if variant and variant.track_inventory:
                variant.stock_quantity = max((variant.stock_quantity or 0) - line.quantity, 0)

    def _count_promo_use(self, order: Order) -> None:
        if not order.promo_code:
            return
        promo = self.db.query(PromoCodeModel).filter(PromoCodeModel.code == order.promo_code).first()
        if promo:
            promo.usage_count = (promo.usage_count or 0) + 1

    async def _handle_payment_failed(self, intent: Dict[str, Any]) -> None:
        last_error = intent.get("last_payment_error") or {}
        async with self.unit_of_work:
            order = await self._order_for_intent(intent)
            if not order:
                logger.error("No order for failed payment intent %s", intent.get("id"))
                return
            if order.is_paid or order.is_refunded:
                logger.warning("Ignoring failure event for %s order %s", order.payment_status.value, order.order_number)
                return
            order.mark_payment_failed(last_error.get("code"), last_error.get("message"))
            await self.unit_of_work.orders.update(order)
            await self.unit_of_work.commit()
        logger.info("Payment failed for order %s: %s", order.order_number, last_error.get("code"))

    async def _handle_requires_action(self, intent: Dict[str, Any]) -> None:
        async with self.unit_of_work:
            order = await self._order_for_intent(intent)
            if not order:
                return
            order.mark_requires_action()
            await self.unit_of_work.orders.update(order)
            await self.unit_of_work.commit()

    async def _handle_charge_succeeded(self, charge: Dict[str, Any]) -> None:
        outcome = charge.get("outcome") or {}
        async with self.unit_of_work:
            order = await self._order_for_charge(charge)
            if not order:
                return
            order.record_charge(
                charge_id=charge.get("id"),
                risk_score=outcome.get("risk_score"),
                risk_level=outcome.get("risk_level"),
                billing_details=charge.get("billing_details"),
            )
            await self.unit_of_work.orders.update(order)
            await self.unit_of_work.commit()

    async def _handle_charge_refunded(self, charge: Dict[str, Any]) -> None:
        async with self.unit_of_work:
            order = await self._order_for_charge(charge)
            if not order:
                return
            order.refund()
            await self.unit_of_work.orders.update(order)
            await self.unit_of_work.commit()
        logger.info("Order %s refunded", order.order_number)
