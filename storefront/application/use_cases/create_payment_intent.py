"""Create payment intent use case: turns an active cart into a pending order"""

import logging
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from ...domain.entities.order import Order, OrderLine
from ...domain.enums import CartStatus, OrderSource, CheckoutStep
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.services.pricing import calculate_tax, evaluate_promo, normalize_code
from ...application.dtos.checkout_dtos import CreatePaymentIntentDto
from ...application.use_cases.quote_shipping_rates import QuoteShippingRatesUseCase
from ...infrastructure.external_services.payment_service import PaymentService, PaymentProviderError
from ...infrastructure.external_services.usps_service import UspsService
from ...infrastructure.orm.cart_model import CartModel
from ...infrastructure.orm.checkout_model import PromoCodeModel, TaxRateModel

logger = logging.getLogger(__name__)


class CartNotFoundError(Exception):
    pass


def order_summary(order: Order) -> Dict[str, Any]:
    return {
        "id": str(order.id),
        "order_number": order.order_number,
        "status": order.status.value,
        "payment_status": order.payment_status.value,
        "checkout_step": order.checkout_step,
        "email": order.email,
        "subtotal_cents": order.subtotal_cents,
        "discount_cents": order.discount_cents,
        "shipping_cents": order.shipping_cents,
        "tax_cents": order.tax_cents,
        "total_cents": order.total_cents,
        "currency": order.currency,
        "promo_code": order.promo_code,
        "shipping_method_name": order.shipping_method_name,
        "items": [
            {
                "id": str(line.id) if line.id else None,
                "product_id": str(line.product_id) if line.product_id else None,
                "variant_id": str(line.variant_id) if line.variant_id else None,
                "title": line.title,
                "variant_title": line.variant_title,
                "sku": line.sku,
                "quantity": line.quantity,
                "price_cents": line.price_cents,
            }
            for line in order.items
        ],
    }


class CreatePaymentIntentUseCase:

    def __init__(
        self,
        db: Session,
        unit_of_work: IUnitOfWork,
        payment_service: PaymentService,
        usps_service: UspsService,
    ):
        self.db = db
        self.unit_of_work = unit_of_work
        self.payment_service = payment_service
        self.usps_service = usps_service

    def _snapshot_lines(self, cart: CartModel) -> List[OrderLine]:
        lines = []
        for item in cart.items:
            variant = item.variant
            if variant is None or variant.product is None:
                continue
            product = variant.product
            lines.append(OrderLine(
                product_id=product.id,
                variant_id=variant.id,
                title=product.title,
                variant_title=variant.title,
                sku=variant.sku,
                quantity=item.quantity,
                price_cents=variant.price_cents,
                product_snapshot={
                    "slug": product.slug,
                    "title": product.title,
                    "variant_title": variant.title,
                    "options": variant.options or {},
                },
            ))
        return lines

    async def _apply_promo(self, code: Optional[str], subtotal_cents: int, profile_id: Optional[UUID], email: str):
        if not code:
            return None, 0, False
        code = normalize_code(code)
        promo = self.db.query(PromoCodeModel).filter(PromoCodeModel.code == code).first()
        customer_uses = await self.unit_of_work.orders.count_paid_with_promo(code, profile_id, email)
        result = evaluate_promo(promo, subtotal_cents, customer_uses=customer_uses)
        if not result.is_valid:
            raise ValueError(result.error_message)
        return code, result.discount_cents, result.free_shipping

    async def _price_shipping(self, request: CreatePaymentIntentDto, subtotal_cents: int):
        if not request.shipping_rate_id:
            return 0, None
        quote = await QuoteShippingRatesUseCase(self.db, self.usps_service).execute(
            subtotal_cents,
            zip_code=request.zip or request.shipping_address.zip,
            cart_id=request.cart_id,
        )
        for rate in quote["shipping_rates"]:
            if rate["id"] == request.shipping_rate_id:
                return rate["price_cents"], rate["name"]
        raise ValueError("Invalid shipping rate")

    async def execute(
        self,
        request: CreatePaymentIntentDto,
        profile_id: Optional[UUID] = None,
        session_id: Optional[str] = None,
        customer_ip: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> Dict[str, Any]:
        cart = self.db.query(CartModel).filter(
            CartModel.id == request.cart_id,
            CartModel.status == CartStatus.ACTIVE.value,
        ).first()
        if not cart:
            raise CartNotFoundError("Cart not found")

        lines = self._snapshot_lines(cart)
        if not lines:
            raise ValueError("Cart is empty")
        subtotal = sum(line.line_total_cents for line in lines)

        email = request.email.strip().lower()
        promo_code, discount, free_shipping = await self._apply_promo(request.promo_code, subtotal, profile_id, email)

        shipping, shipping_name = await self._price_shipping(request, subtotal)
        if free_shipping:
            shipping = 0

        state = request.shipping_address.state.upper()
        rates = self.db.query(TaxRateModel).filter(
            TaxRateModel.state == state,
            TaxRateModel.is_active.is_(True),
        ).all()
        tax = calculate_tax(rates, max(subtotal - discount, 0), shipping).tax_cents

        order = Order.place(
            items=lines,
            subtotal_cents=subtotal,
            discount_cents=discount,
            shipping_cents=shipping,
            tax_cents=tax,
            source=OrderSource.WEB,
            checkout_step=CheckoutStep.PAYMENT.value,
            profile_id=profile_id,
            guest_key=None if profile_id else session_id,
            cart_id=cart.id,
            promo_code=promo_code,
            email=email,
            phone=request.phone or request.shipping_address.phone,
            customer_first_name=request.shipping_address.first_name,
            customer_last_name=request.shipping_address.last_name,
            shipping_address=request.shipping_address.model_dump(),
            billing_address=request.billing_address.model_dump(),
            customer_notes=request.customer_notes,
            customer_ip=customer_ip,
            user_agent=user_agent,
            shipping_rate_id=request.shipping_rate_id,
            shipping_method_name=shipping_name,
        )

        async with self.unit_of_work:
            await self.unit_of_work.orders.add(order)
            await self.unit_of_work.commit()

        address = request.shipping_address
        try:
            intent = await self.payment_service.create_payment_intent(
                amount_cents=order.total_cents,
                metadata={
                    "order_id": str(order.id),
                    "order_number": order.order_number,
                    "customer_email": email,
                },
                description=f"Order {order.order_number}",
                receipt_email=email,
                shipping={
                    "name": address.full_name() or email,
                    "address": {
                        "line1": address.address1,
                        "line2": address.address2,
                        "city": address.city,
                        "state": address.state,
                        "postal_code": address.zip,
                        "country": address.country or "US",
                    },
                },
            )
        except PaymentProviderError:
            logger.error("Payment intent failed for order %s, removing order", order.order_number)
            async with self.unit_of_work:
                await self.unit_of_work.orders.delete(order.id)
                await self.unit_of_work.commit()
            raise

        async with self.unit_of_work:
            order.attach_payment_intent(intent["id"], intent["client_secret"])
            await self.unit_of_work.orders.update(order)
            await self.unit_of_work.commit()

        logger.info("Order %s created with payment intent %s", order.order_number, intent["id"])
        return {
            "order": order_summary(order),
            "payment_intent": {
                "id": intent["id"],
                "client_secret": intent["client_secret"],
                "amount": order.total_cents,
            },
        }
