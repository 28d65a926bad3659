"""Point of sale charge use case"""

import logging
from typing import Any, Dict, List
from uuid import UUID

from sqlalchemy.orm import Session

from ...domain.entities.order import Order, OrderLine
from ...domain.enums import OrderSource
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.value_objects.money import format_cents
from ...application.dtos.pos_dtos import PosChargeDto
from ...infrastructure.external_services.payment_service import PaymentService, PaymentProviderError
from ...infrastructure.orm.catalog_model import ProductModel, ProductVariantModel

logger = logging.getLogger(__name__)

POS_NOTE = "[POS] In-person sale"


class PosChargeError(ValueError):
    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code


class PosChargeUseCase:

    def __init__(self, db: Session, unit_of_work: IUnitOfWork, payment_service: PaymentService):
        self.db = db
        self.unit_of_work = unit_of_work
        self.payment_service = payment_service

    def _price_lines(self, request: PosChargeDto) -> List[OrderLine]:
        """Catalog prices for the rung-up products"""
        lines = []
        for item in request.items:
            product = self.db.get(ProductModel, item.product_id)
            if not product:
                raise PosChargeError("PRODUCT_NOT_FOUND", f"Product {item.product_id} not found")

            variant = None
            if item.variant_id is not None:
                variant = self.db.get(ProductVariantModel, item.variant_id)
                if not variant or variant.product_id != product.id:
                    raise PosChargeError("VARIANT_NOT_FOUND", f"Variant {item.variant_id} not found")

            lines.append(OrderLine(
                product_id=product.id,
                variant_id=variant.id if variant else None,
                title=product.title,
                variant_title=variant.title if variant else None,
                sku=variant.sku if variant else None,
                quantity=item.quantity,
                price_cents=variant.price_cents if variant else product.price_cents,
            ))
        return lines

    async def execute(self, request: PosChargeDto, staff_id: UUID) -> Dict[str, Any]:
        if not request.items and not request.custom_items:
            raise PosChargeError("EMPTY_CART", "Cart is empty")

        lines = self._price_lines(request)
        items_total = sum(line.line_total_cents for line in lines)
        custom_total = sum(item.amount_cents for item in request.custom_items)
        total = items_total + custom_total
        if total <= 0:
            raise PosChargeError("INVALID_TOTAL", "Total must be > 0")

        notes = [POS_NOTE]
        if request.custom_items:
            amounts = ", ".join(
                f"{item.label or 'Custom'} {format_cents(item.amount_cents)}" for item in request.custom_items
            )
            notes.append(f"Custom amounts: {amounts}")

        email = request.customer_email.strip().lower() if request.customer_email else None
        order = Order.place(
            items=lines,
            subtotal_cents=total,
            discount_cents=0,
            shipping_cents=0,
            tax_cents=0,
            source=OrderSource.POS,
            pos_staff_id=staff_id,
            email=email,
            customer_first_name=request.customer_first_name,
            customer_last_name=request.customer_last_name,
            internal_notes=" | ".join(notes),
        )

        async with self.unit_of_work:
            await self.unit_of_work.orders.add(order)
            await self.unit_of_work.commit()

        try:
            intent = await self.payment_service.create_payment_intent(
                amount_cents=order.total_cents,
                metadata={
                    "order_id": str(order.id),
                    "order_number": order.order_number,
                    "order_source": OrderSource.POS.value,
                    "staff_profile_id": str(staff_id),
                },
                description=f"POS {order.order_number}",
                receipt_email=email,
            )
        except PaymentProviderError:
            logger.error("POS payment intent failed for %s, removing order", order.order_number)
            async with self.unit_of_work:
                await self.unit_of_work.orders.delete(order.id)
                await self.unit_of_work.commit()
            raise

        async with self.unit_of_work:
            order.attach_payment_intent(intent["id"], intent["client_secret"])
            await self.unit_of_work.orders.update(order)
            await self.unit_of_work.commit()

        logger.info("POS sale %s for %s", order.order_number, format_cents(order.total_cents))
        return {
            "order": {
                "id": str(order.id),
                "order_number": order.order_number,
                "total_cents": order.total_cents,
            },
            "payment_intent": {
                "id": intent["id"],
                "client_secret": intent["client_secret"],
            },
        }
