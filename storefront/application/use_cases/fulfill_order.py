"""Fulfill order use case"""

import logging
from typing import Optional
from uuid import UUID

from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.value_objects.entity_ids import OrderId
from ...application.dtos.order_dtos import FulfillOrderDto

logger = logging.getLogger(__name__)


class OrderNotFoundError(Exception):
    pass


class FulfillOrderUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, order_id: OrderId, request: FulfillOrderDto, fulfilled_by: Optional[UUID] = None):
        async with self.unit_of_work:
            order = await self.unit_of_work.orders.get_by_id(order_id)
            if not order:
                raise OrderNotFoundError("Order not found")

            order.fulfill(request.tracking_number, request.tracking_url)
            await self.unit_of_work.orders.upsert_fulfillment(
                order.id,
                tracking_number=order.tracking_number,
                tracking_url=order.tracking_url,
                note=request.note.strip() if request.note else None,
                fulfilled_by=fulfilled_by,
            )
            await self.unit_of_work.orders.update(order)
            await self.unit_of_work.commit()

        logger.info("Order %s fulfilled (tracking %s)", order.order_number, order.tracking_number)
        return order
