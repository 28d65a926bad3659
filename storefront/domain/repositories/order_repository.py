"""Order repository interface"""

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from ..entities.order import Order
from ..value_objects.entity_ids import OrderId


class IOrderRepository(ABC):

    @abstractmethod
    async def get_by_id(self, order_id: OrderId) -> Optional[Order]:
        pass

    @abstractmethod
    async def get_by_payment_intent_id(self, payment_intent_id: str) -> Optional[Order]:
        pass

    @abstractmethod
    async def add(self, order: Order) -> Order:
        pass

    @abstractmethod
    async def update(self, order: Order) -> Order:
        pass

    @abstractmethod
    async def delete(self, order_id: OrderId) -> bool:
        pass

    @abstractmethod
    async def upsert_fulfillment(
        self,
        order_id: OrderId,
        tracking_number: Optional[str],
        tracking_url: Optional[str],
        note: Optional[str],
        fulfilled_by: Optional[UUID],
    ) -> None:
        pass

    @abstractmethod
    async def count_paid_with_promo(self, code: str, profile_id: Optional[UUID], email: Optional[str]) -> int:
        pass
