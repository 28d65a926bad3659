"""Order domain events"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..value_objects.money import Money
from ..value_objects.entity_ids import OrderId


@dataclass(frozen=True)
class OrderPaid:
    order_id: OrderId
    order_number: str
    amount: Money
    payment_intent_id: str
    email: Optional[str]


@dataclass(frozen=True)
class OrderFulfilled:
    order_id: OrderId
    tracking_number: Optional[str]
    fulfilled_at: datetime


@dataclass(frozen=True)
class OrderRefunded:
    order_id: OrderId
    refunded_at: datetime
