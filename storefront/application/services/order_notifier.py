"""Hands paid orders to the background email task"""

import logging
from uuid import UUID

logger = logging.getLogger(__name__)


class OrderNotifier:

    def order_paid(self, order_id: UUID) -> None:
        from ...tasks import send_order_confirmation_email

        send_order_confirmation_email.delay(str(order_id))
        logger.info("Queued confirmation email for order %s", order_id)
