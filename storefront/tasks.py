import asyncio
import logging

from .celery_app import celery_app
from .db.database import session_scope
from .domain.value_objects.entity_ids import parse_uuid
from .infrastructure.external_services.email_service import EmailService
from .infrastructure.orm.order_model import OrderModel

logger = logging.getLogger(__name__)


@celery_app.task(bind=True, max_retries=3)
def send_order_confirmation_email(self, order_id: str):
    """Background task to send the order receipt."""
    order_uuid = parse_uuid(order_id)
    if order_uuid is None:
        logger.error("Invalid order id %s", order_id)
        return False

    email_service = EmailService()
    with session_scope() as db:
        order = db.get(OrderModel, order_uuid)
        if not order:
            logger.error("Order %s not found", order_id)
            return False
        sent = asyncio.run(email_service.send_order_confirmation(order))

    if not sent and email_service.is_configured:
        logger.error("Confirmation email for order %s failed, retrying", order_id)
        raise self.retry(countdown=60 * (self.request.retries + 1))

    logger.info("Confirmation email for order %s handled (sent=%s)", order_id, sent)
    return sent
