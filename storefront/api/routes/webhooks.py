"""Webhook routes for payment provider events"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, Request
from sqlalchemy.orm import Session

from ...api.dependencies import get_unit_of_work, get_payment_service, get_order_notifier
from ...application.services.order_notifier import OrderNotifier
from ...application.use_cases.process_payment_webhook import ProcessStripeWebhookUseCase
from ...core.errors import bad_request
from ...db.database import get_db
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...infrastructure.external_services.payment_service import PaymentService, WebhookSignatureError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["webhooks"])


@router.post("/stripe")
async def stripe_webhook(
    request: Request,
    stripe_signature: Optional[str] = Header(None),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
    payment_service: PaymentService = Depends(get_payment_service),
    notifier: OrderNotifier = Depends(get_order_notifier),
    db: Session = Depends(get_db)
):
    """Stripe events; the raw body is needed for signature verification"""
    if not stripe_signature:
        raise bad_request("Missing Stripe-Signature header", code="MISSING_SIGNATURE")

    payload = await request.body()
    use_case = ProcessStripeWebhookUseCase(db, unit_of_work, payment_service, notifier)
    try:
        return await use_case.execute(payload, stripe_signature)
    except WebhookSignatureError:
        raise bad_request("Invalid webhook signature", code="INVALID_SIGNATURE")
