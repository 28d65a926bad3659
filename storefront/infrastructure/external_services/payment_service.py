"""Payment service for processing payments via Stripe"""

import logging
from typing import Any, Dict, Optional

import stripe

from ...core.config import settings

logger = logging.getLogger(__name__)


class PaymentProviderError(Exception):
    """Raised when Stripe rejects or fails a request"""


class WebhookSignatureError(Exception):
    """Raised when a webhook payload does not match its signature"""


class PaymentService:

    def __init__(self):
        stripe.api_key = settings.STRIPE_SECRET_KEY
        self.webhook_secret = settings.STRIPE_WEBHOOK_SECRET

    async def create_payment_intent(
        self,
        amount_cents: int,
        metadata: Dict[str, str],
        description: str,
        receipt_email: Optional[str] = None,
        shipping: Optional[Dict[str, Any]] = None,
        currency: str = "usd",
    ) -> Dict[str, Any]:
        """Create a PaymentIntent with automatic payment methods"""
        params: Dict[str, Any] = {
            "amount": amount_cents,
            "currency": currency,
            "automatic_payment_methods": {"enabled": True},
            "metadata": metadata,
            "description": description,
        }
        if receipt_email:
            params["receipt_email"] = receipt_email
        if shipping:
            params["shipping"] = shipping

        try:
            intent = stripe.PaymentIntent.create(**params)
        except stripe.StripeError as e:
            logger.error("Stripe error creating payment intent: %s", e)
            raise PaymentProviderError(str(e)) from e

        logger.info("Created payment intent %s for %s cents", intent.id, amount_cents)
        return {
            "id": intent.id,
            "client_secret": intent.client_secret,
            "amount": intent.amount,
            "status": intent.status,
        }

    def construct_event(self, payload: bytes, signature: str) -> Dict[str, Any]:
        """Verify a webhook signature and return the event as a dict"""
        try:
            event = stripe.Webhook.construct_event(payload, signature, self.webhook_secret)
        except (ValueError, stripe.SignatureVerificationError) as e:
            logger.warning("Stripe webhook signature verification failed: %s", e)
            raise WebhookSignatureError(str(e)) from e
        return event.to_dict() if hasattr(event, "to_dict") else dict(event)

    async def get_card_details(self, payment_method_id: str) -> Optional[Dict[str, Any]]:
        """Brand, last4 and expiry of a card payment method; None for other types"""
        try:
            method = stripe.PaymentMethod.retrieve(payment_method_id)
        except stripe.StripeError as e:
            logger.error("Failed to retrieve payment method %s: %s", payment_method_id, e)
            return None

        card = getattr(method, "card", None)
        if not card:
            return None
        return {
            "id": method.id,
            "type": method.type,
            "brand": card.brand,
            "last4": card.last4,
            "exp_month": card.exp_month,
            "exp_year": card.exp_year,
        }

    async def create_connection_token(self) -> str:
        """Stripe Terminal connection token for card readers"""
        params = {}
        if settings.STRIPE_TERMINAL_LOCATION_ID:
            params["location"] = settings.STRIPE_TERMINAL_LOCATION_ID
        try:
            token = stripe.terminal.ConnectionToken.create(**params)
        except stripe.StripeError as e:
            logger.error("Stripe error creating connection token: %s", e)
            raise PaymentProviderError(str(e)) from e
        return token.secret
