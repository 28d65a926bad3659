"""Quote shipping rates use case"""

import logging
from typing import Any, Dict, List, Optional
from uuid import UUID

import httpx
from sqlalchemy.orm import Session

from ...core.config import settings
from ...infrastructure.external_services.usps_service import UspsService, UspsError, PackageSpec
from ...infrastructure.orm.cart_model import CartItemModel
from ...infrastructure.orm.checkout_model import ShippingRateModel, ShippingBoxModel

logger = logging.getLogger(__name__)

# Package used when no default shipping box is configured
FALLBACK_PACKAGE = PackageSpec(weight_oz=2, length_in=10, width_in=13, height_in=1)

FREE_GROUND_NAME = "Standard Shipping (Free!)"


def free_standard_rate() -> List[Dict[str, Any]]:
    """Shown when weight data is incomplete"""
    return [{
        "id": "usps-ground-free",
        "name": "Standard Shipping",
        "description": "5-7 business days",
        "carrier": "USPS",
        "mail_class": "USPS_GROUND_ADVANTAGE",
        "price_cents": 0,
        "min_delivery_days": 5,
        "max_delivery_days": 7,
    }]


class QuoteShippingRatesUseCase:

    def __init__(self, db: Session, usps_service: UspsService):
        self.db = db
        self.usps_service = usps_service

    async def execute(self, subtotal_cents: int, zip_code: Optional[str] = None, cart_id: Optional[UUID] = None) -> Dict[str, Any]:
        """Returns {shipping_rates, source[, reason]}"""
        if cart_id is not None and self._cart_missing_weight(cart_id):
            logger.info("Cart %s has items without weight, using free standard shipping", cart_id)
            return {
                "shipping_rates": free_standard_rate(),
                "source": "free-fallback",
                "reason": "missing-weight",
            }

        if self.usps_service.is_live and zip_code:
            rates = await self._live_rates(subtotal_cents, zip_code)
            if rates:
                return {"shipping_rates": rates, "source": "usps"}

        return {"shipping_rates": self.db_rates(subtotal_cents), "source": "db"}

    def _cart_missing_weight(self, cart_id: UUID) -> bool:
        items = self.db.query(CartItemModel).filter(CartItemModel.cart_id == cart_id).all()
        return any(not (item.variant and item.variant.weight_grams) for item in items)

    def default_package(self) -> PackageSpec:
        box = self.db.query(ShippingBoxModel).filter(
            ShippingBoxModel.is_default.is_(True),
            ShippingBoxModel.is_active.is_(True),
        ).first()
        if not box:
            return FALLBACK_PACKAGE
        return PackageSpec(
            weight_oz=float(box.weight_oz) if box.weight_oz is not None else FALLBACK_PACKAGE.weight_oz,
            length_in=float(box.length_in),
            width_in=float(box.width_in),
            height_in=float(box.height_in),
        )

    async def _live_rates(self, subtotal_cents: int, zip_code: str) -> List[Dict[str, Any]]:
        origin_zip = settings.USPS_FROM_ZIP
        if not origin_zip:
            logger.warning("No origin zip configured, falling back to DB rates")
            return []

        package = self.default_package()
        try:
            rates = await self.usps_service.quote_rates(origin_zip, zip_code, package)
        except (UspsError, httpx.HTTPError) as e:
            logger.error("USPS OAuth failed, falling back to DB rates: %s", e)
            return []

        if subtotal_cents >= settings.FREE_SHIPPING_THRESHOLD_CENTS:
            for rate in rates:
                if rate["mail_class"] == "USPS_GROUND_ADVANTAGE":
                    rate["price_cents"] = 0
                    rate["name"] = FREE_GROUND_NAME

        if not rates:
            logger.warning("All USPS rate calls failed, falling back to DB rates")
        return rates

    def db_rates(self, subtotal_cents: int) -> List[Dict[str, Any]]:
        """Flat rates configured in the database, filtered by subtotal window"""
        rows = self.db.query(ShippingRateModel).filter(
            ShippingRateModel.is_active.is_(True)
        ).order_by(ShippingRateModel.position).all()

        rates = []
        for rate in rows:
            if rate.min_subtotal_cents and subtotal_cents < rate.min_subtotal_cents:
                continue
            if rate.max_subtotal_cents and subtotal_cents > rate.max_subtotal_cents:
                continue
            rates.append({
                "id": str(rate.id),
                "name": rate.name,
                "description": rate.description or f"{rate.min_delivery_days}-{rate.max_delivery_days} business days",
                "carrier": rate.carrier or "USPS",
                "price_cents": rate.price_cents or 0,
                "min_delivery_days": rate.min_delivery_days or 5,
                "max_delivery_days": rate.max_delivery_days or 7,
            })
        return rates
