"""Checkout pricing rules: sales tax and promo code evaluation"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional

from ..enums import DiscountType
from ..value_objects.money import format_cents


INVALID_CODE = "Invalid promo code"
NOT_STARTED = "This promo code is not active yet"
EXPIRED = "This promo code has expired"
USAGE_LIMIT_REACHED = "This promo code has reached its usage limit"
ALREADY_USED = "You have already used this promo code"


def round_half_up(value: Decimal) -> int:
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class TaxResult:
    tax_cents: int
    tax_rate: Decimal


def calculate_tax(rates: Iterable, subtotal_cents: int, shipping_cents: int = 0) -> TaxResult:
    """Sum every active rate for a state.

    Each rate applies to the subtotal, plus shipping when its
    ``applies_to_shipping`` flag is set. The combined amount is rounded
    half-up to whole cents once.
    """
    total = Decimal("0")
    combined_rate = Decimal("0")
    for rate in rates:
        value = Decimal(str(rate.rate))
        combined_rate += value
        base = subtotal_cents + (shipping_cents if rate.applies_to_shipping else 0)
        total += value * base
    return TaxResult(tax_cents=round_half_up(total), tax_rate=combined_rate)


@dataclass(frozen=True)
class PromoResult:
    is_valid: bool
    discount_cents: int = 0
    error_message: Optional[str] = None
    free_shipping: bool = False

    @classmethod
    def invalid(cls, message: str) -> "PromoResult":
        return cls(is_valid=False, error_message=message)


def normalize_code(code: str) -> str:
    return (code or "").strip().upper()


def evaluate_promo(
    promo,
    subtotal_cents: int,
    now: Optional[datetime] = None,
    customer_uses: int = 0,
) -> PromoResult:
    """Decide whether a promo code applies to a subtotal and how much it takes off.

    ``promo`` is any object with the promo_codes columns, or None when the
    code does not exist. ``customer_uses`` is how many paid orders the
    current customer already placed with this code.
    """
    if promo is None or not promo.is_active:
        return PromoResult.invalid(INVALID_CODE)

    now = now or datetime.utcnow()
    if promo.starts_at is not None and now < promo.starts_at:
        return PromoResult.invalid(NOT_STARTED)
    if promo.expires_at is not None and now > promo.expires_at:
        return PromoResult.invalid(EXPIRED)

    if promo.usage_limit is not None and (promo.usage_count or 0) >= promo.usage_limit:
        return PromoResult.invalid(USAGE_LIMIT_REACHED)

    if promo.min_subtotal_cents and subtotal_cents < promo.min_subtotal_cents:
        return PromoResult.invalid(f"Minimum order of {format_cents(promo.min_subtotal_cents)} required")

    if promo.per_customer_limit is not None and customer_uses >= promo.per_customer_limit:
        return PromoResult.invalid(ALREADY_USED)

    discount_type = promo.discount_type
    value = promo.discount_value or 0

    if discount_type == DiscountType.PERCENTAGE.value:
        discount = round_half_up(Decimal(subtotal_cents) * Decimal(value) / Decimal(100))
        if promo.max_discount_cents is not None:
            discount = min(discount, promo.max_discount_cents)
        return PromoResult(is_valid=True, discount_cents=min(discount, subtotal_cents))

    if discount_type == DiscountType.FIXED_AMOUNT.value:
        return PromoResult(is_valid=True, discount_cents=min(value, subtotal_cents))

    if discount_type == DiscountType.FREE_SHIPPING.value:
        return PromoResult(is_valid=True, discount_cents=0, free_shipping=True)

    return PromoResult.invalid(INVALID_CODE)
