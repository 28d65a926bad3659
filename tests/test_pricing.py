from datetime import datetime, timedelta
from decimal import Decimal
from types import SimpleNamespace

from storefront.domain.services.pricing import calculate_tax, evaluate_promo, normalize_code


def rate(value, applies_to_shipping=False):
    return SimpleNamespace(rate=Decimal(value), applies_to_shipping=applies_to_shipping)


def promo(**fields):
    defaults = dict(
        code="SAVE10", is_active=True, starts_at=None, expires_at=None,
        usage_limit=None, usage_count=0, min_subtotal_cents=None,
        per_customer_limit=None, discount_type="percentage", discount_value=10,
        max_discount_cents=None,
    )
    defaults.update(fields)
    return SimpleNamespace(**defaults)


def test_tax_sums_rates_and_rounds_half_up():
    result = calculate_tax([rate("0.0625"), rate("0.02")], 1000)

    # 62.5 + 20 = 82.5 -> 83
    assert result.tax_cents == 83
    assert result.tax_rate == Decimal("0.0825")


def test_tax_on_shipping_only_for_flagged_rates():
    result = calculate_tax([rate("0.05", applies_to_shipping=True), rate("0.01")], 1000, shipping_cents=500)

    assert result.tax_cents == 75 + 10


def test_no_rates_means_no_tax():
    assert calculate_tax([], 5000, 500).tax_cents == 0


def test_normalize_code():
    assert normalize_code("  save10 ") == "SAVE10"


def test_unknown_or_inactive_code():
    assert evaluate_promo(None, 1000).error_message == "Invalid promo code"
    assert not evaluate_promo(promo(is_active=False), 1000).is_valid


def test_window_and_usage_limits():
    now = datetime(2026, 5, 1)
    assert not evaluate_promo(promo(starts_at=now + timedelta(days=1)), 1000, now=now).is_valid
    assert not evaluate_promo(promo(expires_at=now - timedelta(days=1)), 1000, now=now).is_valid
    assert not evaluate_promo(promo(usage_limit=5, usage_count=5), 1000).is_valid
    assert evaluate_promo(promo(usage_limit=5, usage_count=4), 1000).is_valid


def test_minimum_subtotal_message():
    result = evaluate_promo(promo(min_subtotal_cents=5000), 4999)

    assert result.error_message == "Minimum order of $50.00 required"


def test_per_customer_limit():
    assert not evaluate_promo(promo(per_customer_limit=1), 1000, customer_uses=1).is_valid
    assert evaluate_promo(promo(per_customer_limit=1), 1000, customer_uses=0).is_valid


def test_percentage_discount_is_rounded_and_capped():
    assert evaluate_promo(promo(discount_value=15), 1999).discount_cents == 300
    assert evaluate_promo(promo(discount_value=50, max_discount_cents=1000), 5000).discount_cents == 1000


def test_fixed_discount_never_exceeds_subtotal():
    result = evaluate_promo(promo(discount_type="fixed_amount", discount_value=2500), 1800)

    assert result.discount_cents == 1800


def test_free_shipping_flag():
    result = evaluate_promo(promo(discount_type="free_shipping", discount_value=0), 1800)

    assert result.is_valid
    assert result.discount_cents == 0
    assert result.free_shipping
