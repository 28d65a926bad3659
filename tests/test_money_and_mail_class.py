import pytest

from storefront.domain.value_objects.money import Money, format_cents, discount_percentage
from storefront.domain.value_objects.mail_class import resolve_mail_class, resolve_rate_indicator


def test_money_formatting():
    assert Money(1299).format() == "$12.99"
    assert format_cents(123456) == "$1,234.56"
    assert format_cents(-500) == "-$5.00"


def test_dollars_to_cents_round_half_up():
    assert Money.from_dollars("12.345").cents == 1235
    assert Money.from_dollars(0.1).cents == 10


def test_money_arithmetic_requires_same_currency():
    assert (Money(100) + Money(250)).cents == 350
    with pytest.raises(ValueError):
        Money(100) + Money(100, "EUR")


def test_money_rejects_fractional_cents():
    with pytest.raises(ValueError):
        Money(12.5)


def test_discount_percentage():
    assert discount_percentage(4000, 3000) == 25
    assert discount_percentage(0, 100) == 0


@pytest.mark.parametrize("name, expected", [
    ("Priority Mail", "PRIORITY_MAIL"),
    ("  EXPRESS ", "PRIORITY_MAIL_EXPRESS"),
    ("Standard Shipping (Free!)", "USPS_GROUND_ADVANTAGE"),
    ("Media Mail", "MEDIA_MAIL"),
    ("Carrier pigeon", "USPS_GROUND_ADVANTAGE"),
    ("", "USPS_GROUND_ADVANTAGE"),
    (None, "USPS_GROUND_ADVANTAGE"),
])
def test_mail_class_resolution(name, expected):
    assert resolve_mail_class(name) == expected


def test_rate_indicator_is_single_piece():
    assert resolve_rate_indicator("PRIORITY_MAIL") == "SP"
