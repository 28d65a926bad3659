"""Money value object with currency"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP


@dataclass(frozen=True)
class Money:
    cents: int
    currency: str = "USD"

    def __post_init__(self):
        if not isinstance(self.cents, int):
            raise ValueError("Amount must be an integer number of cents")
        if not self.currency:
            raise ValueError("Currency required")

    @property
    def amount(self) -> Decimal:
        return Decimal(self.cents) / 100

    @classmethod
    def from_dollars(cls, dollars, currency: str = "USD") -> "Money":
        cents = (Decimal(str(dollars)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
        return cls(cents=int(cents), currency=currency)

    def __add__(self, other: "Money") -> "Money":
        self._check_currency(other)
        return Money(self.cents + other.cents, self.currency)

    def __sub__(self, other: "Money") -> "Money":
        self._check_currency(other)
        return Money(self.cents - other.cents, self.currency)

    def _check_currency(self, other: "Money") -> None:
        if other.currency != self.currency:
            raise ValueError(f"Currency mismatch: {self.currency} vs {other.currency}")

    def format(self) -> str:
        """Format as a display string, e.g. $12.99"""
        sign = "-" if self.cents < 0 else ""
        return f"{sign}${abs(self.amount):,.2f}"

    def __str__(self) -> str:
        return self.format()


def format_cents(cents: int) -> str:
    return Money(cents).format()


def discount_percentage(original_cents: int, sale_cents: int) -> int:
    """Whole-percent discount of a sale price against the original price."""
    if original_cents <= 0:
        return 0
    saved = Decimal(original_cents - sale_cents) / Decimal(original_cents) * 100
    return int(saved.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
