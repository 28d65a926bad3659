"""
Domain Enums - Business domain enumerations
"""

from enum import Enum


class ProfileRole(str, Enum):
    ADMIN = "admin"
    MEMBER = "member"
    GUEST = "guest"

    @classmethod
    def normalize(cls, value) -> "ProfileRole":
        """Unknown or missing roles are treated as members."""
        try:
            return cls(value)
        except ValueError:
            return cls.MEMBER


class ProductStatus(str, Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    ARCHIVED = "archived"


class OrderStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    FULFILLED = "fulfilled"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


class OrderSource(str, Enum):
    WEB = "web"
    POS = "pos"


class CheckoutStep(str, Enum):
    INFORMATION = "information"
    PAYMENT = "payment"
    COMPLETE = "complete"


class FulfillmentStatus(str, Enum):
    UNFULFILLED = "unfulfilled"
    FULFILLED = "fulfilled"


class CartStatus(str, Enum):
    ACTIVE = "active"
    CONVERTED = "converted"


class SavedCartTrigger(str, Enum):
    CLONE = "clone"
    MANUAL = "manual"


class MovementType(str, Enum):
    """Inventory movement kinds; quantities are always positive"""
    RESTOCK = "restock"
    SALE = "sale"
    ADJUSTMENT = "adjustment"
    DAMAGE = "damage"
    RETURN = "return"

    def apply(self, stock: int, quantity: int) -> int:
        """New stock level; an adjustment is a recount, outflows stop at zero"""
        if self == MovementType.ADJUSTMENT:
            return quantity
        if self in (MovementType.SALE, MovementType.DAMAGE):
            return max(stock - quantity, 0)
        return stock + quantity


class DiscountType(str, Enum):
    PERCENTAGE = "percentage"
    FIXED_AMOUNT = "fixed_amount"
    FREE_SHIPPING = "free_shipping"


class NavNodeType(str, Enum):
    CATEGORY = "category"
    COLLECTION = "collection"
    STATIC = "static"
