"""Checkout DTOs for API requests"""

from pydantic import BaseModel, Field
from typing import Optional
from uuid import UUID


class AddressDto(BaseModel):
    """Postal address; accepts camelCase names from the storefront client"""
    first_name: Optional[str] = Field(None, alias='firstName')
    last_name: Optional[str] = Field(None, alias='lastName')
    address1: str = Field(..., min_length=1)
    address2: Optional[str] = None
    city: str = Field(..., min_length=1)
    state: str = Field(..., min_length=2, max_length=2)
    zip: str = Field(..., min_length=5, max_length=10)
    country: str = "US"
    phone: Optional[str] = None

    class Config:
        populate_by_name = True

    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)


class CalculateTaxDto(BaseModel):
    subtotal_cents: int = Field(..., gt=0)
    shipping_cents: int = Field(0, ge=0)
    state: str = Field(..., min_length=2, max_length=2)


class ValidatePromoDto(BaseModel):
    code: str = Field(..., min_length=1, max_length=64)
    subtotal_cents: int = Field(..., gt=0)
    email: Optional[str] = None


class ShippingRatesDto(BaseModel):
    subtotal_cents: int = Field(..., gt=0)
    zip: Optional[str] = None
    cart_id: Optional[UUID] = None


class CreatePaymentIntentDto(BaseModel):
    cart_id: UUID
    email: str = Field(..., min_length=3, max_length=320)
    shipping_address: AddressDto
    billing_address: AddressDto
    phone: Optional[str] = None
    customer_notes: Optional[str] = Field(None, max_length=2000)
    promo_code: Optional[str] = None
    shipping_rate_id: Optional[str] = None
    zip: Optional[str] = None
