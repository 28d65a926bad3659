"""Point of sale DTOs"""

from pydantic import BaseModel, Field
from typing import Optional, List
from uuid import UUID


class PosItemDto(BaseModel):
    product_id: UUID
    variant_id: Optional[UUID] = None
    quantity: int = Field(1, ge=1, le=999)


class PosCustomItemDto(BaseModel):
    """A custom amount rung up without a catalog product"""
    label: str = Field("Custom", max_length=200)
    amount_cents: int = Field(..., gt=0)


class PosChargeDto(BaseModel):
    items: List[PosItemDto] = Field(default_factory=list)
    custom_items: List[PosCustomItemDto] = Field(default_factory=list)
    customer_email: Optional[str] = None
    customer_first_name: Optional[str] = None
    customer_last_name: Optional[str] = None
