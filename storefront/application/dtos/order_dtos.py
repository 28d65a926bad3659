"""Order DTOs for API requests"""

from pydantic import BaseModel, Field
from typing import Optional


class FulfillOrderDto(BaseModel):
    tracking_number: Optional[str] = Field(None, max_length=100)
    tracking_url: Optional[str] = Field(None, max_length=500)
    note: Optional[str] = Field(None, max_length=2000)


class OrderNotesDto(BaseModel):
    internal_notes: Optional[str] = Field(None, max_length=5000)


class CreateLabelDto(BaseModel):
    """Package measurements for a USPS label"""
    weight_lb: float = Field(..., gt=0, le=70)
    length_in: float = Field(..., gt=0)
    width_in: float = Field(..., gt=0)
    height_in: float = Field(..., gt=0)
    preset_name: Optional[str] = None
