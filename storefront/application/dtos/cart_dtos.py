"""Cart DTOs"""

from pydantic import BaseModel, Field
from typing import Optional
from uuid import UUID


class AddCartItemDto(BaseModel):
    variant_id: UUID
    quantity: int = Field(1, ge=1, le=99)


class UpdateCartItemDto(BaseModel):
    quantity: int = Field(..., ge=1, le=99)


class ShareCartDto(BaseModel):
    name: Optional[str] = Field(None, max_length=100)
    message: Optional[str] = Field(None, max_length=500)
    expires_in_days: Optional[int] = Field(None, ge=1, le=365)
