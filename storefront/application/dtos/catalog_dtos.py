"""Catalog DTOs: categories, collections, products, variants, images, tags and inventory"""

from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any
from uuid import UUID

from ...domain.enums import MovementType


class CategoryCreateDto(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    slug: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    image_url: Optional[str] = None
    parent_id: Optional[UUID] = None
    position: int = 0
    sort_order: int = 0
    is_active: bool = True


class CategoryUpdateDto(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    slug: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    image_url: Optional[str] = None
    parent_id: Optional[UUID] = None
    position: Optional[int] = None
    sort_order: Optional[int] = None
    is_active: Optional[bool] = None


class CollectionCreateDto(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    slug: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    image_url: Optional[str] = None
    position: int = 0
    is_active: bool = True


class CollectionUpdateDto(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    slug: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    image_url: Optional[str] = None
    position: Optional[int] = None
    is_active: Optional[bool] = None


class ProductCreateDto(BaseModel):
    slug: str = Field(..., min_length=1, max_length=200)
    title: str = Field(..., min_length=1, max_length=300)
    price_cents: int = Field(..., ge=0)
    description: Optional[str] = None
    material: Optional[str] = None
    made_in: Optional[str] = None


class ProductUpdateDto(BaseModel):
    """Only the fields sent by the client are applied"""
    slug: Optional[str] = Field(None, min_length=1, max_length=200)
    title: Optional[str] = Field(None, min_length=1, max_length=300)
    description: Optional[str] = None
    price_cents: Optional[int] = Field(None, ge=0)
    compare_at_price_cents: Optional[int] = Field(None, ge=0)
    status: Optional[str] = None
    featured: Optional[bool] = None
    material: Optional[str] = None
    made_in: Optional[str] = None
    care_instructions: Optional[str] = None
    seo_title: Optional[str] = None
    seo_description: Optional[str] = None


class VariantCreateDto(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    sku: Optional[str] = None
    price_cents: Optional[int] = Field(None, ge=0)
    compare_at_price_cents: Optional[int] = Field(None, ge=0)
    stock_quantity: int = Field(0, ge=0)
    track_inventory: bool = True
    allow_backorder: bool = False
    low_stock_threshold: int = Field(5, ge=0)
    weight_grams: Optional[int] = Field(None, ge=0)
    options: Dict[str, Any] = Field(default_factory=dict)
    position: Optional[int] = None
    is_active: bool = True


class VariantUpdateDto(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    sku: Optional[str] = None
    price_cents: Optional[int] = Field(None, ge=0)
    compare_at_price_cents: Optional[int] = Field(None, ge=0)
    stock_quantity: Optional[int] = Field(None, ge=0)
    track_inventory: Optional[bool] = None
    allow_backorder: Optional[bool] = None
    low_stock_threshold: Optional[int] = Field(None, ge=0)
    weight_grams: Optional[int] = Field(None, ge=0)
    options: Optional[Dict[str, Any]] = None
    position: Optional[int] = None
    is_active: Optional[bool] = None


class ImageRegisterDto(BaseModel):
    """An object already uploaded to storage"""
    bucket_name: str = Field(..., min_length=1)
    object_path: str = Field(..., min_length=1)
    alt_text: Optional[str] = None
    is_primary: bool = False
    width: Optional[int] = None
    height: Optional[int] = None


class AssignmentDto(BaseModel):
    """Category, collection or tag ids to link to a product"""
    ids: List[UUID] = Field(..., min_length=1)


class TagCreateDto(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    slug: str = Field(..., min_length=1, max_length=100)


class TagUpdateDto(BaseModel):
    id: UUID
    name: Optional[str] = None
    slug: Optional[str] = None


class InventoryMovementDto(BaseModel):
    """Quantity is always positive; the movement type decides the direction"""
    variant_id: UUID
    movement_type: MovementType
    quantity: int = Field(..., gt=0)
    note: Optional[str] = Field(None, max_length=1000)
    reference: Optional[str] = Field(None, max_length=200)
