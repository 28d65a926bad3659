"""Content DTOs: hero slides, landing sections, static pages, notifications and shipping boxes"""

from pydantic import BaseModel, Field
from typing import Any, Dict, Optional, List
from uuid import UUID


class HeroSlideCreateDto(BaseModel):
    title: Optional[str] = None
    subtitle: Optional[str] = None
    image_url: Optional[str] = None
    image_path: Optional[str] = None
    cta_label: Optional[str] = None
    cta_href: Optional[str] = None
    position: Optional[int] = None
    is_active: bool = True


class HeroSlideUpdateDto(BaseModel):
    title: Optional[str] = None
    subtitle: Optional[str] = None
    image_url: Optional[str] = None
    image_path: Optional[str] = None
    cta_label: Optional[str] = None
    cta_href: Optional[str] = None
    position: Optional[int] = None
    is_active: Optional[bool] = None


class SlidePositionDto(BaseModel):
    id: UUID
    position: int


class ReorderSlidesDto(BaseModel):
    order: List[SlidePositionDto]


class LandingSectionCreateDto(BaseModel):
    type: str = Field(..., min_length=1, max_length=100)
    config: Optional[Dict[str, Any]] = None
    position: Optional[int] = None
    is_active: bool = True


class LandingSectionUpdateDto(BaseModel):
    type: Optional[str] = Field(None, min_length=1, max_length=100)
    config: Optional[Dict[str, Any]] = None
    is_active: Optional[bool] = None


class SwapSectionsDto(BaseModel):
    """New positions for sections dragged in the landing editor"""
    swap: List[SlidePositionDto] = Field(..., min_length=1)


class StaticPageCreateDto(BaseModel):
    slug: str = Field(..., min_length=1, max_length=200)
    title: str = Field(..., min_length=1, max_length=300)
    content: Optional[str] = None
    seo_title: Optional[str] = None
    seo_description: Optional[str] = None
    is_published: bool = False


class StaticPageUpdateDto(BaseModel):
    slug: Optional[str] = Field(None, min_length=1, max_length=200)
    title: Optional[str] = Field(None, min_length=1, max_length=300)
    content: Optional[str] = None
    seo_title: Optional[str] = None
    seo_description: Optional[str] = None
    is_published: Optional[bool] = None


class NotificationCreateDto(BaseModel):
    """Target one profile, one role, or everyone when both are empty"""
    title: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1, max_length=5000)
    receiver_id: Optional[UUID] = None
    target_role: Optional[str] = None
    link: Optional[str] = None


class ShippingBoxCreateDto(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    length_in: float = Field(..., gt=0)
    width_in: float = Field(..., gt=0)
    height_in: float = Field(..., gt=0)
    weight_oz: Optional[float] = Field(None, ge=0)
    is_default: bool = False
    is_active: bool = True


class ShippingBoxUpdateDto(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    length_in: Optional[float] = Field(None, gt=0)
    width_in: Optional[float] = Field(None, gt=0)
    height_in: Optional[float] = Field(None, gt=0)
    weight_oz: Optional[float] = Field(None, ge=0)
    is_default: Optional[bool] = None
    is_active: Optional[bool] = None
