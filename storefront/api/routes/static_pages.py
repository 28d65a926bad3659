"""Static page routes"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, status
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...api.dependencies import get_current_admin
from ...api.serializers import iso
from ...application.dtos.content_dtos import StaticPageCreateDto, StaticPageUpdateDto
from ...core.errors import bad_request, conflict, not_found, ok
from ...db.database import get_db
from ...domain.entities.profile import Profile
from ...domain.value_objects.entity_ids import parse_uuid
from ...infrastructure.orm.content_model import StaticPageModel

logger = logging.getLogger(__name__)

router = APIRouter()


def normalize_slug(slug: str) -> str:
    return slug.strip().lstrip("/")


def serialize_page(page: StaticPageModel) -> Dict[str, Any]:
    return {
        "id": str(page.id),
        "slug": page.slug,
        "title": page.title,
        "content": page.content,
        "seo_title": page.seo_title,
        "seo_description": page.seo_description,
        "is_published": page.is_published,
        "updated_at": iso(page.updated_at),
    }


def _get_page(db: Session, page_id: str) -> StaticPageModel:
    page_uuid = parse_uuid(page_id)
    page = db.get(StaticPageModel, page_uuid) if page_uuid else None
    if not page:
        raise not_found("Page not found")
    return page


@router.get("")
async def list_pages(db: Session = Depends(get_db)):
    """Published page slugs ordered by title"""
    pages = db.query(StaticPageModel).filter(
        StaticPageModel.is_published.is_(True)
    ).order_by(StaticPageModel.title).all()
    return ok([{"slug": page.slug, "title": page.title} for page in pages])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_page(
    request: StaticPageCreateDto,
    admin: Profile = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    values = request.model_dump()
    values["slug"] = normalize_slug(values["slug"])
    if not values["slug"]:
        raise bad_request("slug is required")

    page = StaticPageModel(**values)
    db.add(page)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise conflict("A page with this slug already exists", code="DUPLICATE_SLUG")
    db.refresh(page)
    return ok(serialize_page(page))


@router.patch("/{page_id}")
async def update_page(
    page_id: str,
    request: StaticPageUpdateDto,
    admin: Profile = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    page = _get_page(db, page_id)
    updates = request.model_dump(exclude_unset=True)
    if not updates:
        raise bad_request("No fields to update", code="NO_FIELDS")
    if updates.get("slug") is not None:
        updates["slug"] = normalize_slug(updates["slug"])

    for field, value in updates.items():
        setattr(page, field, value)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise conflict("A page with this slug already exists", code="DUPLICATE_SLUG")
    db.refresh(page)
    return ok(serialize_page(page))


@router.delete("/{page_id}")
async def delete_page(
    page_id: str,
    admin: Profile = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    page = _get_page(db, page_id)
    db.delete(page)
    db.commit()
    return ok({"deleted": True, "id": page_id})


@router.get("/{slug:path}")
async def get_page(slug: str, db: Session = Depends(get_db)):
    """Published page; the slug matches with or without a leading slash"""
    normalized = normalize_slug(slug)
    page = db.query(StaticPageModel).filter(
        or_(StaticPageModel.slug == normalized, StaticPageModel.slug == f"/{normalized}"),
        StaticPageModel.is_published.is_(True),
    ).first()
    if not page:
        raise not_found("Page not found")
    return ok(serialize_page(page))
