"""Category routes"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...api.dependencies import get_current_admin
from ...api.serializers import serialize_category
from ...application.dtos.catalog_dtos import CategoryCreateDto, CategoryUpdateDto
from ...application.services.navigation_service import NavigationService, revalidate_navigation
from ...core.errors import bad_request, conflict, not_found, ok
from ...db.database import get_db
from ...domain.entities.profile import Profile
from ...domain.value_objects.entity_ids import parse_uuid
from ...infrastructure.orm.catalog_model import CategoryModel

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_category(db: Session, category_id: str) -> CategoryModel:
    category_uuid = parse_uuid(category_id)
    category = db.get(CategoryModel, category_uuid) if category_uuid else None
    if not category:
        raise not_found("Category not found")
    return category


@router.get("")
async def list_categories(
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    parent: Optional[str] = None,
    db: Session = Depends(get_db)
):
    """Active categories ordered by position, sort order and name"""
    query = db.query(CategoryModel).filter(CategoryModel.is_active.is_(True))
    if parent:
        parent_uuid = parse_uuid(parent)
        if parent_uuid is None:
            parent_row = db.query(CategoryModel).filter(CategoryModel.slug == parent).first()
            parent_uuid = parent_row.id if parent_row else None
        if parent_uuid is None:
            return ok([], meta={"limit": limit, "offset": offset})
        query = query.filter(CategoryModel.parent_id == parent_uuid)

    categories = query.order_by(
        CategoryModel.position, CategoryModel.sort_order, CategoryModel.name
    ).offset(offset).limit(limit).all()
    return ok([serialize_category(c) for c in categories], meta={"limit": limit, "offset": offset})


@router.get("/tree")
async def category_tree(db: Session = Depends(get_db)):
    """Every category nested under its parent"""
    return ok(NavigationService(db).category_tree())


@router.post("", status_code=201)
async def create_category(
    request: CategoryCreateDto,
    admin: Profile = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    if request.parent_id and not db.get(CategoryModel, request.parent_id):
        raise bad_request("Parent category not found")

    category = CategoryModel(**request.model_dump())
    db.add(category)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise conflict("A category with this slug already exists", code="DUPLICATE_SLUG")
    db.refresh(category)
    revalidate_navigation()
    logger.info("Category %s created by %s", category.slug, admin.id)
    return ok(serialize_category(category))


@router.patch("/{category_id}")
async def update_category(
    category_id: str,
    request: CategoryUpdateDto,
    admin: Profile = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    category = _get_category(db, category_id)
    updates = request.model_dump(exclude_unset=True)
    if not updates:
        raise bad_request("No fields to update", code="NO_FIELDS")

    if "parent_id" in updates and updates["parent_id"] is not None:
        if updates["parent_id"] == category.id:
            raise bad_request("A category cannot be its own parent")
        if not db.get(CategoryModel, updates["parent_id"]):
            raise bad_request("Parent category not found")

    for field, value in updates.items():
        setattr(category, field, value)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise conflict("A category with this slug already exists", code="DUPLICATE_SLUG")
    db.refresh(category)
    revalidate_navigation()
    return ok(serialize_category(category))


@router.delete("/{category_id}")
async def delete_category(
    category_id: str,
    admin: Profile = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    category = _get_category(db, category_id)
    # Children move up to the root
    db.query(CategoryModel).filter(CategoryModel.parent_id == category.id).update(
        {CategoryModel.parent_id: None}, synchronize_session=False
    )
    db.delete(category)
    db.commit()
    revalidate_navigation()
    logger.info("Category %s deleted by %s", category_id, admin.id)
    return ok({"deleted": True, "id": category_id})
