"""Collection routes"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...api.dependencies import get_current_admin
from ...api.serializers import serialize_collection
from ...application.dtos.catalog_dtos import CollectionCreateDto, CollectionUpdateDto
from ...application.services.navigation_service import revalidate_navigation
from ...core.errors import bad_request, conflict, not_found, ok
from ...db.database import get_db
from ...domain.entities.profile import Profile
from ...domain.value_objects.entity_ids import parse_uuid
from ...infrastructure.orm.catalog_model import CollectionModel

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_collection(db: Session, collection_id: str) -> CollectionModel:
    collection_uuid = parse_uuid(collection_id)
    collection = db.get(CollectionModel, collection_uuid) if collection_uuid else None
    if not collection:
        raise not_found("Collection not found")
    return collection


@router.get("")
async def list_collections(
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    q: Optional[str] = None,
    db: Session = Depends(get_db)
):
    query = db.query(CollectionModel)
    if q:
        pattern = f"%{q.strip()}%"
        query = query.filter(or_(
            CollectionModel.name.ilike(pattern),
            CollectionModel.slug.ilike(pattern),
            CollectionModel.description.ilike(pattern),
        ))
    collections = query.order_by(CollectionModel.position, CollectionModel.name).offset(offset).limit(limit).all()
    return ok([serialize_collection(c) for c in collections], meta={"limit": limit, "offset": offset})


@router.post("", status_code=201)
async def create_collection(
    request: CollectionCreateDto,
    admin: Profile = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    collection = CollectionModel(**request.model_dump())
    db.add(collection)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise conflict("A collection with this slug already exists", code="DUPLICATE_SLUG")
    db.refresh(collection)
    revalidate_navigation()
    return ok(serialize_collection(collection))


@router.patch("/{collection_id}")
async def update_collection(
    collection_id: str,
    request: CollectionUpdateDto,
    admin: Profile = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    collection = _get_collection(db, collection_id)
    updates = request.model_dump(exclude_unset=True)
    if not updates:
        raise bad_request("No fields to update", code="NO_FIELDS")
    for field, value in updates.items():
        setattr(collection, field, value)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise conflict("A collection with this slug already exists", code="DUPLICATE_SLUG")
    db.refresh(collection)
    revalidate_navigation()
    return ok(serialize_collection(collection))


@router.delete("/{collection_id}")
async def delete_collection(
    collection_id: str,
    admin: Profile = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    collection = _get_collection(db, collection_id)
    db.delete(collection)
    db.commit()
    revalidate_navigation()
    logger.info("Collection %s deleted by %s", collection_id, admin.id)
    return ok({"deleted": True, "id": collection_id})
