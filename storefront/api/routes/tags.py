"""Tag routes"""

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...api.dependencies import get_current_admin
from ...api.serializers import serialize_tag
from ...application.dtos.catalog_dtos import TagCreateDto, TagUpdateDto
from ...core.errors import bad_request, conflict, not_found, ok
from ...db.database import get_db
from ...domain.entities.profile import Profile
from ...domain.value_objects.entity_ids import parse_uuid
from ...infrastructure.orm.catalog_model import TagModel

router = APIRouter()


@router.get("")
async def list_tags(q: Optional[str] = None, db: Session = Depends(get_db)):
    query = db.query(TagModel)
    if q:
        pattern = f"%{q.strip()}%"
        query = query.filter(or_(TagModel.name.ilike(pattern), TagModel.slug.ilike(pattern)))
    return ok([serialize_tag(tag) for tag in query.order_by(TagModel.name).all()])


@router.post("", status_code=201)
async def create_tag(
    request: TagCreateDto,
    admin: Profile = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    tag = TagModel(name=request.name.strip(), slug=request.slug.strip())
    db.add(tag)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise conflict("A tag with this slug already exists", code="DUPLICATE_SLUG")
    db.refresh(tag)
    return ok(serialize_tag(tag))


@router.patch("")
async def update_tag(
    request: TagUpdateDto,
    admin: Profile = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    name = request.name.strip() if request.name else ""
    slug = request.slug.strip() if request.slug else ""
    if not name and not slug:
        raise bad_request("Nothing to update", code="NO_FIELDS")

    tag = db.get(TagModel, request.id)
    if not tag:
        raise not_found("Tag not found")
    if name:
        tag.name = name
    if slug:
        tag.slug = slug
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise conflict("A tag with this slug already exists", code="DUPLICATE_SLUG")
    db.refresh(tag)
    return ok(serialize_tag(tag))


@router.delete("/{tag_id}")
async def delete_tag(
    tag_id: str,
    admin: Profile = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    tag_uuid = parse_uuid(tag_id)
    tag = db.get(TagModel, tag_uuid) if tag_uuid else None
    if not tag:
        raise not_found("Tag not found")
    db.delete(tag)
    db.commit()
    return ok({"deleted": True, "id": tag_id})
