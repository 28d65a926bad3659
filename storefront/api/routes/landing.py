"""Landing page section routes"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from ...api.dependencies import get_current_admin
from ...api.serializers import iso
from ...application.dtos.content_dtos import LandingSectionCreateDto, LandingSectionUpdateDto, SwapSectionsDto
from ...core.errors import bad_request, not_found, ok
from ...db.database import get_db
from ...domain.entities.profile import Profile
from ...domain.value_objects.entity_ids import parse_uuid
from ...infrastructure.orm.content_model import LandingSectionModel

logger = logging.getLogger(__name__)

router = APIRouter()


def serialize_section(section: LandingSectionModel) -> Dict[str, Any]:
    return {
        "id": str(section.id),
        "type": section.type,
        "config": section.config or {},
        "position": section.position,
        "is_active": section.is_active,
        "created_at": iso(section.created_at),
        "updated_at": iso(section.updated_at),
    }


def _get_section(db: Session, section_id: str) -> LandingSectionModel:
    section_uuid = parse_uuid(section_id)
    section = db.get(LandingSectionModel, section_uuid) if section_uuid else None
    if not section:
        raise not_found("Section not found")
    return section


def _ordered(query):
    return query.order_by(LandingSectionModel.position, LandingSectionModel.created_at)


@router.get("/sections")
async def list_sections(db: Session = Depends(get_db)):
    """Active sections by position"""
    sections = _ordered(db.query(LandingSectionModel).filter(LandingSectionModel.is_active.is_(True))).all()
    return ok([serialize_section(section) for section in sections])


@router.get("/sections/admin")
async def admin_list_sections(
    admin: Profile = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    sections = _ordered(db.query(LandingSectionModel)).all()
    return ok([serialize_section(section) for section in sections])


@router.post("/sections", status_code=status.HTTP_201_CREATED)
async def create_section(
    request: LandingSectionCreateDto,
    admin: Profile = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    values = request.model_dump()
    values["type"] = values["type"].strip()
    if values["position"] is None:
        max_position = db.query(func.max(LandingSectionModel.position)).scalar()
        values["position"] = 1 if max_position is None else max_position + 1

    section = LandingSectionModel(**values)
    db.add(section)
    db.commit()
    db.refresh(section)
    logger.info("Landing section %s (%s) created by %s", section.id, section.type, admin.id)
    return ok(serialize_section(section))


@router.patch("/sections")
async def swap_sections(
    request: SwapSectionsDto,
    admin: Profile = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    """Apply positions from the drag-and-drop editor"""
    updated = 0
    for entry in request.swap:
        section = db.get(LandingSectionModel, entry.id)
        if section:
            section.position = entry.position
            updated += 1
    db.commit()
    return ok({"updated": updated})


@router.patch("/sections/{section_id}")
async def update_section(
    section_id: str,
    request: LandingSectionUpdateDto,
    admin: Profile = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    section = _get_section(db, section_id)
    updates = request.model_dump(exclude_unset=True)
    if not updates:
        raise bad_request("No fields to update", code="NO_FIELDS")
    if "type" in updates and not updates["type"]:
        raise bad_request("type cannot be null")

    for field, value in updates.items():
        setattr(section, field, value)
    db.commit()
    db.refresh(section)
    return ok(serialize_section(section))


@router.delete("/sections/{section_id}")
async def delete_section(
    section_id: str,
    admin: Profile = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    section = _get_section(db, section_id)
    db.delete(section)
    db.commit()
    return ok({"deleted": True, "id": section_id})
