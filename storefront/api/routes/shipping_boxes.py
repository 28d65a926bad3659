"""Shipping box presets used for rate quotes and labels"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ...api.dependencies import get_current_admin
from ...application.dtos.content_dtos import ShippingBoxCreateDto, ShippingBoxUpdateDto
from ...core.errors import bad_request, not_found, ok
from ...db.database import get_db
from ...domain.entities.profile import Profile
from ...domain.value_objects.entity_ids import parse_uuid
from ...infrastructure.orm.checkout_model import ShippingBoxModel

logger = logging.getLogger(__name__)

router = APIRouter()


def _number(value) -> Optional[float]:
    return float(value) if value is not None else None


def serialize_box(box: ShippingBoxModel) -> Dict[str, Any]:
    return {
        "id": str(box.id),
        "name": box.name,
        "length_in": _number(box.length_in),
        "width_in": _number(box.width_in),
        "height_in": _number(box.height_in),
        "weight_oz": _number(box.weight_oz),
        "is_default": box.is_default,
        "is_active": box.is_active,
    }


def _clear_default(db: Session, keep: Optional[ShippingBoxModel] = None) -> None:
    query = db.query(ShippingBoxModel).filter(ShippingBoxModel.is_default.is_(True))
    for box in query.all():
        if box is not keep:
            box.is_default = False


def _get_box(db: Session, box_id: str) -> ShippingBoxModel:
    box_uuid = parse_uuid(box_id)
    box = db.get(ShippingBoxModel, box_uuid) if box_uuid else None
    if not box:
        raise not_found("Shipping box not found")
    return box


@router.get("")
async def list_boxes(
    admin: Profile = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    boxes = db.query(ShippingBoxModel).order_by(
        ShippingBoxModel.is_default.desc(), ShippingBoxModel.name
    ).all()
    return ok([serialize_box(box) for box in boxes])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_box(
    request: ShippingBoxCreateDto,
    admin: Profile = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    """Only one box can be the default"""
    if request.is_default:
        _clear_default(db)
    box = ShippingBoxModel(**request.model_dump())
    box.name = box.name.strip()
    db.add(box)
    db.commit()
    db.refresh(box)
    return ok(serialize_box(box))


@router.patch("/{box_id}")
async def update_box(
    box_id: str,
    request: ShippingBoxUpdateDto,
    admin: Profile = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    box = _get_box(db, box_id)
    updates = request.model_dump(exclude_unset=True)
    if not updates:
        raise bad_request("No fields to update", code="NO_FIELDS")
    for required in ("name", "length_in", "width_in", "height_in", "is_default", "is_active"):
        if required in updates and updates[required] is None:
            raise bad_request(f"{required} cannot be null")

    if updates.get("is_default"):
        _clear_default(db, keep=box)
    for field, value in updates.items():
        setattr(box, field, value)
    db.commit()
    db.refresh(box)
    return ok(serialize_box(box))


@router.delete("/{box_id}")
async def delete_box(
    box_id: str,
    admin: Profile = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    box = _get_box(db, box_id)
    db.delete(box)
    db.commit()
    return ok({"deleted": True, "id": box_id})
