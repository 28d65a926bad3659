"""Inventory movement routes"""

import logging
from typing import Any, Dict, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import desc
from sqlalchemy.orm import Session

from ...api.dependencies import get_current_admin
from ...api.serializers import iso, uid
from ...application.dtos.catalog_dtos import InventoryMovementDto
from ...core.errors import not_found, ok
from ...db.database import get_db
from ...domain.entities.profile import Profile
from ...infrastructure.orm.catalog_model import InventoryMovementModel, ProductVariantModel

logger = logging.getLogger(__name__)

router = APIRouter()


def serialize_movement(movement: InventoryMovementModel) -> Dict[str, Any]:
    return {
        "id": str(movement.id),
        "variant_id": str(movement.variant_id),
        "movement_type": movement.movement_type,
        "quantity": movement.quantity,
        "stock_before": movement.stock_before,
        "stock_after": movement.stock_after,
        "note": movement.note,
        "reference": movement.reference,
        "created_by": uid(movement.created_by),
        "created_at": iso(movement.created_at),
    }


@router.post("/movements", status_code=status.HTTP_201_CREATED)
async def record_movement(
    request: InventoryMovementDto,
    admin: Profile = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    """Record a stock movement and apply it to the variant"""
    variant = db.get(ProductVariantModel, request.variant_id)
    if not variant:
        raise not_found("Variant not found")

    before = variant.stock_quantity or 0
    variant.stock_quantity = request.movement_type.apply(before, request.quantity)
    movement = InventoryMovementModel(
        variant_id=variant.id,
        movement_type=request.movement_type.value,
        quantity=request.quantity,
        stock_before=before,
        stock_after=variant.stock_quantity,
        note=request.note,
        reference=request.reference,
        created_by=admin.id.value,
    )
    db.add(movement)
    db.commit()
    db.refresh(movement)
    logger.info("Inventory %s of %s on %s: %s -> %s", movement.movement_type, movement.quantity,
                variant.sku or variant.id, before, movement.stock_after)
    return ok(serialize_movement(movement))


@router.get("/movements")
async def list_movements(
    variant_id: Optional[UUID] = None,
    limit: int = Query(50, ge=1, le=500),
    admin: Profile = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    """Newest movements first, optionally for one variant"""
    query = db.query(InventoryMovementModel)
    if variant_id:
        query = query.filter(InventoryMovementModel.variant_id == variant_id)
    movements = query.order_by(desc(InventoryMovementModel.created_at)).limit(limit).all()
    return ok([serialize_movement(movement) for movement in movements])
