"""Saved cart snapshots taken before a cart is overwritten"""

import logging
from datetime import datetime
from typing import Any, Dict
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...api.serializers import iso
from ...application.services.cart_snapshots import merge_lines, snapshot_cart
from ...core.errors import not_found, ok
from ...db.database import get_db
from ...domain.enums import SavedCartTrigger
from ...domain.value_objects.entity_ids import parse_uuid
from ...infrastructure.orm.cart_model import SavedCartModel
from .cart import CartOwner, get_cart_owner, get_or_create_cart, serialize_cart

logger = logging.getLogger(__name__)

router = APIRouter()

MAX_LISTED = 10


def serialize_saved_cart(saved: SavedCartModel) -> Dict[str, Any]:
    return {
        "id": str(saved.id),
        "trigger": saved.trigger,
        "label": saved.label,
        "source_share_token": saved.source_share_token,
        "source_share_name": saved.source_share_name,
        "items": saved.items or [],
        "item_count": saved.item_count,
        "subtotal_cents": saved.subtotal_cents,
        "created_at": iso(saved.created_at),
        "expires_at": iso(saved.expires_at),
    }


def _live_snapshots(db: Session, owner: CartOwner):
    query = db.query(SavedCartModel).filter(
        SavedCartModel.deleted_at.is_(None),
        SavedCartModel.expires_at > datetime.utcnow(),
    )
    if owner.profile_id is not None:
        return query.filter(SavedCartModel.profile_id == owner.profile_id)
    return query.filter(SavedCartModel.session_id == owner.session_id)


@router.get("")
async def list_saved_carts(owner: CartOwner = Depends(get_cart_owner), db: Session = Depends(get_db)):
    """Newest snapshots first"""
    saved = _live_snapshots(db, owner).order_by(SavedCartModel.created_at.desc()).limit(MAX_LISTED).all()
    return ok([serialize_saved_cart(snapshot) for snapshot in saved])


@router.post("/{saved_cart_id}/restore")
async def restore_saved_cart(
    saved_cart_id: str,
    owner: CartOwner = Depends(get_cart_owner),
    db: Session = Depends(get_db)
):
    """Merge a snapshot back into the active cart.

    The current cart is saved first, and the restored snapshot is retired.
    """
    saved_uuid = parse_uuid(saved_cart_id)
    saved = _live_snapshots(db, owner).filter(SavedCartModel.id == saved_uuid).first() if saved_uuid else None
    if not saved:
        raise not_found("Saved cart not found or expired")

    cart = get_or_create_cart(db, owner)
    snapshot_cart(db, cart, SavedCartTrigger.MANUAL, "Your cart before restoring", owner.profile_id, owner.session_id)

    lines = [(UUID(item["variant_id"]), int(item["quantity"])) for item in saved.items or []]
    restored, skipped = merge_lines(db, cart, lines)
    saved.deleted_at = datetime.utcnow()
    db.commit()
    db.refresh(cart)

    message = f"Restored {restored} item(s)"
    if skipped:
        message += f", {skipped} no longer available"
    logger.info("Restored saved cart %s into %s (%s skipped)", saved.id, cart.id, skipped)
    return ok(serialize_cart(cart), meta={"restored": restored, "skipped": skipped, "message": message})
