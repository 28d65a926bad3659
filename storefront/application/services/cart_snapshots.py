"""Saved cart snapshots and line merging shared by clone and restore"""

import logging
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional, Tuple
from uuid import UUID

from sqlalchemy.orm import Session

from ...core.config import settings
from ...domain.enums import SavedCartTrigger
from ...infrastructure.external_services.storage_service import public_object_url
from ...infrastructure.orm.cart_model import CartModel, CartItemModel, SavedCartModel
from ...infrastructure.orm.catalog_model import ProductVariantModel

logger = logging.getLogger(__name__)

MAX_LINE_QUANTITY = 99


def _cover_image(product):
    images = sorted(product.images, key=lambda image: (image.position or 0, image.created_at))
    return next((image for image in images if image.is_primary), images[0] if images else None)


def snapshot_items(cart: CartModel) -> List[Dict[str, Any]]:
    """Enough of each line to list it and add it back later"""
    items = []
    for item in cart.items:
        variant = item.variant
        product = variant.product if variant else None
        image = _cover_image(product) if product else None
        items.append({
            "variant_id": str(item.variant_id),
            "product_id": str(product.id) if product else None,
            "product_title": product.title if product else "Unknown Product",
            "product_slug": product.slug if product else "",
            "variant_title": variant.title if variant else None,
            "options": (variant.options or None) if variant else None,
            "quantity": item.quantity,
            "price_cents": variant.price_cents if variant else 0,
            "image_url": public_object_url(image.bucket_name, image.object_path) if image else None,
        })
    return items


def snapshot_cart(
    db: Session,
    cart: CartModel,
    trigger: SavedCartTrigger,
    label: str,
    profile_id: Optional[UUID],
    session_id: Optional[str],
    source: Optional[CartModel] = None,
) -> Optional[SavedCartModel]:
    """Save the cart's current lines; nothing is saved for an empty cart"""
    items = snapshot_items(cart)
    if not items:
        return None

    now = datetime.utcnow()
    saved = SavedCartModel(
        profile_id=profile_id,
        session_id=None if profile_id else session_id,
        trigger=trigger.value,
        label=label,
        source_share_token=source.share_token if source else None,
        source_share_name=source.share_name if source else None,
        source_cart_id=source.id if source else None,
        items=items,
        item_count=sum(item["quantity"] for item in items),
        subtotal_cents=sum(item["price_cents"] * item["quantity"] for item in items),
        created_at=now,
        expires_at=now + timedelta(days=settings.SAVED_CART_TTL_DAYS),
    )
    db.add(saved)
    db.flush()
    logger.info("Saved %s snapshot %s of cart %s", trigger.value, saved.id, cart.id)
    return saved


def is_available(variant: Optional[ProductVariantModel]) -> bool:
    if variant is None or not variant.is_active:
        return False
    if variant.track_inventory and not variant.allow_backorder:
        return (variant.stock_quantity or 0) >= 1
    return True


def merge_lines(db: Session, cart: CartModel, lines: Iterable[Tuple[UUID, int]]) -> Tuple[int, int]:
    """Add (variant_id, quantity) lines to the cart, summing existing ones.

    Inactive, deleted and sold out variants are skipped. Returns (merged, skipped).
    """
    existing = {item.variant_id: item for item in cart.items}
    merged = skipped = 0
    for variant_id, quantity in lines:
        variant = db.get(ProductVariantModel, variant_id)
        if not is_available(variant):
            skipped += 1
            continue
        if variant_id in existing:
            line = existing[variant_id]
            line.quantity = min(line.quantity + quantity, MAX_LINE_QUANTITY)
        else:
            line = CartItemModel(variant_id=variant_id, quantity=min(quantity, MAX_LINE_QUANTITY))
            cart.items.append(line)
            existing[variant_id] = line
        merged += 1
    return merged, skipped
