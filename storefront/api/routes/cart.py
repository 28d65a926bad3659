"""Cart routes for members and anonymous sessions"""

import logging
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Header, status
from sqlalchemy.orm import Session

from ...api.dependencies import get_optional_profile
from ...api.serializers import iso
from ...application.dtos.cart_dtos import AddCartItemDto, UpdateCartItemDto, ShareCartDto
from ...application.services.cart_snapshots import MAX_LINE_QUANTITY, merge_lines, snapshot_cart
from ...core.config import settings
from ...core.errors import ApiError, bad_request, not_found, ok
from ...core.security import generate_share_token
from ...db.database import get_db
from ...domain.entities.profile import Profile
from ...domain.enums import CartStatus, SavedCartTrigger
from ...domain.value_objects.entity_ids import parse_uuid
from ...infrastructure.orm.cart_model import CartModel, CartItemModel
from ...infrastructure.orm.catalog_model import ProductVariantModel

logger = logging.getLogger(__name__)

router = APIRouter()


class CartOwner:
    """Who a cart belongs to: a signed-in profile or an anonymous session"""

    def __init__(self, profile: Optional[Profile], session_id: Optional[str]):
        self.profile_id = profile.id.value if profile else None
        self.session_id = session_id

    def filter(self, query):
        if self.profile_id is not None:
            return query.filter(CartModel.profile_id == self.profile_id)
        return query.filter(CartModel.session_id == self.session_id)


def get_cart_owner(
    profile: Optional[Profile] = Depends(get_optional_profile),
    x_session_id: Optional[str] = Header(None)
) -> CartOwner:
    session_id = (x_session_id or "").strip() or None
    if profile is None and session_id is None:
        raise bad_request("Sign in or send an X-Session-Id header", code="MISSING_SESSION")
    return CartOwner(profile, session_id)


def get_or_create_cart(db: Session, owner: CartOwner) -> CartModel:
    cart = owner.filter(db.query(CartModel)).filter(
        CartModel.status == CartStatus.ACTIVE.value
    ).order_by(CartModel.created_at.desc()).first()
    if cart:
        return cart

    cart = CartModel(
        profile_id=owner.profile_id,
        session_id=None if owner.profile_id else owner.session_id,
        status=CartStatus.ACTIVE.value,
    )
    db.add(cart)
    db.commit()
    db.refresh(cart)
    logger.info("Created cart %s", cart.id)
    return cart


def share_url(token: str) -> str:
    return f"{settings.FRONTEND_URL.rstrip('/')}/cart/shared/{token}"


def serialize_cart(cart: CartModel) -> Dict[str, Any]:
    items = []
    subtotal = 0
    for item in cart.items:
        variant = item.variant
        product = variant.product if variant else None
        price = variant.price_cents if variant else 0
        subtotal += price * item.quantity
        items.append({
            "id": str(item.id),
            "variant_id": str(item.variant_id),
            "product_id": str(product.id) if product else None,
            "quantity": item.quantity,
            "price_cents": price,
            "line_total_cents": price * item.quantity,
            "product": {"title": product.title, "slug": product.slug} if product else None,
            "variant": {
                "title": variant.title,
                "sku": variant.sku,
                "options": variant.options or {},
            } if variant else None,
        })

    return {
        "id": str(cart.id),
        "status": cart.status,
        "items": items,
        "item_count": sum(item.quantity for item in cart.items),
        "subtotal_cents": subtotal,
        "is_shared": cart.is_shared,
        "share_token": cart.share_token,
        "share_url": share_url(cart.share_token) if cart.share_token else None,
        "share_name": cart.share_name,
        "share_message": cart.share_message,
        "share_expires_at": iso(cart.share_expires_at),
    }


def _check_stock(variant: ProductVariantModel, quantity: int) -> None:
    if variant.track_inventory and not variant.allow_backorder:
        available = variant.stock_quantity or 0
        if quantity > available:
            raise bad_request(f"Only {available} left in stock", code="INSUFFICIENT_STOCK")


def _get_item(db: Session, cart: CartModel, item_id: str) -> CartItemModel:
    item_uuid = parse_uuid(item_id)
    item = db.get(CartItemModel, item_uuid) if item_uuid else None
    if not item or item.cart_id != cart.id:
        raise not_found("Cart item not found")
    return item


def _get_shared_cart(db: Session, token: str) -> CartModel:
    cart = db.query(CartModel).filter(
        CartModel.share_token == token,
        CartModel.is_shared.is_(True),
    ).first()
    if not cart:
        raise not_found("Shared cart not found")
    if cart.share_expires_at and cart.share_expires_at <= datetime.utcnow():
        raise ApiError(status.HTTP_410_GONE, "EXPIRED", "This share link has expired")
    return cart


@router.get("")
async def get_cart(owner: CartOwner = Depends(get_cart_owner), db: Session = Depends(get_db)):
    """Active cart, created on first access"""
    return ok(serialize_cart(get_or_create_cart(db, owner)))


@router.delete("")
async def clear_cart(owner: CartOwner = Depends(get_cart_owner), db: Session = Depends(get_db)):
    cart = get_or_create_cart(db, owner)
    cart.items.clear()
    db.commit()
    db.refresh(cart)
    return ok(serialize_cart(cart))


@router.post("/items")
async def add_cart_item(
    request: AddCartItemDto,
    owner: CartOwner = Depends(get_cart_owner),
    db: Session = Depends(get_db)
):
    """Add a variant, merging with an existing line"""
    variant = db.get(ProductVariantModel, request.variant_id)
    if not variant:
        raise not_found("Variant not found")
    if not variant.is_active:
        raise bad_request("This variant is not available", code="VARIANT_INACTIVE")

    cart = get_or_create_cart(db, owner)
    existing = next((item for item in cart.items if item.variant_id == variant.id), None)
    quantity = request.quantity + (existing.quantity if existing else 0)
    if quantity > MAX_LINE_QUANTITY:
        raise bad_request(f"Quantity cannot exceed {MAX_LINE_QUANTITY}")
    _check_stock(variant, quantity)

    if existing:
        existing.quantity = quantity
    else:
        cart.items.append(CartItemModel(variant_id=variant.id, quantity=quantity))
    db.commit()
    db.refresh(cart)
    return ok(serialize_cart(cart))


@router.patch("/items/{item_id}")
async def update_cart_item(
    item_id: str,
    request: UpdateCartItemDto,
    owner: CartOwner = Depends(get_cart_owner),
    db: Session = Depends(get_db)
):
    cart = get_or_create_cart(db, owner)
    item = _get_item(db, cart, item_id)
    _check_stock(item.variant, request.quantity)

    item.quantity = request.quantity
    db.commit()
    db.refresh(cart)
    return ok(serialize_cart(cart))


@router.delete("/items/{item_id}")
async def remove_cart_item(
    item_id: str,
    owner: CartOwner = Depends(get_cart_owner),
    db: Session = Depends(get_db)
):
    cart = get_or_create_cart(db, owner)
    item = _get_item(db, cart, item_id)
    cart.items.remove(item)
    db.commit()
    db.refresh(cart)
    return ok(serialize_cart(cart))


@router.post("/share")
async def share_cart(
    request: ShareCartDto,
    owner: CartOwner = Depends(get_cart_owner),
    db: Session = Depends(get_db)
):
    """Enable sharing; the token is kept across repeated calls"""
    cart = get_or_create_cart(db, owner)
    if not cart.share_token:
        cart.share_token = generate_share_token()
    cart.is_shared = True
    cart.share_name = request.name
    cart.share_message = request.message
    cart.share_expires_at = (
        datetime.utcnow() + timedelta(days=request.expires_in_days) if request.expires_in_days else None
    )
    db.commit()
    return ok({
        "share_token": cart.share_token,
        "share_url": share_url(cart.share_token),
        "share_expires_at": iso(cart.share_expires_at),
    })


@router.get("/shared/{token}")
async def get_shared_cart(token: str, db: Session = Depends(get_db)):
    return ok(serialize_cart(_get_shared_cart(db, token)))


@router.post("/shared/{token}/clone")
async def clone_shared_cart(
    token: str,
    owner: CartOwner = Depends(get_cart_owner),
    db: Session = Depends(get_db)
):
    """Copy a shared cart's available items into the caller's cart.

    Whatever the caller already had is saved first so it can be restored.
    """
    shared = _get_shared_cart(db, token)
    cart = get_or_create_cart(db, owner)
    if cart.id == shared.id:
        return ok(serialize_cart(cart), meta={"cloned": 0, "skipped": 0, "saved_cart_id": None})

    saved = snapshot_cart(
        db,
        cart,
        SavedCartTrigger.CLONE,
        f'Your cart before adding "{shared.share_name or "a wishlist"}"',
        owner.profile_id,
        owner.session_id,
        source=shared,
    )
    cloned, skipped = merge_lines(db, cart, [(item.variant_id, item.quantity) for item in shared.items])
    db.commit()
    db.refresh(cart)
    logger.info("Cloned %s lines from shared cart %s into %s (%s skipped)", cloned, shared.id, cart.id, skipped)
    return ok(serialize_cart(cart), meta={
        "cloned": cloned,
        "skipped": skipped,
        "saved_cart_id": str(saved.id) if saved else None,
    })
