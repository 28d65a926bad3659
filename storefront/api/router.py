"""Main API router"""

from fastapi import APIRouter

from .routes import (
    auth, profile, members, admin, categories, collections, tags, products, inventory, navigation,
    cart, saved_carts, checkout, webhooks, orders, pos, hero_slides, landing, static_pages, notifications,
    shipping_boxes,
)
from ..core.config import settings

# Main API router
api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(profile.router, prefix="/profile", tags=["profile"])
api_router.include_router(members.router, prefix="/admin", tags=["admin"])
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])
api_router.include_router(categories.router, prefix="/categories", tags=["catalog"])
api_router.include_router(collections.router, prefix="/collections", tags=["catalog"])
api_router.include_router(tags.router, prefix="/tags", tags=["catalog"])
api_router.include_router(products.router, prefix="/products", tags=["catalog"])
api_router.include_router(inventory.router, prefix="/inventory", tags=["catalog"])
api_router.include_router(navigation.router, prefix="/navigation", tags=["navigation"])
api_router.include_router(navigation.nav_router, prefix="/nav", tags=["navigation"])
api_router.include_router(cart.router, prefix="/cart", tags=["cart"])
api_router.include_router(saved_carts.router, prefix="/saved-carts", tags=["cart"])
api_router.include_router(checkout.router, prefix="/checkout", tags=["checkout"])
api_router.include_router(webhooks.router, prefix="/webhooks", tags=["webhooks"])
api_router.include_router(orders.router, prefix="/orders", tags=["orders"])
api_router.include_router(pos.router, prefix="/pos", tags=["pos"])
api_router.include_router(hero_slides.router, prefix="/hero-slides", tags=["content"])
api_router.include_router(landing.router, prefix="/landing", tags=["content"])
api_router.include_router(static_pages.router, prefix="/static-pages", tags=["content"])
api_router.include_router(notifications.router, prefix="/notifications", tags=["content"])
api_router.include_router(shipping_boxes.router, prefix="/shipping-boxes", tags=["content"])


@api_router.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "version": settings.VERSION}
