"""Admin dashboard routes"""

import logging
from datetime import datetime, timedelta

from fastapi import APIRouter, Depends, status
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...api.dependencies import get_current_admin
from ...api.serializers import serialize_variant
from ...core.errors import ApiError, ok
from ...db.database import get_db
from ...domain.entities.profile import Profile
from ...domain.enums import ProductStatus, OrderStatus, PaymentStatus, ProfileRole
from ...domain.value_objects.money import format_cents
from ...infrastructure.orm.catalog_model import ProductModel, ProductVariantModel
from ...infrastructure.orm.order_model import OrderModel
from ...infrastructure.orm.profile_model import ProfileModel

logger = logging.getLogger(__name__)

router = APIRouter()


def _counts_by(db: Session, column, values) -> dict:
    rows = dict(db.query(column, func.count()).group_by(column).all())
    return {value: rows.get(value, 0) for value in values}


@router.get("/dashboard")
async def get_admin_dashboard(
    admin: Profile = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    """Store overview: catalog, orders, revenue, members and stock alerts"""
    try:
        products = _counts_by(db, ProductModel.status, [s.value for s in ProductStatus])
        orders = _counts_by(db, OrderModel.status, [s.value for s in OrderStatus])
        payments = _counts_by(db, OrderModel.payment_status, [s.value for s in PaymentStatus])

        # Revenue is stored in cents
        revenue_cents = db.query(func.sum(OrderModel.total_cents)).filter(
            OrderModel.payment_status == PaymentStatus.PAID.value
        ).scalar() or 0

        recent_orders = db.query(OrderModel).filter(
            OrderModel.created_at >= datetime.utcnow() - timedelta(hours=24)
        ).count()

        members = _counts_by(db, ProfileModel.role, [r.value for r in ProfileRole])

        low_stock = db.query(ProductVariantModel).filter(
            ProductVariantModel.track_inventory.is_(True),
            ProductVariantModel.is_active.is_(True),
            ProductVariantModel.stock_quantity <= ProductVariantModel.low_stock_threshold,
        ).order_by(ProductVariantModel.stock_quantity).all()
    except SQLAlchemyError as e:
        logger.error("Failed to build admin dashboard: %s", e)
        raise ApiError(status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL_ERROR", "Failed to load dashboard")

    return ok({
        "products": {**products, "total": sum(products.values())},
        "orders": {
            "by_status": orders,
            "by_payment_status": payments,
            "total": sum(orders.values()),
            "recent_24h": recent_orders,
        },
        "revenue": {
            "paid_cents": int(revenue_cents),
            "paid_formatted": format_cents(int(revenue_cents)),
        },
        "members": {**members, "total": sum(members.values())},
        "low_stock": [
            {
                **serialize_variant(variant, include_inventory=True),
                "product_title": variant.product.title if variant.product else None,
            }
            for variant in low_stock
        ],
    })
