"""Point of sale routes for in-person sales"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ...api.dependencies import get_current_admin, get_unit_of_work, get_payment_service
from ...api.serializers import serialize_variant
from ...application.dtos.pos_dtos import PosChargeDto
from ...application.use_cases.pos_charge import PosChargeUseCase, PosChargeError
from ...core.errors import ApiError, bad_request, ok
from ...db.database import get_db
from ...domain.entities.profile import Profile
from ...domain.enums import ProductStatus
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...infrastructure.external_services.payment_service import PaymentService, PaymentProviderError
from ...infrastructure.external_services.storage_service import public_object_url
from ...infrastructure.orm.catalog_model import ProductModel

logger = logging.getLogger(__name__)

router = APIRouter()


def _pos_image_url(product: ProductModel):
    """Primary image first, then lowest sort order"""
    images = sorted(
        product.images,
        key=lambda image: (not image.is_primary, image.sort_order or 0, image.position or 0),
    )
    if not images:
        return None
    return public_object_url(images[0].bucket_name, images[0].object_path)


@router.get("/products")
async def pos_products(
    admin: Profile = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    """Active products with their active variants"""
    products = db.query(ProductModel).filter(
        ProductModel.status == ProductStatus.ACTIVE.value
    ).order_by(ProductModel.title).all()

    return ok([
        {
            "id": str(product.id),
            "slug": product.slug,
            "title": product.title,
            "price_cents": product.price_cents,
            "image_url": _pos_image_url(product),
            "variants": [
                serialize_variant(variant, include_inventory=True)
                for variant in sorted(product.variants, key=lambda v: v.position or 0)
                if variant.is_active
            ],
            "collections": [{"id": str(c.id), "name": c.name, "slug": c.slug} for c in product.collections],
            "categories": [{"id": str(c.id), "name": c.name, "slug": c.slug} for c in product.categories],
        }
        for product in products
    ])


@router.post("/charge", status_code=status.HTTP_201_CREATED)
async def pos_charge(
    request: PosChargeDto,
    admin: Profile = Depends(get_current_admin),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
    payment_service: PaymentService = Depends(get_payment_service),
    db: Session = Depends(get_db)
):
    """Create a POS order and a card-present PaymentIntent"""
    use_case = PosChargeUseCase(db, unit_of_work, payment_service)
    try:
        result = await use_case.execute(request, staff_id=admin.id.value)
    except PosChargeError as e:
        raise bad_request(str(e), code=e.code)
    except PaymentProviderError as e:
        raise ApiError(status.HTTP_502_BAD_GATEWAY, "PAYMENT_PROVIDER_ERROR", str(e))
    return ok(result)


@router.post("/connection-token")
async def connection_token(
    admin: Profile = Depends(get_current_admin),
    payment_service: PaymentService = Depends(get_payment_service)
):
    """Stripe Terminal reader token"""
    try:
        secret = await payment_service.create_connection_token()
    except PaymentProviderError as e:
        raise ApiError(status.HTTP_502_BAD_GATEWAY, "PAYMENT_PROVIDER_ERROR", str(e))
    return ok({"secret": secret})
