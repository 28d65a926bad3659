"""Product routes: public catalog and admin management"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, UploadFile, File
from sqlalchemy import func, or_, desc
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...api.dependencies import get_current_admin, get_storage_service
from ...api.serializers import (
    serialize_product_summary, serialize_product_detail, serialize_product_admin,
    serialize_variant, serialize_image,
)
from ...application.dtos.catalog_dtos import (
    ProductCreateDto, ProductUpdateDto, VariantCreateDto, VariantUpdateDto,
    ImageRegisterDto, AssignmentDto,
)
from ...core.config import settings
from ...core.errors import ApiError, bad_request, conflict, not_found, ok
from ...db.database import get_db
from ...domain.entities.profile import Profile
from ...domain.enums import ProductStatus
from ...domain.value_objects.entity_ids import parse_uuid
from ...infrastructure.external_services.storage_service import StorageService, StorageError
from ...infrastructure.orm.catalog_model import (
    ProductModel, ProductVariantModel, ProductImageModel, CategoryModel, CollectionModel, TagModel,
)

logger = logging.getLogger(__name__)

router = APIRouter()

SORTS = ("newest", "featured", "price-asc", "price-desc")
ADMIN_STATUS_FILTERS = ("all",) + tuple(s.value for s in ProductStatus)

# Related rows that can be linked to a product, by URL segment
ASSIGNABLE = {
    "categories": (CategoryModel, "categories", "Category"),
    "collections": (CollectionModel, "collections", "Collection"),
    "tags": (TagModel, "tags", "Tag"),
}


def _get_product(db: Session, product_id: str) -> ProductModel:
    product_uuid = parse_uuid(product_id)
    product = db.get(ProductModel, product_uuid) if product_uuid else None
    if not product:
        raise not_found("Product not found")
    return product


def _get_variant(db: Session, product: ProductModel, variant_id: str) -> ProductVariantModel:
    variant_uuid = parse_uuid(variant_id)
    variant = db.get(ProductVariantModel, variant_uuid) if variant_uuid else None
    if not variant or variant.product_id != product.id:
        raise not_found("Variant not found")
    return variant


def _commit_or_conflict(db: Session, message: str) -> None:
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise conflict(message, code="DUPLICATE")


# Public catalog

@router.get("")
async def list_products(
    collection: Optional[str] = None,
    featured: Optional[bool] = None,
    q: Optional[str] = None,
    sort: str = Query("newest"),
    limit: int = Query(20, ge=1, le=200),
    db: Session = Depends(get_db)
):
    """Active products with their images"""
    if sort not in SORTS:
        raise bad_request(f"sort must be one of: {', '.join(SORTS)}")

    meta = {"collection": collection, "featured": bool(featured), "sort": sort}
    query = db.query(ProductModel).filter(ProductModel.status == ProductStatus.ACTIVE.value)

    if collection:
        collection_row = db.query(CollectionModel).filter(CollectionModel.slug == collection).first()
        if not collection_row:
            return ok([], meta={**meta, "count": 0, "error": "Collection not found"})
        query = query.filter(ProductModel.collections.any(CollectionModel.id == collection_row.id))

    if featured:
        query = query.filter(ProductModel.featured.is_(True))
    if q:
        query = query.filter(ProductModel.title.ilike(f"%{q.strip()}%"))

    if sort == "featured":
        query = query.order_by(desc(ProductModel.featured), desc(ProductModel.created_at))
    elif sort == "price-asc":
        query = query.order_by(ProductModel.price_cents, desc(ProductModel.created_at))
    elif sort == "price-desc":
        query = query.order_by(desc(ProductModel.price_cents), desc(ProductModel.created_at))
    else:
        query = query.order_by(desc(ProductModel.created_at))

    products = query.limit(limit).all()
    return ok([serialize_product_summary(p) for p in products], meta={**meta, "count": len(products)})


# Admin management

@router.get("/admin")
async def admin_list_products(
    status: str = Query("all"),
    q: Optional[str] = None,
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    admin: Profile = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    """Products of any status"""
    if status not in ADMIN_STATUS_FILTERS:
        raise bad_request(f"status must be one of: {', '.join(ADMIN_STATUS_FILTERS)}", code="INVALID_STATUS")

    query = db.query(ProductModel)
    if status != "all":
        query = query.filter(ProductModel.status == status)
    if q:
        pattern = f"%{q.strip()}%"
        query = query.filter(or_(
            ProductModel.title.ilike(pattern),
            ProductModel.slug.ilike(pattern),
            ProductModel.description.ilike(pattern),
        ))

    total = query.count()
    products = query.order_by(desc(ProductModel.created_at)).offset(offset).limit(limit).all()
    return ok(
        [serialize_product_admin(p) for p in products],
        meta={"total": total, "limit": limit, "offset": offset, "status": status},
    )


@router.post("/admin", status_code=201)
async def admin_create_product(
    request: ProductCreateDto,
    admin: Profile = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    if db.query(ProductModel).filter(ProductModel.slug == request.slug.strip()).first():
        raise conflict("A product with this slug already exists", code="DUPLICATE_SLUG")

    product = ProductModel(
        slug=request.slug.strip(),
        title=request.title.strip(),
        price_cents=request.price_cents,
        description=request.description,
        material=request.material,
        made_in=request.made_in,
        status=ProductStatus.DRAFT.value,
    )
    db.add(product)
    _commit_or_conflict(db, "A product with this slug already exists")
    db.refresh(product)
    logger.info("Product %s created by %s", product.slug, admin.id)
    return ok(serialize_product_admin(product))


@router.get("/admin/{product_id}")
async def admin_get_product(
    product_id: str,
    admin: Profile = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    return ok(serialize_product_admin(_get_product(db, product_id)))


@router.patch("/admin/{product_id}")
async def admin_update_product(
    product_id: str,
    request: ProductUpdateDto,
    admin: Profile = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    product = _get_product(db, product_id)
    updates = request.model_dump(exclude_unset=True)
    if not updates:
        raise bad_request("No fields to update", code="NO_FIELDS")

    if "status" in updates and updates["status"] not in [s.value for s in ProductStatus]:
        raise bad_request("status must be active, draft or archived", code="INVALID_STATUS")
    for required in ("price_cents", "slug", "title", "status", "featured"):
        if required in updates and updates[required] is None:
            raise bad_request(f"{required} cannot be null")

    for field, value in updates.items():
        setattr(product, field, value)
    _commit_or_conflict(db, "A product with this slug already exists")
    db.refresh(product)
    return ok(serialize_product_admin(product))


@router.delete("/admin/{product_id}")
async def admin_archive_product(
    product_id: str,
    admin: Profile = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    """Products are archived, never hard deleted"""
    product = _get_product(db, product_id)
    product.status = ProductStatus.ARCHIVED.value
    db.commit()
    logger.info("Product %s archived by %s", product.slug, admin.id)
    return ok({"id": str(product.id), "status": product.status})


# Variants

@router.post("/admin/{product_id}/variants", status_code=201)
async def admin_create_variant(
    product_id: str,
    request: VariantCreateDto,
    admin: Profile = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    product = _get_product(db, product_id)
    values = request.model_dump()
    if values["position"] is None:
        max_position = db.query(func.max(ProductVariantModel.position)).filter(
            ProductVariantModel.product_id == product.id
        ).scalar()
        values["position"] = 0 if max_position is None else max_position + 1
    if values["price_cents"] is None:
        values["price_cents"] = product.price_cents

    variant = ProductVariantModel(product_id=product.id, **values)
    db.add(variant)
    _commit_or_conflict(db, "A variant with this SKU already exists")
    db.refresh(variant)
    return ok(serialize_variant(variant, include_inventory=True))


@router.patch("/admin/{product_id}/variants/{variant_id}")
async def admin_update_variant(
    product_id: str,
    variant_id: str,
    request: VariantUpdateDto,
    admin: Profile = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    product = _get_product(db, product_id)
    variant = _get_variant(db, product, variant_id)
    updates = request.model_dump(exclude_unset=True)
    if not updates:
        raise bad_request("No fields to update", code="NO_FIELDS")
    for required in ("title", "price_cents", "stock_quantity", "track_inventory", "allow_backorder",
                     "low_stock_threshold", "position", "is_active"):
        if required in updates and updates[required] is None:
            raise bad_request(f"{required} cannot be null")

    for field, value in updates.items():
        setattr(variant, field, value)
    _commit_or_conflict(db, "A variant with this SKU already exists")
    db.refresh(variant)
    return ok(serialize_variant(variant, include_inventory=True))


@router.delete("/admin/{product_id}/variants/{variant_id}")
async def admin_delete_variant(
    product_id: str,
    variant_id: str,
    admin: Profile = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    product = _get_product(db, product_id)
    variant = _get_variant(db, product, variant_id)
    db.delete(variant)
    db.commit()
    return ok({"deleted": True, "id": variant_id})


# Images

def _next_image_position(db: Session, product: ProductModel) -> int:
    max_position = db.query(func.max(ProductImageModel.position)).filter(
        ProductImageModel.product_id == product.id
    ).scalar()
    return 0 if max_position is None else max_position + 1


@router.post("/admin/{product_id}/images", status_code=201)
async def admin_register_image(
    product_id: str,
    request: ImageRegisterDto,
    admin: Profile = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    """Attach an object that is already in storage"""
    product = _get_product(db, product_id)
    position = _next_image_position(db, product)
    image = ProductImageModel(
        product_id=product.id,
        position=position,
        sort_order=position,
        **request.model_dump(),
    )
    db.add(image)
    db.commit()
    db.refresh(image)
    return ok(serialize_image(image))


@router.post("/admin/{product_id}/images/upload", status_code=201)
async def admin_upload_image(
    product_id: str,
    file: UploadFile = File(...),
    admin: Profile = Depends(get_current_admin),
    db: Session = Depends(get_db),
    storage_service: StorageService = Depends(get_storage_service)
):
    """Store an image file and attach it"""
    product = _get_product(db, product_id)
    if file.content_type not in settings.ALLOWED_IMAGE_TYPES:
        raise bad_request(f"Unsupported image type: {file.content_type}", code="INVALID_FILE_TYPE")
    data = await file.read()
    if len(data) > settings.MAX_FILE_SIZE:
        raise bad_request("File too large", code="FILE_TOO_LARGE")

    try:
        object_path = await storage_service.upload_file(
            bucket=settings.PRODUCT_IMAGES_BUCKET,
            data=data,
            filename=file.filename or "image",
            content_type=file.content_type,
            prefix=str(product.id),
        )
    except StorageError as e:
        raise ApiError(502, "STORAGE_ERROR", str(e))

    position = _next_image_position(db, product)
    image = ProductImageModel(
        product_id=product.id,
        bucket_name=settings.PRODUCT_IMAGES_BUCKET,
        object_path=object_path,
        position=position,
        sort_order=position,
        is_primary=position == 0,
    )
    db.add(image)
    db.commit()
    db.refresh(image)
    return ok(serialize_image(image))


@router.delete("/admin/{product_id}/images/{image_id}")
async def admin_delete_image(
    product_id: str,
    image_id: str,
    admin: Profile = Depends(get_current_admin),
    db: Session = Depends(get_db),
    storage_service: StorageService = Depends(get_storage_service)
):
    product = _get_product(db, product_id)
    image_uuid = parse_uuid(image_id)
    image = db.get(ProductImageModel, image_uuid) if image_uuid else None
    if not image or image.product_id != product.id:
        raise not_found("Image not found")

    bucket, object_path = image.bucket_name, image.object_path
    db.delete(image)
    db.commit()
    await storage_service.delete_file(bucket, object_path)
    return ok({"deleted": True, "id": image_id})


# Category / collection / tag assignment

@router.post("/admin/{product_id}/{kind}")
async def admin_assign(
    product_id: str,
    kind: str,
    request: AssignmentDto,
    admin: Profile = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    """Link categories, collections or tags to a product"""
    if kind not in ASSIGNABLE:
        raise not_found()
    model, attribute, label = ASSIGNABLE[kind]
    product = _get_product(db, product_id)

    linked = getattr(product, attribute)
    for item_id in request.ids:
        row = db.get(model, item_id)
        if not row:
            raise bad_request(f"{label} {item_id} not found")
        if row not in linked:
            linked.append(row)
    db.commit()
    return ok([str(row.id) for row in getattr(product, attribute)])


@router.delete("/admin/{product_id}/{kind}/{item_id}")
async def admin_unassign(
    product_id: str,
    kind: str,
    item_id: str,
    admin: Profile = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    if kind not in ASSIGNABLE:
        raise not_found()
    model, attribute, _ = ASSIGNABLE[kind]
    product = _get_product(db, product_id)

    linked = getattr(product, attribute)
    item_uuid = parse_uuid(item_id)
    for row in list(linked):
        if row.id == item_uuid:
            linked.remove(row)
    db.commit()
    return ok([str(row.id) for row in getattr(product, attribute)])


# Public detail is registered last so /admin is never captured as a slug

@router.get("/{slug}")
async def get_product(
    slug: str,
    include: Optional[str] = None,
    db: Session = Depends(get_db)
):
    product = db.query(ProductModel).filter(
        ProductModel.slug == slug,
        ProductModel.status == ProductStatus.ACTIVE.value,
    ).first()
    if not product:
        raise not_found("Product not found")

    include_inventory = "inventory" in (include or "").split(",")
    return ok(serialize_product_detail(product, include_inventory=include_inventory))
