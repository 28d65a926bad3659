"""Row to JSON mapping shared by the route modules"""

from typing import Any, Dict, List, Optional

from ..domain.entities.order import points_for
from ..domain.enums import FulfillmentStatus, OrderSource
from ..infrastructure.external_services.storage_service import public_object_url
from ..infrastructure.orm.catalog_model import (
    CategoryModel, CollectionModel, TagModel, ProductModel, ProductImageModel, ProductVariantModel,
)
from ..infrastructure.orm.order_model import OrderModel


def iso(value) -> Optional[str]:
    return value.isoformat() if value is not None else None


def uid(value) -> Optional[str]:
    return str(value) if value is not None else None


def serialize_category(category: CategoryModel) -> Dict[str, Any]:
    return {
        "id": str(category.id),
        "name": category.name,
        "slug": category.slug,
        "description": category.description,
        "image_url": category.image_url,
        "parent_id": uid(category.parent_id),
        "position": category.position,
        "sort_order": category.sort_order,
        "is_active": category.is_active,
    }


def serialize_collection(collection: CollectionModel) -> Dict[str, Any]:
    return {
        "id": str(collection.id),
        "name": collection.name,
        "slug": collection.slug,
        "description": collection.description,
        "image_url": collection.image_url,
        "position": collection.position,
        "is_active": collection.is_active,
    }


def serialize_tag(tag: TagModel) -> Dict[str, Any]:
    return {"id": str(tag.id), "name": tag.name, "slug": tag.slug}


def serialize_image(image: ProductImageModel) -> Dict[str, Any]:
    return {
        "id": str(image.id),
        "bucket_name": image.bucket_name,
        "object_path": image.object_path,
        "url": public_object_url(image.bucket_name, image.object_path),
        "alt_text": image.alt_text,
        "position": image.position,
        "sort_order": image.sort_order,
        "is_primary": image.is_primary,
        "width": image.width,
        "height": image.height,
    }


def serialize_variant(variant: ProductVariantModel, include_inventory: bool = False) -> Dict[str, Any]:
    data = {
        "id": str(variant.id),
        "product_id": str(variant.product_id),
        "title": variant.title,
        "sku": variant.sku,
        "price_cents": variant.price_cents,
        "compare_at_price_cents": variant.compare_at_price_cents,
        "options": variant.options or {},
        "weight_grams": variant.weight_grams,
        "position": variant.position,
        "is_active": variant.is_active,
    }
    if include_inventory:
        data.update({
            "stock_quantity": variant.stock_quantity,
            "track_inventory": variant.track_inventory,
            "allow_backorder": variant.allow_backorder,
            "low_stock_threshold": variant.low_stock_threshold,
            "in_stock": (
                not variant.track_inventory
                or variant.allow_backorder
                or (variant.stock_quantity or 0) > 0
            ),
        })
    return data


def images_by_position(product: ProductModel) -> List[ProductImageModel]:
    return sorted(product.images, key=lambda image: (image.position or 0, image.created_at))


def primary_image(images: List[ProductImageModel]) -> Optional[ProductImageModel]:
    """First image flagged primary, else the first image"""
    for image in images:
        if image.is_primary:
            return image
    return images[0] if images else None


def serialize_product_summary(product: ProductModel) -> Dict[str, Any]:
    images = images_by_position(product)
    primary = primary_image(images)
    return {
        "id": str(product.id),
        "slug": product.slug,
        "title": product.title,
        "description": product.description,
        "price_cents": product.price_cents,
        "compare_at_price_cents": product.compare_at_price_cents,
        "status": product.status,
        "featured": product.featured,
        "created_at": iso(product.created_at),
        "images": [serialize_image(image) for image in images],
        "primary_image": serialize_image(primary) if primary else None,
    }


def serialize_product_detail(product: ProductModel, include_inventory: bool = False) -> Dict[str, Any]:
    images = images_by_position(product)
    variants = sorted(product.variants, key=lambda variant: variant.position or 0)
    return {
        "id": str(product.id),
        "slug": product.slug,
        "title": product.title,
        "description": product.description,
        "price_cents": product.price_cents,
        "compare_at_price_cents": product.compare_at_price_cents,
        "status": product.status,
        "featured": product.featured,
        "material": product.material,
        "made_in": product.made_in,
        "care_instructions": product.care_instructions,
        "seo_title": product.seo_title,
        "seo_description": product.seo_description,
        "created_at": iso(product.created_at),
        "updated_at": iso(product.updated_at),
        "images": [serialize_image(image) for image in images],
        "primary_image": serialize_image(images[0]) if images else None,
        "variants": [serialize_variant(variant, include_inventory) for variant in variants],
        "categories": [serialize_category(category) for category in product.categories],
        "collections": [serialize_collection(collection) for collection in product.collections],
        "tags": [serialize_tag(tag) for tag in product.tags],
    }


def serialize_product_admin(product: ProductModel) -> Dict[str, Any]:
    data = serialize_product_detail(product, include_inventory=True)
    data["images"] = [
        serialize_image(image)
        for image in sorted(
            product.images,
            key=lambda image: (image.sort_order or 0, image.position or 0, image.created_at),
        )
    ]
    return data


def fulfillment_status(order: OrderModel) -> str:
    if order.fulfillments:
        return order.fulfillments[0].status
    return FulfillmentStatus.UNFULFILLED.value


def serialize_order_item(item) -> Dict[str, Any]:
    return {
        "id": str(item.id),
        "product_id": uid(item.product_id),
        "variant_id": uid(item.variant_id),
        "title": item.title,
        "variant_title": item.variant_title,
        "sku": item.sku,
        "quantity": item.quantity,
        "price_cents": item.price_cents,
    }


def serialize_order(order: OrderModel) -> Dict[str, Any]:
    """Customer-facing order view; amounts are never null"""
    return {
        "id": str(order.id),
        "order_number": order.order_number,
        "status": order.status,
        "payment_status": order.payment_status,
        "fulfillment_status": fulfillment_status(order),
        "subtotal_cents": order.subtotal_cents or 0,
        "discount_cents": order.discount_cents or 0,
        "shipping_cents": order.shipping_cents or 0,
        "tax_cents": order.tax_cents or 0,
        "total_cents": order.total_cents or 0,
        "currency": order.currency,
        "promo_code": order.promo_code,
        "email": order.email,
        "shipping_address": order.shipping_address,
        "shipping_method_name": order.shipping_method_name,
        "tracking_number": order.tracking_number,
        "tracking_url": order.tracking_url,
        "card_brand": order.card_brand,
        "card_last4": order.card_last4,
        "points_earned": points_for(order.subtotal_cents, order.total_cents),
        "created_at": iso(order.created_at),
        "payment_succeeded_at": iso(order.payment_succeeded_at),
        "fulfilled_at": iso(order.fulfilled_at),
        "items": [serialize_order_item(item) for item in order.items],
    }


def serialize_order_admin(order: OrderModel) -> Dict[str, Any]:
    data = serialize_order(order)
    is_pos = order.source == OrderSource.POS.value
    data.update({
        "source": order.source,
        "profile_id": uid(order.profile_id),
        "guest_key": order.guest_key,
        "customer_first_name": order.customer_first_name,
        "customer_last_name": order.customer_last_name,
        "phone": order.phone,
        "billing_address": order.billing_address,
        "customer_notes": order.customer_notes,
        "internal_notes": order.internal_notes,
        "is_pos": is_pos,
        "is_member": not is_pos and order.profile_id is not None,
        "is_guest": not is_pos and order.profile_id is None and bool(order.guest_key),
        "is_legacy": not is_pos and order.profile_id is None and not order.guest_key,
        "label_pdf_path": order.label_pdf_path,
        "label_postage_cents": order.label_postage_cents,
        "risk_level": order.risk_level,
        "payment_error_message": order.payment_error_message,
    })
    return data
