"""Infrastructure ORM Models"""

from .profile_model import ProfileModel, NotificationModel, NotificationReadModel
from .catalog_model import (
    CategoryModel,
    CollectionModel,
    TagModel,
    ProductModel,
    ProductImageModel,
    ProductVariantModel,
    InventoryMovementModel,
    product_categories,
    product_collections,
    product_tags,
)
from .cart_model import CartModel, CartItemModel, SavedCartModel
from .order_model import OrderModel, OrderItemModel, FulfillmentModel
from .checkout_model import TaxRateModel, PromoCodeModel, ShippingRateModel, ShippingBoxModel
from .content_model import HeroSlideModel, LandingSectionModel, StaticPageModel

__all__ = [
    'ProfileModel',
    'NotificationModel',
    'NotificationReadModel',
    'CategoryModel',
    'CollectionModel',
    'TagModel',
    'ProductModel',
    'ProductImageModel',
    'ProductVariantModel',
    'InventoryMovementModel',
    'product_categories',
    'product_collections',
    'product_tags',
    'CartModel',
    'CartItemModel',
    'SavedCartModel',
    'OrderModel',
    'OrderItemModel',
    'FulfillmentModel',
    'TaxRateModel',
    'PromoCodeModel',
    'ShippingRateModel',
    'ShippingBoxModel',
    'HeroSlideModel',
    'LandingSectionModel',
    'StaticPageModel',
]
