"""Catalog ORM Models"""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import (
    Column, Integer, String, DateTime, Boolean, Text, ForeignKey, Table, JSON, Uuid,
)
from sqlalchemy.orm import relationship

from ...db.models import Base
from ...domain.enums import ProductStatus


product_categories = Table(
    'product_categories',
    Base.metadata,
    Column('product_id', Uuid, ForeignKey('products.id', ondelete='CASCADE'), primary_key=True),
    Column('category_id', Uuid, ForeignKey('categories.id', ondelete='CASCADE'), primary_key=True),
)

product_collections = Table(
    'product_collections',
    Base.metadata,
    Column('product_id', Uuid, ForeignKey('products.id', ondelete='CASCADE'), primary_key=True),
    Column('collection_id', Uuid, ForeignKey('collections.id', ondelete='CASCADE'), primary_key=True),
)

product_tags = Table(
    'product_tags',
    Base.metadata,
    Column('product_id', Uuid, ForeignKey('products.id', ondelete='CASCADE'), primary_key=True),
    Column('tag_id', Uuid, ForeignKey('tags.id', ondelete='CASCADE'), primary_key=True),
)


class CategoryModel(Base):
    __tablename__ = 'categories'

    id = Column(Uuid, primary_key=True, default=uuid4, index=True)
    name = Column(String, nullable=False)
    slug = Column(String, unique=True, nullable=False, index=True)
    description = Column(Text, nullable=True)
    image_url = Column(String, nullable=True)
    parent_id = Column(Uuid, ForeignKey('categories.id', ondelete='SET NULL'), nullable=True, index=True)
    position = Column(Integer, default=0, nullable=False)
    sort_order = Column(Integer, default=0, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    products = relationship('ProductModel', secondary=product_categories, back_populates='categories')


class CollectionModel(Base):
    __tablename__ = 'collections'

    id = Column(Uuid, primary_key=True, default=uuid4, index=True)
    name = Column(String, nullable=False)
    slug = Column(String, unique=True, nullable=False, index=True)
    description = Column(Text, nullable=True)
    image_url = Column(String, nullable=True)
    position = Column(Integer, default=0, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    products = relationship('ProductModel', secondary=product_collections, back_populates='collections')


class TagModel(Base):
    __tablename__ = 'tags'

    id = Column(Uuid, primary_key=True, default=uuid4, index=True)
    name = Column(String, nullable=False)
    slug = Column(String, unique=True, nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    products = relationship('ProductModel', secondary=product_tags, back_populates='tags')


class ProductModel(Base):
    __tablename__ = 'products'

    id = Column(Uuid, primary_key=True, default=uuid4, index=True)
    slug = Column(String, unique=True, nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    price_cents = Column(Integer, nullable=False, default=0)
    compare_at_price_cents = Column(Integer, nullable=True)
    status = Column(String, default=ProductStatus.DRAFT.value, nullable=False, index=True)
    featured = Column(Boolean, default=False, nullable=False)
    material = Column(String, nullable=True)
    made_in = Column(String, nullable=True)
    care_instructions = Column(Text, nullable=True)
    seo_title = Column(String, nullable=True)
    seo_description = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    images = relationship('ProductImageModel', back_populates='product', cascade='all, delete-orphan')
    variants = relationship('ProductVariantModel', back_populates='product', cascade='all, delete-orphan')
    categories = relationship('CategoryModel', secondary=product_categories, back_populates='products')
    collections = relationship('CollectionModel', secondary=product_collections, back_populates='products')
    tags = relationship('TagModel', secondary=product_tags, back_populates='products')


class ProductImageModel(Base):
    __tablename__ = 'product_images'

    id = Column(Uuid, primary_key=True, default=uuid4, index=True)
    product_id = Column(Uuid, ForeignKey('products.id', ondelete='CASCADE'), nullable=False, index=True)
    bucket_name = Column(String, nullable=False)
    object_path = Column(String, nullable=False)
    alt_text = Column(String, nullable=True)
    position = Column(Integer, default=0, nullable=False)
    sort_order = Column(Integer, default=0, nullable=False)
    is_primary = Column(Boolean, default=False, nullable=False)
    width = Column(Integer, nullable=True)
    height = Column(Integer, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    product = relationship('ProductModel', back_populates='images')


class ProductVariantModel(Base):
    __tablename__ = 'product_variants'

    id = Column(Uuid, primary_key=True, default=uuid4, index=True)
    product_id = Column(Uuid, ForeignKey('products.id', ondelete='CASCADE'), nullable=False, index=True)
    title = Column(String, nullable=False)
    sku = Column(String, unique=True, nullable=True)
    price_cents = Column(Integer, nullable=False, default=0)
    compare_at_price_cents = Column(Integer, nullable=True)
    stock_quantity = Column(Integer, default=0, nullable=False)
    track_inventory = Column(Boolean, default=True, nullable=False)
    allow_backorder = Column(Boolean, default=False, nullable=False)
    low_stock_threshold = Column(Integer, default=5, nullable=False)
    weight_grams = Column(Integer, nullable=True)
    options = Column(JSON, default=dict, nullable=False)
    position = Column(Integer, default=0, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    product = relationship('ProductModel', back_populates='variants')


class InventoryMovementModel(Base):
    """Stock ledger entry; quantity is positive and movement_type gives the direction"""
    __tablename__ = 'inventory_movements'

    id = Column(Uuid, primary_key=True, default=uuid4, index=True)
    variant_id = Column(Uuid, ForeignKey('product_variants.id', ondelete='CASCADE'), nullable=False, index=True)
    movement_type = Column(String, nullable=False)
    quantity = Column(Integer, nullable=False)
    stock_before = Column(Integer, nullable=False)
    stock_after = Column(Integer, nullable=False)
    note = Column(Text, nullable=True)
    reference = Column(String, nullable=True)
    created_by = Column(Uuid, ForeignKey('profiles.id', ondelete='SET NULL'), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    variant = relationship('ProductVariantModel')
