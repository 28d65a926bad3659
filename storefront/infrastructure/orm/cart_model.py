"""Cart ORM Models"""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import Column, Integer, String, DateTime, Boolean, Text, ForeignKey, Uuid, JSON
from sqlalchemy.orm import relationship

from ...db.models import Base
from ...domain.enums import CartStatus


class CartModel(Base):
    __tablename__ = 'carts'

    id = Column(Uuid, primary_key=True, default=uuid4, index=True)
    profile_id = Column(Uuid, ForeignKey('profiles.id', ondelete='CASCADE'), nullable=True, index=True)
    session_id = Column(String, nullable=True, index=True)
    status = Column(String, default=CartStatus.ACTIVE.value, nullable=False, index=True)

    # Sharing
    share_token = Column(String, unique=True, nullable=True, index=True)
    is_shared = Column(Boolean, default=False, nullable=False)
    share_name = Column(String, nullable=True)
    share_message = Column(Text, nullable=True)
    share_expires_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    converted_at = Column(DateTime, nullable=True)

    items = relationship(
        'CartItemModel',
        back_populates='cart',
        cascade='all, delete-orphan',
        order_by='CartItemModel.created_at',
    )


class CartItemModel(Base):
    __tablename__ = 'cart_items'

    id = Column(Uuid, primary_key=True, default=uuid4, index=True)
    cart_id = Column(Uuid, ForeignKey('carts.id', ondelete='CASCADE'), nullable=False, index=True)
    variant_id = Column(Uuid, ForeignKey('product_variants.id', ondelete='CASCADE'), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    cart = relationship('CartModel', back_populates='items')
    variant = relationship('ProductVariantModel')


class SavedCartModel(Base):
    """Snapshot of a cart's lines taken before they are merged or replaced"""
    __tablename__ = 'saved_carts'

    id = Column(Uuid, primary_key=True, default=uuid4, index=True)
    profile_id = Column(Uuid, ForeignKey('profiles.id', ondelete='CASCADE'), nullable=True, index=True)
    session_id = Column(String, nullable=True, index=True)
    trigger = Column(String, nullable=False)
    label = Column(String, nullable=True)

    source_share_token = Column(String, nullable=True)
    source_share_name = Column(String, nullable=True)
    source_cart_id = Column(Uuid, ForeignKey('carts.id', ondelete='SET NULL'), nullable=True)

    items = Column(JSON, nullable=False, default=list)
    item_count = Column(Integer, nullable=False, default=0)
    subtotal_cents = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    expires_at = Column(DateTime, nullable=False)
    deleted_at = Column(DateTime, nullable=True)
