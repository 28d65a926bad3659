"""Profile ORM Models"""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import Column, String, DateTime, Boolean, Text, ForeignKey, Uuid
from sqlalchemy.orm import relationship

from ...db.models import Base
from ...domain.enums import ProfileRole


class ProfileModel(Base):
    __tablename__ = 'profiles'

    id = Column(Uuid, primary_key=True, default=uuid4, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    display_name = Column(String, nullable=True)
    avatar_url = Column(String, nullable=True)
    role = Column(String, default=ProfileRole.MEMBER.value, nullable=False, index=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    last_login = Column(DateTime, nullable=True)

    # Relationships
    orders = relationship('OrderModel', back_populates='profile', foreign_keys='OrderModel.profile_id')


class NotificationModel(Base):
    __tablename__ = 'notifications'

    id = Column(Uuid, primary_key=True, default=uuid4, index=True)
    title = Column(String, nullable=False)
    message = Column(Text, nullable=False)
    # Targeting: a single receiver, a role, or everyone when both are null
    receiver_id = Column(Uuid, ForeignKey('profiles.id', ondelete='CASCADE'), nullable=True, index=True)
    target_role = Column(String, nullable=True)
    sender_id = Column(Uuid, ForeignKey('profiles.id', ondelete='SET NULL'), nullable=True)
    link = Column(String, nullable=True)
    is_read = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)


class NotificationReadModel(Base):
    """Read marker for a broadcast or role notification, one per profile"""
    __tablename__ = 'notification_reads'

    notification_id = Column(Uuid, ForeignKey('notifications.id', ondelete='CASCADE'), primary_key=True)
    profile_id = Column(Uuid, ForeignKey('profiles.id', ondelete='CASCADE'), primary_key=True, index=True)
    read_at = Column(DateTime, default=datetime.utcnow, nullable=False)
