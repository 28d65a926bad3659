"""Content ORM Models: hero slides, landing sections and static pages"""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import Column, Integer, String, DateTime, Boolean, Text, Uuid, JSON

from ...db.models import Base


class HeroSlideModel(Base):
    __tablename__ = 'hero_slides'

    id = Column(Uuid, primary_key=True, default=uuid4, index=True)
    title = Column(String, nullable=True)
    subtitle = Column(String, nullable=True)
    image_url = Column(String, nullable=True)
    image_path = Column(String, nullable=True)  # object path in the hero bucket
    cta_label = Column(String, nullable=True)
    cta_href = Column(String, nullable=True)
    position = Column(Integer, default=0, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class LandingSectionModel(Base):
    __tablename__ = 'landing_sections'

    id = Column(Uuid, primary_key=True, default=uuid4, index=True)
    type = Column(String, nullable=False)  # featured_products, collection_grid, banner, ...
    config = Column(JSON, nullable=True)
    position = Column(Integer, default=0, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class StaticPageModel(Base):
    __tablename__ = 'static_pages'

    id = Column(Uuid, primary_key=True, default=uuid4, index=True)
    slug = Column(String, unique=True, nullable=False, index=True)
    title = Column(String, nullable=False)
    content = Column(Text, nullable=True)
    seo_title = Column(String, nullable=True)
    seo_description = Column(Text, nullable=True)
    is_published = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
