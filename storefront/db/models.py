"""Declarative base shared by the ORM models"""

from sqlalchemy.orm import declarative_base

Base = declarative_base()

# Model classes live in infrastructure/orm/ and are imported there,
# not here, to avoid circular imports.
