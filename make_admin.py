#!/usr/bin/env python3
"""
Script to make a profile an admin.
Usage: python make_admin.py someone@example.com
"""

import sys

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from storefront.db.database import SessionLocal
from storefront.domain.enums import ProfileRole
import storefront.infrastructure.orm  # noqa: F401
from storefront.infrastructure.orm.profile_model import ProfileModel


def make_profile_admin(email: str) -> bool:
    """Make a profile an admin by email."""
    db = SessionLocal()
    try:
        profile = db.query(ProfileModel).filter(
            func.lower(ProfileModel.email) == email.strip().lower()
        ).first()
        if not profile:
            print(f"Profile with email '{email}' not found")
            return False

        profile.role = ProfileRole.ADMIN.value
        db.commit()
        print(f"{profile.email} is now an admin (id {profile.id})")
        return True
    except SQLAlchemyError as e:
        db.rollback()
        print(f"Error: {e}")
        return False
    finally:
        db.close()


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print(__doc__)
        sys.exit(2)
    sys.exit(0 if make_profile_admin(sys.argv[1]) else 1)
