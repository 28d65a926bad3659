"""API dependencies"""

from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from ..core.security import verify_token
from ..db.database import get_db
from ..domain.entities.profile import Profile
from ..domain.repositories.unit_of_work import IUnitOfWork
from ..domain.value_objects.entity_ids import ProfileId, parse_uuid
from ..infrastructure.repositories.unit_of_work_impl import UnitOfWorkImpl
from ..infrastructure.external_services.payment_service import PaymentService
from ..infrastructure.external_services.storage_service import StorageService
from ..infrastructure.external_services.usps_service import UspsService
from ..application.services.order_notifier import OrderNotifier


security = HTTPBearer(auto_error=False)


async def _load_profile(token: str, db: Session) -> Optional[Profile]:
    subject = verify_token(token)
    profile_uuid = parse_uuid(subject) if subject else None
    if profile_uuid is None:
        return None

    unit_of_work = UnitOfWorkImpl(db)
    return await unit_of_work.profiles.get_by_id(ProfileId(profile_uuid))


async def get_current_profile(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db)
) -> Profile:
    """Get current authenticated profile"""
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required"
        )

    profile = await _load_profile(credentials.credentials, db)
    if not profile:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token"
        )
    return profile


async def get_optional_profile(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db)
) -> Optional[Profile]:
    """Profile when a valid token is sent, None for anonymous shoppers"""
    if credentials is None:
        return None
    return await _load_profile(credentials.credentials, db)


async def get_current_admin(current_profile: Profile = Depends(get_current_profile)) -> Profile:
    """Get current admin profile"""
    if not current_profile.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required"
        )
    return current_profile


def get_unit_of_work(db: Session = Depends(get_db)) -> IUnitOfWork:
    """Get unit of work"""
    return UnitOfWorkImpl(db)


def get_payment_service() -> PaymentService:
    """Get payment service"""
    return PaymentService()


def get_storage_service() -> StorageService:
    """Get storage service"""
    return StorageService()


def get_usps_service() -> UspsService:
    """Get USPS service"""
    return UspsService()


def get_order_notifier() -> OrderNotifier:
    """Get order notifier"""
    return OrderNotifier()
