"""Notification routes"""

import logging
from typing import Any, Dict, Iterable, Set
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy import and_, desc, or_
from sqlalchemy.orm import Session

from ...api.dependencies import get_current_profile, get_current_admin
from ...api.serializers import iso, uid
from ...application.dtos.content_dtos import NotificationCreateDto
from ...core.config import settings
from ...core.errors import ApiError, bad_request, not_found, ok
from ...db.database import get_db
from ...domain.entities.profile import Profile
from ...domain.enums import ProfileRole
from ...domain.value_objects.entity_ids import parse_uuid
from ...infrastructure.orm.profile_model import ProfileModel, NotificationModel, NotificationReadModel

logger = logging.getLogger(__name__)


def require_notifications_enabled() -> None:
    if not settings.NOTIFICATIONS_ENABLED:
        raise ApiError(status.HTTP_503_SERVICE_UNAVAILABLE, "NOTIFICATIONS_DISABLED", "Notifications are disabled")


router = APIRouter(dependencies=[Depends(require_notifications_enabled)])

INBOX_LIMIT = 50
PROFILE_FEED_LIMIT = 10


def serialize_notification(notification: NotificationModel, read_ids: Set[UUID] = frozenset()) -> Dict[str, Any]:
    """Shared notifications are read per profile, direct ones on the row itself"""
    if notification.receiver_id is not None:
        is_read = notification.is_read
    else:
        is_read = notification.id in read_ids
    return {
        "id": str(notification.id),
        "title": notification.title,
        "message": notification.message,
        "receiver_id": uid(notification.receiver_id),
        "target_role": notification.target_role,
        "sender_id": uid(notification.sender_id),
        "link": notification.link,
        "is_read": is_read,
        "created_at": iso(notification.created_at),
    }


def read_ids_for(db: Session, profile: Profile, notifications: Iterable[NotificationModel]) -> Set[UUID]:
    shared = [n.id for n in notifications if n.receiver_id is None]
    if not shared:
        return set()
    rows = db.query(NotificationReadModel.notification_id).filter(
        NotificationReadModel.profile_id == profile.id.value,
        NotificationReadModel.notification_id.in_(shared),
    ).all()
    return {row.notification_id for row in rows}


def visible_to(profile: Profile):
    """Sent to the profile, to its role, or to everyone"""
    return or_(
        NotificationModel.receiver_id == profile.id.value,
        and_(NotificationModel.receiver_id.is_(None), NotificationModel.target_role == profile.role.value),
        and_(NotificationModel.receiver_id.is_(None), NotificationModel.target_role.is_(None)),
    )


@router.get("")
async def my_notifications(
    profile: Profile = Depends(get_current_profile),
    db: Session = Depends(get_db)
):
    notifications = db.query(NotificationModel).filter(
        visible_to(profile)
    ).order_by(desc(NotificationModel.created_at)).limit(INBOX_LIMIT).all()
    read_ids = read_ids_for(db, profile, notifications)
    return ok([serialize_notification(n, read_ids) for n in notifications])


@router.get("/{profile_id}")
async def profile_notifications(
    profile_id: str,
    profile: Profile = Depends(get_current_profile),
    db: Session = Depends(get_db)
):
    """Latest notifications sent directly to a profile"""
    target_uuid = parse_uuid(profile_id)
    if target_uuid is None or db.get(ProfileModel, target_uuid) is None:
        raise not_found("Profile not found")
    if target_uuid != profile.id.value and not profile.is_admin:
        raise ApiError(status.HTTP_403_FORBIDDEN, "FORBIDDEN", "Not allowed to read these notifications")

    notifications = db.query(NotificationModel).filter(
        NotificationModel.receiver_id == target_uuid
    ).order_by(desc(NotificationModel.created_at)).limit(PROFILE_FEED_LIMIT).all()
    return ok([serialize_notification(n) for n in notifications])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_notification(
    request: NotificationCreateDto,
    admin: Profile = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    if request.target_role is not None and request.target_role not in [r.value for r in ProfileRole]:
        raise bad_request("target_role must be admin, member or guest", code="INVALID_ROLE")
    if request.receiver_id is not None and db.get(ProfileModel, request.receiver_id) is None:
        raise not_found("Receiver not found")

    notification = NotificationModel(
        title=request.title.strip(),
        message=request.message,
        receiver_id=request.receiver_id,
        target_role=request.target_role,
        link=request.link,
        sender_id=admin.id.value,
    )
    db.add(notification)
    db.commit()
    db.refresh(notification)
    logger.info("Notification %s sent by %s", notification.id, admin.id)
    return ok(serialize_notification(notification))


@router.patch("/{notification_id}/read")
async def mark_read(
    notification_id: str,
    profile: Profile = Depends(get_current_profile),
    db: Session = Depends(get_db)
):
    notification_uuid = parse_uuid(notification_id)
    notification = None
    if notification_uuid is not None:
        notification = db.query(NotificationModel).filter(
            NotificationModel.id == notification_uuid,
            visible_to(profile),
        ).first()
    if not notification:
        raise not_found("Notification not found")

    if notification.receiver_id is not None:
        notification.is_read = True
    elif not db.get(NotificationReadModel, (notification.id, profile.id.value)):
        db.add(NotificationReadModel(notification_id=notification.id, profile_id=profile.id.value))
    db.commit()
    return ok(serialize_notification(notification, read_ids_for(db, profile, [notification])))
