"""Order routes: customer history and admin fulfillment"""

import logging
import math
from typing import Optional

import httpx
from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import Response
from sqlalchemy import desc, func
from sqlalchemy.orm import Session

from ...api.dependencies import (
    get_current_profile, get_optional_profile, get_current_admin,
    get_unit_of_work, get_usps_service, get_storage_service,
)
from ...api.serializers import serialize_order, serialize_order_admin
from ...application.dtos.order_dtos import FulfillOrderDto, OrderNotesDto, CreateLabelDto
from ...application.use_cases.create_shipping_label import CreateShippingLabelUseCase
from ...application.use_cases.fulfill_order import FulfillOrderUseCase, OrderNotFoundError
from ...core.config import settings
from ...core.errors import ApiError, bad_request, not_found, ok
from ...db.database import get_db
from ...domain.entities.profile import Profile
from ...domain.enums import PaymentStatus
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.value_objects.entity_ids import OrderId, parse_uuid
from ...infrastructure.external_services.storage_service import StorageService, StorageError
from ...infrastructure.external_services.usps_service import UspsService, UspsError
from ...infrastructure.orm.order_model import OrderModel

logger = logging.getLogger(__name__)

router = APIRouter(tags=["orders"])


def _get_order(db: Session, order_id: str) -> OrderModel:
    order_uuid = parse_uuid(order_id)
    order = db.get(OrderModel, order_uuid) if order_uuid else None
    if not order:
        raise not_found("Order not found")
    return order


def _label_response(
    pdf: bytes,
    order_number: str,
    tracking_number: Optional[str],
    tracking_url: Optional[str] = None,
    postage_cents: Optional[int] = None,
    mail_class: Optional[str] = None,
    mock: bool = False,
) -> Response:
    filename = f"label-{order_number}-SAMPLE.pdf" if mock else f"label-{order_number}.pdf"
    headers = {"Content-Disposition": f'inline; filename="{filename}"'}
    if tracking_number:
        headers["X-Tracking-Number"] = tracking_number
    if tracking_url:
        headers["X-Tracking-URL"] = tracking_url
    if postage_cents is not None:
        headers["X-Postage"] = str(postage_cents)
    if mail_class:
        headers["X-Mail-Class"] = mail_class
    headers["X-Mock-Mode"] = "true" if mock else "false"
    return Response(content=pdf, media_type="application/pdf", headers=headers)


@router.get("/mine")
async def my_orders(
    profile: Profile = Depends(get_current_profile),
    db: Session = Depends(get_db)
):
    """Caller's orders, newest first"""
    orders = db.query(OrderModel).filter(
        OrderModel.profile_id == profile.id.value
    ).order_by(desc(OrderModel.created_at)).all()
    return ok([serialize_order(order) for order in orders])


@router.get("/history")
async def order_history(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    profile: Profile = Depends(get_current_profile),
    db: Session = Depends(get_db)
):
    """Paid and refunded orders, paginated"""
    query = db.query(OrderModel).filter(
        OrderModel.profile_id == profile.id.value,
        OrderModel.payment_status.in_([PaymentStatus.PAID.value, PaymentStatus.REFUNDED.value]),
    )
    total = query.count()
    orders = query.order_by(desc(OrderModel.created_at)).offset((page - 1) * limit).limit(limit).all()
    return ok(
        [serialize_order(order) for order in orders],
        meta={
            "page": page,
            "limit": limit,
            "total": total,
            "total_pages": math.ceil(total / limit) if total else 0,
        },
    )


@router.get("/admin")
async def admin_orders(
    status_filter: Optional[str] = Query(None, alias="status"),
    payment_status: Optional[str] = None,
    q: Optional[str] = None,
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    admin: Profile = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    """Every order with customer fields and source flags"""
    query = db.query(OrderModel)
    if status_filter:
        query = query.filter(OrderModel.status == status_filter)
    if payment_status:
        query = query.filter(OrderModel.payment_status == payment_status)
    if q:
        pattern = f"%{q.strip().lower()}%"
        query = query.filter(
            func.lower(OrderModel.order_number).like(pattern) | func.lower(OrderModel.email).like(pattern)
        )

    total = query.count()
    orders = query.order_by(desc(OrderModel.created_at)).offset(offset).limit(limit).all()
    return ok(
        [serialize_order_admin(order) for order in orders],
        meta={"total": total, "limit": limit, "offset": offset},
    )


@router.get("/{order_id}")
async def get_order(
    order_id: str,
    email: Optional[str] = None,
    profile: Optional[Profile] = Depends(get_optional_profile),
    db: Session = Depends(get_db)
):
    """Visible to the owner, admins, or anyone who knows the order email"""
    order = _get_order(db, order_id)

    if profile and profile.is_admin:
        return ok(serialize_order_admin(order))
    is_owner = profile is not None and order.profile_id == profile.id.value
    email_matches = bool(email and order.email and email.strip().lower() == order.email.lower())
    if not (is_owner or email_matches):
        # Same answer as a missing order so ids cannot be guessed
        raise not_found("Order not found")
    return ok(serialize_order(order))


@router.patch("/{order_id}/fulfill")
async def fulfill_order(
    order_id: str,
    request: FulfillOrderDto,
    admin: Profile = Depends(get_current_admin),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
    db: Session = Depends(get_db)
):
    order_uuid = parse_uuid(order_id)
    if order_uuid is None:
        raise not_found("Order not found")

    use_case = FulfillOrderUseCase(unit_of_work)
    try:
        await use_case.execute(OrderId(order_uuid), request, fulfilled_by=admin.id.value)
    except OrderNotFoundError as e:
        raise not_found(str(e))
    except ValueError as e:
        raise bad_request(str(e), code="CANNOT_FULFILL")

    order = db.get(OrderModel, order_uuid)
    db.refresh(order)
    return ok(serialize_order_admin(order))


@router.patch("/{order_id}/notes")
async def update_order_notes(
    order_id: str,
    request: OrderNotesDto,
    admin: Profile = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    order = _get_order(db, order_id)
    order.internal_notes = request.internal_notes
    db.commit()
    db.refresh(order)
    return ok(serialize_order_admin(order))


@router.post("/{order_id}/label")
async def create_label(
    order_id: str,
    request: CreateLabelDto,
    admin: Profile = Depends(get_current_admin),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
    usps_service: UspsService = Depends(get_usps_service),
    storage_service: StorageService = Depends(get_storage_service)
):
    """Buy a USPS label; mock mode answers with a sample PDF and a fake tracking number"""
    order_uuid = parse_uuid(order_id)
    if order_uuid is None:
        raise not_found("Order not found")

    use_case = CreateShippingLabelUseCase(unit_of_work, usps_service, storage_service)
    try:
        outcome = await use_case.execute(OrderId(order_uuid), request)
    except OrderNotFoundError as e:
        raise not_found(str(e))
    except ValueError as e:
        raise bad_request(str(e), code="INCOMPLETE_ADDRESS")
    except (UspsError, httpx.HTTPError) as e:
        logger.error("USPS label failed for order %s: %s", order_id, e)
        raise ApiError(status.HTTP_502_BAD_GATEWAY, "USPS_ERROR", str(e))
    except StorageError as e:
        raise ApiError(status.HTTP_502_BAD_GATEWAY, "STORAGE_ERROR", str(e))

    return _label_response(
        outcome.pdf,
        outcome.order_number,
        outcome.tracking_number,
        tracking_url=outcome.tracking_url,
        postage_cents=outcome.postage_cents,
        mail_class=outcome.mail_class,
        mock=outcome.mock,
    )


@router.get("/{order_id}/label")
async def get_label(
    order_id: str,
    admin: Profile = Depends(get_current_admin),
    storage_service: StorageService = Depends(get_storage_service),
    db: Session = Depends(get_db)
):
    """Stored label PDF"""
    order = _get_order(db, order_id)
    if not order.label_pdf_path:
        raise not_found("No label for this order")

    try:
        pdf = await storage_service.download_file(settings.SHIPPING_LABELS_BUCKET, order.label_pdf_path)
    except StorageError:
        raise not_found("Label file not found")
    return _label_response(pdf, order.order_number, order.tracking_number)
