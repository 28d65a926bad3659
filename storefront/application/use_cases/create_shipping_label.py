"""Create shipping label use case"""

import logging
import secrets
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Optional

from ...core.config import settings
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.value_objects.entity_ids import OrderId
from ...domain.value_objects.mail_class import resolve_mail_class
from ...application.dtos.order_dtos import CreateLabelDto
from ...application.use_cases.fulfill_order import OrderNotFoundError
from ...infrastructure.external_services.label_renderer import label_lines, render_sample_label
from ...infrastructure.external_services.storage_service import StorageService
from ...infrastructure.external_services.usps_service import UspsService, TRACKING_URL

logger = logging.getLogger(__name__)

MOCK_TRACKING_PREFIX = "9400111899"


def fake_tracking_number() -> str:
    return MOCK_TRACKING_PREFIX + ''.join(secrets.choice("0123456789") for _ in range(12))


def normalize_address(address: Optional[Dict[str, Any]], first_name: Optional[str], last_name: Optional[str]) -> Optional[Dict[str, Any]]:
    """Snake case keys with the order's customer name as fallback; None when incomplete"""
    if not address:
        return None
    normalized = {
        "first_name": address.get("first_name") or address.get("firstName") or first_name or "",
        "last_name": address.get("last_name") or address.get("lastName") or last_name or "",
        "address1": address.get("address1"),
        "address2": address.get("address2"),
        "city": address.get("city"),
        "state": address.get("state"),
        "zip": address.get("zip"),
    }
    if not all(normalized[key] for key in ("address1", "city", "state", "zip")):
        return None
    return normalized


@dataclass
class LabelOutcome:
    order_number: str
    tracking_number: str
    tracking_url: str
    mail_class: str
    postage_cents: int
    mock: bool
    pdf: Optional[bytes] = None


class CreateShippingLabelUseCase:

    def __init__(self, unit_of_work: IUnitOfWork, usps_service: UspsService, storage_service: StorageService):
        self.unit_of_work = unit_of_work
        self.usps_service = usps_service
        self.storage_service = storage_service

    async def execute(self, order_id: OrderId, request: CreateLabelDto) -> LabelOutcome:
        async with self.unit_of_work:
            order = await self.unit_of_work.orders.get_by_id(order_id)
        if not order:
            raise OrderNotFoundError("Order not found")

        address = normalize_address(order.shipping_address, order.customer_first_name, order.customer_last_name)
        if address is None:
            raise ValueError("Order is missing a complete shipping address")

        mail_class = resolve_mail_class(order.shipping_method_name)

        # Mock labels are sample PDFs and leave the order untouched
        if self.usps_service.labels_mocked:
            tracking = fake_tracking_number()
            pdf = render_sample_label(
                label_lines(
                    order_number=order.order_number,
                    to_address=address,
                    mail_class=mail_class,
                    tracking_number=tracking,
                    weight_lb=request.weight_lb,
                    dimensions=(request.length_in, request.width_in, request.height_in),
                    mailing_date=date.today().isoformat(),
                ),
                title=f"Sample label {order.order_number}",
            )
            logger.info("Mock label for order %s (%s)", order.order_number, mail_class)
            return LabelOutcome(
                order_number=order.order_number,
                tracking_number=tracking,
                tracking_url=TRACKING_URL.format(tracking),
                mail_class=mail_class,
                postage_cents=0,
                mock=True,
                pdf=pdf,
            )

        label = await self.usps_service.create_label(
            to_address=address,
            mail_class=mail_class,
            weight_lb=request.weight_lb,
            length_in=request.length_in,
            width_in=request.width_in,
            height_in=request.height_in,
        )
        postage_cents = int(round(label.postage * 100))

        object_path = await self.storage_service.upload_file(
            bucket=settings.SHIPPING_LABELS_BUCKET,
            data=label.pdf,
            filename=f"label-{order.order_number}.pdf",
            content_type="application/pdf",
            object_path=f"{order.id}/label-{order.order_number}.pdf",
        )

        async with self.unit_of_work:
            order.record_label(label.tracking_number, object_path, postage_cents, label.tracking_url)
            await self.unit_of_work.orders.update(order)
            await self.unit_of_work.commit()

        logger.info("USPS label %s created for order %s", label.tracking_number, order.order_number)
        return LabelOutcome(
            order_number=order.order_number,
            tracking_number=label.tracking_number,
            tracking_url=label.tracking_url,
            mail_class=mail_class,
            postage_cents=postage_cents,
            mock=False,
            pdf=label.pdf,
        )
