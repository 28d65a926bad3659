"""Checkout routes: tax, promo codes, shipping rates and payment intents"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, Request, status
from sqlalchemy.orm import Session

from ...api.dependencies import (
    get_optional_profile, get_unit_of_work, get_payment_service, get_usps_service,
)
from ...application.dtos.checkout_dtos import (
    CalculateTaxDto, ValidatePromoDto, ShippingRatesDto, CreatePaymentIntentDto,
)
from ...application.use_cases.create_payment_intent import CreatePaymentIntentUseCase, CartNotFoundError
from ...application.use_cases.quote_shipping_rates import QuoteShippingRatesUseCase
from ...core.errors import ApiError, bad_request, not_found, ok
from ...db.database import get_db
from ...domain.entities.profile import Profile
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.services.pricing import calculate_tax, evaluate_promo, normalize_code
from ...domain.value_objects.money import format_cents
from ...infrastructure.external_services.payment_service import PaymentService, PaymentProviderError
from ...infrastructure.external_services.usps_service import UspsService
from ...infrastructure.orm.checkout_model import TaxRateModel, PromoCodeModel

logger = logging.getLogger(__name__)

router = APIRouter()


def _promo_message(result) -> str:
    if result.free_shipping:
        return "Free shipping applied"
    return f"{format_cents(result.discount_cents)} off applied"


@router.post("/calculate-tax")
async def calculate_sales_tax(request: CalculateTaxDto, db: Session = Depends(get_db)):
    """Sales tax for a state's active rates"""
    state = request.state.upper()
    rates = db.query(TaxRateModel).filter(
        TaxRateModel.state == state,
        TaxRateModel.is_active.is_(True),
    ).all()
    result = calculate_tax(rates, request.subtotal_cents, request.shipping_cents)
    return ok({
        "tax_cents": result.tax_cents,
        "tax_rate": float(result.tax_rate),
        "tax_breakdown": [
            {"rate": float(rate.rate), "type": rate.type, "description": rate.description}
            for rate in rates
        ],
        "state": state,
    })


@router.post("/validate-promo")
async def validate_promo(
    request: ValidatePromoDto,
    profile: Optional[Profile] = Depends(get_optional_profile),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
    db: Session = Depends(get_db)
):
    """Invalid codes answer 200 with valid=false so the client can show the reason"""
    code = normalize_code(request.code)
    promo = db.query(PromoCodeModel).filter(PromoCodeModel.code == code).first()

    customer_uses = 0
    email = request.email.strip().lower() if request.email else None
    if promo is not None and promo.per_customer_limit is not None and (profile or email):
        customer_uses = await unit_of_work.orders.count_paid_with_promo(
            code, profile.id.value if profile else None, email
        )

    result = evaluate_promo(promo, request.subtotal_cents, customer_uses=customer_uses)
    if not result.is_valid:
        return ok({"valid": False, "error": result.error_message})

    return ok({
        "valid": True,
        "discount_cents": result.discount_cents,
        "free_shipping": result.free_shipping,
        "promo_code": {
            "code": promo.code,
            "description": promo.description,
            "discount_type": promo.discount_type,
            "discount_value": promo.discount_value,
        },
        "message": _promo_message(result),
    })


@router.post("/shipping-rates")
async def shipping_rates(
    request: ShippingRatesDto,
    usps_service: UspsService = Depends(get_usps_service),
    db: Session = Depends(get_db)
):
    use_case = QuoteShippingRatesUseCase(db, usps_service)
    return ok(await use_case.execute(request.subtotal_cents, zip_code=request.zip, cart_id=request.cart_id))


@router.post("/create-payment-intent", status_code=status.HTTP_201_CREATED)
async def create_payment_intent(
    request: CreatePaymentIntentDto,
    http_request: Request,
    x_session_id: Optional[str] = Header(None),
    user_agent: Optional[str] = Header(None),
    profile: Optional[Profile] = Depends(get_optional_profile),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
    payment_service: PaymentService = Depends(get_payment_service),
    usps_service: UspsService = Depends(get_usps_service),
    db: Session = Depends(get_db)
):
    """Turn the cart into a pending order and open a Stripe PaymentIntent"""
    use_case = CreatePaymentIntentUseCase(db, unit_of_work, payment_service, usps_service)
    try:
        result = await use_case.execute(
            request,
            profile_id=profile.id.value if profile else None,
            session_id=x_session_id,
            customer_ip=http_request.client.host if http_request.client else None,
            user_agent=user_agent,
        )
    except CartNotFoundError as e:
        raise not_found(str(e))
    except ValueError as e:
        raise bad_request(str(e))
    except PaymentProviderError as e:
        raise ApiError(status.HTTP_502_BAD_GATEWAY, "PAYMENT_PROVIDER_ERROR", str(e))
    return ok(result)
