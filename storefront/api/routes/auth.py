"""Authentication routes"""

import logging

from fastapi import APIRouter, Depends, status

from ...api.dependencies import get_unit_of_work
from ...application.use_cases.register_profile import RegisterProfileUseCase
from ...application.use_cases.login_profile import LoginProfileUseCase
from ...application.dtos.auth_dtos import RegisterProfileDto, LoginDto, RefreshTokenDto
from ...core.errors import ApiError, bad_request, ok
from ...core.security import verify_refresh_token, create_access_token
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.value_objects.entity_ids import ProfileId, parse_uuid

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    request: RegisterProfileDto,
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    """Register a new member profile"""
    use_case = RegisterProfileUseCase(unit_of_work)
    try:
        result = await use_case.execute(request)
    except ValueError as e:
        raise bad_request(str(e), code="EMAIL_TAKEN")
    return ok(result.model_dump(mode="json"))


@router.post("/login")
async def login(
    request: LoginDto,
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    """Login with email and password"""
    use_case = LoginProfileUseCase(unit_of_work)
    try:
        result = await use_case.execute(request)
    except ValueError as e:
        logger.info("Failed login for %s", request.email)
        raise ApiError(status.HTTP_401_UNAUTHORIZED, "INVALID_CREDENTIALS", str(e))
    return ok(result.model_dump(mode="json"))


@router.post("/refresh")
async def refresh_token(
    request: RefreshTokenDto,
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    """Exchange a refresh token for a new access token"""
    subject = verify_refresh_token(request.refresh_token)
    profile_uuid = parse_uuid(subject) if subject else None
    if profile_uuid is None:
        raise ApiError(status.HTTP_401_UNAUTHORIZED, "INVALID_TOKEN", "Invalid refresh token")

    async with unit_of_work:
        profile = await unit_of_work.profiles.get_by_id(ProfileId(profile_uuid))
    if not profile:
        raise ApiError(status.HTTP_401_UNAUTHORIZED, "INVALID_TOKEN", "Profile not found")

    return ok({
        "access_token": create_access_token(str(profile.id)),
        "token_type": "bearer",
    })
