"""Current profile routes"""

from fastapi import APIRouter, Depends

from ...api.dependencies import get_current_profile, get_unit_of_work
from ...application.dtos.auth_dtos import ProfileDto, UpdateProfileDto
from ...application.use_cases.manage_profiles import UpdateProfileUseCase
from ...core.errors import ok
from ...domain.entities.profile import Profile
from ...domain.repositories.unit_of_work import IUnitOfWork

router = APIRouter()


@router.get("")
async def get_profile(current_profile: Profile = Depends(get_current_profile)):
    """Get the signed-in profile"""
    return ok(ProfileDto.from_entity(current_profile).model_dump(mode="json"))


@router.patch("")
async def update_profile(
    request: UpdateProfileDto,
    current_profile: Profile = Depends(get_current_profile),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    """Update display name or avatar"""
    result = await UpdateProfileUseCase(unit_of_work).execute(current_profile, request)
    return ok(result.model_dump(mode="json"))
