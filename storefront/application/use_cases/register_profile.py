"""Register profile use case"""

import logging

from ...domain.entities.profile import Profile
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...application.dtos.auth_dtos import RegisterProfileDto, AuthResponse, ProfileDto, TokenDto
from ...core.security import get_password_hash, create_access_token, create_refresh_token

logger = logging.getLogger(__name__)


class RegisterProfileUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, request: RegisterProfileDto) -> AuthResponse:
        async with self.unit_of_work:
            if await self.unit_of_work.profiles.exists_by_email(request.email):
                raise ValueError("A profile with this email already exists")

            profile = Profile.create(
                email=request.email,
                password=get_password_hash(request.password),
                display_name=request.display_name,
            )
            profile = await self.unit_of_work.profiles.add(profile)
            await self.unit_of_work.commit()

        logger.info("Registered profile %s", profile.id)
        return AuthResponse(
            profile=ProfileDto.from_entity(profile),
            tokens=TokenDto(
                access_token=create_access_token(str(profile.id)),
                refresh_token=create_refresh_token(str(profile.id)),
            ),
        )
