"""Login profile use case"""

from ...domain.repositories.unit_of_work import IUnitOfWork
from ...application.dtos.auth_dtos import LoginDto, AuthResponse, ProfileDto, TokenDto
from ...core.security import verify_password, create_access_token, create_refresh_token


class LoginProfileUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, request: LoginDto) -> AuthResponse:
        async with self.unit_of_work:
            profile = await self.unit_of_work.profiles.get_by_email(request.email)
            if not profile:
                raise ValueError("Invalid email or password")

            if not verify_password(request.password, profile.hashed_password):
                raise ValueError("Invalid email or password")

            profile.record_login()
            await self.unit_of_work.profiles.update(profile)
            await self.unit_of_work.commit()

            return AuthResponse(
                profile=ProfileDto.from_entity(profile),
                tokens=TokenDto(
                    access_token=create_access_token(str(profile.id)),
                    refresh_token=create_refresh_token(str(profile.id)),
                ),
            )
