"""Profile self-service and member administration use cases"""

import logging

from ...domain.entities.profile import Profile
from ...domain.enums import ProfileRole
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.value_objects.entity_ids import ProfileId
from ...application.dtos.auth_dtos import UpdateProfileDto, ProfileDto

logger = logging.getLogger(__name__)


class ProfileNotFoundError(Exception):
    pass


class UpdateProfileUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, profile: Profile, request: UpdateProfileDto) -> ProfileDto:
        async with self.unit_of_work:
            profile.update_details(
                display_name=request.display_name,
                avatar_url=request.avatar_url,
            )
            await self.unit_of_work.profiles.update(profile)
            await self.unit_of_work.commit()
        return ProfileDto.from_entity(profile)


class ChangeMemberRoleUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, admin: Profile, member_id: ProfileId, role: str) -> ProfileDto:
        try:
            new_role = ProfileRole(role.strip().lower())
        except ValueError:
            raise ValueError(f"Invalid role: {role}")

        async with self.unit_of_work:
            member = await self.unit_of_work.profiles.get_by_id(member_id)
            if not member:
                raise ProfileNotFoundError("Profile not found")

            member.change_role(new_role, changed_by=admin)
            await self.unit_of_work.profiles.update(member)
            await self.unit_of_work.commit()

        logger.info("Profile %s role set to %s by %s", member.id, new_role.value, admin.id)
        return ProfileDto.from_entity(member)


class DeleteMemberUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, admin: Profile, member_id: ProfileId) -> None:
        if admin.id == member_id:
            raise ValueError("You cannot delete your own profile")

        async with self.unit_of_work:
            deleted = await self.unit_of_work.profiles.delete(member_id)
            if not deleted:
                raise ProfileNotFoundError("Profile not found")
            await self.unit_of_work.commit()

        logger.info("Profile %s deleted by %s", member_id, admin.id)
