"""Member administration routes"""

import logging

from fastapi import APIRouter, Depends

from ...api.dependencies import get_current_admin, get_unit_of_work
from ...application.dtos.auth_dtos import ProfileDto, SetRoleDto
from ...application.use_cases.manage_profiles import (
    ChangeMemberRoleUseCase, DeleteMemberUseCase, ProfileNotFoundError,
)
from ...core.errors import bad_request, not_found, ok
from ...domain.entities.profile import Profile
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.value_objects.entity_ids import ProfileId, parse_uuid

logger = logging.getLogger(__name__)

router = APIRouter()


def _member_id(value: str) -> ProfileId:
    member_uuid = parse_uuid(value)
    if member_uuid is None:
        raise not_found("Profile not found")
    return ProfileId(member_uuid)


@router.get("/members")
async def list_members(
    admin: Profile = Depends(get_current_admin),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    """Every profile, newest first"""
    async with unit_of_work:
        profiles = await unit_of_work.profiles.list_all()
    members = [ProfileDto.from_entity(profile).model_dump(mode="json") for profile in profiles]
    return ok(members, meta={"count": len(members)})


@router.post("/members/{member_id}/role")
async def set_member_role(
    member_id: str,
    request: SetRoleDto,
    admin: Profile = Depends(get_current_admin),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    """Change a member's role"""
    use_case = ChangeMemberRoleUseCase(unit_of_work)
    try:
        result = await use_case.execute(admin, _member_id(member_id), request.role)
    except ProfileNotFoundError as e:
        raise not_found(str(e))
    except ValueError as e:
        logger.warning("Role change rejected for %s: %s", member_id, e)
        raise bad_request(str(e))
    return ok(result.model_dump(mode="json"))


@router.delete("/members/{member_id}")
async def delete_member(
    member_id: str,
    admin: Profile = Depends(get_current_admin),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    """Delete a profile"""
    use_case = DeleteMemberUseCase(unit_of_work)
    try:
        await use_case.execute(admin, _member_id(member_id))
    except ProfileNotFoundError as e:
        raise not_found(str(e))
    except ValueError as e:
        raise bad_request(str(e))
    return ok({"deleted": True, "id": member_id})


@router.get("/roles/stats")
async def role_stats(
    admin: Profile = Depends(get_current_admin),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    """Profile count per role"""
    async with unit_of_work:
        counts = await unit_of_work.profiles.count_by_role()
    return ok({"roles": counts, "total": sum(counts.values())})
