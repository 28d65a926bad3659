"""Profile repository implementation using SQLAlchemy ORM"""

from typing import Optional, List
from sqlalchemy.orm import Session
from sqlalchemy import func, desc

from ...domain.repositories.profile_repository import IProfileRepository
from ...domain.entities.profile import Profile
from ...domain.value_objects.entity_ids import ProfileId
from ...domain.enums import ProfileRole
from ..orm.profile_model import ProfileModel


class ProfileRepositoryImpl(IProfileRepository):
    """Repository implementation for Profile aggregate"""

    def __init__(self, session: Session):
        self.session = session

    async def get_by_id(self, profile_id: ProfileId) -> Optional[Profile]:
        model = self.session.get(ProfileModel, profile_id.value)
        return self._map_to_entity(model) if model else None

    async def get_by_email(self, email: str) -> Optional[Profile]:
        model = self.session.query(ProfileModel).filter(
            func.lower(ProfileModel.email) == email.strip().lower()
        ).first()
        return self._map_to_entity(model) if model else None

    async def exists_by_email(self, email: str) -> bool:
        return await self.get_by_email(email) is not None

    async def add(self, profile: Profile) -> Profile:
        model = ProfileModel(
            id=profile.id.value,
            email=profile.email,
            hashed_password=profile.hashed_password,
            display_name=profile.display_name,
            avatar_url=profile.avatar_url,
            role=profile.role.value,
            created_at=profile.created_at,
            updated_at=profile.updated_at,
            last_login=profile.last_login,
        )
        self.session.add(model)
        self.session.flush()
        return profile

    async def update(self, profile: Profile) -> Profile:
        model = self.session.get(ProfileModel, profile.id.value)
        if model:
            model.email = profile.email
            model.hashed_password = profile.hashed_password
            model.display_name = profile.display_name
            model.avatar_url = profile.avatar_url
            model.role = profile.role.value
            model.updated_at = profile.updated_at
            model.last_login = profile.last_login
            self.session.flush()
        return profile

    async def delete(self, profile_id: ProfileId) -> bool:
        model = self.session.get(ProfileModel, profile_id.value)
        if not model:
            return False
        self.session.delete(model)
        self.session.flush()
        return True

    async def list_all(self) -> List[Profile]:
        models = self.session.query(ProfileModel).order_by(desc(ProfileModel.created_at)).all()
        return [self._map_to_entity(model) for model in models]

    async def count_by_role(self) -> dict:
        counts = {role.value: 0 for role in ProfileRole}
        rows = self.session.query(ProfileModel.role, func.count(ProfileModel.id)).group_by(ProfileModel.role).all()
        for role, count in rows:
            key = ProfileRole.normalize(role).value
            counts[key] += count
        return counts

    def _map_to_entity(self, model: ProfileModel) -> Profile:
        """Map ORM model to domain entity"""
        return Profile(
            id=ProfileId(model.id),
            email=model.email,
            hashed_password=model.hashed_password,
            display_name=model.display_name,
            avatar_url=model.avatar_url,
            role=ProfileRole.normalize(model.role),
            created_at=model.created_at,
            updated_at=model.updated_at,
            last_login=model.last_login,
        )
