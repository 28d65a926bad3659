"""Profile repository interface"""

from abc import ABC, abstractmethod
from typing import Optional, List

from ..entities.profile import Profile
from ..value_objects.entity_ids import ProfileId


class IProfileRepository(ABC):

    @abstractmethod
    async def get_by_id(self, profile_id: ProfileId) -> Optional[Profile]:
        pass

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[Profile]:
        pass

    @abstractmethod
    async def add(self, profile: Profile) -> Profile:
        pass

    @abstractmethod
    async def update(self, profile: Profile) -> Profile:
        pass

    @abstractmethod
    async def delete(self, profile_id: ProfileId) -> bool:
        pass

    @abstractmethod
    async def exists_by_email(self, email: str) -> bool:
        pass

    @abstractmethod
    async def list_all(self) -> List[Profile]:
        pass

    @abstractmethod
    async def count_by_role(self) -> dict:
        pass
