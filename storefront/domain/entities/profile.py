"""Profile entity with business logic"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..value_objects.entity_ids import ProfileId
from ..enums import ProfileRole


@dataclass
class Profile:
    id: ProfileId
    email: str
    hashed_password: str
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None
    role: ProfileRole = ProfileRole.MEMBER

    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)
    last_login: Optional[datetime] = None

    @classmethod
    def create(
        cls,
        email: str,
        password: str,
        display_name: Optional[str] = None,
    ) -> 'Profile':
        """Factory method to create a new member profile"""
        return cls(
            id=ProfileId.generate(),
            email=email.strip().lower(),
            hashed_password=password,
            display_name=display_name or email.split("@")[0],
            role=ProfileRole.MEMBER,
        )

    def change_role(self, role: ProfileRole, changed_by: 'Profile') -> None:
        """Business logic: an admin cannot demote themself"""
        if changed_by.id == self.id and role != ProfileRole.ADMIN:
            raise ValueError("You cannot remove your own admin role")
        self.role = role
        self.updated_at = datetime.utcnow()

    def update_details(self, display_name: Optional[str] = None, avatar_url: Optional[str] = None) -> None:
        if display_name is not None:
            self.display_name = display_name.strip() or None
        if avatar_url is not None:
            self.avatar_url = avatar_url.strip() or None
        self.updated_at = datetime.utcnow()

    def record_login(self) -> None:
        """Record profile login"""
        self.last_login = datetime.utcnow()

    @property
    def is_admin(self) -> bool:
        return self.role == ProfileRole.ADMIN
