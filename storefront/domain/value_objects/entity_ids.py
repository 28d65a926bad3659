"""Entity ID value objects"""

from dataclasses import dataclass
from uuid import UUID, uuid4


@dataclass(frozen=True)
class ProfileId:
    value: UUID

    def __post_init__(self):
        if not isinstance(self.value, UUID):
            raise ValueError("Profile ID must be a valid UUID")

    @classmethod
    def generate(cls) -> 'ProfileId':
        """Generate a new random UUID"""
        return cls(uuid4())

    @classmethod
    def from_str(cls, uuid_str: str) -> 'ProfileId':
        """Create ProfileId from string representation"""
        return cls(UUID(uuid_str))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class OrderId:
    value: UUID

    def __post_init__(self):
        if not isinstance(self.value, UUID):
            raise ValueError("Order ID must be a valid UUID")

    @classmethod
    def generate(cls) -> 'OrderId':
        """Generate a new random UUID"""
        return cls(uuid4())

    @classmethod
    def from_str(cls, uuid_str: str) -> 'OrderId':
        """Create OrderId from string representation"""
        return cls(UUID(uuid_str))

    def __str__(self) -> str:
        return str(self.value)


def parse_uuid(value: str):
    """Parse a path parameter as UUID, returning None when malformed."""
    try:
        return UUID(str(value))
    except (ValueError, AttributeError):
        return None
