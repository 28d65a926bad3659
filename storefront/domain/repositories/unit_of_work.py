"""Transaction boundary over the profile and order repositories"""

from abc import ABC, abstractmethod

from .order_repository import IOrderRepository
from .profile_repository import IProfileRepository


class IUnitOfWork(ABC):
    """Groups repository writes into one database transaction.

    Use cases enter it with ``async with`` and call ``commit`` once their
    changes are complete. Leaving the block with an exception rolls back;
    leaving it cleanly commits whatever is still pending.
    """

    profiles: IProfileRepository
    orders: IOrderRepository

    @abstractmethod
    async def __aenter__(self) -> "IUnitOfWork":
        ...

    @abstractmethod
    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        ...

    @abstractmethod
    async def commit(self) -> None:
        ...

    @abstractmethod
    async def rollback(self) -> None:
        ...
