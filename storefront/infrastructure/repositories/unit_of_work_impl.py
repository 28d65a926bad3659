"""SQLAlchemy unit of work bound to the request session"""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...domain.repositories.unit_of_work import IUnitOfWork
from .order_repository_impl import OrderRepositoryImpl
from .profile_repository_impl import ProfileRepositoryImpl

logger = logging.getLogger(__name__)


class UnitOfWorkImpl(IUnitOfWork):
    """Repositories share the route's Session, so ORM queries made directly in a
    route see the same transaction as the use case."""

    def __init__(self, session: Session):
        self.session = session
        self.profiles = ProfileRepositoryImpl(session)
        self.orders = OrderRepositoryImpl(session)
        self._pending = False

    async def __aenter__(self) -> "UnitOfWorkImpl":
        self._pending = True
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        if exc_type is not None:
            logger.debug("Rolling back after %s", exc_type.__name__)
            await self.rollback()
        elif self._pending:
            await self.commit()

    async def commit(self) -> None:
        try:
            self.session.commit()
        except SQLAlchemyError:
            logger.exception("Commit failed, rolling back")
            self.session.rollback()
            raise
        self._pending = False

    async def rollback(self) -> None:
        self.session.rollback()
        self._pending = False
