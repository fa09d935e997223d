"""
Unit of Work Pattern - one database transaction shared by several repositories

Architecture:
- UoW owns the session lifecycle (one fresh session per `async with`)
- UoW owns commit/rollback; leaving the block without commit rolls back
- Repositories receive the shared session from the UoW
- Use cases coordinate repositories through the UoW
"""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING, Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.platform.database.orm_db_setting import get_session_maker


if TYPE_CHECKING:
    from src.service.event_booking.app.interface.i_event_query_repo import IEventQueryRepo
    from src.service.event_booking.app.interface.i_inventory_command_repo import (
        IInventoryCommandRepo,
    )
    from src.service.event_booking.app.interface.i_order_command_repo import (
        IOrderCommandRepo,
    )
    from src.service.event_booking.app.interface.i_ticket_command_repo import (
        ITicketCommandRepo,
    )
    from src.service.event_booking.app.interface.i_user_profile_query_repo import (
        IUserProfileQueryRepo,
    )


class AbstractUnitOfWork(abc.ABC):
    """
    Abstract Unit of Work for the booking engine

    Usage:
        async with uow:
            order = await uow.order_command_repo.create_pending_order(...)
            reserved = await uow.inventory_command_repo.reserve_capacity(...)
            await uow.commit()

    The same instance may be entered again after the block exits; every entry
    starts a new transaction.
    """

    event_query_repo: IEventQueryRepo
    inventory_command_repo: IInventoryCommandRepo
    order_command_repo: IOrderCommandRepo
    ticket_command_repo: ITicketCommandRepo
    user_profile_query_repo: IUserProfileQueryRepo

    async def __aenter__(self) -> AbstractUnitOfWork:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.rollback()

    async def commit(self) -> None:
        """Commit the transaction"""
        await self._commit()

    @abc.abstractmethod
    async def _commit(self) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    async def rollback(self) -> None:
        raise NotImplementedError


class SqlAlchemyUnitOfWork(AbstractUnitOfWork):
    """
    SQLAlchemy implementation of Unit of Work

    Usage in use case:
        async with self.uow:
            await self.uow.order_command_repo.mark_expired(...)
            await self.uow.commit()
    """

    def __init__(self, session_factory: Optional[async_sessionmaker[AsyncSession]] = None):
        self._session_factory = session_factory
        self.session: Optional[AsyncSession] = None

    async def __aenter__(self) -> AbstractUnitOfWork:
        from src.service.event_booking.driven_adapter.repo.event_query_repo_impl import (
            EventQueryRepoImpl,
        )
        from src.service.event_booking.driven_adapter.repo.inventory_command_repo_impl import (
            InventoryCommandRepoImpl,
        )
        from src.service.event_booking.driven_adapter.repo.order_command_repo_impl import (
            OrderCommandRepoImpl,
        )
        from src.service.event_booking.driven_adapter.repo.ticket_command_repo_impl import (
            TicketCommandRepoImpl,
        )
        from src.service.event_booking.driven_adapter.repo.user_profile_query_repo_impl import (
            UserProfileQueryRepoImpl,
        )

        session_factory = self._session_factory or get_session_maker()
        self.session = session_factory()

        # Create repositories with shared session
        self.event_query_repo = EventQueryRepoImpl(session=self.session)
        self.inventory_command_repo = InventoryCommandRepoImpl(session=self.session)
        self.order_command_repo = OrderCommandRepoImpl(session=self.session)
        self.ticket_command_repo = TicketCommandRepoImpl(session=self.session)
        self.user_profile_query_repo = UserProfileQueryRepoImpl(session=self.session)

        return await super().__aenter__()

    async def __aexit__(self, *args: Any) -> None:
        try:
            await super().__aexit__(*args)
        finally:
            if self.session is not None:
                await self.session.close()
                self.session = None

    async def _commit(self) -> None:
        assert self.session is not None, 'Unit of work used outside `async with`'
        await self.session.commit()

    async def rollback(self) -> None:
        if self.session is not None:
            await self.session.rollback()
