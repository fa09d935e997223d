"""
Inventory Command Repository Implementation

sold_count / booked_count are only ever changed through conditional UPDATEs:

    reserve: SET sold_count = sold_count + n WHERE id = :id AND sold_count + n <= quantity
    release: SET sold_count = sold_count - n WHERE id = :id AND sold_count >= n

The row lock taken by the UPDATE serializes concurrent writers; a writer that
loses the race re-evaluates the predicate against the committed value and
matches zero rows.
"""

from typing import Mapping
from uuid import UUID

from sqlalchemy import update as sql_update
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.exception.exceptions import InternalError
from src.platform.logging.loguru_io import Logger
from src.service.event_booking.app.interface.i_inventory_command_repo import (
    IInventoryCommandRepo,
)
from src.service.event_booking.driven_adapter.model.event_model import EventModel
from src.service.event_booking.driven_adapter.model.ticket_category_model import (
    TicketCategoryModel,
)


class InventoryCommandRepoImpl(IInventoryCommandRepo):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    @Logger.io
    async def reserve_capacity(
        self, *, event_id: UUID, ticket_category_id: UUID, quantity: int
    ) -> bool:
        result = await self.session.execute(
            sql_update(TicketCategoryModel)
            .where(
                TicketCategoryModel.id == ticket_category_id,
                TicketCategoryModel.event_id == event_id,
                TicketCategoryModel.sold_count + quantity <= TicketCategoryModel.quantity,
            )
            .values(sold_count=TicketCategoryModel.sold_count + quantity)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:  # type: ignore[attr-defined]
            return False

        await self.session.execute(
            sql_update(EventModel)
            .where(EventModel.id == event_id)
            .values(booked_count=EventModel.booked_count + quantity)
            .execution_options(synchronize_session=False)
        )
        return True

    @Logger.io
    async def release_capacity(
        self,
        *,
        quantities_by_category: Mapping[UUID, int],
        quantities_by_event: Mapping[UUID, int],
    ) -> None:
        # Fixed lock order across concurrent releases
        for ticket_category_id in sorted(quantities_by_category, key=str):
            quantity = quantities_by_category[ticket_category_id]
            result = await self.session.execute(
                sql_update(TicketCategoryModel)
                .where(
                    TicketCategoryModel.id == ticket_category_id,
                    TicketCategoryModel.sold_count >= quantity,
                )
                .values(sold_count=TicketCategoryModel.sold_count - quantity)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:  # type: ignore[attr-defined]
                raise InternalError(
                    f'Cannot release {quantity} tickets from category {ticket_category_id}'
                )

        for event_id in sorted(quantities_by_event, key=str):
            quantity = quantities_by_event[event_id]
            result = await self.session.execute(
                sql_update(EventModel)
                .where(EventModel.id == event_id, EventModel.booked_count >= quantity)
                .values(booked_count=EventModel.booked_count - quantity)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:  # type: ignore[attr-defined]
                raise InternalError(f'Cannot release {quantity} bookings from event {event_id}')

        Logger.base.info(
            f'♻️ [INVENTORY] Released {sum(quantities_by_category.values())} tickets '
            f'across {len(quantities_by_category)} categories'
        )
