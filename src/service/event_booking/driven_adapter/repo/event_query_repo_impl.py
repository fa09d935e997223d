from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.platform.types.utc_datetime import as_utc
from src.service.event_booking.app.interface.i_event_query_repo import IEventQueryRepo
from src.service.event_booking.domain.entity.event_entity import EventEntity, TicketCategoryEntity
from src.service.event_booking.domain.enum.event_status import EventStatus, PlatformFeeType
from src.service.event_booking.driven_adapter.model.event_model import EventModel
from src.service.event_booking.driven_adapter.model.ticket_category_model import (
    TicketCategoryModel,
)


class EventQueryRepoImpl(IEventQueryRepo):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    @Logger.io
    async def get_event(self, *, event_id: UUID) -> Optional[EventEntity]:
        result = await self.session.execute(select(EventModel).where(EventModel.id == event_id))
        event_model = result.scalar_one_or_none()
        if not event_model:
            return None
        return self._event_to_entity(event_model)

    @Logger.io
    async def get_ticket_category(
        self, *, event_id: UUID, ticket_category_id: UUID
    ) -> Optional[TicketCategoryEntity]:
        result = await self.session.execute(
            select(TicketCategoryModel).where(
                TicketCategoryModel.id == ticket_category_id,
                TicketCategoryModel.event_id == event_id,
            )
        )
        category_model = result.scalar_one_or_none()
        if not category_model:
            return None
        return self._category_to_entity(category_model)

    @staticmethod
    def _event_to_entity(event_model: EventModel) -> EventEntity:
        return EventEntity(
            id=event_model.id,
            name=event_model.name,
            status=EventStatus(event_model.status),
            is_active=event_model.is_active,
            platform_fee_type=PlatformFeeType(event_model.platform_fee_type),
            platform_fee_percentage=event_model.platform_fee_percentage,
            platform_fee_fixed=event_model.platform_fee_fixed,
            booked_count=event_model.booked_count,
        )

    @staticmethod
    def _category_to_entity(category_model: TicketCategoryModel) -> TicketCategoryEntity:
        return TicketCategoryEntity(
            id=category_model.id,
            event_id=category_model.event_id,
            ticket_title=category_model.ticket_title,
            price=category_model.price,
            quantity=category_model.quantity,
            sold_count=category_model.sold_count,
            sale_start_date=as_utc(category_model.sale_start_date),
            sale_end_date=as_utc(category_model.sale_end_date),
            min_per_order=category_model.min_per_order,
            max_per_order=category_model.max_per_order,
            is_active=category_model.is_active,
        )
