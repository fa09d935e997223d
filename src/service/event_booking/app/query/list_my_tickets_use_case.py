from typing import Optional, Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.event_booking.app.interface.i_booking_query_repo import IBookingQueryRepo
from src.service.event_booking.app.query.list_my_orders_use_case import clamp_page
from src.service.event_booking.domain.entity.booking_summary import Page


class ListMyTicketsUseCase:
    def __init__(self, *, booking_query_repo: IBookingQueryRepo) -> None:
        self.booking_query_repo = booking_query_repo

    @classmethod
    @inject
    def depends(
        cls,
        booking_query_repo: IBookingQueryRepo = Depends(Provide[Container.booking_query_repo]),
    ) -> Self:
        return cls(booking_query_repo=booking_query_repo)

    @Logger.io
    async def list_my_tickets(
        self, *, user_id: UUID, page: Optional[int] = None, limit: Optional[int] = None
    ) -> Page:
        """Tickets of completed orders only"""
        page, limit = clamp_page(page, limit)
        return await self.booking_query_repo.list_tickets_by_user(
            user_id=user_id, page=page, limit=limit
        )
