from typing import Optional, Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.event_booking.app.interface.i_booking_query_repo import IBookingQueryRepo
from src.service.event_booking.domain.entity.booking_summary import Page


def clamp_page(page: Optional[int], limit: Optional[int]) -> tuple[int, int]:
    page = max(page or 1, 1)
    limit = limit or settings.DEFAULT_PAGE_LIMIT
    return page, min(max(limit, 1), settings.MAX_PAGE_LIMIT)


class ListMyOrdersUseCase:
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
    async def list_my_orders(
        self, *, user_id: UUID, page: Optional[int] = None, limit: Optional[int] = None
    ) -> Page:
        page, limit = clamp_page(page, limit)
        return await self.booking_query_repo.list_orders_by_user(
            user_id=user_id, page=page, limit=limit
        )
