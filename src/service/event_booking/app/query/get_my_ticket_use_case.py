from typing import Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.event_booking.app.interface.i_booking_query_repo import IBookingQueryRepo
from src.service.event_booking.domain.entity.booking_summary import TicketDetail


class GetMyTicketUseCase:
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
    async def get_my_ticket(self, *, user_id: UUID, ticket_id: UUID) -> TicketDetail:
        """
        Raises:
            NotFoundError: Unknown ticket, or the ticket is on another purchaser's order
        """
        ticket = await self.booking_query_repo.get_ticket_for_user(
            user_id=user_id, ticket_id=ticket_id
        )
        if not ticket:
            raise NotFoundError('Ticket not found')
        return ticket
