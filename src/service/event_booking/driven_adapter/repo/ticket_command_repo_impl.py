from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.event_booking.app.interface.i_ticket_command_repo import ITicketCommandRepo
from src.service.event_booking.domain.entity.ticket_entity import TicketEntity
from src.service.event_booking.driven_adapter.model.ticket_model import TicketModel


class TicketCommandRepoImpl(ITicketCommandRepo):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    @Logger.io
    async def create_tickets(self, *, tickets: List[TicketEntity]) -> List[TicketEntity]:
        self.session.add_all(
            [
                TicketModel(
                    id=ticket.id,
                    order_id=ticket.order_id,
                    event_id=ticket.event_id,
                    ticket_category_id=ticket.ticket_category_id,
                    user_id=ticket.user_id,
                    ticket_number=ticket.ticket_number,
                    redemption_code=ticket.redemption_code,
                    attendee_name=ticket.attendee_name,
                    attendee_email=ticket.attendee_email,
                    attendee_phone=ticket.attendee_phone,
                    status=ticket.status.value,
                    created_at=ticket.created_at,
                )
                for ticket in tickets
            ]
        )
        # Surface unique-constraint collisions inside the caller's unit of work
        await self.session.flush()
        return tickets
