from abc import ABC, abstractmethod
from typing import List

from src.service.event_booking.domain.entity.ticket_entity import TicketEntity


class ITicketCommandRepo(ABC):
    @abstractmethod
    async def create_tickets(self, *, tickets: List[TicketEntity]) -> List[TicketEntity]:
        """
        Insert issued tickets and flush

        Raises:
            sqlalchemy.exc.IntegrityError: ticket_number or redemption_code collided
        """
        pass
