from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from src.service.event_booking.domain.entity.booking_summary import Page, TicketDetail


class IBookingQueryRepo(ABC):
    """Purchaser-facing listings, newest first"""

    @abstractmethod
    async def list_orders_by_user(self, *, user_id: UUID, page: int, limit: int) -> Page:
        pass

    @abstractmethod
    async def list_tickets_by_user(self, *, user_id: UUID, page: int, limit: int) -> Page:
        """Only tickets of completed orders"""
        pass

    @abstractmethod
    async def get_ticket_for_user(
        self, *, user_id: UUID, ticket_id: UUID
    ) -> Optional[TicketDetail]:
        """None when the ticket does not exist or belongs to another purchaser's order"""
        pass
