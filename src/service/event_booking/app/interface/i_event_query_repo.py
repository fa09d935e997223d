from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from src.service.event_booking.domain.entity.event_entity import EventEntity, TicketCategoryEntity


class IEventQueryRepo(ABC):
    """Lookups against the event and ticket-category tables owned by event management"""

    @abstractmethod
    async def get_event(self, *, event_id: UUID) -> Optional[EventEntity]:
        pass

    @abstractmethod
    async def get_ticket_category(
        self, *, event_id: UUID, ticket_category_id: UUID
    ) -> Optional[TicketCategoryEntity]:
        """
        Get a ticket category that belongs to the given event

        Returns:
            TicketCategoryEntity or None when it does not exist or belongs to another event
        """
        pass
