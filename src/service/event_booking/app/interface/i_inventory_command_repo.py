from abc import ABC, abstractmethod
from typing import Mapping
from uuid import UUID


class IInventoryCommandRepo(ABC):
    """
    Capacity counters of ticket categories and events

    Every mutation is a single conditional UPDATE so 0 <= sold_count <= quantity
    holds under any interleaving of concurrent units of work.
    """

    @abstractmethod
    async def reserve_capacity(
        self, *, event_id: UUID, ticket_category_id: UUID, quantity: int
    ) -> bool:
        """
        Increment sold_count and booked_count when enough capacity remains

        Returns:
            False when the conditional update matched no row, i.e. capacity was
            taken by a concurrent reservation
        """
        pass

    @abstractmethod
    async def release_capacity(
        self,
        *,
        quantities_by_category: Mapping[UUID, int],
        quantities_by_event: Mapping[UUID, int],
    ) -> None:
        """
        Decrement sold_count and booked_count by the given amounts

        Raises:
            InternalError: a counter would drop below zero
        """
        pass
