from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, List, Optional
from uuid import UUID

from src.service.event_booking.domain.entity.order_entity import Order, OrderItem


class IOrderCommandRepo(ABC):
    """
    Order lifecycle writes

    Status transitions are conditional on payment_status='pending' and report
    whether this caller performed the transition.
    """

    @abstractmethod
    async def create_pending_order(self, *, order: Order) -> Order:
        """Insert the order with its items"""
        pass

    @abstractmethod
    async def get_by_id(self, *, order_id: UUID) -> Optional[Order]:
        pass

    @abstractmethod
    async def get_by_gateway_order_id(self, *, gateway_order_id: str) -> Optional[Order]:
        pass

    @abstractmethod
    async def set_gateway_order_id(self, *, order_id: UUID, gateway_order_id: str) -> None:
        pass

    @abstractmethod
    async def mark_completed(
        self, *, order_id: UUID, gateway_payment_id: Optional[str], paid_at: datetime
    ) -> bool:
        pass

    @abstractmethod
    async def mark_failed(self, *, order_id: UUID, gateway_payment_id: Optional[str]) -> bool:
        pass

    @abstractmethod
    async def find_expired_pending_ids(self, *, now: datetime, limit: int) -> List[UUID]:
        pass

    @abstractmethod
    async def mark_expired(self, *, order_ids: List[UUID]) -> Dict[UUID, UUID]:
        """
        Bulk transition pending orders to expired

        Returns:
            order id -> event id for the rows this call actually transitioned
            (rows still pending at update time)
        """
        pass

    @abstractmethod
    async def get_items_by_order_ids(self, *, order_ids: List[UUID]) -> List[OrderItem]:
        pass
