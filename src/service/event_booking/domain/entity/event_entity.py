from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

import attrs

from src.platform.exception.exceptions import ConflictError, NotFoundError, ValidationError
from src.service.event_booking.domain.enum.event_status import EventStatus, PlatformFeeType


@attrs.define
class EventEntity:
    """Read model of an event; only booked_count is written by the booking engine"""

    id: UUID
    name: str
    status: EventStatus
    is_active: bool = True
    platform_fee_type: PlatformFeeType = PlatformFeeType.PERCENTAGE
    platform_fee_percentage: Decimal = Decimal('0')
    platform_fee_fixed: Decimal = Decimal('0')
    booked_count: int = 0

    def ensure_open_for_booking(self) -> None:
        if not self.is_active or self.status != EventStatus.PUBLISHED:
            raise NotFoundError('Event is not available for booking')


@attrs.define
class TicketCategoryEntity:
    id: UUID
    event_id: UUID
    ticket_title: str
    price: Decimal
    quantity: int
    sold_count: int = 0
    sale_start_date: Optional[datetime] = None
    sale_end_date: Optional[datetime] = None
    min_per_order: int = 1
    max_per_order: int = 6
    is_active: bool = True

    @property
    def available(self) -> int:
        return max(self.quantity - self.sold_count, 0)

    def validate_quantity(self, quantity: int) -> None:
        if quantity < self.min_per_order or quantity > self.max_per_order:
            raise ValidationError(
                f'Quantity must be between {self.min_per_order} and {self.max_per_order}'
            )

    def validate_sale_window(self, now: datetime) -> None:
        # Unset bounds are open-ended
        if self.sale_start_date and now < self.sale_start_date:
            raise ValidationError('Ticket sales have not started yet')
        if self.sale_end_date and now > self.sale_end_date:
            raise ValidationError('Ticket sales have ended')

    def validate_availability(self, quantity: int) -> None:
        """Advisory pre-check; the conditional capacity update is authoritative"""
        if quantity > self.available:
            raise ConflictError(insufficient_availability_message(self.available))


def insufficient_availability_message(available: int) -> str:
    if available <= 0:
        return 'Tickets are sold out'
    return f'Only {available} tickets left'
