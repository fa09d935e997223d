"""Read models returned by the purchaser's order and ticket reads"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

import attrs

from src.service.event_booking.domain.enum.payment_status import PaymentStatus
from src.service.event_booking.domain.enum.ticket_status import TicketStatus


@attrs.define
class OrderSummary:
    id: UUID
    order_number: str
    event_id: UUID
    event_name: str
    ticket_title: Optional[str]
    total_tickets: int
    price_per_ticket: Optional[Decimal]
    subtotal: Decimal
    platform_fee: Decimal
    total_amount: Decimal
    payment_status: PaymentStatus
    gateway_payment_id: Optional[str]
    created_at: datetime
    expires_at: Optional[datetime]
    paid_at: Optional[datetime]


@attrs.define
class TicketSummary:
    id: UUID
    order_id: UUID
    event_id: UUID
    event_name: str
    ticket_title: str
    ticket_number: str
    redemption_code: str
    attendee_name: str
    status: TicketStatus
    created_at: datetime


@attrs.define
class TicketDetail:
    id: UUID
    ticket_number: str
    redemption_code: str
    attendee_name: str
    attendee_email: Optional[str]
    attendee_phone: Optional[str]
    status: TicketStatus
    created_at: datetime
    event_id: UUID
    event_name: str
    ticket_category_id: UUID
    ticket_title: str
    ticket_price: Decimal
    order_id: UUID
    order_number: str
    total_amount: Decimal
    payment_status: PaymentStatus
    order_created_at: datetime


@attrs.define
class Page:
    items: list
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        if self.limit <= 0:
            return 0
        return (self.total + self.limit - 1) // self.limit
