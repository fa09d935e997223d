from datetime import datetime
from typing import Optional
from uuid import UUID

import attrs

from src.service.event_booking.domain.enum.ticket_status import TicketStatus


@attrs.define
class TicketEntity:
    id: UUID
    order_id: UUID
    event_id: UUID
    ticket_category_id: UUID
    user_id: UUID
    ticket_number: str
    redemption_code: str
    attendee_name: str
    attendee_email: Optional[str] = None
    attendee_phone: Optional[str] = None
    status: TicketStatus = TicketStatus.VALID
    created_at: Optional[datetime] = None


@attrs.define(frozen=True)
class AttendeeProfile:
    """Purchaser details copied onto every ticket at issuance time"""

    name: str = 'Guest'
    email: Optional[str] = None
    phone: Optional[str] = None
