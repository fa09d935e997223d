"""Event Booking Domain Enums"""

from src.service.event_booking.domain.enum.event_status import EventStatus, PlatformFeeType
from src.service.event_booking.domain.enum.payment_status import PaymentStatus
from src.service.event_booking.domain.enum.ticket_status import TicketStatus

__all__ = ['EventStatus', 'PaymentStatus', 'PlatformFeeType', 'TicketStatus']
