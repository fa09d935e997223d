from enum import StrEnum


class TicketStatus(StrEnum):
    VALID = 'valid'
    USED = 'used'  # Set by check-in
    CANCELLED = 'cancelled'
