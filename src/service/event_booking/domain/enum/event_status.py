from enum import StrEnum


class EventStatus(StrEnum):
    """Publication status, owned by the admin surface"""

    DRAFT = 'draft'
    PUBLISHED = 'published'
    CANCELLED = 'cancelled'
    COMPLETED = 'completed'


class PlatformFeeType(StrEnum):
    PERCENTAGE = 'percentage'
    FIXED = 'fixed'
    BOTH = 'both'
