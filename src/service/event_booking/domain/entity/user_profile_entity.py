from typing import Optional
from uuid import UUID

import attrs

from src.service.event_booking.domain.entity.ticket_entity import AttendeeProfile


@attrs.define
class UserProfileEntity:
    id: UUID
    full_name: Optional[str] = None
    email: Optional[str] = None
    mobile: Optional[str] = None

    def to_attendee(self) -> AttendeeProfile:
        return AttendeeProfile(
            name=self.full_name or 'Guest',
            email=self.email,
            phone=self.mobile,
        )
