from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from src.service.event_booking.domain.entity.user_profile_entity import UserProfileEntity


class IUserProfileQueryRepo(ABC):
    @abstractmethod
    async def get_by_id(self, *, user_id: UUID) -> Optional[UserProfileEntity]:
        pass
