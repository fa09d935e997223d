from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.event_booking.app.interface.i_user_profile_query_repo import (
    IUserProfileQueryRepo,
)
from src.service.event_booking.domain.entity.user_profile_entity import UserProfileEntity
from src.service.event_booking.driven_adapter.model.user_profile_model import UserProfileModel


class UserProfileQueryRepoImpl(IUserProfileQueryRepo):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    @Logger.io
    async def get_by_id(self, *, user_id: UUID) -> Optional[UserProfileEntity]:
        result = await self.session.execute(
            select(UserProfileModel).where(UserProfileModel.id == user_id)
        )
        profile_model = result.scalar_one_or_none()
        if not profile_model:
            return None

        return UserProfileEntity(
            id=profile_model.id,
            full_name=profile_model.full_name,
            email=profile_model.email,
            mobile=profile_model.mobile,
        )
