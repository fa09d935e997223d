from typing import Optional
import uuid

from sqlalchemy import String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.orm_db_setting import Base


class UserProfileModel(Base):
    """Owned by the auth service; read here for attendee details only"""

    __tablename__ = 'users_profile'

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
    full_name: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String, unique=True, nullable=True)
    mobile: Mapped[str] = mapped_column(String, unique=True, nullable=False)
