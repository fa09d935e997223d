from datetime import datetime
from decimal import Decimal
import uuid

from sqlalchemy import Boolean, DateTime, Integer, Numeric, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from src.platform.database.orm_db_setting import Base


class EventModel(Base):
    __tablename__ = 'events'

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    status: Mapped[str] = mapped_column(String(20), default='draft', nullable=False, index=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    platform_fee_type: Mapped[str] = mapped_column(
        String(20), default='percentage', nullable=False
    )
    platform_fee_percentage: Mapped[Decimal] = mapped_column(
        Numeric(5, 2), default=Decimal('0'), nullable=False
    )
    platform_fee_fixed: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), default=Decimal('0'), nullable=False
    )
    booked_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
