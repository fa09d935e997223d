from datetime import datetime
from typing import Optional
import uuid

from sqlalchemy import DateTime, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from src.platform.database.orm_db_setting import Base


class TicketModel(Base):
    __tablename__ = 'event_tickets'

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
    order_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey('event_orders.id'), nullable=False, index=True
    )
    event_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey('events.id'), nullable=False, index=True
    )
    ticket_category_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey('event_ticket_categories.id'), nullable=False
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey('users_profile.id'), nullable=False, index=True
    )
    ticket_number: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    redemption_code: Mapped[str] = mapped_column(String(32), unique=True, nullable=False)
    attendee_name: Mapped[str] = mapped_column(String, nullable=False)
    attendee_email: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    attendee_phone: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    status: Mapped[str] = mapped_column(String(20), default='valid', nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
