from datetime import datetime
from decimal import Decimal
from typing import Optional
import uuid

from sqlalchemy import DateTime, ForeignKey, Integer, Numeric, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from src.platform.database.orm_db_setting import Base


class OrderModel(Base):
    __tablename__ = 'event_orders'

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)  # UUID7
    order_number: Mapped[str] = mapped_column(String(40), unique=True, nullable=False)
    event_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey('events.id'), nullable=False, index=True
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey('users_profile.id'), nullable=False, index=True
    )
    total_tickets: Mapped[int] = mapped_column(Integer, nullable=False)
    subtotal: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    platform_fee: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), default=Decimal('0'), nullable=False
    )
    total_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    payment_status: Mapped[str] = mapped_column(
        String(20), default='pending', nullable=False, index=True
    )
    gateway_order_id: Mapped[Optional[str]] = mapped_column(String, nullable=True, index=True)
    gateway_payment_id: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    expires_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True, index=True
    )
    paid_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)


class OrderItemModel(Base):
    __tablename__ = 'event_order_items'

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
    order_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey('event_orders.id', ondelete='CASCADE'), nullable=False, index=True
    )
    ticket_category_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey('event_ticket_categories.id'), nullable=False, index=True
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    price_per_ticket: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    total_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
