from datetime import datetime, timedelta, timezone
from decimal import Decimal
import secrets
from typing import List, Optional
from uuid import UUID

import attrs
from uuid_utils.compat import uuid7

from src.service.event_booking.domain.enum.payment_status import PaymentStatus
from src.service.event_booking.domain.pricing import PriceBreakdown


def generate_order_number(now: datetime) -> str:
    """Human-readable order number, e.g. ORD-1735689600000-9F2C41AB"""
    return f'ORD-{int(now.timestamp() * 1000)}-{secrets.token_hex(4).upper()}'


@attrs.define
class OrderItem:
    order_id: UUID
    ticket_category_id: UUID
    quantity: int
    price_per_ticket: Decimal  # Snapshot at booking time
    total_price: Decimal
    id: Optional[UUID] = None


@attrs.define
class Order:
    id: UUID
    order_number: str
    event_id: UUID
    user_id: UUID
    total_tickets: int
    subtotal: Decimal
    platform_fee: Decimal
    total_amount: Decimal
    payment_status: PaymentStatus = PaymentStatus.PENDING
    gateway_order_id: Optional[str] = None
    gateway_payment_id: Optional[str] = None
    created_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    paid_at: Optional[datetime] = None
    items: List[OrderItem] = attrs.field(factory=list)

    @classmethod
    def create_pending(
        cls,
        *,
        event_id: UUID,
        user_id: UUID,
        ticket_category_id: UUID,
        quantity: int,
        price_per_ticket: Decimal,
        breakdown: PriceBreakdown,
        hold: timedelta,
        now: Optional[datetime] = None,
    ) -> 'Order':
        now = now or datetime.now(timezone.utc)
        order_id = uuid7()
        item = OrderItem(
            id=uuid7(),
            order_id=order_id,
            ticket_category_id=ticket_category_id,
            quantity=quantity,
            price_per_ticket=price_per_ticket,
            total_price=breakdown.subtotal,
        )
        return cls(
            id=order_id,
            order_number=generate_order_number(now),
            event_id=event_id,
            user_id=user_id,
            total_tickets=quantity,
            subtotal=breakdown.subtotal,
            platform_fee=breakdown.platform_fee,
            total_amount=breakdown.total_amount,
            payment_status=PaymentStatus.PENDING,
            created_at=now,
            expires_at=now + hold,
            items=[item],
        )

    @property
    def is_pending(self) -> bool:
        return self.payment_status == PaymentStatus.PENDING

    def quantity_by_category(self) -> dict[UUID, int]:
        released: dict[UUID, int] = {}
        for item in self.items:
            released[item.ticket_category_id] = (
                released.get(item.ticket_category_id, 0) + item.quantity
            )
        return released

    def with_gateway_order(self, gateway_order_id: str) -> 'Order':
        return attrs.evolve(self, gateway_order_id=gateway_order_id)
