"""
Booking Query Repository Implementation - CQRS Read Side

Each listing runs in its own short session obtained from the session factory;
nothing here participates in a unit of work.
"""

from typing import AsyncContextManager, Callable, Dict, Optional, Tuple
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.platform.types.utc_datetime import as_utc
from src.service.event_booking.app.interface.i_booking_query_repo import IBookingQueryRepo
from src.service.event_booking.domain.entity.booking_summary import (
    OrderSummary,
    Page,
    TicketDetail,
    TicketSummary,
)
from src.service.event_booking.domain.enum.payment_status import PaymentStatus
from src.service.event_booking.domain.enum.ticket_status import TicketStatus
from src.service.event_booking.driven_adapter.model.event_model import EventModel
from src.service.event_booking.driven_adapter.model.order_model import OrderItemModel, OrderModel
from src.service.event_booking.driven_adapter.model.ticket_category_model import (
    TicketCategoryModel,
)
from src.service.event_booking.driven_adapter.model.ticket_model import TicketModel


class BookingQueryRepoImpl(IBookingQueryRepo):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]) -> None:
        self.session_factory = session_factory

    @Logger.io
    async def list_orders_by_user(self, *, user_id: UUID, page: int, limit: int) -> Page:
        async with self.session_factory() as session:
            total = await session.scalar(
                select(func.count()).select_from(OrderModel).where(OrderModel.user_id == user_id)
            )

            result = await session.execute(
                select(OrderModel, EventModel.name)
                .join(EventModel, EventModel.id == OrderModel.event_id)
                .where(OrderModel.user_id == user_id)
                .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
                .offset((page - 1) * limit)
                .limit(limit)
            )
            rows = result.all()

            first_items = await self._first_item_by_order(
                session, order_ids=[order_model.id for order_model, _ in rows]
            )

        items = []
        for order_model, event_name in rows:
            ticket_title, price_per_ticket = first_items.get(order_model.id, (None, None))
            items.append(
                OrderSummary(
                    id=order_model.id,
                    order_number=order_model.order_number,
                    event_id=order_model.event_id,
                    event_name=event_name,
                    ticket_title=ticket_title,
                    total_tickets=order_model.total_tickets,
                    price_per_ticket=price_per_ticket,
                    subtotal=order_model.subtotal,
                    platform_fee=order_model.platform_fee,
                    total_amount=order_model.total_amount,
                    payment_status=PaymentStatus(order_model.payment_status),
                    gateway_payment_id=order_model.gateway_payment_id,
                    created_at=as_utc(order_model.created_at),  # type: ignore[arg-type]
                    expires_at=as_utc(order_model.expires_at),
                    paid_at=as_utc(order_model.paid_at),
                )
            )

        return Page(items=items, total=total or 0, page=page, limit=limit)

    @Logger.io
    async def list_tickets_by_user(self, *, user_id: UUID, page: int, limit: int) -> Page:
        completed_order = (
            select(OrderModel.id)
            .where(OrderModel.payment_status == PaymentStatus.COMPLETED.value)
            .scalar_subquery()
        )
        filters = (TicketModel.user_id == user_id, TicketModel.order_id.in_(completed_order))

        async with self.session_factory() as session:
            total = await session.scalar(
                select(func.count()).select_from(TicketModel).where(*filters)
            )

            result = await session.execute(
                select(TicketModel, EventModel.name, TicketCategoryModel.ticket_title)
                .join(EventModel, EventModel.id == TicketModel.event_id)
                .join(TicketCategoryModel, TicketCategoryModel.id == TicketModel.ticket_category_id)
                .where(*filters)
                .order_by(TicketModel.created_at.desc(), TicketModel.ticket_number)
                .offset((page - 1) * limit)
                .limit(limit)
            )
            rows = result.all()

        items = [
            TicketSummary(
                id=ticket_model.id,
                order_id=ticket_model.order_id,
                event_id=ticket_model.event_id,
                event_name=event_name,
                ticket_title=ticket_title,
                ticket_number=ticket_model.ticket_number,
                redemption_code=ticket_model.redemption_code,
                attendee_name=ticket_model.attendee_name,
                status=TicketStatus(ticket_model.status),
                created_at=as_utc(ticket_model.created_at),  # type: ignore[arg-type]
            )
            for ticket_model, event_name, ticket_title in rows
        ]
        return Page(items=items, total=total or 0, page=page, limit=limit)

    @Logger.io
    async def get_ticket_for_user(
        self, *, user_id: UUID, ticket_id: UUID
    ) -> Optional[TicketDetail]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(TicketModel, EventModel.name, TicketCategoryModel, OrderModel)
                .join(OrderModel, OrderModel.id == TicketModel.order_id)
                .join(EventModel, EventModel.id == TicketModel.event_id)
                .join(TicketCategoryModel, TicketCategoryModel.id == TicketModel.ticket_category_id)
                .where(TicketModel.id == ticket_id, OrderModel.user_id == user_id)
                .limit(1)
            )
            row = result.first()

        if row is None:
            return None

        ticket_model, event_name, category_model, order_model = row
        return TicketDetail(
            id=ticket_model.id,
            ticket_number=ticket_model.ticket_number,
            redemption_code=ticket_model.redemption_code,
            attendee_name=ticket_model.attendee_name,
            attendee_email=ticket_model.attendee_email,
            attendee_phone=ticket_model.attendee_phone,
            status=TicketStatus(ticket_model.status),
            created_at=as_utc(ticket_model.created_at),  # type: ignore[arg-type]
            event_id=ticket_model.event_id,
            event_name=event_name,
            ticket_category_id=category_model.id,
            ticket_title=category_model.ticket_title,
            ticket_price=category_model.price,
            order_id=order_model.id,
            order_number=order_model.order_number,
            total_amount=order_model.total_amount,
            payment_status=PaymentStatus(order_model.payment_status),
            order_created_at=as_utc(order_model.created_at),  # type: ignore[arg-type]
        )

    @staticmethod
    async def _first_item_by_order(
        session: AsyncSession, *, order_ids: list[UUID]
    ) -> Dict[UUID, Tuple[str, object]]:
        if not order_ids:
            return {}

        result = await session.execute(
            select(
                OrderItemModel.order_id,
                TicketCategoryModel.ticket_title,
                OrderItemModel.price_per_ticket,
            )
            .join(TicketCategoryModel, TicketCategoryModel.id == OrderItemModel.ticket_category_id)
            .where(OrderItemModel.order_id.in_(order_ids))
        )
        first_items: Dict[UUID, Tuple[str, object]] = {}
        for order_id, ticket_title, price_per_ticket in result.all():
            first_items.setdefault(order_id, (ticket_title, price_per_ticket))
        return first_items
