from datetime import datetime
from typing import Dict, List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy import update as sql_update
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.platform.types.utc_datetime import as_utc
from src.service.event_booking.app.interface.i_order_command_repo import IOrderCommandRepo
from src.service.event_booking.domain.entity.order_entity import Order, OrderItem
from src.service.event_booking.domain.enum.payment_status import PaymentStatus
from src.service.event_booking.driven_adapter.model.order_model import OrderItemModel, OrderModel


class OrderCommandRepoImpl(IOrderCommandRepo):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    @Logger.io
    async def create_pending_order(self, *, order: Order) -> Order:
        self.session.add(
            OrderModel(
                id=order.id,
                order_number=order.order_number,
                event_id=order.event_id,
                user_id=order.user_id,
                total_tickets=order.total_tickets,
                subtotal=order.subtotal,
                platform_fee=order.platform_fee,
                total_amount=order.total_amount,
                payment_status=order.payment_status.value,
                created_at=order.created_at,
                expires_at=order.expires_at,
            )
        )
        # Parent row first
        await self.session.flush()

        self.session.add_all(
            [
                OrderItemModel(
                    id=item.id,
                    order_id=order.id,
                    ticket_category_id=item.ticket_category_id,
                    quantity=item.quantity,
                    price_per_ticket=item.price_per_ticket,
                    total_price=item.total_price,
                )
                for item in order.items
            ]
        )
        await self.session.flush()
        return order

    @Logger.io
    async def get_by_id(self, *, order_id: UUID) -> Optional[Order]:
        result = await self.session.execute(select(OrderModel).where(OrderModel.id == order_id))
        order_model = result.scalar_one_or_none()
        if not order_model:
            return None
        return await self._with_items(order_model)

    @Logger.io
    async def get_by_gateway_order_id(self, *, gateway_order_id: str) -> Optional[Order]:
        result = await self.session.execute(
            select(OrderModel).where(OrderModel.gateway_order_id == gateway_order_id)
        )
        order_model = result.scalars().first()
        if not order_model:
            return None
        return await self._with_items(order_model)

    @Logger.io
    async def set_gateway_order_id(self, *, order_id: UUID, gateway_order_id: str) -> None:
        await self.session.execute(
            sql_update(OrderModel)
            .where(OrderModel.id == order_id)
            .values(gateway_order_id=gateway_order_id)
            .execution_options(synchronize_session=False)
        )

    @Logger.io
    async def mark_completed(
        self, *, order_id: UUID, gateway_payment_id: Optional[str], paid_at: datetime
    ) -> bool:
        result = await self.session.execute(
            sql_update(OrderModel)
            .where(
                OrderModel.id == order_id,
                OrderModel.payment_status == PaymentStatus.PENDING.value,
            )
            .values(
                payment_status=PaymentStatus.COMPLETED.value,
                gateway_payment_id=gateway_payment_id,
                paid_at=paid_at,
            )
            .returning(OrderModel.id)
            .execution_options(synchronize_session=False)
        )
        return result.scalar_one_or_none() is not None

    @Logger.io
    async def mark_failed(self, *, order_id: UUID, gateway_payment_id: Optional[str]) -> bool:
        result = await self.session.execute(
            sql_update(OrderModel)
            .where(
                OrderModel.id == order_id,
                OrderModel.payment_status == PaymentStatus.PENDING.value,
            )
            .values(
                payment_status=PaymentStatus.FAILED.value,
                gateway_payment_id=gateway_payment_id,
            )
            .returning(OrderModel.id)
            .execution_options(synchronize_session=False)
        )
        return result.scalar_one_or_none() is not None

    @Logger.io
    async def find_expired_pending_ids(self, *, now: datetime, limit: int) -> List[UUID]:
        result = await self.session.execute(
            select(OrderModel.id)
            .where(
                OrderModel.payment_status == PaymentStatus.PENDING.value,
                OrderModel.expires_at < now,
            )
            .order_by(OrderModel.expires_at)
            .limit(limit)
        )
        return list(result.scalars().all())

    @Logger.io
    async def mark_expired(self, *, order_ids: List[UUID]) -> Dict[UUID, UUID]:
        if not order_ids:
            return {}

        result = await self.session.execute(
            sql_update(OrderModel)
            .where(
                OrderModel.id.in_(order_ids),
                OrderModel.payment_status == PaymentStatus.PENDING.value,
            )
            .values(payment_status=PaymentStatus.EXPIRED.value)
            .returning(OrderModel.id, OrderModel.event_id)
            .execution_options(synchronize_session=False)
        )
        return {order_id: event_id for order_id, event_id in result.all()}

    @Logger.io
    async def get_items_by_order_ids(self, *, order_ids: List[UUID]) -> List[OrderItem]:
        if not order_ids:
            return []

        result = await self.session.execute(
            select(OrderItemModel).where(OrderItemModel.order_id.in_(order_ids))
        )
        return [self._item_to_entity(item) for item in result.scalars().all()]

    async def _with_items(self, order_model: OrderModel) -> Order:
        items = await self.get_items_by_order_ids(order_ids=[order_model.id])
        return Order(
            id=order_model.id,
            order_number=order_model.order_number,
            event_id=order_model.event_id,
            user_id=order_model.user_id,
            total_tickets=order_model.total_tickets,
            subtotal=order_model.subtotal,
            platform_fee=order_model.platform_fee,
            total_amount=order_model.total_amount,
            payment_status=PaymentStatus(order_model.payment_status),
            gateway_order_id=order_model.gateway_order_id,
            gateway_payment_id=order_model.gateway_payment_id,
            created_at=as_utc(order_model.created_at),
            expires_at=as_utc(order_model.expires_at),
            paid_at=as_utc(order_model.paid_at),
            items=items,
        )

    @staticmethod
    def _item_to_entity(item_model: OrderItemModel) -> OrderItem:
        return OrderItem(
            id=item_model.id,
            order_id=item_model.order_id,
            ticket_category_id=item_model.ticket_category_id,
            quantity=item_model.quantity,
            price_per_ticket=item_model.price_per_ticket,
            total_price=item_model.total_price,
        )
