from datetime import datetime, timedelta, timezone
from decimal import Decimal
import time
from typing import Optional, Self
from uuid import UUID

import attrs
from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import (
    ConflictError,
    CustomBaseError,
    NotFoundError,
    PaymentGatewayError,
)
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.booking_metrics import metrics
from src.service.event_booking.app.interface.i_payment_gateway import IPaymentGateway
from src.service.event_booking.domain.entity.event_entity import insufficient_availability_message
from src.service.event_booking.domain.entity.order_entity import Order
from src.service.event_booking.domain.pricing import (
    PlatformFeePolicy,
    PriceBreakdown,
    calculate_price_breakdown,
)


@attrs.define(frozen=True)
class GatewayCheckout:
    order_id: str
    key_id: str
    amount: int  # Minor units
    currency: str


@attrs.define(frozen=True)
class Reservation:
    order: Order
    ticket_category_id: UUID
    quantity: int
    ticket_price: Decimal
    gateway: GatewayCheckout


class ReserveTicketsUseCase:
    """
    Reserve tickets - hold capacity while the purchaser pays

    Flow:
    1. Validate event, category, quantity, sale window and advisory availability
    2. One unit of work: conditional capacity increment + pending order insert
    3. After commit: open the gateway order (no transaction held during HTTP)
    4. Second short unit of work: persist the gateway order id

    A gateway failure leaves the order pending; the expiry sweep releases it.
    """

    def __init__(
        self,
        *,
        uow: AbstractUnitOfWork,
        payment_gateway: IPaymentGateway,
        order_hold: Optional[timedelta] = None,
        currency: Optional[str] = None,
    ) -> None:
        self.uow = uow
        self.payment_gateway = payment_gateway
        self.order_hold = order_hold or timedelta(minutes=settings.ORDER_HOLD_MINUTES)
        self.currency = currency or settings.PAYMENT_CURRENCY
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work]),
        payment_gateway: IPaymentGateway = Depends(Provide[Container.payment_gateway]),
    ) -> Self:
        return cls(uow=uow, payment_gateway=payment_gateway)

    @Logger.io
    async def reserve_tickets(
        self,
        *,
        event_id: UUID,
        ticket_category_id: UUID,
        quantity: int,
        user_id: UUID,
    ) -> Reservation:
        start = time.perf_counter()
        with self.tracer.start_as_current_span(
            'use_case.reserve_tickets',
            attributes={
                'event.id': str(event_id),
                'ticket_category.id': str(ticket_category_id),
                'reservation.quantity': quantity,
            },
        ):
            try:
                order, breakdown, ticket_price = await self._hold_capacity(
                    event_id=event_id,
                    ticket_category_id=ticket_category_id,
                    quantity=quantity,
                    user_id=user_id,
                )
                reservation = await self._open_gateway_order(
                    order=order,
                    breakdown=breakdown,
                    ticket_category_id=ticket_category_id,
                    quantity=quantity,
                    ticket_price=ticket_price,
                )
            except CustomBaseError as e:
                metrics.record_reservation(
                    result=self._result_label(e), duration=time.perf_counter() - start
                )
                raise

            metrics.record_reservation(
                result='reserved',
                duration=time.perf_counter() - start,
                event_id=str(event_id),
                quantity=quantity,
            )
            return reservation

    async def _hold_capacity(
        self,
        *,
        event_id: UUID,
        ticket_category_id: UUID,
        quantity: int,
        user_id: UUID,
    ) -> tuple[Order, PriceBreakdown, Decimal]:
        now = datetime.now(timezone.utc)

        async with self.uow:
            event = await self.uow.event_query_repo.get_event(event_id=event_id)
            if not event:
                raise NotFoundError('Event is not available for booking')
            event.ensure_open_for_booking()

            category = await self.uow.event_query_repo.get_ticket_category(
                event_id=event_id, ticket_category_id=ticket_category_id
            )
            if not category or not category.is_active:
                raise NotFoundError('Ticket category not found')

            category.validate_quantity(quantity)
            category.validate_sale_window(now)
            category.validate_availability(quantity)

            breakdown = calculate_price_breakdown(
                price=category.price,
                quantity=quantity,
                fee_policy=PlatformFeePolicy(
                    fee_type=event.platform_fee_type,
                    percentage=event.platform_fee_percentage,
                    fixed=event.platform_fee_fixed,
                ),
            )

            reserved = await self.uow.inventory_command_repo.reserve_capacity(
                event_id=event_id, ticket_category_id=ticket_category_id, quantity=quantity
            )
            if not reserved:
                latest = await self.uow.event_query_repo.get_ticket_category(
                    event_id=event_id, ticket_category_id=ticket_category_id
                )
                available = latest.available if latest else 0
                Logger.base.warning(
                    f'⚠️ [RESERVE] Capacity lost at commit for category {ticket_category_id}: '
                    f'requested={quantity} available={available}'
                )
                raise ConflictError(insufficient_availability_message(available))

            order = Order.create_pending(
                event_id=event_id,
                user_id=user_id,
                ticket_category_id=ticket_category_id,
                quantity=quantity,
                price_per_ticket=category.price,
                breakdown=breakdown,
                hold=self.order_hold,
                now=now,
            )
            await self.uow.order_command_repo.create_pending_order(order=order)
            await self.uow.commit()

        Logger.base.info(
            f'🎫 [RESERVE] Held {quantity} tickets of category {ticket_category_id} '
            f'for order {order.order_number} until {order.expires_at}'
        )
        return order, breakdown, category.price

    async def _open_gateway_order(
        self,
        *,
        order: Order,
        breakdown: PriceBreakdown,
        ticket_category_id: UUID,
        quantity: int,
        ticket_price: Decimal,
    ) -> Reservation:
        try:
            gateway_order = await self.payment_gateway.create_order(
                amount=breakdown.amount_in_minor_units,
                currency=self.currency,
                receipt=order.order_number,
                notes={
                    'order_id': str(order.id),
                    'event_id': str(order.event_id),
                    'user_id': str(order.user_id),
                },
            )
        except PaymentGatewayError:
            Logger.base.error(
                f'💳 [RESERVE] Gateway order failed for {order.order_number}; '
                f'hold stays pending until {order.expires_at}'
            )
            raise

        async with self.uow:
            await self.uow.order_command_repo.set_gateway_order_id(
                order_id=order.id, gateway_order_id=gateway_order.id
            )
            await self.uow.commit()

        return Reservation(
            order=order.with_gateway_order(gateway_order.id),
            ticket_category_id=ticket_category_id,
            quantity=quantity,
            ticket_price=ticket_price,
            gateway=GatewayCheckout(
                order_id=gateway_order.id,
                key_id=self.payment_gateway.key_id,
                amount=breakdown.amount_in_minor_units,
                currency=gateway_order.currency,
            ),
        )

    @staticmethod
    def _result_label(error: CustomBaseError) -> str:
        if isinstance(error, ConflictError):
            return 'conflict'
        if isinstance(error, PaymentGatewayError):
            return 'gateway_error'
        return 'rejected'
