"""
Integration tests for SettlePaymentUseCase

Exactly-once settlement: duplicate deliveries, failed payments and the race
between a capture webhook and the expiry sweep.
"""

import asyncio
from datetime import timedelta
from typing import Awaitable, Callable

import pytest

from src.platform.database.unit_of_work import SqlAlchemyUnitOfWork
from src.service.event_booking.app.command.expire_pending_orders_use_case import (
    ExpirePendingOrdersUseCase,
)
from src.service.event_booking.app.command.reserve_tickets_use_case import (
    Reservation,
    ReserveTicketsUseCase,
)
from src.service.event_booking.app.command.settle_payment_use_case import SettlePaymentUseCase
from src.service.event_booking.app.service.ticket_issuer import TicketIssuer
from src.service.event_booking.driven_adapter.payment_gateway.razorpay_gateway_impl import (
    RazorpayGatewayImpl,
)
from test.constants import PAYMENT_CAPTURED_EVENT, PAYMENT_FAILED_EVENT
from test.shared.razorpay_stub import build_webhook
from test.shared.seeder import BookingSeeder


@pytest.mark.integration
class TestSettlePaymentIntegration:
    @pytest.fixture
    def make_settle(
        self,
        uow_factory: Callable[[], SqlAlchemyUnitOfWork],
        payment_gateway: RazorpayGatewayImpl,
    ) -> Callable[[], SettlePaymentUseCase]:
        def _make() -> SettlePaymentUseCase:
            return SettlePaymentUseCase(
                uow=uow_factory(),
                payment_gateway=payment_gateway,
                ticket_issuer=TicketIssuer(),
                max_issue_attempts=3,
            )

        return _make

    @pytest.fixture
    def reserve(
        self,
        uow_factory: Callable[[], SqlAlchemyUnitOfWork],
        payment_gateway: RazorpayGatewayImpl,
        seeder: BookingSeeder,
    ) -> Callable[..., Awaitable[Reservation]]:
        async def _reserve(*, quantity: int = 2, full_name: str = 'Asha Rao') -> Reservation:
            user_id = await seeder.create_user(full_name=full_name)
            event_id = await seeder.create_event()
            category_id = await seeder.create_category(event_id=event_id, quantity=10)
            use_case = ReserveTicketsUseCase(
                uow=uow_factory(),
                payment_gateway=payment_gateway,
                order_hold=timedelta(minutes=10),
                currency='INR',
            )
            return await use_case.reserve_tickets(
                event_id=event_id,
                ticket_category_id=category_id,
                quantity=quantity,
                user_id=user_id,
            )

        return _reserve

    @pytest.mark.asyncio
    async def test_capture_issues_one_ticket_per_unit(
        self,
        make_settle: Callable[[], SettlePaymentUseCase],
        reserve: Callable[..., Awaitable[Reservation]],
        seeder: BookingSeeder,
    ) -> None:
        reservation = await reserve(quantity=3)
        body, signature = build_webhook(
            event=PAYMENT_CAPTURED_EVENT,
            gateway_order_id=reservation.gateway.order_id,
            payment_id='pay_captured_1',
        )

        result = await make_settle().settle_payment(body=body, signature=signature)

        assert result.message == 'Payment captured, tickets issued'
        order = await seeder.order(reservation.order.id)
        assert order.payment_status == 'completed'
        assert order.gateway_payment_id == 'pay_captured_1'
        assert order.paid_at is not None

        tickets = await seeder.tickets(reservation.order.id)
        assert len(tickets) == 3
        assert len({t.ticket_number for t in tickets}) == 3
        assert len({t.redemption_code for t in tickets}) == 3
        assert {t.attendee_name for t in tickets} == {'Asha Rao'}
        assert {t.status for t in tickets} == {'valid'}
        assert await seeder.sold_count(reservation.ticket_category_id) == 3

    @pytest.mark.asyncio
    async def test_duplicate_capture_delivery_is_noop(
        self,
        make_settle: Callable[[], SettlePaymentUseCase],
        reserve: Callable[..., Awaitable[Reservation]],
        seeder: BookingSeeder,
    ) -> None:
        reservation = await reserve(quantity=2)
        body, signature = build_webhook(
            event=PAYMENT_CAPTURED_EVENT, gateway_order_id=reservation.gateway.order_id
        )

        first = await make_settle().settle_payment(body=body, signature=signature)
        second = await make_settle().settle_payment(body=body, signature=signature)

        assert first.message == 'Payment captured, tickets issued'
        assert second.success
        assert second.message == 'Order already processed'
        assert len(await seeder.tickets(reservation.order.id)) == 2
        assert await seeder.sold_count(reservation.ticket_category_id) == 2

    @pytest.mark.asyncio
    async def test_concurrent_duplicate_deliveries_issue_once(
        self,
        make_settle: Callable[[], SettlePaymentUseCase],
        reserve: Callable[..., Awaitable[Reservation]],
        seeder: BookingSeeder,
    ) -> None:
        reservation = await reserve(quantity=2)
        body, signature = build_webhook(
            event=PAYMENT_CAPTURED_EVENT, gateway_order_id=reservation.gateway.order_id
        )

        results = await asyncio.gather(
            *[make_settle().settle_payment(body=body, signature=signature) for _ in range(3)]
        )

        messages = sorted(result.message for result in results)
        assert messages == [
            'Order already processed',
            'Order already processed',
            'Payment captured, tickets issued',
        ]
        assert len(await seeder.tickets(reservation.order.id)) == 2

    @pytest.mark.asyncio
    async def test_failed_payment_releases_capacity(
        self,
        make_settle: Callable[[], SettlePaymentUseCase],
        reserve: Callable[..., Awaitable[Reservation]],
        seeder: BookingSeeder,
    ) -> None:
        reservation = await reserve(quantity=4)
        assert await seeder.sold_count(reservation.ticket_category_id) == 4
        body, signature = build_webhook(
            event=PAYMENT_FAILED_EVENT, gateway_order_id=reservation.gateway.order_id
        )

        result = await make_settle().settle_payment(body=body, signature=signature)

        assert result.message == 'Payment failure recorded'
        assert (await seeder.order(reservation.order.id)).payment_status == 'failed'
        assert await seeder.sold_count(reservation.ticket_category_id) == 0
        assert await seeder.booked_count(reservation.order.event_id) == 0
        assert await seeder.tickets(reservation.order.id) == []

    @pytest.mark.asyncio
    async def test_capture_after_failure_changes_nothing(
        self,
        make_settle: Callable[[], SettlePaymentUseCase],
        reserve: Callable[..., Awaitable[Reservation]],
        seeder: BookingSeeder,
    ) -> None:
        reservation = await reserve(quantity=1)
        failed_body, failed_signature = build_webhook(
            event=PAYMENT_FAILED_EVENT, gateway_order_id=reservation.gateway.order_id
        )
        captured_body, captured_signature = build_webhook(
            event=PAYMENT_CAPTURED_EVENT, gateway_order_id=reservation.gateway.order_id
        )

        await make_settle().settle_payment(body=failed_body, signature=failed_signature)
        result = await make_settle().settle_payment(
            body=captured_body, signature=captured_signature
        )

        assert result.message == 'Order already processed'
        assert (await seeder.order(reservation.order.id)).payment_status == 'failed'
        assert await seeder.tickets(reservation.order.id) == []
        assert await seeder.sold_count(reservation.ticket_category_id) == 0

    @pytest.mark.asyncio
    async def test_capture_racing_expiry_sweep_settles_exactly_once(
        self,
        make_settle: Callable[[], SettlePaymentUseCase],
        reserve: Callable[..., Awaitable[Reservation]],
        uow_factory: Callable[[], SqlAlchemyUnitOfWork],
        seeder: BookingSeeder,
    ) -> None:
        reservation = await reserve(quantity=3)
        await seeder.expire_hold(reservation.order.id)
        body, signature = build_webhook(
            event=PAYMENT_CAPTURED_EVENT, gateway_order_id=reservation.gateway.order_id
        )
        sweep = ExpirePendingOrdersUseCase(uow=uow_factory(), batch_size=100)

        settle_result, expired_count = await asyncio.gather(
            make_settle().settle_payment(body=body, signature=signature),
            sweep.expire_pending_orders(),
        )

        order = await seeder.order(reservation.order.id)
        tickets = await seeder.tickets(reservation.order.id)
        sold_count = await seeder.sold_count(reservation.ticket_category_id)

        if order.payment_status == 'completed':
            assert settle_result.message == 'Payment captured, tickets issued'
            assert expired_count == 0
            assert len(tickets) == 3
            assert sold_count == 3
        else:
            assert order.payment_status == 'expired'
            assert settle_result.message == 'Order already processed'
            assert expired_count == 1
            assert tickets == []
            assert sold_count == 0

    @pytest.mark.asyncio
    async def test_capture_event_for_authorized_payment_keeps_order_pending(
        self,
        make_settle: Callable[[], SettlePaymentUseCase],
        reserve: Callable[..., Awaitable[Reservation]],
        seeder: BookingSeeder,
    ) -> None:
        reservation = await reserve(quantity=2)
        body, signature = build_webhook(
            event=PAYMENT_CAPTURED_EVENT,
            gateway_order_id=reservation.gateway.order_id,
            payment_status='authorized',
        )

        result = await make_settle().settle_payment(body=body, signature=signature)

        assert result.message == 'Event acknowledged'
        order = await seeder.order(reservation.order.id)
        assert order.payment_status == 'pending'
        assert order.gateway_payment_id is None
        assert await seeder.tickets(reservation.order.id) == []
        assert await seeder.sold_count(reservation.ticket_category_id) == 2
