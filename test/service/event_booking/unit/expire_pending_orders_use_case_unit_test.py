from datetime import datetime, timezone
from decimal import Decimal

import pytest
from uuid_utils.compat import uuid7

from src.platform.exception.exceptions import InternalError
from src.service.event_booking.app.command.expire_pending_orders_use_case import (
    ExpirePendingOrdersUseCase,
)
from src.service.event_booking.domain.entity.order_entity import OrderItem
from test.shared.fake_unit_of_work import FakeUnitOfWork


def _item(*, order_id, category_id, quantity: int) -> OrderItem:
    return OrderItem(
        id=uuid7(),
        order_id=order_id,
        ticket_category_id=category_id,
        quantity=quantity,
        price_per_ticket=Decimal('100.00'),
        total_price=Decimal('100.00') * quantity,
    )


@pytest.mark.unit
class TestExpirePendingOrders:
    @pytest.mark.asyncio
    async def test_nothing_to_expire(self) -> None:
        uow = FakeUnitOfWork()
        uow.order_command_repo.find_expired_pending_ids.return_value = []

        expired = await ExpirePendingOrdersUseCase(uow=uow, batch_size=50).expire_pending_orders()

        assert expired == 0
        uow.order_command_repo.mark_expired.assert_not_awaited()
        uow.inventory_command_repo.release_capacity.assert_not_awaited()
        assert uow.commits == 0

    @pytest.mark.asyncio
    async def test_releases_only_orders_this_sweep_transitioned(self) -> None:
        event_a, event_b = uuid7(), uuid7()
        category_a, category_b = uuid7(), uuid7()
        order_1, order_2, order_3 = uuid7(), uuid7(), uuid7()
        now = datetime.now(timezone.utc)

        uow = FakeUnitOfWork()
        uow.order_command_repo.find_expired_pending_ids.return_value = [order_1, order_2, order_3]
        # order_3 was settled between the scan and the update
        uow.order_command_repo.mark_expired.return_value = {order_1: event_a, order_2: event_b}
        uow.order_command_repo.get_items_by_order_ids.return_value = [
            _item(order_id=order_1, category_id=category_a, quantity=2),
            _item(order_id=order_2, category_id=category_b, quantity=3),
        ]

        expired = await ExpirePendingOrdersUseCase(uow=uow, batch_size=50).expire_pending_orders(
            now=now
        )

        assert expired == 2
        uow.order_command_repo.find_expired_pending_ids.assert_awaited_once_with(now=now, limit=50)
        uow.order_command_repo.get_items_by_order_ids.assert_awaited_once_with(
            order_ids=[order_1, order_2]
        )
        uow.inventory_command_repo.release_capacity.assert_awaited_once_with(
            quantities_by_category={category_a: 2, category_b: 3},
            quantities_by_event={event_a: 2, event_b: 3},
        )
        assert uow.commits == 1

    @pytest.mark.asyncio
    async def test_same_category_across_orders_is_aggregated(self) -> None:
        event_id, category_id = uuid7(), uuid7()
        order_1, order_2 = uuid7(), uuid7()

        uow = FakeUnitOfWork()
        uow.order_command_repo.find_expired_pending_ids.return_value = [order_1, order_2]
        uow.order_command_repo.mark_expired.return_value = {order_1: event_id, order_2: event_id}
        uow.order_command_repo.get_items_by_order_ids.return_value = [
            _item(order_id=order_1, category_id=category_id, quantity=1),
            _item(order_id=order_2, category_id=category_id, quantity=4),
        ]

        await ExpirePendingOrdersUseCase(uow=uow, batch_size=50).expire_pending_orders()

        uow.inventory_command_repo.release_capacity.assert_awaited_once_with(
            quantities_by_category={category_id: 5},
            quantities_by_event={event_id: 5},
        )

    @pytest.mark.asyncio
    async def test_all_candidates_already_settled(self) -> None:
        uow = FakeUnitOfWork()
        uow.order_command_repo.find_expired_pending_ids.return_value = [uuid7()]
        uow.order_command_repo.mark_expired.return_value = {}

        expired = await ExpirePendingOrdersUseCase(uow=uow, batch_size=50).expire_pending_orders()

        assert expired == 0
        uow.inventory_command_repo.release_capacity.assert_not_awaited()
        assert uow.commits == 0

    @pytest.mark.asyncio
    async def test_failed_batch_is_retried_per_order(self) -> None:
        event_id = uuid7()
        category_a, category_b = uuid7(), uuid7()
        order_1, order_2 = uuid7(), uuid7()
        item_1 = _item(order_id=order_1, category_id=category_a, quantity=2)
        item_2 = _item(order_id=order_2, category_id=category_b, quantity=1)

        uow = FakeUnitOfWork()
        uow.order_command_repo.find_expired_pending_ids.return_value = [order_1, order_2]
        uow.order_command_repo.mark_expired.side_effect = [
            {order_1: event_id, order_2: event_id},
            {order_1: event_id},
            {order_2: event_id},
        ]
        uow.order_command_repo.get_items_by_order_ids.side_effect = [
            [item_1, item_2],
            [item_1],
            [item_2],
        ]
        uow.inventory_command_repo.release_capacity.side_effect = [
            InternalError('Cannot release 2 tickets'),
            InternalError('Cannot release 2 tickets'),
            None,
        ]

        expired = await ExpirePendingOrdersUseCase(uow=uow, batch_size=50).expire_pending_orders()

        assert expired == 1
        calls = uow.order_command_repo.mark_expired.await_args_list
        assert [call.kwargs['order_ids'] for call in calls] == [
            [order_1, order_2],
            [order_1],
            [order_2],
        ]
        uow.inventory_command_repo.release_capacity.assert_awaited_with(
            quantities_by_category={category_b: 1},
            quantities_by_event={event_id: 1},
        )
        assert uow.commits == 1
        assert uow.rollbacks >= 2
