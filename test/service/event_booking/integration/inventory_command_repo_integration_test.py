"""
Integration tests for InventoryCommandRepoImpl

Conditional counter updates against a real database.
"""

from typing import Callable

import pytest
from sqlalchemy.exc import IntegrityError

from src.platform.database.unit_of_work import SqlAlchemyUnitOfWork
from src.platform.exception.exceptions import InternalError
from test.shared.seeder import BookingSeeder


@pytest.mark.integration
class TestInventoryCommandRepo:
    @pytest.mark.asyncio
    async def test_reserve_within_capacity(
        self, uow_factory: Callable[[], SqlAlchemyUnitOfWork], seeder: BookingSeeder
    ) -> None:
        event_id = await seeder.create_event()
        category_id = await seeder.create_category(event_id=event_id, quantity=10)

        async with uow_factory() as uow:
            reserved = await uow.inventory_command_repo.reserve_capacity(
                event_id=event_id, ticket_category_id=category_id, quantity=10
            )
            await uow.commit()

        assert reserved is True
        assert await seeder.sold_count(category_id) == 10
        assert await seeder.booked_count(event_id) == 10

    @pytest.mark.asyncio
    async def test_reserve_beyond_capacity_changes_nothing(
        self, uow_factory: Callable[[], SqlAlchemyUnitOfWork], seeder: BookingSeeder
    ) -> None:
        event_id = await seeder.create_event()
        category_id = await seeder.create_category(event_id=event_id, quantity=10, sold_count=8)

        async with uow_factory() as uow:
            reserved = await uow.inventory_command_repo.reserve_capacity(
                event_id=event_id, ticket_category_id=category_id, quantity=3
            )
            await uow.commit()

        assert reserved is False
        assert await seeder.sold_count(category_id) == 8
        assert await seeder.booked_count(event_id) == 0

    @pytest.mark.asyncio
    async def test_reserve_for_category_of_other_event(
        self, uow_factory: Callable[[], SqlAlchemyUnitOfWork], seeder: BookingSeeder
    ) -> None:
        event_id = await seeder.create_event()
        other_event_id = await seeder.create_event()
        category_id = await seeder.create_category(event_id=event_id)

        async with uow_factory() as uow:
            reserved = await uow.inventory_command_repo.reserve_capacity(
                event_id=other_event_id, ticket_category_id=category_id, quantity=1
            )

        assert reserved is False
        assert await seeder.sold_count(category_id) == 0

    @pytest.mark.asyncio
    async def test_reserve_then_release_restores_counts(
        self, uow_factory: Callable[[], SqlAlchemyUnitOfWork], seeder: BookingSeeder
    ) -> None:
        event_id = await seeder.create_event()
        category_id = await seeder.create_category(event_id=event_id, quantity=10, sold_count=2)

        async with uow_factory() as uow:
            await uow.inventory_command_repo.reserve_capacity(
                event_id=event_id, ticket_category_id=category_id, quantity=4
            )
            await uow.commit()

        async with uow_factory() as uow:
            await uow.inventory_command_repo.release_capacity(
                quantities_by_category={category_id: 4}, quantities_by_event={event_id: 4}
            )
            await uow.commit()

        assert await seeder.sold_count(category_id) == 2
        assert await seeder.booked_count(event_id) == 0

    @pytest.mark.asyncio
    async def test_release_more_than_sold_is_internal_error(
        self, uow_factory: Callable[[], SqlAlchemyUnitOfWork], seeder: BookingSeeder
    ) -> None:
        event_id = await seeder.create_event()
        category_id = await seeder.create_category(event_id=event_id, sold_count=1)

        with pytest.raises(InternalError):
            async with uow_factory() as uow:
                await uow.inventory_command_repo.release_capacity(
                    quantities_by_category={category_id: 2}, quantities_by_event={event_id: 2}
                )
                await uow.commit()

        assert await seeder.sold_count(category_id) == 1

    @pytest.mark.asyncio
    async def test_uncommitted_reservation_is_rolled_back(
        self, uow_factory: Callable[[], SqlAlchemyUnitOfWork], seeder: BookingSeeder
    ) -> None:
        event_id = await seeder.create_event()
        category_id = await seeder.create_category(event_id=event_id)

        async with uow_factory() as uow:
            await uow.inventory_command_repo.reserve_capacity(
                event_id=event_id, ticket_category_id=category_id, quantity=3
            )

        assert await seeder.sold_count(category_id) == 0

    @pytest.mark.asyncio
    async def test_sold_count_cannot_exceed_quantity(self, seeder: BookingSeeder) -> None:
        event_id = await seeder.create_event()

        with pytest.raises(IntegrityError):
            await seeder.create_category(event_id=event_id, quantity=5, sold_count=6)
