#!/usr/bin/env python3
"""
Database Seed Script
Populate demo data into the database

Features:
1. Create tables if missing
2. Create a purchaser profile and print a bearer token for it
3. Create a published event with two ticket categories

Notes:
- Event and category CRUD belongs to event management; rows are inserted directly
- Run with DATABASE_URL=sqlite+aiosqlite:///./dev.db for a local file database
"""

import asyncio
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from uuid_utils.compat import uuid7

from src.platform.database.orm_db_setting import (
    create_db_and_tables,
    dispose_engine,
    get_session_maker,
)
from src.service.event_booking.domain.enum.event_status import EventStatus, PlatformFeeType
from src.service.event_booking.driven_adapter.model.event_model import EventModel
from src.service.event_booking.driven_adapter.model.ticket_category_model import (
    TicketCategoryModel,
)
from src.service.event_booking.driven_adapter.model.user_profile_model import UserProfileModel
from src.service.event_booking.driving_adapter.http_controller.auth.jwt_auth import JwtAuth


@dataclass
class CategoryConfig:
    """Ticket category seed configuration"""

    ticket_title: str
    price: Decimal
    quantity: int
    max_per_order: int = 6


DEMO_CATEGORIES = [
    CategoryConfig(ticket_title='General Admission', price=Decimal('199.00'), quantity=200),
    CategoryConfig(ticket_title='Front Row', price=Decimal('499.00'), quantity=20, max_per_order=2),
]


async def seed() -> None:
    await create_db_and_tables()
    session_maker = get_session_maker()
    now = datetime.now(timezone.utc)

    user_id = uuid7()
    event_id = uuid7()
    category_ids = []

    async with session_maker() as session:
        session.add(
            UserProfileModel(
                id=user_id,
                full_name='Demo Student',
                email='student@example.com',
                mobile='9000000000',
            )
        )
        session.add(
            EventModel(
                id=event_id,
                name='Campus Tech Fest',
                status=EventStatus.PUBLISHED.value,
                is_active=True,
                platform_fee_type=PlatformFeeType.PERCENTAGE.value,
                platform_fee_percentage=Decimal('5'),
                platform_fee_fixed=Decimal('0'),
                booked_count=0,
            )
        )
        await session.flush()

        for config in DEMO_CATEGORIES:
            category_id = uuid7()
            category_ids.append((config.ticket_title, category_id))
            session.add(
                TicketCategoryModel(
                    id=category_id,
                    event_id=event_id,
                    ticket_title=config.ticket_title,
                    price=config.price,
                    quantity=config.quantity,
                    sold_count=0,
                    sale_start_date=now - timedelta(days=1),
                    sale_end_date=now + timedelta(days=30),
                    min_per_order=1,
                    max_per_order=config.max_per_order,
                    is_active=True,
                )
            )
        await session.commit()

    print('🌱 Seed complete')
    print(f'   event_id: {event_id}')
    for title, category_id in category_ids:
        print(f'   {title}: {category_id}')
    print(f'   bearer token: {JwtAuth().create_jwt_token(user_id=user_id)}')

    await dispose_engine()


if __name__ == '__main__':
    asyncio.run(seed())
