#!/usr/bin/env python3
"""
Database Reset Script
Drop every booking table and recreate the current schema

Notes:
- This script only resets database structure, does not seed test data
- To seed demo data, run `python -m script.seed_data`
"""

import asyncio

from src.platform.config.core_setting import settings
from src.platform.database.orm_db_setting import (
    Base,
    create_db_and_tables,
    dispose_engine,
    get_engine,
)


async def reset() -> None:
    print(f'🗑️  Resetting {settings.DATABASE_URL_ASYNC.split("@")[-1]}')

    # Register every model before drop_all
    import src.service.event_booking.driven_adapter.model  # noqa: F401

    engine = get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    print('   ✅ Tables dropped')

    await create_db_and_tables(engine)
    print(f'   ✅ Tables created: {", ".join(sorted(Base.metadata.tables))}')

    await dispose_engine()


if __name__ == '__main__':
    asyncio.run(reset())
