#!/usr/bin/env python3
"""
Expiry Sweep Entrypoint

Runs one sweep (or loops with --interval) outside the web process, for
schedulers that prefer a command over POST /api/payment/expire_orders.
"""

import argparse
import asyncio

from src.platform.config.di import container
from src.platform.database.orm_db_setting import dispose_engine
from src.platform.logging.loguru_io import Logger
from src.service.event_booking.app.command.expire_pending_orders_use_case import (
    ExpirePendingOrdersUseCase,
)


async def run(*, interval: float | None) -> None:
    use_case = ExpirePendingOrdersUseCase(uow=container.unit_of_work())
    try:
        while True:
            expired_count = await use_case.expire_pending_orders()
            Logger.base.info(f'⏰ [SWEEP] Run finished, expired_count={expired_count}')
            if interval is None:
                break
            await asyncio.sleep(interval)
    finally:
        await dispose_engine()


def main() -> None:
    parser = argparse.ArgumentParser(description='Expire pending orders past their hold')
    parser.add_argument(
        '--interval', type=float, default=None, help='Repeat every N seconds instead of once'
    )
    args = parser.parse_args()
    asyncio.run(run(interval=args.interval))


if __name__ == '__main__':
    main()
