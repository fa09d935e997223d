from collections import defaultdict
from datetime import datetime, timezone
from typing import Dict, List, Optional, Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace
from sqlalchemy.exc import SQLAlchemyError

from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import InternalError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.booking_metrics import metrics


class ExpirePendingOrdersUseCase:
    """
    Expiry sweep - release holds whose payment window has passed

    Safe to run repeatedly and concurrently with webhook settlement: only the
    ids returned by the conditional bulk UPDATE contribute to the release, so
    an order settled (or expired by another sweep) in between is never
    released twice.
    """

    def __init__(self, *, uow: AbstractUnitOfWork, batch_size: Optional[int] = None) -> None:
        self.uow = uow
        self.batch_size = batch_size or settings.EXPIRY_SWEEP_BATCH_SIZE
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work]),
    ) -> Self:
        return cls(uow=uow)

    @Logger.io
    async def expire_pending_orders(self, *, now: Optional[datetime] = None) -> int:
        """
        Returns:
            Number of orders this sweep transitioned to expired

        A batch whose release fails is retried one order at a time; orders that
        still fail stay pending and are logged, the rest of the batch expires.
        """
        now = now or datetime.now(timezone.utc)

        with self.tracer.start_as_current_span('use_case.expire_pending_orders') as span:
            async with self.uow:
                candidate_ids = await self.uow.order_command_repo.find_expired_pending_ids(
                    now=now, limit=self.batch_size
                )
            if not candidate_ids:
                return 0

            try:
                expired_count = await self._expire_batch(candidate_ids)
            except (InternalError, SQLAlchemyError) as e:
                Logger.base.warning(
                    f'⚠️ [SWEEP] Batch of {len(candidate_ids)} orders failed ({e!r}), '
                    f'retrying one order at a time'
                )
                expired_count = 0
                skipped: List[UUID] = []
                for order_id in candidate_ids:
                    try:
                        expired_count += await self._expire_batch([order_id])
                    except (InternalError, SQLAlchemyError) as order_error:
                        Logger.base.error(
                            f'❌ [SWEEP] Order {order_id} left pending: {order_error!r}'
                        )
                        skipped.append(order_id)
                span.set_attribute('sweep.skipped_orders', len(skipped))
                metrics.orders_sweep_skipped.inc(len(skipped))

            span.set_attribute('sweep.expired_orders', expired_count)
            return expired_count

    async def _expire_batch(self, order_ids: List[UUID]) -> int:
        async with self.uow:
            expired = await self.uow.order_command_repo.mark_expired(order_ids=order_ids)
            if not expired:
                return 0

            items = await self.uow.order_command_repo.get_items_by_order_ids(
                order_ids=list(expired)
            )
            by_category: Dict[UUID, int] = defaultdict(int)
            by_event: Dict[UUID, int] = defaultdict(int)
            for item in items:
                by_category[item.ticket_category_id] += item.quantity
                by_event[expired[item.order_id]] += item.quantity

            await self.uow.inventory_command_repo.release_capacity(
                quantities_by_category=by_category, quantities_by_event=by_event
            )
            await self.uow.commit()

        released_count = sum(by_category.values())
        metrics.orders_expired.inc(len(expired))
        metrics.record_release(reason='expired', quantity=released_count)
        Logger.base.info(
            f'⏰ [SWEEP] Expired {len(expired)} orders, released {released_count} tickets'
        )
        return len(expired)
