from datetime import datetime, timezone
from typing import Optional, Self

import attrs
from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace
from sqlalchemy.exc import IntegrityError

from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import BadRequestError, InternalError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.booking_metrics import metrics
from src.service.event_booking.app.interface.i_payment_gateway import (
    IPaymentGateway,
    PaymentWebhookEvent,
)
from src.service.event_booking.app.service.ticket_issuer import TicketIssuer
from src.service.event_booking.domain.entity.order_entity import Order


PAYMENT_CAPTURED = 'payment.captured'
PAYMENT_FAILED = 'payment.failed'

# Event type and the payment entity status it must carry to change an order
CAPTURED_STATUS = 'captured'
FAILED_STATUS = 'failed'


@attrs.define(frozen=True)
class SettlementResult:
    success: bool
    message: str


class SettlePaymentUseCase:
    """
    Settle a payment from a gateway webhook

    Every transition is conditional on payment_status='pending'; the first
    delivery (or the first of settle/sweep) wins and every later attempt is
    acknowledged as already processed without touching state.

    payment.captured (status captured): pending -> completed, tickets issued in the same unit
    payment.failed (status failed):     pending -> failed, capacity released in the same unit
    anything else is acknowledged without a state change
    """

    def __init__(
        self,
        *,
        uow: AbstractUnitOfWork,
        payment_gateway: IPaymentGateway,
        ticket_issuer: TicketIssuer,
        max_issue_attempts: Optional[int] = None,
    ) -> None:
        self.uow = uow
        self.payment_gateway = payment_gateway
        self.ticket_issuer = ticket_issuer
        self.max_issue_attempts = max_issue_attempts or settings.TICKET_ISSUE_MAX_ATTEMPTS
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work]),
        payment_gateway: IPaymentGateway = Depends(Provide[Container.payment_gateway]),
        ticket_issuer: TicketIssuer = Depends(Provide[Container.ticket_issuer]),
    ) -> Self:
        return cls(uow=uow, payment_gateway=payment_gateway, ticket_issuer=ticket_issuer)

    @Logger.io
    async def settle_payment(self, *, body: bytes, signature: Optional[str]) -> SettlementResult:
        """
        Args:
            body: Raw request bytes exactly as received
            signature: X-Razorpay-Signature header value

        Raises:
            BadRequestError: Missing or invalid signature, malformed payload
            NotFoundError: No order carries the webhook's gateway order id
            InternalError: Ticket issuance kept colliding; the gateway should redeliver
        """
        with self.tracer.start_as_current_span('use_case.settle_payment') as span:
            if not self.payment_gateway.verify_webhook_signature(body=body, signature=signature):
                Logger.base.warning('🚫 [WEBHOOK] Rejected delivery with invalid signature')
                metrics.record_webhook(event_type='unknown', outcome='rejected')
                raise BadRequestError('Invalid webhook signature')

            webhook = self.payment_gateway.parse_webhook_event(body=body)
            span.set_attribute('webhook.event', webhook.event_type)
            span.set_attribute('webhook.payment_status', webhook.payment_status or '')

            if webhook.event_type == PAYMENT_CAPTURED and webhook.payment_status == CAPTURED_STATUS:
                return await self._settle_captured(webhook=webhook)
            if webhook.event_type == PAYMENT_FAILED and webhook.payment_status == FAILED_STATUS:
                return await self._settle_failed(webhook=webhook)

            Logger.base.info(
                f'📨 [WEBHOOK] No action for event {webhook.event_type} '
                f'with payment status {webhook.payment_status}'
            )
            metrics.record_webhook(event_type=webhook.event_type, outcome='ignored')
            return SettlementResult(success=True, message='Event acknowledged')

    async def _settle_captured(self, *, webhook: PaymentWebhookEvent) -> SettlementResult:
        gateway_order_id = self._require_gateway_order_id(webhook)

        for attempt in range(1, self.max_issue_attempts + 1):
            try:
                async with self.uow:
                    order = await self._get_order(gateway_order_id)
                    if not order.is_pending:
                        return self._already_processed(webhook, order)

                    paid_at = datetime.now(timezone.utc)
                    transitioned = await self.uow.order_command_repo.mark_completed(
                        order_id=order.id,
                        gateway_payment_id=webhook.gateway_payment_id,
                        paid_at=paid_at,
                    )
                    if not transitioned:
                        return self._already_processed(webhook, order)

                    tickets = await self.ticket_issuer.issue_tickets(
                        uow=self.uow, order=order, issued_at=paid_at
                    )
                    await self.uow.commit()
            except IntegrityError as e:
                metrics.ticket_issue_retries.inc()
                Logger.base.warning(
                    f'🔁 [WEBHOOK] Ticket code collision for {gateway_order_id} '
                    f'(attempt {attempt}/{self.max_issue_attempts}): {e.orig!r}'
                )
                continue

            metrics.tickets_issued.inc(len(tickets))
            metrics.record_webhook(event_type=webhook.event_type, outcome='completed')
            Logger.base.info(
                f'✅ [WEBHOOK] Order {order.order_number} completed with {len(tickets)} tickets'
            )
            return SettlementResult(success=True, message='Payment captured, tickets issued')

        Logger.base.error(
            f'❌ [WEBHOOK] Ticket issuance exhausted {self.max_issue_attempts} attempts '
            f'for {gateway_order_id}'
        )
        raise InternalError('Failed to issue tickets')

    async def _settle_failed(self, *, webhook: PaymentWebhookEvent) -> SettlementResult:
        gateway_order_id = self._require_gateway_order_id(webhook)

        async with self.uow:
            order = await self._get_order(gateway_order_id)
            if not order.is_pending:
                return self._already_processed(webhook, order)

            transitioned = await self.uow.order_command_repo.mark_failed(
                order_id=order.id, gateway_payment_id=webhook.gateway_payment_id
            )
            if not transitioned:
                return self._already_processed(webhook, order)

            released = order.quantity_by_category()
            released_count = sum(released.values())
            await self.uow.inventory_command_repo.release_capacity(
                quantities_by_category=released,
                quantities_by_event={order.event_id: released_count},
            )
            await self.uow.commit()

        metrics.record_release(reason='failed', quantity=released_count)
        metrics.record_webhook(event_type=webhook.event_type, outcome='failed')
        Logger.base.info(
            f'💸 [WEBHOOK] Order {order.order_number} failed, released {released_count} tickets'
        )
        return SettlementResult(success=True, message='Payment failure recorded')

    async def _get_order(self, gateway_order_id: str) -> Order:
        order = await self.uow.order_command_repo.get_by_gateway_order_id(
            gateway_order_id=gateway_order_id
        )
        if not order:
            Logger.base.warning(f'❓ [WEBHOOK] No order for gateway order {gateway_order_id}')
            raise NotFoundError('Order not found')
        return order

    @staticmethod
    def _require_gateway_order_id(webhook: PaymentWebhookEvent) -> str:
        if not webhook.gateway_order_id:
            raise BadRequestError('Webhook payload is missing the payment order id')
        return webhook.gateway_order_id

    @staticmethod
    def _already_processed(webhook: PaymentWebhookEvent, order: Order) -> SettlementResult:
        Logger.base.info(
            f'🔂 [WEBHOOK] {webhook.event_type} for order {order.order_number} ignored, '
            f'already {order.payment_status}'
        )
        metrics.record_webhook(event_type=webhook.event_type, outcome='duplicate')
        return SettlementResult(success=True, message='Order already processed')
