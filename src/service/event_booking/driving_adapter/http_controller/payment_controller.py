from typing import Optional

from fastapi import APIRouter, Depends, Header, Request

from src.platform.constant.route_constant import RAZORPAY_SIGNATURE_HEADER
from src.platform.logging.loguru_io import Logger
from src.service.event_booking.app.command.expire_pending_orders_use_case import (
    ExpirePendingOrdersUseCase,
)
from src.service.event_booking.app.command.settle_payment_use_case import SettlePaymentUseCase
from src.service.event_booking.driving_adapter.http_controller.schema.payment_schema import (
    ExpireOrdersResponse,
    WebhookResponse,
)


router = APIRouter()


@router.post('/webhook/razorpay')
@Logger.io
async def razorpay_webhook(
    request: Request,
    signature: Optional[str] = Header(default=None, alias=RAZORPAY_SIGNATURE_HEADER),
    use_case: SettlePaymentUseCase = Depends(SettlePaymentUseCase.depends),
) -> WebhookResponse:
    # Signature covers the exact bytes sent; read them before any parsing
    body = await request.body()
    result = await use_case.settle_payment(body=body, signature=signature)
    return WebhookResponse(success=result.success, message=result.message)


@router.post('/expire_orders')
@Logger.io
async def expire_orders(
    use_case: ExpirePendingOrdersUseCase = Depends(ExpirePendingOrdersUseCase.depends),
) -> ExpireOrdersResponse:
    expired_count = await use_case.expire_pending_orders()
    return ExpireOrdersResponse(
        expired_count=expired_count,
        message=f'Expired {expired_count} pending orders',
    )
