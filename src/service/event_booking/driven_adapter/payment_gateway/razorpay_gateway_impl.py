"""
Razorpay Payment Gateway

Orders API:  POST {RAZORPAY_BASE_URL}/orders  (HTTP Basic key_id:key_secret)
Webhooks:    X-Razorpay-Signature = hex(HMAC-SHA256(webhook_secret, raw body))
"""

import hashlib
import hmac
from typing import Any, Mapping, Optional

import httpx
import orjson

from src.platform.exception.exceptions import BadRequestError, PaymentGatewayError
from src.platform.logging.loguru_io import Logger
from src.service.event_booking.app.interface.i_payment_gateway import (
    GatewayOrder,
    IPaymentGateway,
    PaymentWebhookEvent,
)


def compute_webhook_signature(*, body: bytes, secret: str) -> str:
    return hmac.new(secret.encode(), body, hashlib.sha256).hexdigest()


class RazorpayGatewayImpl(IPaymentGateway):
    def __init__(
        self,
        *,
        base_url: str,
        key_id: str,
        key_secret: str,
        webhook_secret: str,
        timeout_seconds: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip('/')
        self._key_id = key_id
        self._key_secret = key_secret
        self._webhook_secret = webhook_secret
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    @property
    def key_id(self) -> str:
        return self._key_id

    @Logger.io
    async def create_order(
        self,
        *,
        amount: int,
        currency: str,
        receipt: str,
        notes: Optional[Mapping[str, str]] = None,
    ) -> GatewayOrder:
        payload = {
            'amount': amount,
            'currency': currency,
            'receipt': receipt,
            'notes': dict(notes or {}),
        }

        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                auth=(self._key_id, self._key_secret),
                timeout=self.timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.post(
                    '/orders',
                    content=orjson.dumps(payload),
                    headers={'Content-Type': 'application/json'},
                )
        except httpx.HTTPError as e:
            Logger.base.error(f'💳 [RAZORPAY] Order request failed for {receipt}: {e!r}')
            raise PaymentGatewayError('Failed to create payment order') from e

        if response.is_error:
            Logger.base.error(
                f'💳 [RAZORPAY] Order creation rejected for {receipt}: '
                f'status={response.status_code} reason={self._error_description(response)}'
            )
            raise PaymentGatewayError('Failed to create payment order')

        try:
            body = orjson.loads(response.content)
            return GatewayOrder(
                id=body['id'],
                amount=int(body.get('amount', amount)),
                currency=body.get('currency', currency),
            )
        except (orjson.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            raise PaymentGatewayError('Unexpected payment gateway response') from e

    def verify_webhook_signature(self, *, body: bytes, signature: Optional[str]) -> bool:
        if not signature:
            return False
        expected = compute_webhook_signature(body=body, secret=self._webhook_secret)
        return hmac.compare_digest(expected, signature)

    def parse_webhook_event(self, *, body: bytes) -> PaymentWebhookEvent:
        try:
            data = orjson.loads(body)
        except orjson.JSONDecodeError as e:
            raise BadRequestError('Malformed webhook payload') from e

        if not isinstance(data, dict) or not isinstance(data.get('event'), str):
            raise BadRequestError('Malformed webhook payload')

        payment = self._payment_entity(data)
        return PaymentWebhookEvent(
            event_type=data['event'],
            gateway_order_id=payment.get('order_id'),
            gateway_payment_id=payment.get('id'),
            payment_status=payment.get('status'),
        )

    @staticmethod
    def _payment_entity(data: dict[str, Any]) -> dict[str, Any]:
        payload = data.get('payload')
        if not isinstance(payload, dict):
            return {}
        payment = payload.get('payment')
        if not isinstance(payment, dict):
            return {}
        entity = payment.get('entity')
        return entity if isinstance(entity, dict) else {}

    @staticmethod
    def _error_description(response: httpx.Response) -> str:
        try:
            error = orjson.loads(response.content).get('error', {})
            return error.get('description', 'Unknown error')
        except (orjson.JSONDecodeError, AttributeError):
            return 'Unknown error'
