"""
Unit tests for RazorpayGatewayImpl

Orders API calls go through httpx.MockTransport; webhook signatures use the
test webhook secret.
"""

import base64

import httpx
import orjson
import pytest

from src.platform.exception.exceptions import BadRequestError, PaymentGatewayError
from src.service.event_booking.driven_adapter.payment_gateway.razorpay_gateway_impl import (
    RazorpayGatewayImpl,
    compute_webhook_signature,
)
from test.constants import (
    PAYMENT_CAPTURED_EVENT,
    TEST_GATEWAY_ORDER_PREFIX,
    TEST_KEY_ID,
    TEST_KEY_SECRET,
    TEST_WEBHOOK_SECRET,
)
from test.shared.razorpay_stub import RazorpayStub, build_webhook


@pytest.mark.unit
class TestCreateOrder:
    @pytest.mark.asyncio
    async def test_posts_amount_in_minor_units_with_basic_auth(
        self, payment_gateway: RazorpayGatewayImpl, razorpay_stub: RazorpayStub
    ) -> None:
        order = await payment_gateway.create_order(
            amount=10500, currency='INR', receipt='ORD-1-ABCDEF12', notes={'order_id': 'x'}
        )

        assert order.id.startswith(TEST_GATEWAY_ORDER_PREFIX)
        assert order.amount == 10500
        assert order.currency == 'INR'

        request = razorpay_stub.requests[0]
        assert request['url'] == 'https://api.razorpay.test/v1/orders'
        assert request['json'] == {
            'amount': 10500,
            'currency': 'INR',
            'receipt': 'ORD-1-ABCDEF12',
            'notes': {'order_id': 'x'},
        }
        expected_auth = base64.b64encode(f'{TEST_KEY_ID}:{TEST_KEY_SECRET}'.encode()).decode()
        assert request['headers']['authorization'] == f'Basic {expected_auth}'

    @pytest.mark.asyncio
    async def test_error_status_raises_gateway_error(
        self, payment_gateway: RazorpayGatewayImpl, razorpay_stub: RazorpayStub
    ) -> None:
        razorpay_stub.fail_with_status = 401

        with pytest.raises(PaymentGatewayError, match='Failed to create payment order'):
            await payment_gateway.create_order(amount=100, currency='INR', receipt='ORD-2')

    @pytest.mark.asyncio
    async def test_transport_error_raises_gateway_error(
        self, payment_gateway: RazorpayGatewayImpl, razorpay_stub: RazorpayStub
    ) -> None:
        razorpay_stub.raise_transport_error = True

        with pytest.raises(PaymentGatewayError):
            await payment_gateway.create_order(amount=100, currency='INR', receipt='ORD-3')

    @pytest.mark.asyncio
    async def test_response_without_id_is_rejected(self) -> None:
        gateway = RazorpayGatewayImpl(
            base_url='https://api.razorpay.test/v1',
            key_id=TEST_KEY_ID,
            key_secret=TEST_KEY_SECRET,
            webhook_secret=TEST_WEBHOOK_SECRET,
            transport=httpx.MockTransport(lambda request: httpx.Response(200, json={})),
        )

        with pytest.raises(PaymentGatewayError, match='Unexpected payment gateway response'):
            await gateway.create_order(amount=100, currency='INR', receipt='ORD-4')


@pytest.mark.unit
class TestWebhookSignature:
    def test_valid_signature(self, payment_gateway: RazorpayGatewayImpl) -> None:
        body, signature = build_webhook(event=PAYMENT_CAPTURED_EVENT, gateway_order_id='order_1')

        assert payment_gateway.verify_webhook_signature(body=body, signature=signature)

    def test_signature_from_other_secret(self, payment_gateway: RazorpayGatewayImpl) -> None:
        body, signature = build_webhook(
            event=PAYMENT_CAPTURED_EVENT, gateway_order_id='order_1', secret='someone_else'
        )

        assert not payment_gateway.verify_webhook_signature(body=body, signature=signature)

    def test_signature_over_modified_body(self, payment_gateway: RazorpayGatewayImpl) -> None:
        body, signature = build_webhook(event=PAYMENT_CAPTURED_EVENT, gateway_order_id='order_1')

        tampered = body.replace(b'order_1', b'order_2')

        assert not payment_gateway.verify_webhook_signature(body=tampered, signature=signature)

    @pytest.mark.parametrize('signature', [None, ''])
    def test_missing_signature(
        self, payment_gateway: RazorpayGatewayImpl, signature: str | None
    ) -> None:
        assert not payment_gateway.verify_webhook_signature(body=b'{}', signature=signature)

    def test_signature_is_hex_hmac_sha256(self) -> None:
        signature = compute_webhook_signature(body=b'{}', secret='secret')

        assert len(signature) == 64
        int(signature, 16)


@pytest.mark.unit
class TestParseWebhookEvent:
    def test_payment_entity_fields(self, payment_gateway: RazorpayGatewayImpl) -> None:
        body, _ = build_webhook(
            event=PAYMENT_CAPTURED_EVENT, gateway_order_id='order_9', payment_id='pay_9'
        )

        event = payment_gateway.parse_webhook_event(body=body)

        assert event.event_type == PAYMENT_CAPTURED_EVENT
        assert event.gateway_order_id == 'order_9'
        assert event.gateway_payment_id == 'pay_9'
        assert event.payment_status == 'captured'

    def test_event_without_payment_entity(self, payment_gateway: RazorpayGatewayImpl) -> None:
        event = payment_gateway.parse_webhook_event(
            body=orjson.dumps({'event': 'order.paid', 'payload': {}})
        )

        assert event.event_type == 'order.paid'
        assert event.gateway_order_id is None

    @pytest.mark.parametrize('body', [b'not json', b'[]', b'{"payload": {}}'])
    def test_malformed_payload(self, payment_gateway: RazorpayGatewayImpl, body: bytes) -> None:
        with pytest.raises(BadRequestError, match='Malformed webhook payload'):
            payment_gateway.parse_webhook_event(body=body)
