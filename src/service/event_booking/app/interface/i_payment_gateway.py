from abc import ABC, abstractmethod
from typing import Mapping, Optional

import attrs


@attrs.define(frozen=True)
class GatewayOrder:
    id: str
    amount: int  # Minor units
    currency: str


@attrs.define(frozen=True)
class PaymentWebhookEvent:
    event_type: str
    gateway_order_id: Optional[str] = None
    gateway_payment_id: Optional[str] = None
    payment_status: Optional[str] = None


class IPaymentGateway(ABC):
    @property
    @abstractmethod
    def key_id(self) -> str:
        """Public key the client checkout needs alongside the gateway order id"""
        pass

    @abstractmethod
    async def create_order(
        self,
        *,
        amount: int,
        currency: str,
        receipt: str,
        notes: Optional[Mapping[str, str]] = None,
    ) -> GatewayOrder:
        """
        Open a payment order on the gateway

        Raises:
            PaymentGatewayError: transport failure, timeout or non-2xx response
        """
        pass

    @abstractmethod
    def verify_webhook_signature(self, *, body: bytes, signature: Optional[str]) -> bool:
        """Verify the signature against the exact raw request bytes"""
        pass

    @abstractmethod
    def parse_webhook_event(self, *, body: bytes) -> PaymentWebhookEvent:
        """
        Raises:
            BadRequestError: body is not a well-formed webhook payload
        """
        pass
