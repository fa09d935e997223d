from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field


class ReserveTicketsRequest(BaseModel):
    ticket_category_id: UUID
    quantity: int = Field(gt=0)

    model_config = {
        'json_schema_extra': {
            'example': {
                'ticket_category_id': '01936d8f-5e73-7c4e-a9c5-123456789abc',
                'quantity': 2,
            }
        },
    }


class GatewayCheckoutResponse(BaseModel):
    order_id: str
    key_id: str
    amount: int  # Minor units (paise)
    currency: str


class ReservationResponse(BaseModel):
    model_config = {
        'json_schema_extra': {
            'example': {
                'order_id': '01936d8f-5e73-7c4e-a9c5-123456789abc',
                'order_number': 'ORD-1735689600000-9F2C41AB',
                'event_id': '01936d8f-0000-7000-8000-000000000001',
                'ticket_category_id': '01936d8f-0000-7000-8000-000000000002',
                'quantity': 2,
                'ticket_price': '100.00',
                'subtotal': '200.00',
                'platform_fee': '10.00',
                'total_amount': '210.00',
                'payment_status': 'pending',
                'expires_at': '2025-01-01T00:10:00Z',
                'created_at': '2025-01-01T00:00:00Z',
                'gateway': {
                    'order_id': 'order_Nx1abc',
                    'key_id': 'rzp_test_key_id',
                    'amount': 21000,
                    'currency': 'INR',
                },
            }
        },
    }

    order_id: UUID
    order_number: str
    event_id: UUID
    ticket_category_id: UUID
    quantity: int
    ticket_price: Decimal
    subtotal: Decimal
    platform_fee: Decimal
    total_amount: Decimal
    payment_status: str
    expires_at: datetime
    created_at: datetime
    gateway: GatewayCheckoutResponse


class OrderSummaryResponse(BaseModel):
    id: UUID
    order_number: str
    event_id: UUID
    event_name: str
    ticket_title: Optional[str] = None
    total_tickets: int
    price_per_ticket: Optional[Decimal] = None
    subtotal: Decimal
    platform_fee: Decimal
    total_amount: Decimal
    payment_status: str
    gateway_payment_id: Optional[str] = None
    created_at: datetime
    expires_at: Optional[datetime] = None
    paid_at: Optional[datetime] = None


class TicketSummaryResponse(BaseModel):
    id: UUID
    order_id: UUID
    event_id: UUID
    event_name: str
    ticket_title: str
    ticket_number: str
    redemption_code: str
    attendee_name: str
    status: str
    created_at: datetime


class PaginationResponse(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int


class OrderListResponse(BaseModel):
    orders: List[OrderSummaryResponse]
    pagination: PaginationResponse


class TicketListResponse(BaseModel):
    tickets: List[TicketSummaryResponse]
    pagination: PaginationResponse


class TicketCategoryBlock(BaseModel):
    id: UUID
    ticket_title: str
    price: Decimal


class TicketOrderBlock(BaseModel):
    id: UUID
    order_number: str
    total_amount: Decimal
    payment_status: str
    created_at: datetime


class TicketDetailResponse(BaseModel):
    id: UUID
    ticket_number: str
    redemption_code: str
    attendee_name: str
    attendee_email: Optional[str] = None
    attendee_phone: Optional[str] = None
    status: str
    created_at: datetime
    event_id: UUID
    event_name: str
    category: TicketCategoryBlock
    order: TicketOrderBlock
