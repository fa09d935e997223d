from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from opentelemetry import trace

from src.platform.logging.loguru_io import Logger
from src.service.event_booking.app.command.reserve_tickets_use_case import ReserveTicketsUseCase
from src.service.event_booking.app.query.get_my_ticket_use_case import GetMyTicketUseCase
from src.service.event_booking.app.query.list_my_orders_use_case import ListMyOrdersUseCase
from src.service.event_booking.app.query.list_my_tickets_use_case import ListMyTicketsUseCase
from src.service.event_booking.driving_adapter.http_controller.auth.current_user import (
    get_current_user_id,
)
from src.service.event_booking.driving_adapter.http_controller.schema.booking_schema import (
    GatewayCheckoutResponse,
    OrderListResponse,
    OrderSummaryResponse,
    PaginationResponse,
    ReservationResponse,
    ReserveTicketsRequest,
    TicketCategoryBlock,
    TicketDetailResponse,
    TicketListResponse,
    TicketOrderBlock,
    TicketSummaryResponse,
)


router = APIRouter()
tracer = trace.get_tracer(__name__)


@router.post('/{event_id}/book', status_code=status.HTTP_201_CREATED)
@Logger.io
async def book_tickets(
    event_id: UUID,
    request: ReserveTicketsRequest,
    user_id: UUID = Depends(get_current_user_id),
    use_case: ReserveTicketsUseCase = Depends(ReserveTicketsUseCase.depends),
) -> ReservationResponse:
    with tracer.start_as_current_span('controller.book_tickets') as span:
        span.set_attribute('event_id', str(event_id))
        span.set_attribute('user_id', str(user_id))

        reservation = await use_case.reserve_tickets(
            event_id=event_id,
            ticket_category_id=request.ticket_category_id,
            quantity=request.quantity,
            user_id=user_id,
        )
        order = reservation.order
        span.set_attribute('order.id', str(order.id))

        return ReservationResponse(
            order_id=order.id,
            order_number=order.order_number,
            event_id=order.event_id,
            ticket_category_id=reservation.ticket_category_id,
            quantity=reservation.quantity,
            ticket_price=reservation.ticket_price,
            subtotal=order.subtotal,
            platform_fee=order.platform_fee,
            total_amount=order.total_amount,
            payment_status=order.payment_status.value,
            expires_at=order.expires_at,  # type: ignore[arg-type]
            created_at=order.created_at,  # type: ignore[arg-type]
            gateway=GatewayCheckoutResponse(
                order_id=reservation.gateway.order_id,
                key_id=reservation.gateway.key_id,
                amount=reservation.gateway.amount,
                currency=reservation.gateway.currency,
            ),
        )


@router.get('/my_orders')
@Logger.io
async def list_my_orders(
    page: Optional[int] = Query(default=None, ge=1),
    limit: Optional[int] = Query(default=None, ge=1),
    user_id: UUID = Depends(get_current_user_id),
    use_case: ListMyOrdersUseCase = Depends(ListMyOrdersUseCase.depends),
) -> OrderListResponse:
    result = await use_case.list_my_orders(user_id=user_id, page=page, limit=limit)
    return OrderListResponse(
        orders=[
            OrderSummaryResponse(
                id=order.id,
                order_number=order.order_number,
                event_id=order.event_id,
                event_name=order.event_name,
                ticket_title=order.ticket_title,
                total_tickets=order.total_tickets,
                price_per_ticket=order.price_per_ticket,
                subtotal=order.subtotal,
                platform_fee=order.platform_fee,
                total_amount=order.total_amount,
                payment_status=order.payment_status.value,
                gateway_payment_id=order.gateway_payment_id,
                created_at=order.created_at,
                expires_at=order.expires_at,
                paid_at=order.paid_at,
            )
            for order in result.items
        ],
        pagination=PaginationResponse(
            page=result.page, limit=result.limit, total=result.total, total_pages=result.total_pages
        ),
    )


@router.get('/my_tickets')
@Logger.io
async def list_my_tickets(
    page: Optional[int] = Query(default=None, ge=1),
    limit: Optional[int] = Query(default=None, ge=1),
    user_id: UUID = Depends(get_current_user_id),
    use_case: ListMyTicketsUseCase = Depends(ListMyTicketsUseCase.depends),
) -> TicketListResponse:
    result = await use_case.list_my_tickets(user_id=user_id, page=page, limit=limit)
    return TicketListResponse(
        tickets=[
            TicketSummaryResponse(
                id=ticket.id,
                order_id=ticket.order_id,
                event_id=ticket.event_id,
                event_name=ticket.event_name,
                ticket_title=ticket.ticket_title,
                ticket_number=ticket.ticket_number,
                redemption_code=ticket.redemption_code,
                attendee_name=ticket.attendee_name,
                status=ticket.status.value,
                created_at=ticket.created_at,
            )
            for ticket in result.items
        ],
        pagination=PaginationResponse(
            page=result.page, limit=result.limit, total=result.total, total_pages=result.total_pages
        ),
    )


@router.get('/my_tickets/{ticket_id}')
@Logger.io
async def get_my_ticket(
    ticket_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    use_case: GetMyTicketUseCase = Depends(GetMyTicketUseCase.depends),
) -> TicketDetailResponse:
    ticket = await use_case.get_my_ticket(user_id=user_id, ticket_id=ticket_id)
    return TicketDetailResponse(
        id=ticket.id,
        ticket_number=ticket.ticket_number,
        redemption_code=ticket.redemption_code,
        attendee_name=ticket.attendee_name,
        attendee_email=ticket.attendee_email,
        attendee_phone=ticket.attendee_phone,
        status=ticket.status.value,
        created_at=ticket.created_at,
        event_id=ticket.event_id,
        event_name=ticket.event_name,
        category=TicketCategoryBlock(
            id=ticket.ticket_category_id,
            ticket_title=ticket.ticket_title,
            price=ticket.ticket_price,
        ),
        order=TicketOrderBlock(
            id=ticket.order_id,
            order_number=ticket.order_number,
            total_amount=ticket.total_amount,
            payment_status=ticket.payment_status.value,
            created_at=ticket.order_created_at,
        ),
    )
