"""
Wire Modules Configuration

Defines the modules that need dependency injection wiring.
Shared between production and test environments.
"""

from types import ModuleType

from src.service.event_booking.app.command import (
    expire_pending_orders_use_case,
    reserve_tickets_use_case,
    settle_payment_use_case,
)
from src.service.event_booking.app.query import (
    get_my_ticket_use_case,
    list_my_orders_use_case,
    list_my_tickets_use_case,
)
from src.service.event_booking.driving_adapter.http_controller.auth import current_user


WIRE_MODULES: list[ModuleType] = [
    reserve_tickets_use_case,
    settle_payment_use_case,
    expire_pending_orders_use_case,
    list_my_orders_use_case,
    list_my_tickets_use_case,
    get_my_ticket_use_case,
    current_user,
]
