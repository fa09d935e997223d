"""
Database Models

Import all models here to ensure they are registered with SQLAlchemy
"""

from src.service.event_booking.driven_adapter.model.event_model import EventModel
from src.service.event_booking.driven_adapter.model.order_model import OrderItemModel, OrderModel
from src.service.event_booking.driven_adapter.model.ticket_category_model import (
    TicketCategoryModel,
)
from src.service.event_booking.driven_adapter.model.ticket_model import TicketModel
from src.service.event_booking.driven_adapter.model.user_profile_model import UserProfileModel

__all__ = [
    'EventModel',
    'OrderItemModel',
    'OrderModel',
    'TicketCategoryModel',
    'TicketModel',
    'UserProfileModel',
]
