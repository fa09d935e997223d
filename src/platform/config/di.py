"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/examples/fastapi-sqlalchemy.html
"""

from dependency_injector import containers, providers

from src.platform.config.core_setting import Settings
from src.platform.database.orm_db_setting import Database
from src.platform.database.unit_of_work import SqlAlchemyUnitOfWork
from src.service.event_booking.app.service.ticket_issuer import TicketIssuer
from src.service.event_booking.driven_adapter.payment_gateway.razorpay_gateway_impl import (
    RazorpayGatewayImpl,
)
from src.service.event_booking.driven_adapter.repo.booking_query_repo_impl import (
    BookingQueryRepoImpl,
)
from src.service.event_booking.driving_adapter.http_controller.auth.jwt_auth import JwtAuth


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    # Database (uses AsyncEngineManager with settings from config_service)
    database = providers.Singleton(Database)

    # Unit of Work (one per request; each `async with` opens its own session)
    unit_of_work = providers.Factory(
        SqlAlchemyUnitOfWork,
        session_factory=database.provided.engine_manager.get_session_maker.call(),
    )

    # Repositories (stateless - use session_factory per-request)
    booking_query_repo = providers.Singleton(
        BookingQueryRepoImpl, session_factory=database.provided.session
    )

    # Payment gateway
    payment_gateway = providers.Singleton(
        RazorpayGatewayImpl,
        base_url=config_service.provided.RAZORPAY_BASE_URL,
        key_id=config_service.provided.RAZORPAY_KEY_ID,
        key_secret=config_service.provided.RAZORPAY_KEY_SECRET.get_secret_value.call(),
        webhook_secret=config_service.provided.RAZORPAY_WEBHOOK_SECRET.get_secret_value.call(),
        timeout_seconds=config_service.provided.PAYMENT_GATEWAY_TIMEOUT_SECONDS,
    )

    # Domain services
    ticket_issuer = providers.Singleton(TicketIssuer)

    # Auth service
    jwt_auth = providers.Singleton(JwtAuth)


container = Container()


def setup() -> None:
    container.config_service()


def cleanup() -> None:
    container.reset_singletons()
