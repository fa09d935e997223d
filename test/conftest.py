"""
Test Configuration and Fixtures

This module provides:
- Environment setup before any application module reads settings
- A fresh SQLite database per test (BEGIN IMMEDIATE transactions)
- Seed helpers for events, ticket categories and purchaser profiles
- A Razorpay gateway backed by httpx.MockTransport
- An ASGI client wired against the test database

Architecture:
- Unit tests (test/**/unit/): stub units of work, no database
- Integration tests: real repositories and use cases on SQLite
"""

# =============================================================================
# CRITICAL: Environment setup MUST happen before any other imports
# Settings are read at import time
# =============================================================================
import os
from pathlib import Path
import tempfile


def _early_setup_test_environment() -> None:
    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)

    scratch_dir = Path(tempfile.mkdtemp(prefix='event_booking_test_'))
    os.environ['DATABASE_URL'] = f'sqlite+aiosqlite:///{scratch_dir / "default.db"}'
    os.environ['RAZORPAY_KEY_ID'] = 'rzp_test_key_id'
    os.environ['RAZORPAY_KEY_SECRET'] = 'test_razorpay_key_secret'
    os.environ['RAZORPAY_WEBHOOK_SECRET'] = 'test_razorpay_webhook_secret'
    os.environ['SECRET_KEY'] = 'test_secret_key'


_early_setup_test_environment()

from collections.abc import AsyncGenerator, Callable  # noqa: E402
from uuid import UUID  # noqa: E402

from dependency_injector import providers  # noqa: E402
import httpx  # noqa: E402
import pytest  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker  # noqa: E402

from src.platform.database.orm_db_setting import (  # noqa: E402
    AsyncEngineManager,
    Database,
    create_db_and_tables,
)
from src.platform.database.unit_of_work import SqlAlchemyUnitOfWork  # noqa: E402
from src.service.event_booking.driven_adapter.payment_gateway import (  # noqa: E402
    razorpay_gateway_impl,
)
from src.service.event_booking.driving_adapter.http_controller.auth.jwt_auth import (  # noqa: E402
    JwtAuth,
)
from test.constants import TEST_KEY_ID, TEST_KEY_SECRET, TEST_WEBHOOK_SECRET  # noqa: E402
from test.shared.razorpay_stub import RazorpayStub  # noqa: E402
from test.shared.seeder import BookingSeeder  # noqa: E402


# =============================================================================
# Pytest Hooks
# =============================================================================
def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        markers = {m.name for m in item.iter_markers()}
        if 'unit' not in markers and 'integration' not in markers:
            item.add_marker(pytest.mark.integration)


# =============================================================================
# Database Fixtures
# =============================================================================
@pytest.fixture
async def engine_manager(tmp_path: Path) -> AsyncGenerator[AsyncEngineManager, None]:
    manager = AsyncEngineManager(url=f'sqlite+aiosqlite:///{tmp_path / "event_booking.db"}')
    await create_db_and_tables(manager.get_engine())
    yield manager
    await manager.dispose()


@pytest.fixture
def session_maker(engine_manager: AsyncEngineManager) -> async_sessionmaker[AsyncSession]:
    return engine_manager.get_session_maker()


@pytest.fixture
def uow_factory(
    session_maker: async_sessionmaker[AsyncSession],
) -> Callable[[], SqlAlchemyUnitOfWork]:
    """Each call gives an independent unit of work, as the DI Factory does per request"""

    def _factory() -> SqlAlchemyUnitOfWork:
        return SqlAlchemyUnitOfWork(session_factory=session_maker)

    return _factory


@pytest.fixture
def seeder(session_maker: async_sessionmaker[AsyncSession]) -> BookingSeeder:
    return BookingSeeder(session_maker)


# =============================================================================
# Payment Gateway Fixtures
# =============================================================================
@pytest.fixture
def razorpay_stub() -> RazorpayStub:
    return RazorpayStub()


@pytest.fixture
def payment_gateway(razorpay_stub: RazorpayStub) -> razorpay_gateway_impl.RazorpayGatewayImpl:
    return razorpay_gateway_impl.RazorpayGatewayImpl(
        base_url='https://api.razorpay.test/v1',
        key_id=TEST_KEY_ID,
        key_secret=TEST_KEY_SECRET,
        webhook_secret=TEST_WEBHOOK_SECRET,
        transport=httpx.MockTransport(razorpay_stub.handler),
    )


# =============================================================================
# HTTP Client Fixtures
# =============================================================================
@pytest.fixture
async def client(
    engine_manager: AsyncEngineManager,
    payment_gateway: razorpay_gateway_impl.RazorpayGatewayImpl,
) -> AsyncGenerator[httpx.AsyncClient, None]:
    from src.platform.config.di import container
    from src.platform.config.wire_modules import WIRE_MODULES
    from test.test_main import app

    container.database.override(providers.Object(Database(engine_manager=engine_manager)))
    container.payment_gateway.override(providers.Object(payment_gateway))
    container.reset_singletons()
    container.wire(modules=WIRE_MODULES)

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url='http://testserver') as test_client:
        yield test_client

    container.unwire()
    container.payment_gateway.reset_override()
    container.database.reset_override()
    container.reset_singletons()


@pytest.fixture
def auth_headers() -> Callable[[UUID], dict[str, str]]:
    def _headers(user_id: UUID) -> dict[str, str]:
        token = JwtAuth().create_jwt_token(user_id=user_id)
        return {'Authorization': f'Bearer {token}'}

    return _headers
