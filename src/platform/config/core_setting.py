from pathlib import Path
from typing import Annotated, List, Optional

import orjson
from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


_PROJECT_ROOT = Path(__file__).resolve().parents[3]
_ENV_PATH = _PROJECT_ROOT / '.env'
_ENV_FILE = _ENV_PATH if _ENV_PATH.exists() else (_PROJECT_ROOT / '.env.example')


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_ignore_empty=True,
        extra='ignore',
    )

    PROJECT_NAME: str = 'Campus Event Booking'
    VERSION: str = '0.1.0'
    DEBUG: bool = True  # Set to False in production

    # Security (tokens are issued by the auth service, only verified here)
    SECRET_KEY: SecretStr = SecretStr('test_secret_key_change_in_production')
    ALGORITHM: str = 'HS256'

    # CORS
    BACKEND_CORS_ORIGINS: Annotated[List[str], NoDecode] = []  # comma separated or a JSON list

    @field_validator('BACKEND_CORS_ORIGINS', mode='before')
    @classmethod
    def assemble_cors_origins(cls, v: str | List[str]) -> List[str]:
        if isinstance(v, str) and v.strip().startswith('['):
            return [str(origin) for origin in orjson.loads(v)]
        elif isinstance(v, str):
            return [i.strip() for i in v.split(',') if i.strip()]
        elif isinstance(v, list):
            return v
        return []

    # PostgreSQL
    POSTGRES_SERVER: str = 'localhost'
    POSTGRES_USER: str = 'postgres'
    POSTGRES_PASSWORD: SecretStr = SecretStr('postgres')
    POSTGRES_DB: str = 'campus_event_booking'
    POSTGRES_PORT: int = 5432
    DATABASE_URL: Optional[str] = None  # Full override, e.g. sqlite+aiosqlite:///./dev.db

    # Connection pool (ignored by SQLite)
    DB_POOL_SIZE: int = 10
    DB_POOL_MAX_OVERFLOW: int = 10
    DB_POOL_TIMEOUT: int = 30  # seconds
    DB_POOL_RECYCLE: int = 1800  # seconds
    DB_POOL_PRE_PING: bool = True

    @property
    def DATABASE_URL_ASYNC(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        password = self.POSTGRES_PASSWORD.get_secret_value()
        return f'postgresql+asyncpg://{self.POSTGRES_USER}:{password}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}'

    # Razorpay payment gateway
    RAZORPAY_BASE_URL: str = 'https://api.razorpay.com/v1'
    RAZORPAY_KEY_ID: str = 'rzp_test_key_id'
    RAZORPAY_KEY_SECRET: SecretStr = SecretStr('test_razorpay_key_secret')
    RAZORPAY_WEBHOOK_SECRET: SecretStr = SecretStr('test_razorpay_webhook_secret')
    PAYMENT_GATEWAY_TIMEOUT_SECONDS: float = 10.0
    PAYMENT_CURRENCY: str = 'INR'

    # Booking engine
    ORDER_HOLD_MINUTES: int = 10  # Reservation hold before the sweeper releases it
    EXPIRY_SWEEP_BATCH_SIZE: int = 500
    TICKET_ISSUE_MAX_ATTEMPTS: int = 3  # Retries on ticket number / redemption code collision
    DEFAULT_PAGE_LIMIT: int = 10
    MAX_PAGE_LIMIT: int = 20


settings = Settings()  # type: ignore
