from pathlib import Path
from typing import List

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


_PROJECT_ROOT = Path(__file__).resolve().parents[3]
_ENV_PATH = _PROJECT_ROOT / '.env'
_ENV_FILE = _ENV_PATH if _ENV_PATH.exists() else (_PROJECT_ROOT / '.env.example')


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_ignore_empty=True,
        extra='ignore',
    )

    PROJECT_NAME: str = 'Event Commerce'
    VERSION: str = '0.1.0'
    DEBUG: bool = True  # Set to False in production

    # Database
    POSTGRES_SERVER: str = 'localhost'
    POSTGRES_USER: str = 'postgres'
    POSTGRES_PASSWORD: SecretStr = SecretStr('postgres')
    POSTGRES_DB: str = 'event_commerce'
    POSTGRES_PORT: int = 5432
    POSTGRES_REPLICA_SERVER: str | None = None
    POSTGRES_REPLICA_PORT: int | None = None

    DB_POOL_SIZE_WRITE: int = 10
    DB_POOL_SIZE_READ: int = 20
    DB_POOL_MAX_OVERFLOW: int = 10
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 1800
    DB_POOL_PRE_PING: bool = True

    @property
    def DATABASE_URL_ASYNC(self) -> str:
        password = self.POSTGRES_PASSWORD.get_secret_value()
        return f'postgresql+asyncpg://{self.POSTGRES_USER}:{password}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}'

    @property
    def DATABASE_READ_URL_ASYNC(self) -> str:
        if not self.POSTGRES_REPLICA_SERVER:
            return self.DATABASE_URL_ASYNC
        password = self.POSTGRES_PASSWORD.get_secret_value()
        port = self.POSTGRES_REPLICA_PORT or self.POSTGRES_PORT
        return f'postgresql+asyncpg://{self.POSTGRES_USER}:{password}@{self.POSTGRES_REPLICA_SERVER}:{port}/{self.POSTGRES_DB}'

    # Security (staff bearer tokens)
    SECRET_KEY: SecretStr = SecretStr('test_secret_key_change_in_production')
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30
    ALGORITHM: str = 'HS256'

    # CORS
    BACKEND_CORS_ORIGINS: List[str] = []  # add your frontend URL here

    @field_validator('BACKEND_CORS_ORIGINS', mode='before')
    @classmethod
    def assemble_cors_origins(cls, v: str | List[str]) -> List[str]:
        if isinstance(v, str) and not v.startswith('['):
            return [i.strip() for i in v.split(',')]
        elif isinstance(v, list):
            return v
        return []

    # Payment processor
    PAYMENT_PROCESSOR_NAME: str = 'stripe'
    STRIPE_API_KEY: SecretStr = SecretStr('sk_test_change_me')
    STRIPE_CURRENCY: str = 'usd'

    # Order tokens (customer ticket pages)
    ORDER_TOKEN_SECRET: SecretStr = SecretStr('test_order_token_secret')
    ORDER_TOKEN_ISSUER: str = 'event-commerce'
    ORDER_TOKEN_AUDIENCE: str = 'tickets'

    # Order lifecycle
    ORDER_PERSIST_ATTEMPTS: int = 3
    FOLLOW_UP_MAX_ATTEMPTS: int = 5
    CHECK_IN_GRACE_PERIOD_HOURS: int = 240  # doors may scan up to 10 days early

    # Mailing list
    MAILING_LIST_ID: str = 'attendees'
    PURCHASER_TAG: str = 'Attendee'
    TRANSFEREE_TAG: str = 'Attendee'
    PARTNER_MARKETING_TAG: str = 'Partner Marketing'


settings = Settings()  # type: ignore
