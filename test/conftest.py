"""
Test Configuration and Fixtures

- Environment setup that must happen before application modules read settings
- `client`: TestClient over the test app (no database, DI wired)
- Operator bearer tokens for the admin / doorman roles
- Test database setup and cleanup for integration tests

Architecture:
- Unit tests (test/**/unit/): never touch a database, use cases run against a
  FakeUnitOfWork whose repositories are AsyncMocks or small in-memory fakes
- API tests: the test app with use cases replaced through dependency_overrides
- Integration tests (@pytest.mark.integration): real PostgreSQL, schema built by
  the alembic migrations, every table truncated before each test
"""

# =============================================================================
# Environment setup MUST happen before any other imports
# =============================================================================
import os
from pathlib import Path


def _early_setup_test_environment() -> None:
    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)

    os.environ.setdefault('POSTGRES_DB', 'event_commerce_test_db')
    os.environ.setdefault('DEBUG', 'false')
    os.environ.setdefault('SECRET_KEY', 'unit-test-operator-secret')
    os.environ.setdefault('ORDER_TOKEN_SECRET', 'unit-test-order-token-secret')

    # Pool size settings for tests
    os.environ.setdefault('DB_POOL_SIZE_WRITE', '2')
    os.environ.setdefault('DB_POOL_SIZE_READ', '2')
    os.environ.setdefault('DB_POOL_MAX_OVERFLOW', '2')


_early_setup_test_environment()

import asyncio  # noqa: E402
from collections.abc import AsyncGenerator, Generator  # noqa: E402
from typing import Any  # noqa: E402

from alembic import command  # noqa: E402
from alembic.config import Config  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
import pytest  # noqa: E402
from sqlalchemy import text  # noqa: E402
from sqlalchemy.exc import DBAPIError  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from src.platform.config.core_setting import settings  # noqa: E402
from src.service.commerce.driving_adapter.http_controller.auth.operator_auth import (  # noqa: E402
    Operator,
    OperatorRole,
    operator_auth,
)


_PROJECT_ROOT = Path(__file__).parent.parent


# =============================================================================
# Database Setup and Cleanup
# =============================================================================
_cached_tables: list[str] | None = None


async def _setup_test_database() -> None:
    db_url = settings.DATABASE_URL_ASYNC

    # Create database if not exists
    postgres_url = db_url.replace(f'/{settings.POSTGRES_DB}', '/postgres')
    engine = create_async_engine(postgres_url, isolation_level='AUTOCOMMIT')
    try:
        async with engine.begin() as conn:
            result = await conn.execute(
                text('SELECT 1 FROM pg_database WHERE datname = :name'),
                {'name': settings.POSTGRES_DB},
            )
            if not result.fetchone():
                await conn.execute(text(f'CREATE DATABASE "{settings.POSTGRES_DB}"'))
    finally:
        await engine.dispose()

    # Reset schema, migrations run afterwards
    reset_engine = create_async_engine(db_url)
    try:
        async with reset_engine.begin() as conn:
            await conn.execute(text('DROP SCHEMA public CASCADE'))
            await conn.execute(text('CREATE SCHEMA public'))
    finally:
        await reset_engine.dispose()


def _run_migrations() -> None:
    # alembic env.py drives its own event loop, so this runs outside asyncio.run
    alembic_cfg = Config(str(_PROJECT_ROOT / 'alembic.ini'))
    alembic_cfg.set_main_option('script_location', str(_PROJECT_ROOT / 'src/platform/alembic'))
    command.upgrade(alembic_cfg, 'head')


async def _clean_all_tables(engine: AsyncEngine) -> None:
    global _cached_tables
    async with engine.begin() as conn:
        if _cached_tables is None:
            result = await conn.execute(
                text(
                    "SELECT tablename FROM pg_tables WHERE schemaname = 'public' "
                    "AND tablename != 'alembic_version'"
                )
            )
            _cached_tables = [row[0] for row in result]

        if _cached_tables:
            quoted = [f'"{t}"' for t in _cached_tables]
            await conn.execute(text(f'TRUNCATE {", ".join(quoted)} RESTART IDENTITY CASCADE'))


# =============================================================================
# Integration Test Fixtures
# =============================================================================
@pytest.fixture(scope='session')
def test_database() -> str:
    try:
        asyncio.run(_setup_test_database())
    except (OSError, DBAPIError) as e:
        pytest.skip(f'PostgreSQL not reachable at {settings.POSTGRES_SERVER}: {e}')
    _run_migrations()
    return settings.DATABASE_URL_ASYNC


@pytest.fixture
async def db_engine(test_database: str) -> AsyncGenerator[AsyncEngine, None]:
    # One engine per test: pytest-asyncio gives every test its own event loop
    engine = create_async_engine(test_database, pool_size=4, max_overflow=0)
    yield engine
    await engine.dispose()


@pytest.fixture
async def clean_database(db_engine: AsyncEngine) -> AsyncGenerator[None, None]:
    await _clean_all_tables(db_engine)
    yield


@pytest.fixture
def session_maker(
    db_engine: AsyncEngine, clean_database: None
) -> async_sessionmaker[AsyncSession]:
    """Each session is its own connection, so two sessions can race each other."""
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


# =============================================================================
# Session-scoped Fixtures
# =============================================================================
@pytest.fixture(scope='session')
def client() -> Generator[Any, None, None]:
    from test.test_main import app

    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


@pytest.fixture
def admin_headers() -> dict[str, str]:
    token = operator_auth.create_jwt_token(Operator(id='admin-1', role=OperatorRole.ADMIN))
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def doorman_headers() -> dict[str, str]:
    token = operator_auth.create_jwt_token(Operator(id='door-1', role=OperatorRole.DOORMAN))
    return {'Authorization': f'Bearer {token}'}
