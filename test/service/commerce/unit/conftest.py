"""
Unit test configuration for the commerce service.

Overrides the session-scoped TestClient so pure unit tests never start the app.
"""

from collections.abc import Generator
from unittest.mock import MagicMock

from fastapi.testclient import TestClient
import pytest

from test.service.commerce.unit.helpers import FakePaymentGateway, FakeUnitOfWork


@pytest.fixture(scope='session')
def client() -> Generator[MagicMock, None, None]:
    """Mock client for unit tests - prevents TestClient/lifespan from being created"""
    yield MagicMock(spec=TestClient)


@pytest.fixture
def uow() -> FakeUnitOfWork:
    return FakeUnitOfWork()


@pytest.fixture
def payment_gateway() -> FakePaymentGateway:
    return FakePaymentGateway()
