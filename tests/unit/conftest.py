from collections.abc import AsyncGenerator
from typing import Any
from unittest import mock

import pytest

from userservice.application.services.users import UserService
from userservice.domain.entities.user import User
from userservice.domain.ports.repositories.users import UserRepository
from userservice.infrastructure.adapters.cache import InMemoryUserCache
from userservice.infrastructure.adapters.executor import AsyncWorkerPool
from userservice.infrastructure.adapters.metrics import PrometheusUserMetrics

from tests.unit.factories.entities.user import UserFactory


@pytest.fixture
def mock_user_repository() -> mock.AsyncMock:
    return mock.AsyncMock(spec=UserRepository)


@pytest.fixture
def user(request: pytest.FixtureRequest) -> User:
    params: dict[str, Any] = getattr(request, "param", {})
    return UserFactory.build(**params)


@pytest.fixture
def user_metrics() -> PrometheusUserMetrics:
    return PrometheusUserMetrics()


@pytest.fixture
def user_cache() -> InMemoryUserCache:
    return InMemoryUserCache(max_size=10, ttl=60.0)


@pytest.fixture
async def executor() -> AsyncGenerator[AsyncWorkerPool]:
    async with AsyncWorkerPool(core_workers=2, max_workers=4, queue_capacity=4) as pool:
        yield pool


@pytest.fixture
def user_service(mock_user_repository: mock.AsyncMock, user_metrics: PrometheusUserMetrics) -> UserService:
    return UserService(user_repository=mock_user_repository, metrics=user_metrics)
