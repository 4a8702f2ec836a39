from collections.abc import AsyncGenerator
from collections.abc import Iterator
from unittest import mock
from unittest.mock import AsyncMock

from httpx import ASGITransport
from httpx import AsyncClient

from sqlalchemy.ext.asyncio import AsyncSession

import pytest

from userservice.infrastructure.adapters.cache import InMemoryUserCache
from userservice.infrastructure.adapters.executor import AsyncWorkerPool
from userservice.infrastructure.adapters.metrics import PrometheusUserMetrics
from userservice.infrastructure.entrypoints.api.dependencies import get_db
from userservice.infrastructure.entrypoints.api.dependencies import get_executor
from userservice.infrastructure.entrypoints.api.dependencies import get_user_cache
from userservice.infrastructure.entrypoints.api.dependencies import get_user_metrics
from userservice.infrastructure.entrypoints.api.main import app


@pytest.fixture(name="mock_api_logger")
def block_api_logging_reconfiguration() -> Iterator[mock.Mock]:
    """Prevents FastAPI lifespan from overwriting test logging config."""
    with mock.patch("userservice.infrastructure.entrypoints.api.main.configure_loggers") as patched:
        yield patched


@pytest.fixture
async def mock_db_session() -> AsyncMock:
    return AsyncMock(spec=AsyncSession)


@pytest.fixture
def user_cache() -> InMemoryUserCache:
    return InMemoryUserCache()


@pytest.fixture
async def async_client(
    mock_api_logger: None,
    async_session_db: AsyncSession,
    user_metrics: PrometheusUserMetrics,
    executor: AsyncWorkerPool,
    request: pytest.FixtureRequest,
) -> AsyncGenerator[AsyncClient]:
    """
    AsyncClient wired on the test session and on the test adapters.

    The lifespan is not run by the ASGI transport, so the adapters it would put
    on the application state are overridden too.

    Usage:
        # Test DB session, no cache
        async def test_xxx(async_client): ...

        # Mocked DB session
        async def test_xxx(mock_db_session, async_client): ...

        # With the in-memory cache (note the order!)
        async def test_xxx(user_cache, async_client): ...
    """

    # Override get_db: use mock_db if present, otherwise use test session
    if "mock_db_session" in request.fixturenames:
        mock_db_session = request.getfixturevalue("mock_db_session")

        async def override_get_db():
            yield mock_db_session

    else:

        async def override_get_db():
            yield async_session_db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_user_metrics] = lambda: user_metrics
    app.dependency_overrides[get_executor] = lambda: executor

    user_cache = request.getfixturevalue("user_cache") if "user_cache" in request.fixturenames else None
    app.dependency_overrides[get_user_cache] = lambda: user_cache

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    # Clean up
    app.dependency_overrides.clear()
