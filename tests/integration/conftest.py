from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy import Connection
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.ext.asyncio import create_async_engine

import pytest

from userservice.application.services.users import UserService
from userservice.domain.entities.user import User
from userservice.domain.ports.repositories.users import UserRepository
from userservice.infrastructure.adapters.database.models import Base
from userservice.infrastructure.adapters.database.repositories.users import UserSQLRepository
from userservice.infrastructure.adapters.database.session import async_session_factory
from userservice.infrastructure.adapters.executor import AsyncWorkerPool
from userservice.infrastructure.adapters.metrics import PrometheusUserMetrics

from tests.integration.factories.base import BaseModelFactory
from tests.integration.factories.users import UserModelFactory


@pytest.fixture(scope="session")
async def async_engine(tmp_path_factory: pytest.TempPathFactory) -> AsyncGenerator[AsyncEngine]:
    db_path = tmp_path_factory.mktemp("db") / "test_users.db"
    async_engine = create_async_engine(url=f"sqlite+aiosqlite:///{db_path}")

    # The driver neither emits BEGIN before a SAVEPOINT nor nests it in the test
    # transaction: take over the transaction control.
    # @see https://docs.sqlalchemy.org/en/20/dialects/sqlite.html#serializable-isolation-savepoints-transactional-ddl-asyncio-version
    @event.listens_for(async_engine.sync_engine, "connect")
    def do_connect(dbapi_connection: Any, connection_record: Any) -> None:
        dbapi_connection.isolation_level = None

    @event.listens_for(async_engine.sync_engine, "begin")
    def do_begin(conn: Connection) -> None:
        conn.exec_driver_sql("BEGIN")

    async with async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_engine

    async with async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await async_engine.dispose()


@pytest.fixture(scope="function", autouse=True)
async def async_session_db(async_engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """
    Provides an async session wrapped in a transaction that rolls back after the test.

    This is the default fixture (autouse=True): data is never permanently written.
    """
    async with async_engine.connect() as conn:
        # Begin a non-ORM transaction
        transaction = await conn.begin()

        # Create a session explicitly bound to this connection
        async with async_session_factory(bind=conn) as async_session:
            # Inject session into Polyfactory
            BaseModelFactory.__async_session__ = async_session

            # Monkeypatch commit to flush.
            # When the API or CLI calls 'await session.commit()', the SQL is sent
            # but the transaction is kept open, so the rollback below still works.
            async_session.commit = async_session.flush  # type: ignore[method-assign]

            yield async_session

        # Rollback the transaction
        await transaction.rollback()


@pytest.fixture
async def user(request: pytest.FixtureRequest) -> User:
    params: dict[str, Any] = getattr(request, "param", {})
    user_db = await UserModelFactory.create_async(**params)
    return user_db.to_entity()


# --- Repository impl ---


@pytest.fixture
def user_repository(async_session_db: AsyncSession) -> UserRepository:
    return UserSQLRepository(async_session_db)


# --- Services ---


@pytest.fixture
def user_metrics() -> PrometheusUserMetrics:
    return PrometheusUserMetrics()


@pytest.fixture
async def executor() -> AsyncGenerator[AsyncWorkerPool]:
    async with AsyncWorkerPool(core_workers=2, max_workers=4, queue_capacity=4) as pool:
        yield pool


@pytest.fixture
def user_service(
    user_repository: UserRepository,
    user_metrics: PrometheusUserMetrics,
    executor: AsyncWorkerPool,
) -> UserService:
    return UserService(user_repository=user_repository, metrics=user_metrics, executor=executor)
