from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncSession

from userservice.application.services.users import UserService
from userservice.domain.ports.executor import TaskExecutorPort
from userservice.domain.ports.metrics import UserMetricsPort
from userservice.domain.ports.repositories.users import UserRepository
from userservice.infrastructure.adapters.database.repositories.users import UserSQLRepository
from userservice.infrastructure.adapters.database.session import session_scope
from userservice.infrastructure.adapters.executor import AsyncWorkerPool
from userservice.infrastructure.adapters.metrics import PrometheusUserMetrics
from userservice.infrastructure.config.settings.executor import executor_settings


@asynccontextmanager
async def get_db() -> AsyncGenerator[AsyncSession]:
    async with session_scope() as session:
        yield session


@asynccontextmanager
async def get_executor() -> AsyncGenerator[TaskExecutorPort]:
    async with AsyncWorkerPool(
        core_workers=executor_settings.CORE_WORKERS,
        max_workers=executor_settings.MAX_WORKERS,
        queue_capacity=executor_settings.QUEUE_CAPACITY,
        worker_name_prefix=executor_settings.WORKER_NAME_PREFIX,
        keep_alive=executor_settings.KEEP_ALIVE_SECONDS,
    ) as executor:
        yield executor


def get_user_repository(session: AsyncSession) -> UserRepository:
    return UserSQLRepository(session)


def get_user_metrics() -> UserMetricsPort:
    return PrometheusUserMetrics()


def get_user_service(session: AsyncSession, executor: TaskExecutorPort | None = None) -> UserService:
    return UserService(
        user_repository=get_user_repository(session),
        metrics=get_user_metrics(),
        executor=executor,
    )
