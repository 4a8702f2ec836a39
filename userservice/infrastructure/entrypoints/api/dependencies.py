from collections.abc import AsyncGenerator

from fastapi import Depends
from fastapi import Request

from sqlalchemy.ext.asyncio import AsyncSession

from userservice.application.services.users import UserService
from userservice.domain.ports.cache import UserCachePort
from userservice.domain.ports.executor import TaskExecutorPort
from userservice.domain.ports.repositories.users import UserRepository
from userservice.infrastructure.adapters.database.repositories.users import UserSQLRepository
from userservice.infrastructure.adapters.database.session import session_scope
from userservice.infrastructure.adapters.metrics import PrometheusUserMetrics


async def get_db() -> AsyncGenerator[AsyncSession]:  # pragma: no cover
    async with session_scope() as session:
        yield session


def get_user_repository(session: AsyncSession = Depends(get_db)) -> UserRepository:
    return UserSQLRepository(session)


def get_user_metrics(request: Request) -> PrometheusUserMetrics:
    return request.app.state.user_metrics


def get_executor(request: Request) -> TaskExecutorPort:
    return request.app.state.executor


def get_user_cache(request: Request) -> UserCachePort | None:
    return request.app.state.user_cache


def get_user_service(
    user_repository: UserRepository = Depends(get_user_repository),
    user_metrics: PrometheusUserMetrics = Depends(get_user_metrics),
    executor: TaskExecutorPort = Depends(get_executor),
    user_cache: UserCachePort | None = Depends(get_user_cache),
) -> UserService:
    return UserService(
        user_repository=user_repository,
        metrics=user_metrics,
        executor=executor,
        cache=user_cache,
    )
