from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import APIRouter
from fastapi import Depends
from fastapi import FastAPI
from fastapi import Response

from prometheus_client import CONTENT_TYPE_LATEST

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from userservice import __version__
from userservice.domain.ports.repositories.users import UserRepository
from userservice.infrastructure.adapters.cache import InMemoryUserCache
from userservice.infrastructure.adapters.executor import AsyncWorkerPool
from userservice.infrastructure.adapters.metrics import PrometheusUserMetrics
from userservice.infrastructure.config.loggers import configure_loggers
from userservice.infrastructure.config.settings.app import app_settings
from userservice.infrastructure.config.settings.executor import executor_settings
from userservice.infrastructure.entrypoints.api.dependencies import get_db
from userservice.infrastructure.entrypoints.api.dependencies import get_user_metrics
from userservice.infrastructure.entrypoints.api.dependencies import get_user_repository
from userservice.infrastructure.entrypoints.api.schemas import HealthCheckResponse
from userservice.infrastructure.entrypoints.api.v1.endpoints.users import router as user_router


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    # Only load configuration loggers at bootstrap, not at import (testing conflicts).
    configure_loggers(level=app_settings.LOG_LEVEL_API, handlers=app_settings.LOG_HANDLERS_API)

    app.state.user_metrics = PrometheusUserMetrics()
    app.state.user_cache = (
        InMemoryUserCache(max_size=app_settings.CACHE_MAX_SIZE, ttl=app_settings.CACHE_TTL_SECONDS)
        if app_settings.CACHE_ENABLED
        else None
    )

    async with AsyncWorkerPool(
        core_workers=executor_settings.CORE_WORKERS,
        max_workers=executor_settings.MAX_WORKERS,
        queue_capacity=executor_settings.QUEUE_CAPACITY,
        worker_name_prefix=executor_settings.WORKER_NAME_PREFIX,
        keep_alive=executor_settings.KEEP_ALIVE_SECONDS,
    ) as executor:
        app.state.executor = executor
        yield


app = FastAPI(
    title="User Management API",
    description=(
        "RESTful API for user management: create, read, update, deactivate and search users, "
        "with caching, Prometheus metrics and asynchronous lookups."
    ),
    version=__version__,
    contact={
        "name": "Development Team",
        "email": "dev@example.com",
    },
    license_info={
        "name": "MIT License",
        "url": "https://opensource.org/licenses/MIT",
    },
    servers=[
        {"url": "http://localhost:8000", "description": "Development server"},
        {"url": "http://userapp.local", "description": "Local Kubernetes"},
    ],
    lifespan=lifespan,
    debug=app_settings.DEBUG,
)

api_v1_router = APIRouter()
api_v1_router.include_router(user_router, prefix="/users", tags=["users"])

app.include_router(api_v1_router, prefix=app_settings.API_V1_PREFIX)


@app.get("/health", name="health_check", tags=["health"])
async def health_check(db: AsyncSession = Depends(get_db)) -> HealthCheckResponse:
    """Health check endpoint to verify application and database status."""
    try:
        await db.execute(text("SELECT 1"))
    except Exception as e:
        return HealthCheckResponse(status="unhealthy", database=f"error: {str(e)}")
    else:
        return HealthCheckResponse(status="healthy", database="connected")


@app.get("/metrics", name="metrics", tags=["health"], response_class=Response)
async def metrics(
    user_repository: UserRepository = Depends(get_user_repository),
    user_metrics: PrometheusUserMetrics = Depends(get_user_metrics),
) -> Response:
    """Exposes the user metrics in the Prometheus text format."""
    await user_metrics.collect(user_repository)
    return Response(content=user_metrics.expose(), media_type=CONTENT_TYPE_LATEST)
