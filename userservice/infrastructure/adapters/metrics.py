import logging
from contextlib import AbstractContextManager
from typing import Final

from prometheus_client import CollectorRegistry
from prometheus_client import Counter
from prometheus_client import Gauge
from prometheus_client import Histogram
from prometheus_client import generate_latest

from userservice.domain.ports.metrics import UserMetricsPort
from userservice.domain.ports.repositories.users import UserRepository
from userservice.domain.types import UserOperation

logger = logging.getLogger(__name__)

OPERATION_COUNTERS: Final[dict[UserOperation, tuple[str, str]]] = {
    UserOperation.CREATE: ("users_created", "Total number of users created"),
    UserOperation.UPDATE: ("users_updated", "Total number of users updated"),
    UserOperation.DEACTIVATE: ("users_deleted", "Total number of users deleted/deactivated"),
}


class PrometheusUserMetrics(UserMetricsPort):
    """An implementation of the `UserMetricsPort` using `prometheus_client`.

    Each instance registers its collectors on its own registry (unless one is
    given), so that several instances can live side by side.

    The gauges are not updated by the operations: they are recomputed from the
    store by `collect()`, right before an exposition.
    """

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self.registry = registry if registry is not None else CollectorRegistry()

        self._counters: dict[UserOperation, Counter] = {
            operation: Counter(name, documentation, registry=self.registry)
            for operation, (name, documentation) in OPERATION_COUNTERS.items()
        }
        self._operation_duration = Histogram(
            "users_operation_duration_seconds",
            "Time taken for user operations",
            registry=self.registry,
        )
        self._active_users = Gauge("users_active_count", "Number of active users", registry=self.registry)
        self._total_users = Gauge("users_total_count", "Total number of users", registry=self.registry)

    def increment(self, operation: UserOperation) -> None:
        self._counters[operation].inc()

    def time_operation(self) -> AbstractContextManager[None]:
        return self._operation_duration.time()

    async def get_active_users_count(self, user_repository: UserRepository) -> int:
        try:
            return await user_repository.count_active()
        except Exception as e:
            logger.warning(f"Unable to count active users: {e}")
            return 0

    async def get_total_users_count(self, user_repository: UserRepository) -> int:
        try:
            return await user_repository.count()
        except Exception as e:
            logger.warning(f"Unable to count users: {e}")
            return 0

    async def collect(self, user_repository: UserRepository) -> None:
        """Refreshes the gauges from the store."""
        self._active_users.set(await self.get_active_users_count(user_repository))
        self._total_users.set(await self.get_total_users_count(user_repository))

    def get_count(self, operation: UserOperation) -> float:
        name, _ = OPERATION_COUNTERS[operation]
        return self.registry.get_sample_value(f"{name}_total") or 0.0

    def get_operation_time_count(self) -> float:
        return self.registry.get_sample_value("users_operation_duration_seconds_count") or 0.0

    def expose(self) -> bytes:
        """Renders the registry in the Prometheus text format."""
        return generate_latest(self.registry)
