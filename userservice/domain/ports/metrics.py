from abc import ABC
from abc import abstractmethod
from contextlib import AbstractContextManager

from userservice.domain.ports.repositories.users import UserRepository
from userservice.domain.types import UserOperation


class UserMetricsPort(ABC):
    """Interface for recording metrics about the user operations.

    Implementations only observe: they must never alter the result of the
    operations they measure, nor the errors those operations raise.
    """

    @abstractmethod
    def increment(self, operation: UserOperation) -> None:
        """Increments the counter of successful calls for the given operation.

        Args:
            operation: The mutation which just succeeded.
        """
        pass

    @abstractmethod
    def time_operation(self) -> AbstractContextManager[None]:
        """Returns a context manager recording the elapsed time of its block.

        The duration is recorded exactly once, whether the block succeeds or not.
        """
        pass

    @abstractmethod
    async def get_active_users_count(self, user_repository: UserRepository) -> int:
        """Computes the number of active users on demand.

        Args:
            user_repository: The repository to query.

        Returns:
            The number of active users, or 0 if the store cannot be queried.
        """
        pass

    @abstractmethod
    async def get_total_users_count(self, user_repository: UserRepository) -> int:
        """Computes the total number of users on demand.

        Args:
            user_repository: The repository to query.

        Returns:
            The number of users, or 0 if the store cannot be queried.
        """
        pass
