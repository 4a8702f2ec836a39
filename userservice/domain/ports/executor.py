import asyncio
from abc import ABC
from abc import abstractmethod
from collections.abc import Awaitable
from collections.abc import Callable
from typing import Any


class TaskExecutorPort(ABC):
    """Interface for running jobs on a pool of workers, off the caller's task."""

    @abstractmethod
    def submit[T](self, fn: Callable[..., Awaitable[T]], /, *args: Any, **kwargs: Any) -> asyncio.Future[T]:
        """Schedules `fn(*args, **kwargs)` on a worker.

        Args:
            fn: The coroutine function to run.
            *args: Positional arguments passed to `fn`.
            **kwargs: Keyword arguments passed to `fn`.

        Returns:
            A future resolved with the result of `fn`, or failed with its exception.

        Raises:
            TaskRejectedError: If the pool is saturated.
            ExecutorShutdownError: If the pool no longer accepts jobs.
        """
        pass

    @abstractmethod
    async def shutdown(self, wait: bool = True) -> None:
        """Stops accepting jobs and stops the workers.

        Args:
            wait: Whether to run the queued jobs before stopping, or to cancel them.
        """
        pass
