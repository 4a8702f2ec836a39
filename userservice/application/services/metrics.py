import functools
from collections.abc import Awaitable
from collections.abc import Callable
from typing import TYPE_CHECKING
from typing import Concatenate

from userservice.domain.types import UserOperation

if TYPE_CHECKING:
    from userservice.application.services.users import UserService


def record_user_operation[**P, R](
    operation: UserOperation,
) -> Callable[
    [Callable[Concatenate["UserService", P], Awaitable[R]]],
    Callable[Concatenate["UserService", P], Awaitable[R]],
]:
    """Wraps a `UserService` mutation to record its metrics.

    The elapsed time is recorded on every call, while the operation counter is
    only incremented when the call returns. The result and any raised exception
    go through untouched.

    Args:
        operation: The operation whose counter is incremented on success.
    """

    def decorator(
        func: Callable[Concatenate["UserService", P], Awaitable[R]],
    ) -> Callable[Concatenate["UserService", P], Awaitable[R]]:
        @functools.wraps(func)
        async def wrapper(self: "UserService", *args: P.args, **kwargs: P.kwargs) -> R:
            with self.metrics.time_operation():
                result = await func(self, *args, **kwargs)
                self.metrics.increment(operation)
            return result

        return wrapper

    return decorator
