from userservice.domain.types import UserField


class UserNotFound(Exception):
    def __init__(self, entity_id: int | str, lookup: str = "id") -> None:
        self.entity_id = entity_id
        self.lookup = lookup
        super().__init__(f"User not found with {lookup} {entity_id}")


class UserAlreadyExistsException(Exception):
    """Raised when a user mutation would break a uniqueness constraint.

    The colliding field is kept so that callers can tell a username conflict
    from an email one.
    """

    def __init__(self, field: UserField, value: str) -> None:
        self.field = field
        self.value = value
        super().__init__(f"User already exists with {field} {value}")


class UsernameAlreadyExistsException(UserAlreadyExistsException):
    def __init__(self, value: str) -> None:
        super().__init__(UserField.USERNAME, value)


class UserEmailAlreadyExistsException(UserAlreadyExistsException):
    def __init__(self, value: str) -> None:
        super().__init__(UserField.EMAIL, value)


class TaskRejectedError(Exception):
    """Raised when the worker pool is saturated and cannot accept a new job."""

    pass


class ExecutorShutdownError(Exception):
    pass
