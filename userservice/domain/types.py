from enum import StrEnum


class UserField(StrEnum):
    """Enumeration of the user fields bearing a uniqueness constraint."""

    USERNAME = "username"
    EMAIL = "email"


class UserOperation(StrEnum):
    """Enumeration of the user mutations tracked by the metrics."""

    CREATE = "create"
    UPDATE = "update"
    DEACTIVATE = "deactivate"
