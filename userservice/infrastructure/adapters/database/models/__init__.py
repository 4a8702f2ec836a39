from userservice.infrastructure.adapters.database.models.base import Base
from userservice.infrastructure.adapters.database.models.users import User

__all__ = ["Base", "User"]
