from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, kw_only=True)
class User:
    id: int | None = None
    username: str
    email: str
    full_name: str

    is_active: bool = True

    created_at: datetime
    updated_at: datetime
