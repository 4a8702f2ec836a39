from sqlalchemy import String
from sqlalchemy.orm import Mapped
from sqlalchemy.orm import mapped_column

from userservice.domain.entities.user import User as UserEntity
from userservice.infrastructure.adapters.database.models.base import Base
from userservice.infrastructure.adapters.database.models.base import DatetimeTrackMixin
from userservice.infrastructure.adapters.database.models.base import NumericIdMixin


class User(NumericIdMixin, DatetimeTrackMixin, Base):
    __tablename__ = "users"

    username: Mapped[str] = mapped_column(String(50), unique=True, index=True, nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    full_name: Mapped[str] = mapped_column(String(100), nullable=False)

    is_active: Mapped[bool] = mapped_column(default=True, index=True)

    def to_entity(self) -> UserEntity:
        return UserEntity(
            id=self.id,
            username=self.username,
            email=self.email,
            full_name=self.full_name,
            is_active=self.is_active,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )
