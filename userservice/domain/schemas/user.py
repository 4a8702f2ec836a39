from datetime import datetime
from typing import Annotated

from pydantic import ConfigDict
from pydantic import EmailStr
from pydantic import Field
from pydantic import StringConstraints
from pydantic import model_validator

from userservice.domain.schemas.base import BaseEntity

Username = Annotated[str, Field(min_length=3, max_length=50, pattern=r"^[a-zA-Z0-9_]+$")]
FullName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]


class UserCreate(BaseEntity):
    """Schema for creating a new user.

    Requires a username (3 to 50 letters, digits or underscores), a valid email
    address and a non-empty full name.
    """

    username: Username
    email: EmailStr
    full_name: FullName


class UserUpdate(BaseEntity):
    """Schema for updating an existing user.

    Every field is optional: only the fields explicitly provided are applied,
    the others are left unchanged. At least one field must be provided and the
    provided fields cannot be set to None.
    """

    username: Username | None = None
    email: EmailStr | None = None
    full_name: FullName | None = None
    is_active: bool | None = None

    @model_validator(mode="after")
    def validate_payload(self):
        if not self.model_fields_set:
            raise ValueError("At least one field must be provided for update")

        for field in self.model_fields_set:
            if getattr(self, field) is None:
                raise ValueError(f"The field '{field}' cannot be set to None")

        return self


class UserResponse(BaseEntity):
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    username: str
    email: str
    full_name: str
    is_active: bool
    created_at: datetime
    updated_at: datetime
