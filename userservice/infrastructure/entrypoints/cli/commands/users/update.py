from typing import Any

import typer

from userservice.domain.schemas.user import UserResponse
from userservice.domain.schemas.user import UserUpdate
from userservice.infrastructure.entrypoints.cli.dependencies import get_db
from userservice.infrastructure.entrypoints.cli.dependencies import get_user_service


async def user_update_logic(
    user_id: int,
    username: str | None = None,
    email: str | None = None,
    full_name: str | None = None,
    is_active: bool | None = None,
) -> UserResponse:
    field_values: dict[str, Any] = {
        "username": username,
        "email": email,
        "full_name": full_name,
        "is_active": is_active,
    }
    attributes = {k: v for k, v in field_values.items() if v is not None}
    if not attributes:
        raise typer.BadParameter("At least one field to update must be provided.")

    user_data = UserUpdate(**attributes)

    async with get_db() as session:
        user_service = get_user_service(session)
        user = await user_service.update_user(user_id, user_data)

    typer.secho(f"User {user_id} updated successfully!", fg=typer.colors.GREEN)
    return user
