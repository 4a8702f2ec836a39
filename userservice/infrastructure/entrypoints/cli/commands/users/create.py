import typer

from userservice.domain.exceptions import UserAlreadyExistsException
from userservice.domain.schemas.user import UserCreate
from userservice.domain.schemas.user import UserResponse
from userservice.infrastructure.entrypoints.cli.dependencies import get_db
from userservice.infrastructure.entrypoints.cli.dependencies import get_user_service


async def user_create_logic(username: str, email: str, full_name: str) -> UserResponse:
    # First build the DTO to create the user.
    user_data = UserCreate(username=username, email=email, full_name=full_name)

    # Then try to create that user in DB.
    async with get_db() as session:
        user_service = get_user_service(session)
        try:
            user = await user_service.create_user(user_data)
        except UserAlreadyExistsException as e:
            typer.secho(f"Error: User with {e.field} {e.value} already exists.", fg=typer.colors.RED, err=True)
            raise

    typer.secho(f"User {user.username} created successfully with ID {user.id}!", fg=typer.colors.GREEN)
    return user
